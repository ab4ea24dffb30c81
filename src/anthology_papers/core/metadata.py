"""
Per-volume listing cache
"""

import json
import logging
from pathlib import Path
from typing import List

from ..config import INDEX_FILENAME, LISTING_FILENAME
from .models import Entry
from .utils import ensure_dir

logger = logging.getLogger(__name__)


class ListingManager:
    """Reads and writes the parsed entry listing of each volume"""

    def __init__(self, root_dir: Path):
        """
        Initialize listing manager

        Args:
            root_dir: Root of the local anthology mirror
        """
        self.root_dir = root_dir

    def get_volume_dir(self, volume: str) -> Path:
        """Get directory for a volume, e.g. <root>/P/P95"""
        return self.root_dir / volume

    def index_path(self, volume: str) -> Path:
        """Raw index page cache"""
        return self.get_volume_dir(volume) / INDEX_FILENAME

    def listing_path(self, volume: str) -> Path:
        """Parsed listing cache"""
        return self.get_volume_dir(volume) / LISTING_FILENAME

    def save(self, entries: List[Entry], volume: str) -> None:
        """
        Serialize entries to the volume's listing file

        Pretty-printed with two-space indent and a trailing newline.

        Args:
            entries: Parsed entries
            volume: Volume identifier
        """
        path = self.listing_path(volume)
        ensure_dir(path.parent)

        data = dumps_listing(entries)
        logger.info(f"write {path} ({len(entries)} entries, {len(data)} characters)")
        with open(path, 'w', encoding='utf-8') as f:
            f.write(data)

    def load(self, volume: str) -> List[Entry]:
        """
        Load the volume's listing file

        Args:
            volume: Volume identifier

        Returns:
            Entries in the order they were written
        """
        path = self.listing_path(volume)
        logger.debug(f"read {path}")
        with open(path, 'r', encoding='utf-8') as f:
            return [Entry.from_dict(item) for item in json.load(f)]


def dumps_listing(entries: List[Entry]) -> str:
    """Listing JSON exactly as stored on disk"""
    return json.dumps([e.to_dict() for e in entries], ensure_ascii=False, indent=2) + '\n'
