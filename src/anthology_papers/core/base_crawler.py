"""
Base crawler class with common functionality
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import Settings
from ..errors import AggregateDownloadError
from .downloader import FileDownloader
from .manifest import flatten_volumes, load_conferences, select_conferences
from .metadata import ListingManager
from .models import Entry
from .pool import map_bounded, run_bounded
from .session import SessionManager
from .utils import ensure_file

logger = logging.getLogger(__name__)

FILE_KINDS = ('bib', 'pdf')


@dataclass(frozen=True)
class RemoteFile:
    """A file to mirror: where it comes from and where it goes"""
    url: str
    filepath: Path


@dataclass
class DownloadSummary:
    """Outcome of a successful ensure_files() batch"""
    total: int = 0
    existing: int = 0
    downloaded: int = 0


class BaseCrawler(ABC):
    """
    Abstract base class for anthology crawlers

    Subclasses must implement:
    - index_url(volume) -> str
    - parse_index(html, volume) -> List[Entry]
    """

    def __init__(
        self,
        settings: Settings,
        session_manager: Optional[SessionManager] = None,
        downloader: Optional[FileDownloader] = None,
    ):
        """
        Initialize crawler

        Args:
            settings: Validated run settings
            session_manager: Source of per-task HTTP sessions
            downloader: File downloader (defaults to one using settings.timeout)
        """
        self.settings = settings
        self.root_dir = settings.root_dir

        # Components
        self.session_manager = session_manager or SessionManager()
        self.downloader = downloader or FileDownloader(timeout=settings.timeout)
        self.listing_manager = ListingManager(settings.root_dir)

    @abstractmethod
    def index_url(self, volume: str) -> str:
        """
        URL of a volume's index page

        Args:
            volume: Volume identifier, e.g. 'P/P95'
        """

    @abstractmethod
    def parse_index(self, html: str, volume: str) -> List[Entry]:
        """
        Parse a volume's index page into entries

        Args:
            html: Raw HTML of the index page
            volume: Volume identifier

        Returns:
            Entries in page order
        """

    # ------------------------------------------------------------------
    # Volume loading
    # ------------------------------------------------------------------

    def get_entries(self, volume: str) -> List[Entry]:
        """
        Get the entries of a volume, fetching and parsing only if not cached

        Args:
            volume: Volume identifier

        Returns:
            Entries from the volume's listing file
        """
        listing_path = self.listing_manager.listing_path(volume)
        ensure_file(listing_path, lambda: self._download_entries(volume))
        return self.listing_manager.load(volume)

    def _download_entries(self, volume: str) -> None:
        """Fetch the index page (potentially from cache), parse it and write the listing"""
        index_path = self.listing_manager.index_path(volume)
        session = self.session_manager.create_worker_session()
        try:
            html = self.downloader.read_or_download(self.index_url(volume), index_path, session)
        finally:
            session.close()

        entries = self.parse_index(html, volume)
        self.listing_manager.save(entries, volume)

    def load_entries(self, volumes: Sequence[str]) -> List[Entry]:
        """
        Resolve every volume's listing and flatten them

        Runs at most settings.volume_workers volumes at once. The first
        failure aborts the whole load. A volume listed twice is loaded once
        but its entries appear at both positions.

        Args:
            volumes: Volume identifiers

        Returns:
            All entries, in volume order
        """
        unique = list(dict.fromkeys(volumes))
        loaded = dict(zip(unique, map_bounded(self.get_entries, unique, self.settings.volume_workers)))
        return [entry for volume in volumes for entry in loaded[volume]]

    def load_all(
        self,
        manifest_path: Optional[Path] = None,
        conference_ids: Optional[Iterable[str]] = None,
    ) -> List[Entry]:
        """
        Load entries for every volume in the manifest

        Args:
            manifest_path: Manifest file (defaults to settings.manifest_path)
            conference_ids: Restrict to these conferences

        Returns:
            Flattened entries
        """
        if manifest_path is None:
            manifest_path = self.settings.manifest_path

        conferences = select_conferences(load_conferences(manifest_path), conference_ids)
        volumes = flatten_volumes(conferences)
        logger.info(f"Found {len(volumes)} volumes")

        entries = self.load_entries(volumes)
        logger.info(f"Found {len(entries)} entries")
        return entries

    # ------------------------------------------------------------------
    # File downloads
    # ------------------------------------------------------------------

    def get_files(self, entries: Iterable[Entry], kinds: Sequence[str] = FILE_KINDS) -> List[RemoteFile]:
        """
        List the files referenced by entries

        Args:
            entries: Parsed entries
            kinds: Which references to include ('bib', 'pdf')

        Returns:
            One RemoteFile per present reference, bib before pdf per entry
        """
        files = []
        for entry in entries:
            for kind in FILE_KINDS:
                web_file = getattr(entry, kind)
                if kind in kinds and web_file is not None:
                    files.append(RemoteFile(
                        url=web_file.url,
                        filepath=self.listing_manager.get_volume_dir(entry.volume) / web_file.filename,
                    ))
        return files

    def ensure_files(self, entries: Iterable[Entry], kinds: Sequence[str] = FILE_KINDS) -> DownloadSummary:
        """
        Download every referenced file that is not on disk yet

        Existence is checked first with settings.check_workers, then the
        missing files are downloaded with the smaller
        settings.download_workers. A failed download does not stop the batch.

        Args:
            entries: Parsed entries
            kinds: Which references to mirror

        Returns:
            Summary of the batch

        Raises:
            AggregateDownloadError: if any download failed
        """
        files = self._claim_paths(self.get_files(entries, kinds))
        logger.info(f"Found {len(files)} files")

        # Check for file existence first, since downloads run less parallel
        checked: List[Tuple[RemoteFile, bool]] = map_bounded(
            self._check_exists, files, self.settings.check_workers
        )
        missing = [f for f, exists in checked if not exists]
        logger.info(f"Downloading {len(missing)} missing files")

        errors = run_bounded(self._download_worker, missing, self.settings.download_workers)
        if errors:
            logger.error(f"{len(errors)} of {len(missing)} downloads failed")
            raise AggregateDownloadError(errors)

        return DownloadSummary(
            total=len(files),
            existing=len(files) - len(missing),
            downloaded=len(missing),
        )

    @staticmethod
    def _claim_paths(files: Iterable[RemoteFile]) -> List[RemoteFile]:
        """Keep the first file per local path so two tasks never write the same path"""
        claimed: Dict[Path, RemoteFile] = {}
        for remote in files:
            first = claimed.setdefault(remote.filepath, remote)
            if first is not remote and first.url != remote.url:
                logger.warning(f"Skipping {remote.url}: {remote.filepath} already claimed by {first.url}")
        return list(claimed.values())

    def _check_exists(self, remote: RemoteFile) -> Tuple[RemoteFile, bool]:
        return remote, remote.filepath.exists()

    def _download_worker(self, remote: RemoteFile) -> None:
        """Download a single file with its own session"""
        session = self.session_manager.create_worker_session()
        try:
            self.downloader.download(remote.url, remote.filepath, session)
        finally:
            session.close()

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def crawl(
        self,
        manifest_path: Optional[Path] = None,
        conference_ids: Optional[Iterable[str]] = None,
        kinds: Sequence[str] = FILE_KINDS,
    ) -> DownloadSummary:
        """
        Load all listings, then mirror the files they reference

        Args:
            manifest_path: Manifest file
            conference_ids: Restrict to these conferences
            kinds: Which references to mirror

        Returns:
            Summary of the download batch
        """
        entries = self.load_all(manifest_path, conference_ids)
        summary = self.ensure_files(entries, kinds)
        logger.info(
            f"Files: total {summary.total}, "
            f"existing {summary.existing}, "
            f"downloaded {summary.downloaded}"
        )
        logger.info("DONE")
        return summary
