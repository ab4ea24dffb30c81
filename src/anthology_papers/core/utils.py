"""
Utility functions for file handling and text processing
"""

import logging
import re
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)


def normalize_whitespace(text: str) -> str:
    """
    Collapse runs of whitespace to single spaces and trim both ends

    Args:
        text: Original text

    Returns:
        Normalized text
    """
    return re.sub(r'\s+', ' ', text).strip()


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, create if not

    Args:
        path: Directory path

    Returns:
        The path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def ensure_file(filepath: Path, produce: Callable[[], None]) -> bool:
    """
    If no file exists at 'filepath', call 'produce()'

    'produce' is expected to create the file at exactly 'filepath'. Whatever
    it raises propagates. An existing file is trusted as-is: a file left
    truncated by an interrupted run counts as present.

    Args:
        filepath: Target file
        produce: Callable that creates the file

    Returns:
        True if 'produce' was called, False if the file already existed
    """
    if filepath.exists():
        logger.debug(f"exists {filepath}")
        return False

    produce()
    return True
