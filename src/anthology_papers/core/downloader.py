"""
Single-attempt file downloader
"""

import logging
from pathlib import Path
from typing import Optional

import requests

from ..config import CHUNK_SIZE
from ..errors import HTTPStatusError, TransportError
from .utils import ensure_dir, ensure_file

logger = logging.getLogger(__name__)


class FileDownloader:
    """Streams remote files to disk, one GET per file and no retries"""

    def __init__(self, timeout: Optional[float] = None, chunk_size: int = CHUNK_SIZE):
        """
        Initialize downloader

        Args:
            timeout: Request timeout in seconds (None waits indefinitely)
            chunk_size: Size of streamed chunks in bytes
        """
        self.timeout = timeout
        self.chunk_size = chunk_size

    def download(
        self,
        url: str,
        filepath: Path,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Stream 'url' into 'filepath', whether or not 'filepath' exists

        The parent directory is created first. Nothing is written unless the
        server answers 200; a stream that breaks halfway leaves the partial
        file behind.

        Args:
            url: URL to download from
            filepath: Path to save to
            session: Requests session to use (a private one is created if None)

        Raises:
            TransportError: on any network-level failure
            HTTPStatusError: if the response status is not 200
        """
        ensure_dir(filepath.parent)

        own_session = session is None
        if own_session:
            session = requests.Session()

        try:
            logger.info(f"GET {url} ({filepath})")
            try:
                response = session.get(url, timeout=self.timeout, stream=True)
            except requests.exceptions.RequestException as e:
                logger.error(f"request error {url}")
                raise TransportError(url, e) from e

            try:
                if response.status_code != 200:
                    logger.warning(f"HTTP response != 200 ({response.status_code}) for {url}")
                    raise HTTPStatusError(url, response.status_code)

                logger.info(f"download {url} > {filepath}")
                with open(filepath, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            f.write(chunk)
            except requests.exceptions.RequestException as e:
                logger.error(f"stream error {url}")
                raise TransportError(url, e) from e
            finally:
                response.close()
        finally:
            if own_session:
                session.close()

    def read_or_download(
        self,
        url: str,
        filepath: Path,
        session: Optional[requests.Session] = None,
    ) -> str:
        """
        If 'filepath' does not exist, stream 'url' into it, then read it back

        Args:
            url: URL to download from
            filepath: Local cache path
            session: Requests session to use

        Returns:
            File contents decoded as UTF-8, undecodable bytes replaced
        """
        ensure_file(filepath, lambda: self.download(url, filepath, session))
        logger.debug(f"read {filepath}")
        return filepath.read_text(encoding='utf-8', errors='replace')
