"""
Core modules for anthology crawling
"""

from .utils import ensure_dir, ensure_file, normalize_whitespace
from .models import Conference, Entry, WebFile
from .session import SessionManager
from .downloader import FileDownloader
from .metadata import ListingManager
from .base_crawler import BaseCrawler, DownloadSummary, RemoteFile
