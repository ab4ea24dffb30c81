"""
ACL Anthology index page crawler
"""

import logging
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..config import DEFAULT_HOST, Settings
from ..core.base_crawler import BaseCrawler
from ..core.models import NA, Entry, WebFile
from ..core.utils import normalize_whitespace
from ..errors import StructuralParseError

logger = logging.getLogger(__name__)


def volume_index_url(volume: str, host: str = DEFAULT_HOST) -> str:
    """Index page URL of a volume, e.g. https://www.aclweb.org/anthology/P/P95/"""
    return f"https://{host}/anthology/{volume}/"


def _href_endswith(suffix: str):
    return lambda href: href is not None and href.endswith(suffix)


def _text_or_na(tag: Optional[Tag]) -> str:
    return normalize_whitespace(tag.get_text()) if tag is not None else NA


def _pdf_file(url: str, anchor_text: str) -> WebFile:
    # The anchor text names the file; it must stay inside the volume directory
    if '/' in anchor_text or '\\' in anchor_text:
        logger.warning(f"Unsafe link text {anchor_text!r} for {url}, naming the file from the URL")
        return WebFile.from_url(url)
    return WebFile.from_url(url, anchor_text + '.pdf')


def parse_index(html: str, volume: str, base_url: Optional[str] = None) -> List[Entry]:
    """
    Parse the HTML of an ACL Anthology index page into entries

    The page body is a flat run of blocks: an <h1> opens a section, and
    every following block is one paper. Blocks before the first <h1> are
    front matter and are skipped. Within a paper block the first <b> is
    the author list, the first <i> the title, and the first links ending
    in 'pdf' and 'bib' the files.

    Args:
        html: Raw page HTML
        volume: Volume identifier, e.g. 'P/P95'
        base_url: URL the page was fetched from, used to resolve links

    Returns:
        Entries in page order

    Raises:
        StructuralParseError: if the page has no #content element or <body>
    """
    if base_url is None:
        base_url = volume_index_url(volume)

    soup = BeautifulSoup(html, 'html.parser')
    content = soup.find(id='content') or soup.body
    if content is None:
        raise StructuralParseError(f"No #content element could be found ({volume})")

    section: Optional[str] = None
    entries: List[Entry] = []

    for child in content.find_all(recursive=False):
        if child.name == 'h1':
            section = child.get_text().strip()
            continue

        if section is None:
            continue

        pdf_anchor = child.find('a', href=_href_endswith('pdf'))
        bib_anchor = child.find('a', href=_href_endswith('bib'))

        pdf = None
        if pdf_anchor is not None:
            pdf = _pdf_file(urljoin(base_url, pdf_anchor['href']), pdf_anchor.get_text())

        bib = None
        if bib_anchor is not None:
            bib = WebFile.from_url(urljoin(base_url, bib_anchor['href']))

        entries.append(Entry(
            volume=volume,
            section=section,
            author=_text_or_na(child.find('b')),
            title=_text_or_na(child.find('i')),
            pdf=pdf,
            bib=bib,
        ))

    logger.debug(f"Parsed {len(entries)} entries from {volume}")
    return entries


class ACLAnthologyCrawler(BaseCrawler):
    """Crawler for the legacy aclweb.org anthology volume pages"""

    def __init__(self, settings: Settings, **kwargs):
        super().__init__(settings, **kwargs)
        self.host = settings.host

    def index_url(self, volume: str) -> str:
        return volume_index_url(volume, self.host)

    def parse_index(self, html: str, volume: str) -> List[Entry]:
        return parse_index(html, volume, self.index_url(volume))
