"""
Data containers for conferences, listing entries and remote files
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

NA = 'NA'


@dataclass(frozen=True)
class WebFile:
    """A remote URL paired with the local filename it is stored under"""
    url: str
    filename: str

    @classmethod
    def from_url(cls, url: str, filename: Optional[str] = None) -> "WebFile":
        """
        Create a WebFile, deriving the filename from the URL if not given

        The derived name is the last non-empty segment of the URL path,
        e.g. 'https://host/anthology/P/P95/P95-1001.bib' -> 'P95-1001.bib'.
        No validation is done on the URL.

        Args:
            url: Absolute URL of the resource
            filename: Explicit local filename

        Returns:
            WebFile instance
        """
        if filename is None:
            segments = [s for s in urlparse(url).path.split('/') if s]
            filename = segments[-1] if segments else 'index.html'
        return cls(url=url, filename=filename)

    def to_dict(self) -> Dict[str, str]:
        return {'url': self.url, 'filename': self.filename}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["WebFile"]:
        if not data:
            return None
        return cls(url=data['url'], filename=data['filename'])


@dataclass(frozen=True)
class Conference:
    """Conference record from the manifest"""
    id: str
    name: str = ""
    description: str = ""
    volumes: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Conference":
        return cls(
            id=str(data['id']),
            name=data.get('name') or "",
            description=data.get('description') or "",
            volumes=tuple(str(v) for v in data['volumes']),
        )


@dataclass(frozen=True)
class Entry:
    """One paper on a volume index page"""
    # Conference volume, e.g. 'P/P95'
    volume: str
    # Section/track heading the paper was listed under
    section: str
    # e.g. 'Kevin Knight; Vasileios Hatzivassiloglou'
    author: str = NA
    title: str = NA
    pdf: Optional[WebFile] = None
    bib: Optional[WebFile] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization (key order is preserved on disk)"""
        return {
            'volume': self.volume,
            'section': self.section,
            'author': self.author,
            'title': self.title,
            'pdf': self.pdf.to_dict() if self.pdf else None,
            'bib': self.bib.to_dict() if self.bib else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        return cls(
            volume=data['volume'],
            section=data['section'],
            author=data.get('author', NA),
            title=data.get('title', NA),
            pdf=WebFile.from_dict(data.get('pdf')),
            bib=WebFile.from_dict(data.get('bib')),
        )
