"""
ACL Anthology Paper Crawler

Mirrors conference volumes from the ACL Anthology:
- volume index pages and their parsed paper listings (JSON)
- the PDF and BibTeX files each listing references
"""

__version__ = "1.0.0"

from .config import Settings, DEFAULT_MANIFEST
