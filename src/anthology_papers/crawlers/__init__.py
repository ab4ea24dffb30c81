"""
Anthology crawlers
"""

from .aclweb import ACLAnthologyCrawler, parse_index, volume_index_url

__all__ = [
    'ACLAnthologyCrawler',
    'parse_index',
    'volume_index_url',
]
