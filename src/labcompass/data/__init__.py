"""
Data Module - Access to department data and trending lists.
===========================================================

- base: CatalogSource interface
- cache: TTL cache with injectable clock
- client: HTTP client for the directory backend
- local: JSON-file directory for offline use
"""

from labcompass.data.base import CatalogSource
from labcompass.data.cache import TTLCache
from labcompass.data.client import DirectoryClient
from labcompass.data.local import LocalDirectory, rank_trending

__all__ = [
    "CatalogSource",
    "TTLCache",
    "DirectoryClient",
    "LocalDirectory",
    "rank_trending",
]
