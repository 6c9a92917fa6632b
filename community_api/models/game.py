"""
Catalog query enums
"""

from enum import Enum


class CatalogEndpoint(str, Enum):
    """Cached catalog endpoints (part of every cache key)"""
    SEARCH = "search"
    GAME = "game"
    CATEGORY = "category"
    TRENDING = "trending"
    POPULAR = "popular"
