from .cache_entry import CacheEntry, CacheMetadata, LayerPresence
from .requests import CacheWriteRequest
from .responses import CacheValueResponse, CacheStatsResponse, RefreshResponse

__all__ = [
    "CacheEntry",
    "CacheMetadata",
    "LayerPresence",
    "CacheWriteRequest",
    "CacheValueResponse",
    "CacheStatsResponse",
    "RefreshResponse",
]
