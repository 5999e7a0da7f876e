"""
Mendicant cache: three-tier (memory, disk, long-term) cache used by the
agent orchestration layer.
"""

from .config import CacheConfig, Settings
from .caching.tiered_cache import TieredCache
from .interfaces.cache import CacheStats, ICache
from .services.cache_registry import CacheRegistry

__version__ = "1.0.0"

__all__ = [
    "CacheConfig",
    "Settings",
    "TieredCache",
    "CacheStats",
    "ICache",
    "CacheRegistry",
]
