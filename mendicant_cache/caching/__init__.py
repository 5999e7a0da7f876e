"""
Three-tier caching: memory (LRU), disk (namespaced JSON file) and a
long-term knowledge graph store.
"""

from .disk_store import DiskStore
from .lru_cache import LRUCache
from .remote_store import KnowledgeGraphRemoteStore, UnavailableRemoteStore
from .tiered_cache import TieredCache
from .ttl import is_expired

__all__ = [
    "DiskStore",
    "LRUCache",
    "KnowledgeGraphRemoteStore",
    "UnavailableRemoteStore",
    "TieredCache",
    "is_expired",
]
