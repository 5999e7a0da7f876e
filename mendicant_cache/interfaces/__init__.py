from .cache import ICache, CacheStats
from .remote_store import IRemoteStore, KnowledgeGraphClient

__all__ = [
    "ICache",
    "CacheStats",
    "IRemoteStore",
    "KnowledgeGraphClient",
]
