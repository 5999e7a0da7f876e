from .cache_registry import CacheRegistry
from .embedding_cache import ThreeTierEmbeddingCache, CachedEmbedding

__all__ = [
    "CacheRegistry",
    "ThreeTierEmbeddingCache",
    "CachedEmbedding",
]
