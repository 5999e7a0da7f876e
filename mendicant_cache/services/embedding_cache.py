"""
Three-tier embedding cache.

Thin wrapper over a TieredCache (normally the 'embeddings' namespace) that
stores vectors with a timestamp and a hit counter.
"""

import hashlib
import logging
import time
from typing import List, Optional

from pydantic import BaseModel, ValidationError

from ..caching.tiered_cache import TieredCache
from ..interfaces.cache import CacheStats

logger = logging.getLogger(__name__)


class CachedEmbedding(BaseModel):
    """Embedding vector as stored in the cache"""
    embedding: List[float]
    timestamp: float
    hits: int = 0


class ThreeTierEmbeddingCache:
    """Embedding lookups backed by memory, disk and long-term tiers."""

    def __init__(self, cache: TieredCache):
        self.cache = cache

    @staticmethod
    def key_for_text(text: str) -> str:
        """SHA-256 of the text, used as the cache key."""
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    async def initialize(self) -> None:
        await self.cache.initialize()

    async def get(self, key: str) -> Optional[List[float]]:
        """
        Retrieve a cached embedding.

        A hit bumps the stored hit counter and writes the entry back.

        Args:
            key: Cache key (typically key_for_text(text))

        Returns:
            Embedding vector or None if not cached
        """
        data = await self.cache.get(key)
        if data is None:
            return None

        try:
            cached = CachedEmbedding.model_validate(data)
        except ValidationError:
            logger.warning(f"Dropping malformed embedding cache entry '{key}'")
            await self.cache.invalidate(key)
            return None

        cached.hits += 1
        await self.cache.set(key, cached.model_dump())
        return cached.embedding

    async def set(self, key: str, embedding: List[float]) -> None:
        cached = CachedEmbedding(embedding=embedding, timestamp=time.time())
        await self.cache.set(key, cached.model_dump())

    async def clear(self) -> None:
        await self.cache.clear()

    def get_stats(self) -> CacheStats:
        return self.cache.get_stats()

    def destroy(self) -> None:
        self.cache.destroy()
