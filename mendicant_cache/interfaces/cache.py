"""
Cache interface - the contract upstream callers depend on.
"""

from abc import ABC, abstractmethod
from typing import Optional, Any
from pydantic import BaseModel


class CacheStats(BaseModel):
    """Lifetime counters for a cache instance"""
    l1_hits: int = 0
    l1_misses: int = 0
    l2_hits: int = 0
    l2_misses: int = 0
    l3_hits: int = 0
    l3_misses: int = 0
    evictions: int = 0
    promotions: int = 0

    @property
    def l1_hit_rate(self) -> float:
        total = self.l1_hits + self.l1_misses
        return self.l1_hits / total if total > 0 else 0.0

    @property
    def l2_hit_rate(self) -> float:
        total = self.l2_hits + self.l2_misses
        return self.l2_hits / total if total > 0 else 0.0

    @property
    def overall_hit_rate(self) -> float:
        """Hit rate at any tier. An L3 miss is a complete miss."""
        hits = self.l1_hits + self.l2_hits + self.l3_hits
        total = hits + self.l3_misses
        return hits / total if total > 0 else 0.0


class ICache(ABC):
    """
    Unified cache interface.

    Callers (embedding cache, agent performance lookups) only ever see this
    surface, never the individual tiers.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare storage and load persisted state."""
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Retrieve value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """
        Store value in cache.

        Args:
            key: Cache key
            value: Value to cache
        """
        pass

    @abstractmethod
    async def invalidate(self, key: str) -> None:
        """
        Remove specific key from every tier.

        Args:
            key: Cache key to invalidate
        """
        pass

    @abstractmethod
    async def refresh(self) -> int:
        """Pull fresh data down from the slowest tier."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Clear all entries. Statistics are kept."""
        pass

    @abstractmethod
    def get_stats(self) -> CacheStats:
        """
        Get cache performance statistics.

        Returns:
            Snapshot of the lifetime counters
        """
        pass

    @abstractmethod
    def destroy(self) -> None:
        """Release in-memory structures."""
        pass
