"""
Tiered Cache implementation with L1/L2/L3 levels.

L1: memory (LRU, bounded)
L2: disk (one JSON file per namespace, survives restarts)
L3: long-term knowledge graph store (behind IRemoteStore)

Operations:
- get(): L1 -> L2 -> L3 cascade, promoting hits into the faster tiers
- set(): write-through to every tier
- invalidate(): remove from every tier
- refresh(): pull L3 contents down into L2/L1
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..config import CacheConfig
from ..interfaces.cache import ICache, CacheStats
from ..interfaces.remote_store import IRemoteStore
from ..models.cache_entry import CacheEntry, LayerPresence
from .disk_store import DiskStore
from .lru_cache import LRUCache
from .remote_store import UnavailableRemoteStore

logger = logging.getLogger(__name__)


class TieredCache(ICache):
    """
    Three-tier cache for a single namespace.

    Only this class is visible to callers. Disk and remote faults are
    absorbed by their tiers; at worst the cache gets colder.

    By default the disk tier is an independent map that keeps entries
    evicted from memory. With config.disk_mirrors_memory the disk file is
    rewritten from the memory contents on every write instead.
    """

    def __init__(
        self,
        namespace: str,
        config: CacheConfig,
        remote_store: Optional[IRemoteStore] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize tiered cache.

        Args:
            namespace: Keyspace partition; also names the L2 file
            config: Tier capacities, TTLs and paths
            remote_store: L3 store (defaults to the always-absent stub)
            clock: Source of epoch seconds
        """
        self.namespace = namespace
        self.config = config
        self._clock = clock
        self._initialized = False

        self._stats = CacheStats()

        self._l1 = LRUCache(
            max_entries=config.max_entries,
            ttl_seconds=config.memory_ttl_seconds,
            clock=clock,
            on_evict=self._record_eviction
        )
        self._l2 = DiskStore(
            path=config.disk_path(namespace),
            ttl_seconds=config.disk_ttl_seconds,
            clock=clock
        )
        self._l3 = remote_store or UnavailableRemoteStore()

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def disk_path(self) -> Path:
        return self._l2.path

    async def initialize(self) -> None:
        """Ensure the cache directory exists and load the disk tier."""
        await self._l2.ensure_directory()
        entries = await self._l2.load()
        self._initialized = True
        logger.info(
            f"[{self.namespace}] Cache initialized from {self._l2.path} "
            f"({len(entries)} disk entries)"
        )

    async def get(self, key: str) -> Optional[Any]:
        """
        Get value, cascading through the tiers.

        Args:
            key: Cache key

        Returns:
            Cached value or None on a miss at every tier
        """
        if not self._ready("get"):
            return None

        # L1
        entry = self._l1.get(key)
        if entry is not None:
            self._stats.l1_hits += 1
            self._log_hit("L1", key)
            return entry.value
        self._stats.l1_misses += 1

        # L2
        entry = await self._l2.get(key)
        if entry is not None:
            self._stats.l2_hits += 1
            self._log_hit("L2", key)
            entry.metadata.layers.l1 = True
            self._l1.set(key, entry)
            self._stats.promotions += 1
            return entry.value
        self._stats.l2_misses += 1

        # L3
        entry = await self._l3.get(key)
        if entry is not None:
            self._stats.l3_hits += 1
            self._log_hit("L3", key)
            promoted = CacheEntry.create(
                key=key,
                value=entry.value,
                ttl=self.config.remote_ttl_seconds,
                now=self._clock(),
                access_count=1,
                layers=LayerPresence(l1=True, l2=True, l3=True)
            )
            self._l1.set(key, promoted)
            await self._write_l2({key: promoted})
            self._stats.promotions += 1
            return promoted.value
        self._stats.l3_misses += 1

        if self.config.log_misses:
            logger.debug(f"[{self.namespace}] Miss for '{key}'")
        return None

    async def set(self, key: str, value: Any) -> None:
        """
        Write-through to every tier.

        There is no rollback: if a slower tier fails, the faster ones keep
        the new value.

        Args:
            key: Cache key
            value: JSON-representable value
        """
        if not self._ready("set"):
            return

        entry = CacheEntry.create(
            key=key,
            value=value,
            ttl=self.config.disk_ttl_seconds,
            now=self._clock(),
            layers=LayerPresence(l1=True, l2=True, l3=self._l3.is_available())
        )

        self._l1.set(key, entry)
        await self._write_l2({key: entry})
        await self._l3.set(key, entry)
        logger.debug(f"[{self.namespace}] Wrote '{key}'")

    async def invalidate(self, key: str) -> None:
        if not self._ready("invalidate"):
            return

        self._l1.remove(key)
        if self.config.disk_mirrors_memory:
            await self._l2.replace(dict(self._l1.items()))
        else:
            await self._l2.remove(key)
        await self._l3.delete(key)
        logger.debug(f"[{self.namespace}] Invalidated '{key}'")

    async def refresh(self) -> int:
        """
        Pull live L3 entries down into L2 and L1.

        Returns:
            Number of entries pulled down (0 when L3 is unavailable)
        """
        if not self._ready("refresh"):
            return 0

        if not self._l3.is_available():
            logger.debug(f"[{self.namespace}] Refresh skipped, long-term store unavailable")
            return 0

        remote_entries = await self._l3.entries()
        if not remote_entries:
            return 0

        now = self._clock()
        refreshed: Dict[str, CacheEntry] = {}
        for key, remote_entry in remote_entries.items():
            refreshed[key] = CacheEntry.create(
                key=key,
                value=remote_entry.value,
                ttl=self.config.remote_ttl_seconds,
                now=now,
                layers=LayerPresence(l1=True, l2=True, l3=True)
            )

        for key, entry in refreshed.items():
            self._l1.set(key, entry)
        await self._write_l2(refreshed)

        logger.info(f"[{self.namespace}] Refreshed {len(refreshed)} entries from long-term store")
        return len(refreshed)

    async def clear(self) -> None:
        """Empty every tier. Statistics are lifetime counters and survive."""
        if not self._ready("clear"):
            return

        self._l1.clear()
        await self._l2.remove_all()
        await self._l3.clear()
        logger.info(f"[{self.namespace}] Cleared all layers")

    def get_stats(self) -> CacheStats:
        return self._stats.model_copy()

    async def get_tier_sizes(self) -> Dict[str, int]:
        """
        Current entry counts for the memory and disk tiers.

        Raises:
            CacheIntegrityError: If the memory tier is structurally broken
        """
        self._l1.check_integrity()
        return {
            "l1": len(self._l1),
            "l1_max": self._l1.max_entries,
            "l2": await self._l2.size(),
        }

    def destroy(self) -> None:
        """
        Drop the memory tier. The disk file is left in place; call
        initialize() again before reusing this instance.
        """
        self._l1.clear()
        self._initialized = False

    async def _write_l2(self, new_entries: Dict[str, CacheEntry]) -> None:
        if self.config.disk_mirrors_memory:
            # Disk holds exactly what is resident in memory
            await self._l2.replace(dict(self._l1.items()))
        else:
            await self._l2.set_many(new_entries)

    def _ready(self, operation: str) -> bool:
        if not self._initialized:
            logger.warning(
                f"[{self.namespace}] {operation}() called before initialize(); treating cache as empty"
            )
        return self._initialized

    def _record_eviction(self, key: str, reason: str) -> None:
        self._stats.evictions += 1

    def _log_hit(self, tier: str, key: str) -> None:
        if self.config.log_hits:
            logger.debug(f"[{self.namespace}] {tier} hit for '{key}'")
