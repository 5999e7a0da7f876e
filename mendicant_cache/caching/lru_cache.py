"""
LRU (Least Recently Used) store backing the memory tier.

Uses a hash index plus a doubly-linked list: head is the most recently
touched entry, tail the least. get, set and eviction are all O(1).
"""

import logging
import time
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from ..exceptions import CacheIntegrityError
from ..models.cache_entry import CacheEntry
from .ttl import is_expired

logger = logging.getLogger(__name__)

EVICT_CAPACITY = "capacity"
EVICT_EXPIRED = "expired"

EvictionCallback = Callable[[str, str], None]


class _LRUNode:
    __slots__ = ("key", "entry", "stored_at", "prev", "next")

    def __init__(self, key: str, entry: CacheEntry, stored_at: float):
        self.key = key
        self.entry = entry
        # Memory TTL runs from the write into this tier, not from entry.updated_at
        self.stored_at = stored_at
        self.prev: Optional["_LRUNode"] = None
        self.next: Optional["_LRUNode"] = None


class LRUCache:
    """
    Fixed-capacity in-memory cache with strict recency ordering.

    Features:
    - O(1) get/set/evict
    - TTL check on access, measured from when the entry was written into
      this store (expired entries are dropped and count as evictions)
    - Access count tracking on every hit
    - Not thread-safe; meant for single-threaded async code
    """

    def __init__(
        self,
        max_entries: int = 100,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
        on_evict: Optional[EvictionCallback] = None
    ):
        """
        Initialize LRU cache.

        Args:
            max_entries: Maximum number of entries (fixed for the store's lifetime)
            ttl_seconds: Entries older than this are expired on access (None = never)
            clock: Source of epoch seconds
            on_evict: Called with (key, reason) whenever an entry is evicted
        """
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")

        self._index: Dict[str, _LRUNode] = {}
        self._head: Optional[_LRUNode] = None
        self._tail: Optional[_LRUNode] = None
        self._size = 0
        self._max_entries = max_entries
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._on_evict = on_evict

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: str) -> bool:
        return key in self._index

    def get(self, key: str) -> Optional[CacheEntry]:
        """
        Retrieve entry and mark it most recently used.

        Args:
            key: Cache key

        Returns:
            CacheEntry, or None if missing or expired
        """
        node = self._index.get(key)
        if node is None:
            return None

        now = self._clock()
        if self._ttl_seconds is not None and is_expired(
            node.stored_at, self._ttl_seconds, now
        ):
            self._remove_node(node)
            self._evicted(key, EVICT_EXPIRED)
            return None

        self._move_to_front(node)
        node.entry.touch(now)
        return node.entry

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Look at an entry without touching recency, stats or TTL."""
        node = self._index.get(key)
        return node.entry if node is not None else None

    def set(self, key: str, entry: CacheEntry) -> None:
        """
        Insert or replace an entry and move it to the head.

        Replacing an existing key is neither an insertion nor an eviction.
        Inserting at capacity evicts the tail first.

        Args:
            key: Cache key
            entry: Entry to store
        """
        existing = self._index.get(key)
        if existing is not None:
            existing.entry = entry
            existing.stored_at = self._clock()
            self._move_to_front(existing)
            return

        if self._size >= self._max_entries:
            self.evict_lru()

        node = _LRUNode(key, entry, self._clock())
        node.next = self._head
        if self._head is not None:
            self._head.prev = node
        self._head = node
        if self._tail is None:
            self._tail = node

        self._index[key] = node
        self._size += 1

    def remove(self, key: str) -> bool:
        """
        Remove a key. Not counted as an eviction.

        Returns:
            True if the key was present
        """
        node = self._index.get(key)
        if node is None:
            return False
        self._remove_node(node)
        return True

    def evict_lru(self) -> Optional[str]:
        """
        Evict the least recently used entry.

        Returns:
            Evicted key, or None if the store is empty
        """
        node = self._tail
        if node is None:
            return None
        self._remove_node(node)
        self._evicted(node.key, EVICT_CAPACITY)
        return node.key

    def clear(self) -> None:
        self._index.clear()
        self._head = None
        self._tail = None
        self._size = 0

    def keys(self) -> List[str]:
        """Keys from most to least recently used."""
        return [node.key for node in self._iter_nodes()]

    def items(self) -> List[Tuple[str, CacheEntry]]:
        return [(node.key, node.entry) for node in self._iter_nodes()]

    def check_integrity(self) -> None:
        """
        Walk the list and verify it agrees with the index.

        Raises:
            CacheIntegrityError: On size mismatch, broken back-links or cycles
        """
        if len(self._index) != self._size:
            raise CacheIntegrityError(
                f"index holds {len(self._index)} keys but size is {self._size}"
            )
        if self._size > self._max_entries:
            raise CacheIntegrityError(
                f"size {self._size} exceeds capacity {self._max_entries}"
            )

        count = 0
        prev = None
        node = self._head
        while node is not None:
            count += 1
            if count > self._size:
                raise CacheIntegrityError("linked list is longer than the index (cycle?)")
            if node.prev is not prev:
                raise CacheIntegrityError(f"broken back-link at key '{node.key}'")
            if self._index.get(node.key) is not node:
                raise CacheIntegrityError(f"key '{node.key}' is linked but not indexed")
            prev = node
            node = node.next

        if prev is not self._tail:
            raise CacheIntegrityError("tail does not match the last linked node")
        if count != self._size:
            raise CacheIntegrityError(f"linked list holds {count} nodes but size is {self._size}")

    def _iter_nodes(self) -> Iterator[_LRUNode]:
        node = self._head
        while node is not None:
            yield node
            node = node.next

    def _move_to_front(self, node: _LRUNode) -> None:
        if node is self._head:
            return
        self._unlink(node)
        node.prev = None
        node.next = self._head
        if self._head is not None:
            self._head.prev = node
        self._head = node
        if self._tail is None:
            self._tail = node

    def _unlink(self, node: _LRUNode) -> None:
        if node.prev is not None:
            node.prev.next = node.next
        else:
            self._head = node.next

        if node.next is not None:
            node.next.prev = node.prev
        else:
            self._tail = node.prev

        node.prev = None
        node.next = None

    def _remove_node(self, node: _LRUNode) -> None:
        self._unlink(node)
        del self._index[node.key]
        self._size -= 1

    def _evicted(self, key: str, reason: str) -> None:
        logger.debug(f"Evicted '{key}' from memory tier ({reason})")
        if self._on_evict is not None:
            self._on_evict(key, reason)
