"""
Tests for the memory-tier LRU store.
"""

import pytest

from mendicant_cache.caching.lru_cache import LRUCache, EVICT_CAPACITY, EVICT_EXPIRED
from mendicant_cache.exceptions import CacheIntegrityError
from mendicant_cache.models.cache_entry import CacheEntry


def make_entry(key: str, value, now: float = 0.0) -> CacheEntry:
    """Helper to create a test entry"""
    return CacheEntry.create(key=key, value=value, ttl=60, now=now)


@pytest.fixture
def evictions():
    return []


@pytest.fixture
def lru(clock, evictions):
    return LRUCache(
        max_entries=3,
        ttl_seconds=60,
        clock=clock,
        on_evict=lambda key, reason: evictions.append((key, reason))
    )


def test_basic_get_set(lru, clock):
    lru.set("a", make_entry("a", 1, clock.now))

    entry = lru.get("a")
    assert entry is not None
    assert entry.value == 1
    assert lru.get("missing") is None


def test_hit_updates_access_metadata(lru, clock):
    lru.set("a", make_entry("a", 1, clock.now))
    clock.advance(5)

    lru.get("a")
    entry = lru.get("a")

    assert entry.metadata.access_count == 2
    assert entry.metadata.last_accessed_at == clock.now


def test_capacity_never_exceeded(lru, clock):
    for i in range(20):
        lru.set(f"k{i}", make_entry(f"k{i}", i, clock.now))
        assert len(lru) <= lru.max_entries
    lru.check_integrity()


def test_lru_eviction_order(lru, clock, evictions):
    """Touching an entry protects it from the next eviction"""
    for key in ("a", "b", "c"):
        lru.set(key, make_entry(key, key, clock.now))

    lru.get("a")
    lru.set("d", make_entry("d", "d", clock.now))

    assert "b" not in lru
    assert evictions == [("b", EVICT_CAPACITY)]
    assert lru.keys() == ["d", "a", "c"]


def test_update_in_place_does_not_grow(lru, clock, evictions):
    lru.set("a", make_entry("a", 1, clock.now))
    lru.set("a", make_entry("a", 2, clock.now))
    lru.set("a", make_entry("a", 3, clock.now))

    assert len(lru) == 1
    assert lru.get("a").value == 3
    assert evictions == []


def test_update_moves_to_head(lru, clock):
    for key in ("a", "b", "c"):
        lru.set(key, make_entry(key, key, clock.now))

    lru.set("a", make_entry("a", "A", clock.now))
    assert lru.keys() == ["a", "c", "b"]

    lru.set("d", make_entry("d", "d", clock.now))
    assert "b" not in lru
    assert "a" in lru


def test_expired_entry_is_evicted_on_access(lru, clock, evictions):
    lru.set("a", make_entry("a", 1, clock.now))
    clock.advance(61)

    assert lru.get("a") is None
    assert "a" not in lru
    assert len(lru) == 0
    assert evictions == [("a", EVICT_EXPIRED)]


def test_evict_from_empty_store_is_noop(lru, evictions):
    assert lru.evict_lru() is None
    assert evictions == []
    lru.check_integrity()


@pytest.mark.parametrize("victim", ["a", "b", "c"])
def test_remove_relinks_neighbors(lru, clock, victim):
    """Removing head, middle or tail keeps the list consistent"""
    for key in ("a", "b", "c"):
        lru.set(key, make_entry(key, key, clock.now))

    assert lru.remove(victim)
    lru.check_integrity()

    expected = [k for k in ["c", "b", "a"] if k != victim]
    assert lru.keys() == expected


def test_remove_missing_key(lru):
    assert not lru.remove("missing")


def test_single_entry_list(lru, clock):
    lru.set("a", make_entry("a", 1, clock.now))
    lru.get("a")
    assert lru.evict_lru() == "a"
    assert len(lru) == 0
    assert lru.keys() == []
    lru.check_integrity()


def test_peek_does_not_touch_recency(lru, clock):
    for key in ("a", "b", "c"):
        lru.set(key, make_entry(key, key, clock.now))

    assert lru.peek("a").value == "a"
    assert lru.peek("a").metadata.access_count == 0

    lru.set("d", make_entry("d", "d", clock.now))
    assert "a" not in lru


def test_clear(lru, clock):
    for key in ("a", "b"):
        lru.set(key, make_entry(key, key, clock.now))
    lru.clear()
    assert len(lru) == 0
    assert lru.get("a") is None
    lru.check_integrity()


def test_no_ttl_means_no_expiry(clock):
    lru = LRUCache(max_entries=2, ttl_seconds=None, clock=clock)
    lru.set("a", make_entry("a", 1, clock.now))
    clock.advance(10 ** 9)
    assert lru.get("a").value == 1


def test_invalid_capacity():
    with pytest.raises(ValueError):
        LRUCache(max_entries=0)


def test_integrity_check_detects_corruption(lru, clock):
    for key in ("a", "b", "c"):
        lru.set(key, make_entry(key, key, clock.now))

    # Break the back-link of the middle node
    lru._index["b"].prev = None

    with pytest.raises(CacheIntegrityError):
        lru.check_integrity()


def test_integrity_check_detects_size_mismatch(lru, clock):
    lru.set("a", make_entry("a", 1, clock.now))
    lru._size = 2

    with pytest.raises(CacheIntegrityError):
        lru.check_integrity()


def test_ttl_runs_from_write_into_memory(lru, clock):
    """An entry last updated long ago is fresh once written into memory"""
    lru.set("a", make_entry("a", 1, clock.now - 1000))

    assert lru.get("a").value == 1
    clock.advance(59)
    assert lru.get("a").value == 1
    clock.advance(2)
    assert lru.get("a") is None


def test_replacing_entry_restarts_ttl(lru, clock):
    lru.set("a", make_entry("a", 1, clock.now))
    clock.advance(50)
    lru.set("a", make_entry("a", 2, clock.now))
    clock.advance(50)

    assert lru.get("a").value == 2
