"""
Tests for the embedding cache built on the tiered cache.
"""

import pytest

from mendicant_cache.caching.tiered_cache import TieredCache
from mendicant_cache.services.embedding_cache import ThreeTierEmbeddingCache, CachedEmbedding


@pytest.fixture
def embeddings(cache_config, clock):
    return ThreeTierEmbeddingCache(TieredCache("embeddings", cache_config, clock=clock))


def test_key_for_text_is_stable():
    first = ThreeTierEmbeddingCache.key_for_text("refactor the auth module")
    second = ThreeTierEmbeddingCache.key_for_text("refactor the auth module")
    other = ThreeTierEmbeddingCache.key_for_text("write tests")

    assert first == second
    assert first != other
    assert len(first) == 64


@pytest.mark.asyncio
async def test_set_and_get(embeddings):
    await embeddings.initialize()
    key = embeddings.key_for_text("hello")

    await embeddings.set(key, [0.1, 0.2, 0.3])

    assert await embeddings.get(key) == [0.1, 0.2, 0.3]
    assert await embeddings.get("missing") is None


@pytest.mark.asyncio
async def test_hits_are_counted_in_stored_entry(embeddings):
    await embeddings.initialize()
    await embeddings.set("k", [1.0])

    await embeddings.get("k")
    await embeddings.get("k")

    stored = CachedEmbedding.model_validate(embeddings.cache._l1.peek("k").value)
    assert stored.hits == 2


@pytest.mark.asyncio
async def test_survives_restart(embeddings, cache_config, clock):
    await embeddings.initialize()
    await embeddings.set("k", [0.5, 0.25])
    embeddings.destroy()

    reopened = ThreeTierEmbeddingCache(TieredCache("embeddings", cache_config, clock=clock))
    await reopened.initialize()

    assert await reopened.get("k") == [0.5, 0.25]
    assert reopened.get_stats().promotions == 1


@pytest.mark.asyncio
async def test_malformed_entry_is_dropped(embeddings):
    await embeddings.initialize()
    await embeddings.cache.set("k", {"not": "an embedding"})

    assert await embeddings.get("k") is None
    assert await embeddings.cache.get("k") is None


@pytest.mark.asyncio
async def test_clear(embeddings):
    await embeddings.initialize()
    await embeddings.set("k", [1.0])
    await embeddings.clear()
    assert await embeddings.get("k") is None
