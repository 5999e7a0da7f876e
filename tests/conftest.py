"""Shared fixtures for cache tests."""

import asyncio
from typing import Any, Dict, Optional

import pytest

from mendicant_cache.config import CacheConfig


class FakeClock:
    """Controllable epoch clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeKnowledgeClient:
    """In-memory stand-in for a knowledge graph backend."""

    def __init__(self, connected: bool = True):
        self.connected = connected
        self.data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.fail_next = 0
        self.delay: Optional[float] = None
        self.calls = 0

    def is_connected(self) -> bool:
        return self.connected

    async def _maybe_fail(self) -> None:
        self.calls += 1
        if self.delay is not None:
            await asyncio.sleep(self.delay)
        if self.fail_next > 0:
            self.fail_next -= 1
            raise ConnectionError("knowledge graph unreachable")

    async def get_cache_entry(self, namespace: str, key: str) -> Optional[Dict[str, Any]]:
        await self._maybe_fail()
        return self.data.get(namespace, {}).get(key)

    async def set_cache_entry(self, namespace: str, key: str, data: Dict[str, Any]) -> None:
        await self._maybe_fail()
        self.data.setdefault(namespace, {})[key] = data

    async def delete_cache_entry(self, namespace: str, key: str) -> None:
        await self._maybe_fail()
        self.data.get(namespace, {}).pop(key, None)

    async def list_cache_entries(self, namespace: str) -> Dict[str, Dict[str, Any]]:
        await self._maybe_fail()
        return dict(self.data.get(namespace, {}))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_config(tmp_path):
    """Small-capacity config writing into a temporary directory."""
    return CacheConfig(
        cache_dir=tmp_path / "cache",
        max_entries=3,
        memory_ttl_seconds=60,
        disk_ttl_seconds=3600,
        remote_ttl_seconds=86400,
        remote_timeout_seconds=0.5,
        remote_retry_attempts=2,
    )


@pytest.fixture
def knowledge_client():
    return FakeKnowledgeClient()
