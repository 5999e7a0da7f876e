"""
Long-term (L3) store adapters.

UnavailableRemoteStore is what ships today: the knowledge graph backend does
not expose generic cache primitives yet. KnowledgeGraphRemoteStore is the
adapter for a backend that does.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError

from ..interfaces.remote_store import IRemoteStore, KnowledgeGraphClient
from ..models.cache_entry import CacheEntry
from .ttl import is_expired

logger = logging.getLogger(__name__)


class UnavailableRemoteStore(IRemoteStore):
    """Always-absent store used while no backend is wired in."""

    def is_available(self) -> bool:
        return False

    async def get(self, key: str) -> Optional[CacheEntry]:
        return None

    async def set(self, key: str, entry: CacheEntry) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None

    async def clear(self) -> None:
        return None

    async def entries(self) -> Dict[str, CacheEntry]:
        return {}


class KnowledgeGraphRemoteStore(IRemoteStore):
    """
    Namespaced adapter over a knowledge graph client.

    Every call is bounded by a timeout and retried a fixed number of times.
    A disconnected client, a timeout, or any client error is logged and read
    as absent / treated as a no-op.
    """

    def __init__(
        self,
        client: KnowledgeGraphClient,
        namespace: str,
        ttl_seconds: float,
        timeout_seconds: float = 5.0,
        retry_attempts: int = 2,
        clock: Callable[[], float] = time.time
    ):
        """
        Args:
            client: Backend exposing the KnowledgeGraphClient primitives
            namespace: Cache namespace this store is bound to
            ttl_seconds: Long-horizon TTL for L3 entries
            timeout_seconds: Per-attempt timeout
            retry_attempts: Extra attempts after the first failure
            clock: Source of epoch seconds
        """
        self.client = client
        self.namespace = namespace
        self.ttl_seconds = ttl_seconds
        self.timeout_seconds = timeout_seconds
        self.retry_attempts = retry_attempts
        self._clock = clock

    def is_available(self) -> bool:
        try:
            return bool(self.client.is_connected())
        except Exception as e:
            logger.warning(f"Knowledge graph availability check failed: {e}")
            return False

    async def get(self, key: str) -> Optional[CacheEntry]:
        if not self.is_available():
            return None

        data = await self._call("get", lambda: self.client.get_cache_entry(self.namespace, key))
        if not data:
            return None

        entry = self._parse(key, data)
        if entry is None or self._expired(entry):
            return None
        return entry

    async def set(self, key: str, entry: CacheEntry) -> None:
        if not self.is_available():
            return
        try:
            data = entry.model_dump(mode="json", by_alias=True)
        except (ValueError, TypeError) as e:
            logger.warning(f"Not writing '{self.namespace}:{key}' to knowledge graph: {e}")
            return
        await self._call("set", lambda: self.client.set_cache_entry(self.namespace, key, data))

    async def delete(self, key: str) -> None:
        if not self.is_available():
            return
        await self._call("delete", lambda: self.client.delete_cache_entry(self.namespace, key))

    async def clear(self) -> None:
        for key in await self._list_raw():
            await self.delete(key)

    async def entries(self) -> Dict[str, CacheEntry]:
        """Live, parseable entries in the namespace."""
        result: Dict[str, CacheEntry] = {}
        for key, data in (await self._list_raw()).items():
            entry = self._parse(key, data)
            if entry is not None and not self._expired(entry):
                result[key] = entry
        return result

    async def _list_raw(self) -> Dict[str, Any]:
        if not self.is_available():
            return {}
        listed = await self._call("list", lambda: self.client.list_cache_entries(self.namespace))
        return listed or {}

    def _expired(self, entry: CacheEntry) -> bool:
        return is_expired(entry.metadata.updated_at, self.ttl_seconds, self._clock())

    def _parse(self, key: str, data: Any) -> Optional[CacheEntry]:
        try:
            return CacheEntry.model_validate(data)
        except ValidationError:
            logger.warning(f"Ignoring malformed knowledge graph entry '{self.namespace}:{key}'")
            return None

    async def _call(self, operation: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        """Run a client call with timeout and retries. Returns None on failure."""
        attempts = self.retry_attempts + 1
        for attempt in range(1, attempts + 1):
            try:
                return await asyncio.wait_for(factory(), timeout=self.timeout_seconds)
            except asyncio.TimeoutError:
                logger.warning(
                    f"Knowledge graph {operation} timed out for namespace "
                    f"'{self.namespace}' (attempt {attempt}/{attempts})"
                )
            except Exception as e:
                logger.warning(
                    f"Knowledge graph {operation} failed for namespace "
                    f"'{self.namespace}' (attempt {attempt}/{attempts}): {e}"
                )
        return None
