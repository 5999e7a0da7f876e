"""
Tier-3 contracts.

IRemoteStore is what the tiered cache talks to. KnowledgeGraphClient is the
shape a long-term knowledge backend has to offer before it can sit behind
KnowledgeGraphRemoteStore.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Protocol

from ..models.cache_entry import CacheEntry


class KnowledgeGraphClient(Protocol):
    """Minimal cache primitives a knowledge graph backend must expose"""

    def is_connected(self) -> bool:
        ...

    async def get_cache_entry(self, namespace: str, key: str) -> Optional[Dict[str, Any]]:
        ...

    async def set_cache_entry(self, namespace: str, key: str, data: Dict[str, Any]) -> None:
        ...

    async def delete_cache_entry(self, namespace: str, key: str) -> None:
        ...

    async def list_cache_entries(self, namespace: str) -> Dict[str, Dict[str, Any]]:
        ...


class IRemoteStore(ABC):
    """
    Long-term store behind the disk tier.

    Implementations must never raise: an unreachable backend reads as absent
    and writes become no-ops.
    """

    @abstractmethod
    def is_available(self) -> bool:
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[CacheEntry]:
        pass

    @abstractmethod
    async def set(self, key: str, entry: CacheEntry) -> None:
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass

    @abstractmethod
    async def entries(self) -> Dict[str, CacheEntry]:
        """All live entries for the namespace. Used by refresh."""
        pass
