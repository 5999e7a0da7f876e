import logging
from typing import Callable, Dict, Iterable, List, Optional

from ..config import CacheConfig
from ..caching.tiered_cache import TieredCache
from ..interfaces.remote_store import IRemoteStore

logger = logging.getLogger(__name__)

RemoteStoreFactory = Callable[[str], IRemoteStore]


class CacheRegistry:
    """
    Owns one TieredCache per namespace.

    Built once at application start and passed to whatever needs a cache,
    instead of each subsystem creating its own module-level instance.
    """

    def __init__(
        self,
        config: CacheConfig,
        namespaces: Iterable[str] = (),
        remote_store_factory: Optional[RemoteStoreFactory] = None
    ):
        """
        Args:
            config: Shared cache configuration
            namespaces: Namespaces to register up front
            remote_store_factory: Builds the L3 store for a namespace (stub if None)
        """
        self.config = config
        self._remote_store_factory = remote_store_factory
        self._caches: Dict[str, TieredCache] = {}
        for namespace in namespaces:
            self.register(namespace)

    def register(self, namespace: str) -> TieredCache:
        """Create the cache for a namespace, or return the existing one."""
        if namespace in self._caches:
            return self._caches[namespace]

        remote_store = None
        if self._remote_store_factory is not None:
            remote_store = self._remote_store_factory(namespace)

        cache = TieredCache(namespace, self.config, remote_store=remote_store)
        self._caches[namespace] = cache
        return cache

    def get(self, namespace: str) -> TieredCache:
        """
        Raises:
            KeyError: If the namespace was never registered
        """
        return self._caches[namespace]

    def __contains__(self, namespace: str) -> bool:
        return namespace in self._caches

    @property
    def namespaces(self) -> List[str]:
        return list(self._caches)

    async def initialize_all(self) -> None:
        for cache in self._caches.values():
            await cache.initialize()
        logger.info(f"Initialized {len(self._caches)} cache namespaces: {', '.join(self._caches)}")

    def destroy_all(self) -> None:
        for cache in self._caches.values():
            cache.destroy()
