"""
Cache entry models shared by every tier.

On disk the models use camelCase field names (createdAt, accessCount, ...);
in Python they are plain snake_case attributes.
"""

import time
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LayerPresence(_CamelModel):
    """Which tiers are believed to hold a copy. Informational only."""
    l1: bool = False
    l2: bool = False
    l3: bool = False


class CacheMetadata(_CamelModel):
    """Bookkeeping stored alongside a cached value"""
    key: str
    created_at: float = Field(default_factory=time.time)
    updated_at: float = Field(default_factory=time.time)
    access_count: int = Field(default=0, ge=0)
    last_accessed_at: float = Field(default_factory=time.time)
    ttl: float = 0.0  # seconds
    layers: LayerPresence = Field(default_factory=LayerPresence)


class CacheEntry(_CamelModel):
    """Cached value plus metadata"""
    value: Any = None
    metadata: CacheMetadata

    @classmethod
    def create(
        cls,
        key: str,
        value: Any,
        ttl: float,
        now: float,
        access_count: int = 0,
        layers: Optional[LayerPresence] = None
    ) -> "CacheEntry":
        """
        Build a fresh entry with all timestamps set to now.

        Args:
            key: Cache key
            value: Caller-supplied value
            ttl: TTL in seconds recorded on the entry
            now: Current epoch time
            access_count: Initial access count
            layers: Tiers the entry is about to be written to

        Returns:
            New CacheEntry
        """
        return cls(
            value=value,
            metadata=CacheMetadata(
                key=key,
                created_at=now,
                updated_at=now,
                access_count=access_count,
                last_accessed_at=now,
                ttl=ttl,
                layers=layers or LayerPresence()
            )
        )

    def touch(self, now: float) -> None:
        """Record an access."""
        self.metadata.access_count += 1
        self.metadata.last_accessed_at = now
