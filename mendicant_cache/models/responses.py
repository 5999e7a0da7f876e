from typing import Any, Dict
from pydantic import BaseModel, Field

from ..interfaces.cache import CacheStats


class CacheValueResponse(BaseModel):
    """A value read from a cache namespace"""
    namespace: str
    key: str
    value: Any


class CacheStatsResponse(BaseModel):
    """Lifetime counters plus current tier sizes for a namespace"""
    namespace: str
    stats: CacheStats
    l1_hit_rate: float
    overall_hit_rate: float
    tier_sizes: Dict[str, int] = Field(default_factory=dict)


class RefreshResponse(BaseModel):
    namespace: str
    refreshed: int
