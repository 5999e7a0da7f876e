from fastapi import APIRouter, HTTPException, Depends, Request

from ..caching.tiered_cache import TieredCache
from ..models.requests import CacheWriteRequest
from ..models.responses import CacheValueResponse, CacheStatsResponse, RefreshResponse
from ..services.cache_registry import CacheRegistry


router = APIRouter(prefix="/api/v1/cache", tags=["cache"])


# Dependencies resolved from app state (populated in the app lifespan)
def get_registry(request: Request) -> CacheRegistry:
    return request.app.state.cache_registry


def get_cache(namespace: str, registry: CacheRegistry = Depends(get_registry)) -> TieredCache:
    if namespace not in registry:
        raise HTTPException(status_code=404, detail=f"Unknown cache namespace '{namespace}'")
    return registry.get(namespace)


@router.get("/{namespace}/stats", response_model=CacheStatsResponse)
async def get_stats(namespace: str, cache: TieredCache = Depends(get_cache)) -> CacheStatsResponse:
    """
    Lifetime statistics for a namespace

    Args:
        namespace: Cache namespace

    Returns:
        CacheStatsResponse with counters, hit rates and tier sizes
    """
    stats = cache.get_stats()
    return CacheStatsResponse(
        namespace=namespace,
        stats=stats,
        l1_hit_rate=stats.l1_hit_rate,
        overall_hit_rate=stats.overall_hit_rate,
        tier_sizes=await cache.get_tier_sizes()
    )


@router.get("/{namespace}/entries/{key}", response_model=CacheValueResponse)
async def get_entry(namespace: str, key: str, cache: TieredCache = Depends(get_cache)) -> CacheValueResponse:
    value = await cache.get(key)
    if value is None:
        raise HTTPException(status_code=404, detail=f"Key '{key}' not cached in '{namespace}'")
    return CacheValueResponse(namespace=namespace, key=key, value=value)


@router.put("/{namespace}/entries/{key}", response_model=CacheValueResponse)
async def put_entry(
    namespace: str,
    key: str,
    body: CacheWriteRequest,
    cache: TieredCache = Depends(get_cache)
) -> CacheValueResponse:
    await cache.set(key, body.value)
    return CacheValueResponse(namespace=namespace, key=key, value=body.value)


@router.delete("/{namespace}/entries/{key}", status_code=204)
async def delete_entry(namespace: str, key: str, cache: TieredCache = Depends(get_cache)) -> None:
    await cache.invalidate(key)


@router.post("/{namespace}/refresh", response_model=RefreshResponse)
async def refresh(namespace: str, cache: TieredCache = Depends(get_cache)) -> RefreshResponse:
    """Pull long-term entries down into memory and disk"""
    refreshed = await cache.refresh()
    return RefreshResponse(namespace=namespace, refreshed=refreshed)


@router.delete("/{namespace}", status_code=204)
async def clear(namespace: str, cache: TieredCache = Depends(get_cache)) -> None:
    await cache.clear()
