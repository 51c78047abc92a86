"""
Cache administration routes
"""

from fastapi import APIRouter, Depends, Request

from ..core import get_logger
from ..services.infrastructure.cache import TTLCache

router = APIRouter(prefix="/api/cache", tags=["cache"])
logger = get_logger(__name__, component="routes")


def get_cache(request: Request) -> TTLCache:
    return request.app.state.cache


@router.get("/stats")
async def cache_stats(cache: TTLCache = Depends(get_cache)):
    """Entry counts for monitoring"""
    return cache.get_stats()


@router.post("/clear")
async def clear_cache(cache: TTLCache = Depends(get_cache)):
    """Drop every cached storyline, video and thumbnail"""
    cache.clear()
    logger.info("Cache cleared")
    return {"message": "Cache cleared", "stats": cache.get_stats()}


@router.post("/cleanup")
async def cleanup_cache(cache: TTLCache = Depends(get_cache)):
    """Sweep expired entries now instead of waiting for lazy eviction"""
    removed = cache.cleanup()
    return {"removed": removed, "stats": cache.get_stats()}
