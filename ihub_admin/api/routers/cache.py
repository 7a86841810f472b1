"""Configuration cache endpoints."""

import asyncio
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..dependencies import get_config_cache, get_contents_lock, require_admin
from ..exceptions import OperationFailedError
from ..models import MessageResponse
from ihub_admin import ConfigCache
from ihub_admin._utils import logger

router = APIRouter(prefix="/admin/cache", tags=["cache"], dependencies=[Depends(require_admin)])


@router.get("/stats")
async def cache_stats(cache: ConfigCache = Depends(get_config_cache)) -> Dict[str, Any]:
    """Get configuration cache statistics."""
    return cache.get_stats()


@router.api_route("/_refresh", methods=["GET", "POST"], response_model=MessageResponse)
async def refresh_cache(
    cache: ConfigCache = Depends(get_config_cache),
    lock: asyncio.Lock = Depends(get_contents_lock),
) -> MessageResponse:
    """Reload every cached configuration entry from disk."""
    try:
        async with lock:
            await cache.refresh_all()
    except Exception as e:
        logger.error(f"Cache refresh failed: {e}")
        raise OperationFailedError("refresh configuration cache", e)
    return MessageResponse(message="Configuration cache refreshed successfully")


@router.api_route("/_clear", methods=["GET", "POST"], response_model=MessageResponse)
async def clear_cache(
    cache: ConfigCache = Depends(get_config_cache),
    lock: asyncio.Lock = Depends(get_contents_lock),
) -> MessageResponse:
    """Drop the cache and load it again from the configuration tree."""
    try:
        async with lock:
            cache.clear()
            await cache.initialize()
    except Exception as e:
        logger.error(f"Cache clear failed: {e}")
        raise OperationFailedError("clear configuration cache", e)
    return MessageResponse(message="Configuration cache cleared and reinitialized successfully")
