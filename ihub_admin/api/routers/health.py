"""Health check endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_config_cache
from ..models import HealthStatus
from ihub_admin import ConfigCache

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live", response_model=HealthStatus)
async def liveness_probe(cache: ConfigCache = Depends(get_config_cache)) -> HealthStatus:
    """Kubernetes liveness probe."""
    return HealthStatus(status="alive", cache_initialized=cache.is_initialized)


@router.get("/ready", response_model=HealthStatus)
async def readiness_probe(cache: ConfigCache = Depends(get_config_cache)) -> HealthStatus:
    """Kubernetes readiness probe."""
    if not cache.is_initialized:
        raise HTTPException(status_code=503, detail="Configuration cache not initialized")
    return HealthStatus(status="ready", cache_initialized=True)
