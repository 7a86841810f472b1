"""Platform authentication configuration endpoints."""

import asyncio
import copy
from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request

from ..dependencies import get_config_cache, get_contents_dir, get_contents_lock, require_admin
from ..exceptions import InvalidRequestError, OperationFailedError
from ..models import PlatformConfigResponse, ReconfigurationResult
from ihub_admin import ConfigCache
from ihub_admin._utils import atomic_write_json, logger
from ihub_admin.config_cache import PLATFORM_KEY
from ihub_admin.platform_config import (
    DEFAULT_PLATFORM_CONFIG,
    PLATFORM_FILE,
    load_platform_config,
    merge_platform_config,
    reconfigure_authentication_methods,
    sanitize_platform_config,
)

router = APIRouter(prefix="/admin/configs", tags=["configs"], dependencies=[Depends(require_admin)])


@router.get("/platform")
async def get_platform_config(contents_dir: Path = Depends(get_contents_dir)) -> Dict[str, Any]:
    """Get platform configuration with secrets redacted."""
    platform_config = load_platform_config(contents_dir)
    if platform_config is None:
        logger.info("Platform config not found, returning default config")
        platform_config = copy.deepcopy(DEFAULT_PLATFORM_CONFIG)

    return sanitize_platform_config(platform_config)


@router.post("/platform", response_model=PlatformConfigResponse)
async def update_platform_config(
    request: Request,
    new_config: Any = Body(None),
    contents_dir: Path = Depends(get_contents_dir),
    cache: ConfigCache = Depends(get_config_cache),
    lock: asyncio.Lock = Depends(get_contents_lock),
) -> PlatformConfigResponse:
    """Update the authentication sections of platform.json.

    Secrets that come back as ``***REDACTED***`` keep their stored value.
    """
    if not isinstance(new_config, dict):
        raise InvalidRequestError("Invalid configuration data")

    try:
        async with lock:
            existing_config = load_platform_config(contents_dir)
            if existing_config is None:
                logger.info("Creating new platform config file")
                existing_config = {}

            merged_config = merge_platform_config(existing_config, new_config)
            atomic_write_json(contents_dir / PLATFORM_FILE, merged_config)
            await cache.refresh_cache_entry(PLATFORM_KEY)
    except Exception as e:
        logger.error(f"Error updating platform configuration: {e}")
        raise OperationFailedError("update platform configuration", e)

    results = reconfigure_authentication_methods(
        existing_config,
        merged_config,
        oidc_reconfigurer=getattr(request.app.state, "oidc_reconfigurer", None),
    )

    if results["reconfigured"]:
        logger.info(f"Reconfigured: {', '.join(results['reconfigured'])}")
    if results["requiresRestart"]:
        logger.info(f"Requires restart: {', '.join(results['requiresRestart'])}")
    for note in results["notes"]:
        logger.info(note)

    logger.info("Platform authentication configuration updated")

    return PlatformConfigResponse(
        config=sanitize_platform_config(merged_config),
        reconfiguration=ReconfigurationResult(**results),
    )
