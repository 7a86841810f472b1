"""Runtime logging level and logging configuration endpoints."""

import asyncio
import copy
from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException

from ..config import settings
from ..dependencies import get_config_cache, get_contents_dir, get_contents_lock, require_admin
from ..exceptions import InvalidRequestError, OperationFailedError
from ..models import LoggingConfigResponse, LogLevelInfo, LogLevelResponse, LogLevelUpdate
from ihub_admin import ConfigCache
from ihub_admin._utils import atomic_write_json, load_json_file, logger
from ihub_admin.config_cache import PLATFORM_KEY
from ihub_admin.logging_control import (
    DEFAULT_LOGGING_CONFIG,
    LOG_LEVELS,
    configure_logging,
    get_log_level_info,
    set_log_level,
)
from ihub_admin.platform_config import PLATFORM_FILE

router = APIRouter(prefix="/admin/logging", tags=["logging"], dependencies=[Depends(require_admin)])


async def _update_platform_logging(
    contents_dir: Path,
    cache: ConfigCache,
    updates: Dict[str, Any],
) -> Dict[str, Any]:
    """Read-modify-write the ``logging`` section of platform.json and reload it."""
    platform_path = contents_dir / PLATFORM_FILE
    try:
        platform_config = load_json_file(platform_path)
    except FileNotFoundError:
        logger.info("Creating new platform config file")
        platform_config = {}

    platform_config["logging"] = {**(platform_config.get("logging") or {}), **updates}
    atomic_write_json(platform_path, platform_config)

    await cache.refresh_cache_entry(PLATFORM_KEY)
    configure_logging(platform_config["logging"], app_managed=not settings.disable_app_logging)
    return platform_config["logging"]


@router.get("/level", response_model=LogLevelInfo)
async def get_log_level() -> LogLevelInfo:
    """Get current log level and available levels."""
    return LogLevelInfo(**get_log_level_info())


@router.put("/level", response_model=LogLevelResponse)
async def update_log_level(
    update: LogLevelUpdate,
    contents_dir: Path = Depends(get_contents_dir),
    cache: ConfigCache = Depends(get_config_cache),
    lock: asyncio.Lock = Depends(get_contents_lock),
) -> LogLevelResponse:
    """Change the log level, optionally persisting it to platform.json."""
    if update.level not in LOG_LEVELS:
        raise HTTPException(
            status_code=400,
            detail={"error": "Invalid log level", "validLevels": list(LOG_LEVELS.keys())},
        )

    set_log_level(update.level)
    logger.info(f"Log level changed to: {update.level}")

    if update.persist:
        try:
            async with lock:
                await _update_platform_logging(contents_dir, cache, {"level": update.level})
        except Exception as e:
            logger.error(f"Error updating log level: {e}")
            raise OperationFailedError("update log level", e)
        logger.info(f"Log level persisted to platform.json: {update.level}")

    suffix = " and saved to configuration" if update.persist else " (runtime only)"
    return LogLevelResponse(
        level=update.level,
        persisted=update.persist,
        message=f"Log level updated to {update.level}{suffix}",
    )


@router.get("/config")
async def get_logging_config(cache: ConfigCache = Depends(get_config_cache)) -> Dict[str, Any]:
    """Get the logging section of the cached platform configuration."""
    platform_config = cache.get_platform() or {}
    return platform_config.get("logging") or copy.deepcopy(DEFAULT_LOGGING_CONFIG)


@router.put("/config", response_model=LoggingConfigResponse)
async def update_logging_config(
    new_logging_config: Any = Body(None),
    contents_dir: Path = Depends(get_contents_dir),
    cache: ConfigCache = Depends(get_config_cache),
    lock: asyncio.Lock = Depends(get_contents_lock),
) -> LoggingConfigResponse:
    """Merge the request body into the logging section of platform.json."""
    if not isinstance(new_logging_config, dict):
        raise InvalidRequestError("Invalid logging configuration")

    level = new_logging_config.get("level")
    if level is not None and level not in LOG_LEVELS:
        raise HTTPException(
            status_code=400,
            detail={"error": "Invalid log level", "validLevels": list(LOG_LEVELS.keys())},
        )

    try:
        async with lock:
            logging_config = await _update_platform_logging(contents_dir, cache, new_logging_config)
    except Exception as e:
        logger.error(f"Error updating logging config: {e}")
        raise OperationFailedError("update logging configuration", e)

    logger.info(f"Logging configuration updated: {new_logging_config}")
    return LoggingConfigResponse(config=logging_config)
