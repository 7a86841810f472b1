"""Dependency injection for FastAPI."""

import asyncio
import secrets
from pathlib import Path
from typing import Optional

from fastapi import Header, Request

from ihub_admin import BackupManager, ConfigCache
from ihub_admin.translation import Translator
from .config import settings
from .exceptions import AdminAuthRequiredError


async def get_config_cache(request: Request) -> ConfigCache:
    """Get ConfigCache instance from app state."""
    return request.app.state.config_cache


async def get_contents_lock(request: Request) -> asyncio.Lock:
    """Process-wide lock guarding the configuration tree."""
    return request.app.state.contents_lock


async def get_contents_dir(request: Request) -> Path:
    return Path(request.app.state.backup_config.contents_dir)


async def get_backup_manager(request: Request) -> BackupManager:
    return BackupManager(
        request.app.state.backup_config,
        request.app.state.config_cache,
        request.app.state.contents_lock,
    )


async def get_translator() -> Translator:
    return Translator(settings.translation_config())


async def require_admin(
    authorization: Optional[str] = Header(None),
    x_admin_secret: Optional[str] = Header(None),
) -> None:
    """Reject requests without the admin secret; open when no secret is configured."""
    expected = settings.admin_secret
    if not expected:
        return

    supplied = x_admin_secret
    if authorization and authorization.lower().startswith("bearer "):
        supplied = authorization[7:].strip()

    if not supplied or not secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        raise AdminAuthRequiredError()
