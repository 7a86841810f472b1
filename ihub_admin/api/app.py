"""FastAPI application for the ihub-admin API."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ihub_admin import ConfigCache
from ihub_admin.config import BackupConfig
from ihub_admin.logging_control import configure_logging
from .config import settings
from .routers import backup, cache, configs, health, log_level, translate

# App-managed logging: our own stdout handler, independent of uvicorn's
# root logger configuration. DISABLE_APP_LOGGING falls back to propagation.
configure_logging({"level": settings.log_level}, app_managed=not settings.disable_app_logging)

logger = logging.getLogger("ihub-admin")


def configure_state(
    app: FastAPI,
    backup_config: BackupConfig,
    config_cache: Optional[ConfigCache] = None,
) -> FastAPI:
    """Attach the configuration cache, tree lock and backup settings to ``app``."""
    app.state.backup_config = backup_config
    app.state.config_cache = config_cache or ConfigCache(
        backup_config.contents_dir, settings.cache_config()
    )
    app.state.contents_lock = asyncio.Lock()
    return app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the configuration cache and apply persisted logging settings."""
    logger.info("Initializing configuration cache...")

    await app.state.config_cache.initialize()

    platform_config = app.state.config_cache.get_platform() or {}
    if platform_config.get("logging"):
        configure_logging(platform_config["logging"], app_managed=not settings.disable_app_logging)

    if not settings.admin_secret:
        logger.warning("ADMIN_SECRET is not set - admin endpoints are not protected")

    yield

    logger.info("Shutting down, clearing configuration cache...")
    app.state.config_cache.clear()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    configure_state(app, settings.backup_config())

    app.include_router(backup.router, prefix=settings.api_prefix)
    app.include_router(cache.router, prefix=settings.api_prefix)
    app.include_router(configs.router, prefix=settings.api_prefix)
    app.include_router(log_level.router, prefix=settings.api_prefix)
    app.include_router(translate.router, prefix=settings.api_prefix)
    app.include_router(health.router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "docs": f"{settings.api_prefix}/docs"
        }

    return app


# Create default app instance
app = create_app()
