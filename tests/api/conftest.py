"""Fixtures for API router tests."""

import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ihub_admin.config import BackupConfig


@pytest.fixture
def test_app(contents_dir, temp_dir):
    """FastAPI app with all admin routers, pointed at the test configuration tree."""
    app = FastAPI()

    # Import routers after creating app
    from ihub_admin.api.app import configure_state
    from ihub_admin.api.routers import backup, cache, configs, health, log_level, translate

    configure_state(app, BackupConfig(contents_dir=str(contents_dir), temp_dir=str(temp_dir)))
    asyncio.run(app.state.config_cache.initialize())

    app.include_router(backup.router, prefix="/api")
    app.include_router(cache.router, prefix="/api")
    app.include_router(configs.router, prefix="/api")
    app.include_router(log_level.router, prefix="/api")
    app.include_router(translate.router, prefix="/api")
    app.include_router(health.router, prefix="/api")

    return app


@pytest.fixture
def client(test_app):
    """Create test client."""
    return TestClient(test_app)


@pytest.fixture
def admin_secret(monkeypatch):
    """Require ``s3cret`` on admin endpoints for the duration of a test."""
    from ihub_admin.api.config import settings

    monkeypatch.setattr(settings, "admin_secret", "s3cret")
    return "s3cret"
