"""Tests for configuration cache endpoints."""

import json

import pytest


def test_cache_stats(client):
    response = client.get("/api/admin/cache/stats")

    assert response.status_code == 200
    stats = response.json()
    assert stats["isInitialized"] is True
    assert stats["cacheTTL"] == 300
    assert "config/platform.json" in stats["entries"]
    assert "config/models-all.json" in stats["entries"]
    entry = stats["entries"]["config/platform.json"]
    assert entry["etag"].startswith('"')
    assert entry["sizeApprox"] > 0


@pytest.mark.parametrize("method", ["get", "post"])
def test_refresh_picks_up_disk_changes(client, contents_dir, method):
    (contents_dir / "config" / "ui.json").write_text(json.dumps({"title": {"en": "Changed"}}))

    response = getattr(client, method)("/api/admin/cache/_refresh")

    assert response.status_code == 200
    assert response.json() == {"message": "Configuration cache refreshed successfully"}
    cache = client.app.state.config_cache
    assert cache.get("config/ui.json") == {"title": {"en": "Changed"}}


@pytest.mark.parametrize("method", ["get", "post"])
def test_clear_reinitializes(client, contents_dir, method):
    (contents_dir / "models" / "new.json").write_text(json.dumps({"id": "new", "enabled": True}))

    response = getattr(client, method)("/api/admin/cache/_clear")

    assert response.status_code == 200
    assert response.json() == {"message": "Configuration cache cleared and reinitialized successfully"}
    cache = client.app.state.config_cache
    assert cache.is_initialized
    assert "new" in [m["id"] for m in cache.get_models()]


def test_refresh_keeps_entry_on_invalid_json(client, contents_dir):
    (contents_dir / "config" / "ui.json").write_text("{broken")

    response = client.post("/api/admin/cache/_refresh")

    assert response.status_code == 200
    assert client.app.state.config_cache.get("config/ui.json") == {"title": {"en": "iHub"}}


def test_cache_requires_admin(client, admin_secret):
    assert client.get("/api/admin/cache/stats").status_code == 401
    assert client.post("/api/admin/cache/_clear").status_code == 401
