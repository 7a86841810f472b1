"""Tests for logging control endpoints."""

import json

import pytest

from ihub_admin._utils import logger
from ihub_admin.logging_control import LOG_LEVELS, configure_logging


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    configure_logging({"level": "info"})


def _stored_logging(contents_dir):
    return json.loads((contents_dir / "config" / "platform.json").read_text())["logging"]


def test_get_log_level(client):
    configure_logging({"level": "warn"})

    response = client.get("/api/admin/logging/level")

    assert response.status_code == 200
    assert response.json() == {"current": "warn", "available": list(LOG_LEVELS.keys())}


def test_set_log_level_persists(client, contents_dir):
    response = client.put("/api/admin/logging/level", json={"level": "debug"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["level"] == "debug"
    assert data["persisted"] is True
    assert data["message"] == "Log level updated to debug and saved to configuration"
    assert logger.level == LOG_LEVELS["debug"]
    assert _stored_logging(contents_dir)["level"] == "debug"
    assert client.app.state.config_cache.get_platform()["logging"]["level"] == "debug"
    assert client.get("/api/admin/logging/level").json()["current"] == "debug"


def test_set_log_level_runtime_only(client, contents_dir):
    response = client.put("/api/admin/logging/level", json={"level": "error", "persist": False})

    assert response.status_code == 200
    assert response.json()["message"] == "Log level updated to error (runtime only)"
    assert logger.level == LOG_LEVELS["error"]
    assert _stored_logging(contents_dir)["level"] == "info"


@pytest.mark.parametrize("body", [{"level": "loud"}, {}])
def test_set_log_level_invalid(client, body):
    response = client.put("/api/admin/logging/level", json=body)

    assert response.status_code == 400
    assert response.json()["detail"] == {
        "error": "Invalid log level",
        "validLevels": list(LOG_LEVELS.keys()),
    }


def test_get_logging_config(client):
    response = client.get("/api/admin/logging/config")

    assert response.status_code == 200
    assert response.json() == {"level": "info"}


def test_get_logging_config_defaults(client, contents_dir):
    (contents_dir / "config" / "platform.json").write_text("{}")
    client.post("/api/admin/cache/_refresh")

    response = client.get("/api/admin/logging/config")

    assert response.json()["level"] == "info"
    assert response.json()["file"]["enabled"] is False


def test_update_logging_config_merges(client, contents_dir):
    response = client.put("/api/admin/logging/config", json={"level": "warn", "format": "json"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["config"] == {"level": "warn", "format": "json"}
    assert _stored_logging(contents_dir) == {"level": "warn", "format": "json"}
    assert logger.level == LOG_LEVELS["warn"]

    stored = json.loads((contents_dir / "config" / "platform.json").read_text())
    assert stored["features"] == {"usageTracking": True}


def test_update_logging_config_invalid_level(client, contents_dir):
    response = client.put("/api/admin/logging/config", json={"level": "loud"})

    assert response.status_code == 400
    assert _stored_logging(contents_dir) == {"level": "info"}


def test_update_logging_config_rejects_non_object(client):
    response = client.put("/api/admin/logging/config", json="debug")

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid logging configuration"
