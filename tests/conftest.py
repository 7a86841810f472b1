"""Global pytest configuration and fixtures."""

import json
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tests.utils import PLATFORM_CONFIG  # noqa: E402


@pytest.fixture
def contents_dir(tmp_path) -> Path:
    """A small configuration tree under ``<tmp>/contents``."""
    root = tmp_path / "contents"
    (root / "config").mkdir(parents=True)
    (root / "config" / "platform.json").write_text(json.dumps(PLATFORM_CONFIG, indent=2))
    (root / "config" / "ui.json").write_text(json.dumps({"title": {"en": "iHub"}}))
    (root / "config" / "tools.json").write_text(json.dumps([
        {"id": "search", "name": "Search", "description": "Web search"},
        {
            "id": "jira",
            "name": "Jira",
            "description": "Jira tools",
            "functions": {
                "searchTickets": {"description": "Search tickets", "parameters": {"type": "object"}},
                "getTicket": {"name": "Get ticket"},
            },
        },
    ]))

    (root / "models").mkdir()
    (root / "models" / "gpt-4.json").write_text(json.dumps({
        "id": "gpt-4", "modelId": "gpt-4o", "provider": "openai", "enabled": True, "default": True,
    }))
    (root / "models" / "claude.json").write_text(json.dumps({
        "id": "claude", "modelId": "claude-sonnet", "provider": "anthropic", "enabled": False,
    }))

    (root / "apps").mkdir()
    (root / "apps" / "chat.json").write_text(json.dumps({"id": "chat", "enabled": True}))

    (root / "pages" / "en").mkdir(parents=True)
    (root / "pages" / "en" / "faq.md").write_text("# FAQ\n")
    (root / "frontend").mkdir()
    (root / "frontend" / "custom.css").write_bytes(b"body { color: #333; }\n")
    return root


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    path = tmp_path / "tmp"
    path.mkdir()
    return path
