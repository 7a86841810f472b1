"""Test utilities for ihub-admin tests."""
import io
import zipfile
from pathlib import Path
from typing import Dict

PLATFORM_CONFIG = {
    "auth": {"mode": "local", "authenticatedGroup": "authenticated", "jwtSecret": "super-secret"},
    "localAuth": {"enabled": True, "jwtSecret": "${JWT_SECRET}"},
    "oidcAuth": {
        "enabled": True,
        "providers": [{"name": "microsoft", "clientId": "abc", "clientSecret": "oidc-secret"}],
    },
    "proxyAuth": {
        "enabled": False,
        "jwtProviders": [
            {"name": "gw", "header": "Authorization", "issuer": "iss", "audience": "aud", "jwkUrl": "https://keys"}
        ],
    },
    "logging": {"level": "info"},
    "features": {"usageTracking": True},
}


def build_zip(entries: Dict[str, bytes]) -> bytes:
    """Create an in-memory ZIP from a name -> content mapping (names ending in '/' become directories)."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def snapshot_tree(root: Path) -> Dict[str, bytes]:
    """Map of relative posix path -> bytes for every file under ``root``."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }
