"""In-memory cache of the JSON configuration held in the configuration tree.

Critical single-file configs are loaded from ``config/*.json``. Models, apps
and prompts are collections of one JSON object per file and are cached twice:
enabled items under ``config/<kind>.json`` and everything under
``config/<kind>-all.json``.

All operations take effect immediately: once ``initialize``, ``refresh_all``
or ``refresh_cache_entry`` has returned, ``get`` sees the new data.
"""

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ._utils import compute_etag, load_json_file, logger
from .config import CacheConfig

PLATFORM_KEY = "config/platform.json"

CRITICAL_CONFIGS = [
    PLATFORM_KEY,
    "config/ui.json",
    "config/groups.json",
    "config/tools.json",
    "config/styles.json",
]

COLLECTIONS = ("models", "apps", "prompts")


@dataclass
class CacheEntry:
    data: Any
    etag: str
    timestamp: float


def _expand_tool_functions(tools: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Split tools that declare several ``functions`` into one entry per function."""
    expanded = []
    for tool in tools:
        functions = tool.get("functions")
        if isinstance(functions, dict):
            for name, fn in functions.items():
                expanded.append({
                    **tool,
                    "id": f"{tool.get('id')}.{name}",
                    "name": fn.get("name") or f"{tool.get('name')} {name}",
                    "description": fn.get("description") or tool.get("description"),
                    "parameters": fn.get("parameters") or {},
                    "method": name,
                })
        else:
            expanded.append(tool)
    return expanded


class ConfigCache:
    """Memory cache for frequently read configuration files."""

    def __init__(self, contents_dir: Union[str, Path], config: Optional[CacheConfig] = None):
        self.contents_dir = Path(contents_dir)
        self.config = config or CacheConfig()
        self._cache: Dict[str, CacheEntry] = {}
        self.is_initialized = False

    async def initialize(self) -> None:
        """Load every critical config and collection; failures are logged per entry."""
        logger.info("Initializing configuration cache...")

        for key in CRITICAL_CONFIGS:
            try:
                self._load_file_entry(key)
            except (OSError, ValueError) as e:
                logger.error(f"Error caching {key}: {e}")

        for kind in COLLECTIONS:
            try:
                self._load_collection(kind)
            except (OSError, ValueError) as e:
                logger.error(f"Error caching {kind}: {e}")

        self.is_initialized = True
        logger.info(f"Configuration cache initialized with {len(self._cache)} entries")

    def clear(self) -> None:
        self._cache.clear()
        self.is_initialized = False
        logger.info("Configuration cache cleared")

    async def refresh_all(self) -> None:
        """Reload every key currently in the cache."""
        logger.info("Refreshing all cached configurations...")
        for key in list(self._cache.keys()):
            await self.refresh_cache_entry(key)
        logger.info("All configurations refreshed")

    async def refresh_cache_entry(self, key: str) -> None:
        """Reload a single key, keeping the previous data if loading fails."""
        try:
            kind = self._collection_kind(key)
            if kind is not None:
                self._load_collection(kind)
            else:
                self._load_file_entry(key)
        except (OSError, ValueError) as e:
            logger.error(f"Error refreshing cache for {key}: {e}")

    def get(self, key: str) -> Any:
        entry = self._cache.get(key)
        if entry is None:
            return None

        age = time.time() - entry.timestamp
        if age > self.config.ttl_seconds * 2:
            logger.warning(f"Cache entry for {key} is stale ({round(age)}s old)")

        return entry.data

    def get_etag(self, key: str) -> Optional[str]:
        entry = self._cache.get(key)
        return entry.etag if entry else None

    def get_models(self, include_disabled: bool = False) -> List[Dict[str, Any]]:
        return self._get_collection("models", include_disabled)

    def get_apps(self, include_disabled: bool = False) -> List[Dict[str, Any]]:
        return self._get_collection("apps", include_disabled)

    def get_prompts(self, include_disabled: bool = False) -> List[Dict[str, Any]]:
        return self._get_collection("prompts", include_disabled)

    def get_platform(self) -> Optional[Dict[str, Any]]:
        return self.get(PLATFORM_KEY)

    def get_stats(self) -> Dict[str, Any]:
        now = time.time()
        return {
            "isInitialized": self.is_initialized,
            "totalEntries": len(self._cache),
            "cacheTTL": self.config.ttl_seconds,
            "entries": {
                key: {
                    "age": round(now - entry.timestamp, 3),
                    "sizeApprox": len(json.dumps(entry.data, default=str)),
                    "etag": entry.etag,
                }
                for key, entry in self._cache.items()
            },
        }

    # Private helper methods

    def _set_entry(self, key: str, data: Any) -> None:
        self._cache[key] = CacheEntry(data=data, etag=compute_etag(data), timestamp=time.time())

    def _load_file_entry(self, key: str) -> None:
        path = self.contents_dir / key
        if not path.is_file():
            logger.warning(f"Failed to load: {key} (file not found)")
            return

        data = load_json_file(path)
        if key == "config/tools.json" and isinstance(data, list):
            data = _expand_tool_functions(data)
        self._set_entry(key, data)
        logger.debug(f"Cached: {key}")

    def _load_collection(self, kind: str) -> None:
        items = []
        directory = self.contents_dir / kind
        if directory.is_dir():
            for path in sorted(directory.glob("*.json")):
                try:
                    item = load_json_file(path)
                except (OSError, ValueError) as e:
                    logger.warning(f"Skipping invalid {kind} file {path.name}: {e}")
                    continue
                if isinstance(item, dict):
                    items.append(item)

        enabled = [item for item in items if item.get("enabled", True) is not False]
        self._set_entry(f"config/{kind}.json", enabled)
        self._set_entry(f"config/{kind}-all.json", items)
        logger.debug(f"Cached {kind}: {len(enabled)} enabled, {len(items)} total")

    def _get_collection(self, kind: str, include_disabled: bool) -> List[Dict[str, Any]]:
        key = f"config/{kind}-all.json" if include_disabled else f"config/{kind}.json"
        data = self.get(key)
        if data is None:
            logger.warning(f"{kind.capitalize()} cache not initialized - returning empty list")
            return []
        return data

    @staticmethod
    def _collection_kind(key: str) -> Optional[str]:
        for kind in COLLECTIONS:
            if key in (f"config/{kind}.json", f"config/{kind}-all.json"):
                return kind
        return None
