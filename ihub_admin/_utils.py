import hashlib
import json
import logging
import os
import re
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger("ihub-admin")


def compute_etag(data: Any) -> str:
    """Quoted MD5 of the JSON form of ``data``."""
    digest = hashlib.md5(json.dumps(data, sort_keys=True, default=str).encode("utf-8"))
    return f'"{digest.hexdigest()}"'


def timestamp_slug(moment: Optional[datetime] = None) -> str:
    """ISO timestamp with ':' and '.' replaced by '-', trimmed to seconds.

    Example: ``2024-05-01T12-30-45``
    """
    moment = moment or datetime.now(timezone.utc)
    iso = moment.isoformat().replace(":", "-").replace(".", "-")
    return iso[:19]


def load_json_file(path: Union[str, Path]) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def atomic_write_json(path: Union[str, Path], data: Any) -> None:
    """Write JSON to ``path`` through a temp file in the same directory and rename it in place."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.debug(f"Atomically wrote {path}")


ENV_PLACEHOLDER_PATTERN = re.compile(r"^\$\{([A-Z_][A-Z0-9_]*)\}$", re.IGNORECASE)


def is_env_placeholder(value: Any) -> bool:
    return isinstance(value, str) and ENV_PLACEHOLDER_PATTERN.match(value) is not None


def resolve_env_placeholder(value: Optional[str]) -> Optional[str]:
    """Expand a ``${NAME}`` placeholder from the environment; other values pass through."""
    if not is_env_placeholder(value):
        return value
    name = ENV_PLACEHOLDER_PATTERN.match(value).group(1)
    return os.getenv(name)
