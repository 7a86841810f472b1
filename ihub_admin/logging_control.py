"""Runtime control of the ihub-admin logger.

Level names follow the npm convention used by the web frontend and are
mapped onto stdlib numeric levels.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from ._utils import logger

LOG_LEVELS: Dict[str, int] = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "http": 15,
    "verbose": 12,
    "debug": logging.DEBUG,
    "silly": 5,
}

DEFAULT_LOGGING_CONFIG: Dict[str, Any] = {
    "level": "info",
    "file": {
        "enabled": False,
        "path": "logs/app.log",
        "maxSize": 10485760,
        "maxFiles": 5,
    },
}

LOG_FORMAT = "%(asctime)s - [%(name)s] - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logging.addLevelName(15, "HTTP")
logging.addLevelName(12, "VERBOSE")
logging.addLevelName(5, "SILLY")


def _level_name(numeric: int) -> str:
    for name, value in LOG_LEVELS.items():
        if value == numeric:
            return name
    return logging.getLevelName(numeric).lower()


def set_log_level(level: str) -> None:
    if level not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level}")
    logger.setLevel(LOG_LEVELS[level])
    for handler in logger.handlers:
        handler.setLevel(LOG_LEVELS[level])


def get_log_level_info() -> Dict[str, Any]:
    return {
        "current": _level_name(logger.getEffectiveLevel()),
        "available": list(LOG_LEVELS.keys()),
    }


def configure_logging(
    logging_config: Optional[Dict[str, Any]] = None,
    app_managed: bool = True,
) -> None:
    """(Re)build the handlers of the ihub-admin logger.

    With ``app_managed`` the logger owns a stdout handler and does not
    propagate, so output does not depend on the server's root logging
    setup. A rotating file handler is added when ``file.enabled`` is set.

    Args:
        logging_config: ``logging`` section of platform.json
        app_managed: Attach our own handlers instead of propagating to root
    """
    logging_config = logging_config or {}
    level = logging_config.get("level", DEFAULT_LOGGING_CONFIG["level"])
    if level not in LOG_LEVELS:
        level = DEFAULT_LOGGING_CONFIG["level"]

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(LOG_LEVELS[level])

    if not app_managed:
        logger.propagate = True
        return

    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(LOG_LEVELS[level])
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_config = logging_config.get("file") or {}
    if file_config.get("enabled"):
        defaults = DEFAULT_LOGGING_CONFIG["file"]
        log_file = Path(file_config.get("path") or defaults["path"])
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=int(file_config.get("maxSize") or defaults["maxSize"]),
                backupCount=int(file_config.get("maxFiles") or defaults["maxFiles"]),
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning(f"File logging disabled, could not open {log_file}: {e}")
        else:
            file_handler.setLevel(LOG_LEVELS[level])
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
