"""API routers."""

from . import backup, cache, configs, health, log_level, translate

__all__ = ["backup", "cache", "configs", "health", "log_level", "translate"]
