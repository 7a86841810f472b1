from .config_cache import ConfigCache
from .backup import BackupManager


__version__ = "1.0.0"
__author__ = "iHub Apps Team"
__url__ = "https://github.com/intrafind/ihub-apps"
