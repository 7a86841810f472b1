"""Configuration tree export/import as ZIP archives."""

from .manager import BackupManager, InvalidBackupError
from .models import BackupMetadata, ImportResult

__all__ = ["BackupManager", "InvalidBackupError", "BackupMetadata", "ImportResult"]
