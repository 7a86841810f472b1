"""Data models for configuration backup/restore operations."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BackupMetadata(BaseModel):
    """Provenance record appended to every exported archive."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    backup_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = "1.0"
    description: str = "iHub Apps Configuration Backup"
    file_count: int = Field(..., ge=0, description="Number of configuration files in the archive")
    note: str = (
        "This backup includes all configuration files, custom pages, apps, models, "
        "and frontend customizations (CSS, HTML, etc.)"
    )


class ImportResult(BaseModel):
    """Summary returned after a configuration import."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str = "Configuration imported successfully"
    imported_files: int
    backup_path: Optional[str] = Field(None, description="Basename of the snapshot of the previous tree")
    metadata: Optional[Dict[str, Any]] = None
    note: str = (
        "All configurations have been replaced and cache has been reloaded. "
        "Frontend customizations (CSS, HTML, etc.) are included if they were in the backup."
    )
