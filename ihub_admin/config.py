"""Configuration management for ihub-admin."""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class BackupConfig:
    """Configuration tree backup/restore settings."""
    contents_dir: str = "./contents"
    temp_dir: str = field(default_factory=tempfile.gettempdir)
    app_slug: str = "ihub"
    max_upload_bytes: int = 100 * 1024 * 1024
    compression_level: int = 9
    chunk_size: int = 64 * 1024

    @classmethod
    def from_env(cls) -> 'BackupConfig':
        """Create config from environment variables."""
        return cls(
            contents_dir=os.getenv("CONTENTS_DIR", "./contents"),
            temp_dir=os.getenv("TEMP_DIR", tempfile.gettempdir()),
            app_slug=os.getenv("APP_SLUG", "ihub"),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(100 * 1024 * 1024))),
            compression_level=int(os.getenv("BACKUP_COMPRESSION_LEVEL", "9")),
        )

    def __post_init__(self):
        """Validate configuration."""
        if self.max_upload_bytes <= 0:
            raise ValueError(f"max_upload_bytes must be positive, got {self.max_upload_bytes}")
        if not 0 <= self.compression_level <= 9:
            raise ValueError(f"compression_level must be between 0 and 9, got {self.compression_level}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if not Path(self.contents_dir).name:
            raise ValueError(f"contents_dir must name a directory, got {self.contents_dir!r}")

    @property
    def folder_name(self) -> str:
        """Top-level archive folder that scopes importable entries."""
        return Path(self.contents_dir).resolve().name


@dataclass(frozen=True)
class CacheConfig:
    """Configuration cache settings."""
    ttl_seconds: float = 300.0

    @classmethod
    def from_env(cls) -> 'CacheConfig':
        return cls(ttl_seconds=float(os.getenv("CACHE_TTL_SECONDS", "300")))

    def __post_init__(self):
        if self.ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {self.ttl_seconds}")


@dataclass(frozen=True)
class TranslationConfig:
    """Translation proxy settings."""
    api_key: str = ""
    request_timeout: float = 30.0
    max_retries: int = 3
    temperature: float = 0.0

    @classmethod
    def from_env(cls) -> 'TranslationConfig':
        """Create config from environment variables."""
        return cls(
            api_key=os.getenv("TRANSLATION_API_KEY", ""),
            request_timeout=float(os.getenv("TRANSLATION_TIMEOUT", "30.0")),
            max_retries=int(os.getenv("TRANSLATION_MAX_RETRIES", "3")),
        )

    def __post_init__(self):
        """Validate configuration."""
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.max_retries <= 0:
            raise ValueError(f"max_retries must be positive, got {self.max_retries}")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"temperature must be between 0.0 and 2.0, got {self.temperature}")
