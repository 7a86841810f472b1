"""Configuration for FastAPI application."""

import json
import tempfile
from typing import List, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ihub_admin.config import BackupConfig, CacheConfig, TranslationConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # API Configuration
    api_prefix: str = "/api"
    api_title: str = "iHub Apps Admin API"
    api_version: str = "1.0.0"
    allowed_origins: Union[str, List[str]] = ["*"]

    @field_validator('allowed_origins', mode='before')
    @classmethod
    def parse_allowed_origins(cls, v):
        """Parse allowed_origins from string or list."""
        if isinstance(v, str):
            # If it's a JSON array string, parse it
            if v.startswith('['):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    return [v]
            # Single origin string
            return [v]
        return v

    # Authentication
    admin_secret: Optional[str] = None

    # Configuration tree
    contents_dir: str = "./contents"
    temp_dir: str = Field(default_factory=tempfile.gettempdir)
    app_slug: str = "ihub"
    max_upload_bytes: int = Field(default=100 * 1024 * 1024, description="Maximum size of an imported backup")

    # Cache
    cache_ttl_seconds: float = 300.0

    # Translation
    translation_api_key: str = ""
    translation_timeout: float = 30.0

    # Logging
    log_level: str = "info"
    disable_app_logging: bool = False

    def backup_config(self) -> BackupConfig:
        return BackupConfig(
            contents_dir=self.contents_dir,
            temp_dir=self.temp_dir,
            app_slug=self.app_slug,
            max_upload_bytes=self.max_upload_bytes,
        )

    def cache_config(self) -> CacheConfig:
        return CacheConfig(ttl_seconds=self.cache_ttl_seconds)

    def translation_config(self) -> TranslationConfig:
        return TranslationConfig(
            api_key=self.translation_api_key,
            request_timeout=self.translation_timeout,
        )


settings = Settings()
