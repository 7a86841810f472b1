"""Tests for configuration management."""

import os
import pytest
from unittest.mock import patch

from ihub_admin.api.config import Settings
from ihub_admin.config import BackupConfig, CacheConfig, TranslationConfig


class TestBackupConfig:
    """Test backup configuration."""

    def test_defaults(self):
        config = BackupConfig()
        assert config.contents_dir == "./contents"
        assert config.app_slug == "ihub"
        assert config.max_upload_bytes == 100 * 1024 * 1024
        assert config.compression_level == 9
        assert config.folder_name == "contents"

    def test_from_env(self):
        """Test creating from environment variables."""
        with patch.dict(os.environ, {
            "CONTENTS_DIR": "/srv/ihub/data",
            "TEMP_DIR": "/var/tmp",
            "APP_SLUG": "acme",
            "MAX_UPLOAD_BYTES": "1024",
            "BACKUP_COMPRESSION_LEVEL": "1",
        }):
            config = BackupConfig.from_env()
            assert config.contents_dir == "/srv/ihub/data"
            assert config.temp_dir == "/var/tmp"
            assert config.app_slug == "acme"
            assert config.max_upload_bytes == 1024
            assert config.compression_level == 1
            assert config.folder_name == "data"

    def test_folder_name_of_relative_path(self):
        assert BackupConfig(contents_dir="contents/").folder_name == "contents"

    def test_validation(self):
        """Test validation errors."""
        with pytest.raises(ValueError, match="max_upload_bytes must be positive"):
            BackupConfig(max_upload_bytes=0)

        with pytest.raises(ValueError, match="compression_level must be between"):
            BackupConfig(compression_level=10)

        with pytest.raises(ValueError, match="chunk_size must be positive"):
            BackupConfig(chunk_size=0)


class TestCacheConfig:
    def test_defaults(self):
        assert CacheConfig().ttl_seconds == 300.0

    def test_from_env(self):
        with patch.dict(os.environ, {"CACHE_TTL_SECONDS": "60"}):
            assert CacheConfig.from_env().ttl_seconds == 60.0

    def test_validation(self):
        with pytest.raises(ValueError, match="ttl_seconds must be positive"):
            CacheConfig(ttl_seconds=0)


class TestTranslationConfig:
    """Test translation configuration."""

    def test_from_env(self):
        with patch.dict(os.environ, {
            "TRANSLATION_API_KEY": "sk-test",
            "TRANSLATION_TIMEOUT": "5",
            "TRANSLATION_MAX_RETRIES": "2",
        }):
            config = TranslationConfig.from_env()
            assert config.api_key == "sk-test"
            assert config.request_timeout == 5.0
            assert config.max_retries == 2

    def test_validation(self):
        with pytest.raises(ValueError, match="request_timeout must be positive"):
            TranslationConfig(request_timeout=0)

        with pytest.raises(ValueError, match="max_retries must be positive"):
            TranslationConfig(max_retries=0)

        with pytest.raises(ValueError, match="temperature must be between"):
            TranslationConfig(temperature=3.0)


class TestSettings:
    """Test API settings."""

    def test_allowed_origins_parsing(self):
        assert Settings(allowed_origins="https://admin.example.com").allowed_origins == [
            "https://admin.example.com"
        ]
        assert Settings(allowed_origins='["https://a", "https://b"]').allowed_origins == [
            "https://a",
            "https://b",
        ]

    def test_builds_component_configs(self, tmp_path):
        settings = Settings(
            contents_dir=str(tmp_path / "contents"),
            temp_dir=str(tmp_path),
            app_slug="acme",
            max_upload_bytes=2048,
            cache_ttl_seconds=10,
            translation_api_key="sk-test",
            translation_timeout=12,
        )

        backup = settings.backup_config()
        assert backup.contents_dir == str(tmp_path / "contents")
        assert backup.app_slug == "acme"
        assert backup.max_upload_bytes == 2048
        assert settings.cache_config().ttl_seconds == 10
        assert settings.translation_config().api_key == "sk-test"
        assert settings.translation_config().request_timeout == 12
