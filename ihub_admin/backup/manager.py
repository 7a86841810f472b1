"""Export and import orchestration for the configuration tree."""

import asyncio
import os
import shutil
import uuid
from pathlib import Path
from typing import AsyncIterator, Optional

from .._utils import logger, timestamp_slug
from ..config import BackupConfig
from ..config_cache import ConfigCache
from .archive import collect_files, extract_archive, iter_archive
from .models import ImportResult


class InvalidBackupError(ValueError):
    """Uploaded archive does not contain an importable configuration tree."""


class BackupManager:
    """Export the configuration tree as ZIP and replace it from an uploaded ZIP."""

    def __init__(
        self,
        config: BackupConfig,
        cache: ConfigCache,
        lock: Optional[asyncio.Lock] = None,
    ):
        """Initialize backup manager.

        Args:
            config: Backup settings (tree location, temp dir, limits)
            cache: Configuration cache reloaded after an import
            lock: Process-wide lock serializing operations on the tree
        """
        self.config = config
        self.cache = cache
        self.lock = lock or asyncio.Lock()
        self.contents_path = Path(config.contents_dir).resolve()
        self.temp_dir = Path(config.temp_dir)

    @property
    def folder_name(self) -> str:
        return self.config.folder_name

    def export_filename(self) -> str:
        return f"{self.config.app_slug}-config-backup-{timestamp_slug()}.zip"

    def check_export_ready(self) -> None:
        """Raise before any bytes are streamed if there is nothing to export."""
        if not self.contents_path.is_dir():
            raise FileNotFoundError(f"Configuration directory not found: {self.contents_path}")

    async def export_stream(self) -> AsyncIterator[bytes]:
        """Stream the configuration tree as a ZIP archive.

        The tree lock is held until the last chunk is sent. Errors past this
        point can only be logged because the response is already committed.
        """
        async with self.lock:
            logger.info("Starting configuration export...")
            try:
                files = collect_files(self.contents_path)
                for chunk in iter_archive(
                    files,
                    self.contents_path.parent,
                    compression_level=self.config.compression_level,
                    chunk_size=self.config.chunk_size,
                ):
                    yield chunk
            except Exception as e:
                logger.error(f"Export failed after streaming started: {e}")
                raise
            logger.info("Configuration export completed")

    async def import_archive(self, archive_path: Path) -> ImportResult:
        """Replace the configuration tree with the contents of an uploaded archive.

        The uploaded file and the extraction directory are removed whether
        the import succeeds or fails.

        Args:
            archive_path: Uploaded ZIP file on disk

        Returns:
            ImportResult with file count, snapshot name and archive metadata

        Raises:
            InvalidBackupError: If the archive has no entries under the designated folder
        """
        extract_dir = self.temp_dir / f"extract_{uuid.uuid4().hex}"
        logger.info(f"Starting configuration import from {archive_path}")

        try:
            async with self.lock:
                extract_dir.mkdir(parents=True, exist_ok=True)
                result = await extract_archive(archive_path, extract_dir, self.folder_name)

                extracted_tree = extract_dir / self.folder_name
                if not extracted_tree.is_dir():
                    raise InvalidBackupError(
                        f"Invalid backup file: No {self.folder_name} directory found"
                    )

                if result.metadata is not None:
                    logger.info(f"Backup metadata: {result.metadata}")
                else:
                    logger.info("No metadata found in backup (normal for manual backups)")

                backup_path = self._replace_contents(extracted_tree)

                logger.info("Reloading configuration cache...")
                self.cache.clear()
                await self.cache.initialize()

                imported_files = len(collect_files(self.contents_path))

        finally:
            self._cleanup(archive_path, extract_dir)

        logger.info(f"Configuration import completed. Imported {imported_files} files")

        return ImportResult(
            imported_files=imported_files,
            backup_path=backup_path.name if backup_path else None,
            metadata=result.metadata,
        )

    def _replace_contents(self, extracted_tree: Path) -> Optional[Path]:
        """Swap ``extracted_tree`` into the live path by rename.

        The new tree is staged next to the live one so the final rename stays
        on one filesystem. The old tree is renamed aside and becomes the
        snapshot.

        Returns:
            Path of the snapshot, or None if there was no live tree
        """
        parent = self.contents_path.parent
        parent.mkdir(parents=True, exist_ok=True)
        timestamp = timestamp_slug()

        staging = self._unique_path(parent / f".{self.folder_name}-incoming-{timestamp}")
        shutil.move(str(extracted_tree), str(staging))

        backup_path = None
        if self.contents_path.exists():
            backup_path = self._unique_path(parent / f"{self.folder_name}-backup-{timestamp}")
            logger.info(f"Moving current configuration aside to: {backup_path}")
            try:
                os.rename(self.contents_path, backup_path)
            except OSError:
                shutil.rmtree(staging, ignore_errors=True)
                raise
        else:
            logger.warning(f"No current configuration at {self.contents_path}, nothing to back up")

        try:
            os.rename(staging, self.contents_path)
        except OSError as e:
            logger.error(f"Could not move imported configuration into place: {e}")
            if backup_path is not None:
                os.rename(backup_path, self.contents_path)
                logger.info("Previous configuration restored")
            shutil.rmtree(staging, ignore_errors=True)
            raise

        logger.info("Configuration files replaced")
        return backup_path

    @staticmethod
    def _unique_path(path: Path) -> Path:
        candidate = path
        counter = 1
        while candidate.exists():
            candidate = path.with_name(f"{path.name}-{counter}")
            counter += 1
        return candidate

    @staticmethod
    def _cleanup(archive_path: Path, extract_dir: Path) -> None:
        try:
            archive_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove uploaded archive {archive_path}: {e}")

        try:
            if extract_dir.exists():
                shutil.rmtree(extract_dir)
        except OSError as e:
            logger.warning(f"Could not remove extraction directory {extract_dir}: {e}")
