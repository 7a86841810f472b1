"""ZIP archive helpers for configuration tree export and import."""

import io
import json
import os
import re
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterator, List, Optional

from .._utils import logger
from .models import BackupMetadata

METADATA_ENTRY_NAME = "backup-metadata.json"

# Sidecar files written by desktop archivers and file managers
_PLATFORM_METADATA_DIRS = ("__MACOSX",)
_PLATFORM_METADATA_FILES = (".DS_Store", "Thumbs.db", "desktop.ini")


class _ChunkBuffer(io.RawIOBase):
    """Unseekable sink that collects what ZipFile writes until it is drained."""

    def __init__(self):
        super().__init__()
        self._chunks: List[bytes] = []

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        self._chunks.append(bytes(data))
        return len(data)

    def drain(self) -> bytes:
        data = b"".join(self._chunks)
        self._chunks.clear()
        return data


@dataclass
class ExtractionResult:
    """Outcome of a filtered archive extraction."""
    extracted_files: int
    skipped_entries: int
    metadata: Optional[Dict[str, Any]]


def collect_files(root: Path) -> List[Path]:
    """Recursively list regular files under ``root``.

    Directories that cannot be read are skipped with a warning.
    """
    files = []

    def _on_error(error: OSError) -> None:
        logger.warning(f"Could not read directory {error.filename}: {error.strerror}")

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_on_error):
        for filename in filenames:
            files.append(Path(dirpath) / filename)

    return files


def iter_archive(
    files: List[Path],
    base_dir: Path,
    compression_level: int = 9,
    chunk_size: int = 64 * 1024,
) -> Iterator[bytes]:
    """Yield a ZIP archive of ``files`` piece by piece.

    Entries are named relative to ``base_dir`` and a ``backup-metadata.json``
    entry is appended last. At most one read chunk of file data is held in
    memory at a time. Files that cannot be opened are skipped with a warning.
    """
    buffer = _ChunkBuffer()
    file_count = 0

    with zipfile.ZipFile(
        buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=compression_level
    ) as archive:
        for file_path in files:
            arcname = file_path.relative_to(base_dir).as_posix()

            try:
                source = open(file_path, "rb")
            except OSError as e:
                logger.warning(f"Could not add {file_path} to archive: {e}")
                continue

            logger.debug(f"Adding to archive: {arcname}")
            with source, archive.open(arcname, "w") as target:
                for chunk in iter(lambda: source.read(chunk_size), b""):
                    target.write(chunk)
                    data = buffer.drain()
                    if data:
                        yield data

            file_count += 1
            data = buffer.drain()
            if data:
                yield data

        logger.info(f"Added {file_count} files to backup archive")

        metadata = BackupMetadata(file_count=file_count)
        archive.writestr(
            METADATA_ENTRY_NAME,
            json.dumps(metadata.model_dump(by_alias=True, mode="json"), indent=2),
        )

    # Central directory is written when the archive closes
    data = buffer.drain()
    if data:
        yield data


def normalize_entry_name(name: str) -> str:
    return name.replace("\\", "/")


def is_platform_metadata(name: str) -> bool:
    """True for OS sidecar entries such as ``__MACOSX/`` folders, ``.DS_Store`` and ``._*`` files."""
    parts = normalize_entry_name(name).split("/")
    if any(part in _PLATFORM_METADATA_DIRS for part in parts):
        return True
    basename = parts[-1]
    return basename in _PLATFORM_METADATA_FILES or basename.startswith("._")


def match_folder_entry(name: str, folder: str) -> Optional[str]:
    """Return the path below the first ``folder/`` segment of entries like ``folder/x`` or ``wrapper/folder/x``."""
    pattern = rf"(?:^|.*?/){re.escape(folder)}/(.+)$"
    match = re.match(pattern, normalize_entry_name(name))
    return match.group(1) if match else None


def _safe_target(root: Path, relative_path: str) -> Optional[Path]:
    """Join ``relative_path`` under ``root``, or None if it would escape it."""
    relative = PurePosixPath(relative_path)
    if relative.is_absolute() or ".." in relative.parts:
        return None
    return root.joinpath(*relative.parts)


def _parse_metadata(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> Optional[Dict[str, Any]]:
    try:
        with archive.open(info) as f:
            metadata = json.loads(f.read().decode("utf-8"))
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring unreadable backup metadata: {e}")
        return None

    if not isinstance(metadata, dict):
        logger.warning("Ignoring backup metadata that is not a JSON object")
        return None
    return metadata


async def extract_archive(archive_path: Path, output_dir: Path, folder: str) -> ExtractionResult:
    """Extract the entries of ``archive_path`` that live under ``folder``.

    Matching entries land in ``output_dir/folder/<rest>``. Directory entries,
    OS metadata and entries outside ``folder`` are skipped. Entries are
    processed one at a time and each output file is closed before the next
    entry is read. Any read or write error aborts the extraction and leaves
    partial output behind for the caller to remove.

    Args:
        archive_path: Uploaded ZIP file
        output_dir: Fresh extraction directory
        folder: Designated top-level folder name

    Returns:
        ExtractionResult with counts and parsed metadata (None when absent)
    """
    logger.info(f"Extracting archive: {archive_path} to {output_dir}")

    target_root = output_dir / folder
    extracted = 0
    skipped = 0
    metadata = None

    output_dir.mkdir(parents=True, exist_ok=True)

    with zipfile.ZipFile(archive_path, "r") as archive:
        for info in archive.infolist():
            name = normalize_entry_name(info.filename)

            if name.endswith("/"):
                logger.debug(f"Skipping directory: {name}")
                skipped += 1
                continue

            if is_platform_metadata(name):
                logger.debug(f"Skipping metadata: {name}")
                skipped += 1
                continue

            if name == METADATA_ENTRY_NAME:
                metadata = _parse_metadata(archive, info)
                continue

            relative_path = match_folder_entry(name, folder)
            if relative_path is None:
                logger.debug(f"Skipping entry outside {folder}/: {name}")
                skipped += 1
                continue

            target = _safe_target(target_root, relative_path)
            if target is None:
                logger.warning(f"Skipping entry with unsafe path: {name}")
                skipped += 1
                continue

            target.parent.mkdir(parents=True, exist_ok=True)
            with archive.open(info) as source, open(target, "wb") as dest:
                shutil.copyfileobj(source, dest)

            logger.debug(f"Extracted: {name} -> {folder}/{relative_path}")
            extracted += 1

    logger.info(f"Archive extracted: {extracted} files, {skipped} entries skipped")

    return ExtractionResult(
        extracted_files=extracted,
        skipped_entries=skipped,
        metadata=metadata,
    )
