"""Configuration backup export and import endpoints."""

import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import StreamingResponse

from ..dependencies import get_backup_manager, require_admin
from ..exceptions import InvalidRequestError, OperationFailedError, UploadTooLargeError
from ihub_admin.backup import BackupManager, ImportResult, InvalidBackupError
from ihub_admin._utils import logger

router = APIRouter(prefix="/admin/backup", tags=["backup"], dependencies=[Depends(require_admin)])

ZIP_CONTENT_TYPES = {"application/zip", "application/x-zip-compressed", "application/x-zip"}
UPLOAD_CHUNK_SIZE = 1024 * 1024


def _is_zip_upload(upload: UploadFile) -> bool:
    filename = (upload.filename or "").lower()
    return upload.content_type in ZIP_CONTENT_TYPES or filename.endswith(".zip")


async def _save_upload(upload: UploadFile, destination: Path, limit: int) -> int:
    """Copy the upload to ``destination`` in chunks, refusing anything over ``limit`` bytes."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    size = 0
    try:
        with open(destination, "wb") as f:
            while True:
                chunk = await upload.read(UPLOAD_CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > limit:
                    raise UploadTooLargeError(limit)
                f.write(chunk)
    except BaseException:
        destination.unlink(missing_ok=True)
        raise
    return size


@router.get("/export")
async def export_config(
    backup_manager: BackupManager = Depends(get_backup_manager),
) -> StreamingResponse:
    """Download the whole configuration tree as a ZIP archive."""
    try:
        backup_manager.check_export_ready()
    except OSError as e:
        logger.error(f"Export error: {e}")
        raise OperationFailedError("export configuration", e)

    filename = backup_manager.export_filename()
    return StreamingResponse(
        backup_manager.export_stream(),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResult)
async def import_config(
    backup: Optional[UploadFile] = File(None),
    backup_manager: BackupManager = Depends(get_backup_manager),
) -> ImportResult:
    """Replace the configuration tree with an uploaded backup archive.

    The current tree is kept as ``contents-backup-<timestamp>`` next to the
    live one and the configuration cache is reloaded.
    """
    if backup is None or not backup.filename:
        raise InvalidRequestError("No ZIP file uploaded")

    if not _is_zip_upload(backup):
        raise InvalidRequestError("Only ZIP files are allowed")

    upload_path = backup_manager.temp_dir / f"upload_{uuid.uuid4().hex}.zip"
    size = await _save_upload(backup, upload_path, backup_manager.config.max_upload_bytes)
    logger.info(f"Uploaded backup file: {backup.filename} ({size:,} bytes)")

    try:
        return await backup_manager.import_archive(upload_path)
    except InvalidBackupError as e:
        logger.warning(f"Rejected backup {backup.filename}: {e}")
        raise InvalidRequestError(str(e))
    except Exception as e:
        logger.error(f"Import error: {e}")
        raise OperationFailedError("import configuration", e)
