from functools import lru_cache
import logging
from typing import List, Optional

from fastapi import UploadFile

from docconvert.core.config import settings
from docconvert.core.errors import UploadTooLargeError
from docconvert.services.storage_service import (
    LocalTransientStorage,
    TransientFiles,
    TransientStorage,
    UploadedBlob,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


@lru_cache
def get_storage() -> TransientStorage:
    storage = LocalTransientStorage(settings.UPLOAD_DIR)
    logger.info("Uploads directory: %s", storage.directory)
    return storage


async def persist_upload(upload: UploadFile, files: TransientFiles, stage: str) -> UploadedBlob:
    """Stream one upload into transient storage under the request's scope."""
    chunks = []
    size = 0
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > settings.max_upload_bytes:
            raise UploadTooLargeError(
                f"{upload.filename} exceeds {settings.MAX_UPLOAD_MB} MB", stage=stage
            )
        chunks.append(chunk)
    return files.add(b"".join(chunks), upload.content_type, upload.filename)


async def persist_uploads(
    uploads: Optional[List[UploadFile]], files: TransientFiles, stage: str, limit: int
) -> List[UploadedBlob]:
    uploads = uploads or []
    if len(uploads) > limit:
        raise UploadTooLargeError(f"Too many files: at most {limit} allowed", stage=stage)
    return [await persist_upload(upload, files, stage) for upload in uploads]
