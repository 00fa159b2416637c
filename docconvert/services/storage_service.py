"""Request-scoped storage for uploaded blobs.

Uploads are written to a :class:`TransientStorage` before any conversion runs
and must be gone again by the time the response is finalized. Handlers hold
their blobs in a :class:`TransientFiles` scope which releases every blob it
acquired on exit, however the request ended.
"""
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Set, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedBlob:
    path: str
    mime_type: str
    original_name: str
    size_bytes: int


class TransientStorage(Protocol):
    def save(self, data: bytes) -> str:
        """Persist ``data`` and return an opaque handle unique to it."""

    def open(self, handle: str) -> bytes:
        ...

    def delete(self, handle: str) -> None:
        ...


class LocalTransientStorage(TransientStorage):
    def __init__(self, directory: str) -> None:
        self._base = Path(directory).resolve()
        self._base.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._base

    def save(self, data: bytes) -> str:
        path = self._base / uuid.uuid4().hex
        path.write_bytes(data)
        return str(path)

    def open(self, handle: str) -> bytes:
        return Path(handle).read_bytes()

    def delete(self, handle: str) -> None:
        Path(handle).unlink()


BlobArg = Union[UploadedBlob, Iterable[UploadedBlob], None]


def release(storage: TransientStorage, blobs: BlobArg) -> None:
    """Delete one blob or a list of blobs. Never raises.

    Each distinct handle is deleted once; failures are logged and skipped.
    """
    if blobs is None:
        return
    if isinstance(blobs, UploadedBlob):
        blobs = [blobs]

    deleted: Set[str] = set()
    for blob in blobs:
        if blob.path in deleted:
            continue
        deleted.add(blob.path)
        try:
            storage.delete(blob.path)
        except Exception as exc:
            logger.warning("Failed to delete transient file %s: %s", blob.path, exc)


class TransientFiles:
    """Scope owning every blob acquired for one request."""

    def __init__(self, storage: TransientStorage) -> None:
        self.storage = storage
        self._blobs: List[UploadedBlob] = []

    def __enter__(self) -> "TransientFiles":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        blobs, self._blobs = self._blobs, []
        release(self.storage, blobs)

    def add(
        self,
        data: bytes,
        mime_type: Optional[str] = None,
        original_name: Optional[str] = None,
    ) -> UploadedBlob:
        handle = self.storage.save(data)
        blob = UploadedBlob(
            path=handle,
            mime_type=mime_type or "application/octet-stream",
            original_name=original_name or "upload",
            size_bytes=len(data),
        )
        self._blobs.append(blob)
        return blob

    def read(self, blob: UploadedBlob) -> bytes:
        return self.storage.open(blob.path)
