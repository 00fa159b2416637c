"""Unit tests for docconvert.services.storage_service."""

import logging
from pathlib import Path

import pytest

from docconvert.services.storage_service import (
    LocalTransientStorage,
    TransientFiles,
    UploadedBlob,
    release,
)


def blob(handle: str) -> UploadedBlob:
    return UploadedBlob(path=handle, mime_type="application/pdf", original_name="a.pdf", size_bytes=1)


class TestLocalTransientStorage:
    def test_creates_directory(self, tmp_path):
        storage = LocalTransientStorage(str(tmp_path / "uploads"))

        assert storage.directory.is_dir()

    def test_save_open_delete(self, tmp_path):
        storage = LocalTransientStorage(str(tmp_path))
        handle = storage.save(b"payload")

        assert Path(handle).parent == tmp_path.resolve()
        assert storage.open(handle) == b"payload"

        storage.delete(handle)
        assert not Path(handle).exists()

    def test_handles_are_unique(self, tmp_path):
        storage = LocalTransientStorage(str(tmp_path))

        assert storage.save(b"x") != storage.save(b"x")


class TestRelease:
    def test_single_blob(self, storage):
        handle = storage.save(b"data")

        release(storage, blob(handle))

        assert storage.blobs == {}

    def test_list_of_blobs(self, storage):
        handles = [storage.save(b"a"), storage.save(b"b")]

        release(storage, [blob(h) for h in handles])

        assert storage.blobs == {}

    def test_none_is_a_no_op(self, storage):
        release(storage, None)

        assert storage.deleted == []

    def test_each_handle_deleted_once(self, storage):
        handle = storage.save(b"a")

        release(storage, [blob(handle), blob(handle)])

        assert storage.deleted == [handle]

    def test_failures_are_logged_not_raised(self, storage, caplog):
        storage.fail_on_delete = True
        first, second = storage.save(b"a"), storage.save(b"b")

        with caplog.at_level(logging.WARNING):
            release(storage, [blob(first), blob(second)])

        assert storage.deleted == [first, second]
        assert "Failed to delete transient file mem-0" in caplog.text

    def test_missing_local_file_is_tolerated(self, tmp_path):
        storage = LocalTransientStorage(str(tmp_path))
        handle = storage.save(b"x")
        Path(handle).unlink()

        release(storage, blob(handle))


class TestTransientFiles:
    def test_releases_on_success(self, storage):
        with TransientFiles(storage) as transient:
            saved = transient.add(b"abc", "application/pdf", "a.pdf")
            assert transient.read(saved) == b"abc"

        assert saved.size_bytes == 3
        assert saved.original_name == "a.pdf"
        assert storage.blobs == {}

    def test_releases_on_failure(self, storage):
        with pytest.raises(RuntimeError):
            with TransientFiles(storage) as transient:
                transient.add(b"abc")
                transient.add(b"def")
                raise RuntimeError("mid-operation failure")

        assert storage.blobs == {}
        assert len(storage.deleted) == 2

    def test_release_failure_does_not_mask_result(self, storage):
        storage.fail_on_delete = True

        with TransientFiles(storage) as transient:
            transient.add(b"abc")
            result = "done"

        assert result == "done"

    def test_defaults_for_missing_metadata(self, storage):
        with TransientFiles(storage) as transient:
            saved = transient.add(b"abc")

        assert saved.mime_type == "application/octet-stream"
        assert saved.original_name == "upload"

    def test_second_exit_releases_nothing(self, storage):
        transient = TransientFiles(storage)
        with transient:
            transient.add(b"abc")
        with transient:
            pass

        assert len(storage.deleted) == 1
