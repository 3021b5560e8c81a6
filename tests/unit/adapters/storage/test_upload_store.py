"""Tests for on-disk upload storage."""
import os
import time

import pytest

from bookmarker.adapters.storage.upload_store import UploadStore
from bookmarker.core.exceptions import StorageError


class TestUploadStore:
    @pytest.fixture
    def store(self, tmp_path):
        return UploadStore(tmp_path / "uploads")

    def test_creates_directory(self, tmp_path):
        UploadStore(tmp_path / "nested" / "uploads")
        assert (tmp_path / "nested" / "uploads").is_dir()

    @pytest.mark.asyncio
    async def test_save_and_exists(self, store):
        upload_id = await store.save(b"%PDF-1.7")
        assert upload_id.endswith(".pdf")
        assert store.exists(upload_id)
        assert store.path_for(upload_id).read_bytes() == b"%PDF-1.7"

    @pytest.mark.parametrize("upload_id", [
        "../etc/passwd",
        "abc.pdf",
        "",
        "0123456789abcdef0123456789abcdef.txt",
    ])
    def test_rejects_malformed_ids(self, store, upload_id):
        assert not store.exists(upload_id)
        with pytest.raises(StorageError):
            store.path_for(upload_id)

    @pytest.mark.asyncio
    async def test_discard(self, store):
        upload_id = await store.save(b"%PDF")
        store.discard(upload_id)
        assert not store.exists(upload_id)
        store.discard(upload_id)

    def test_safe_unlink_missing_file(self, store, tmp_path):
        assert store.safe_unlink(tmp_path / "nothing.pdf") is False
        assert store.safe_unlink(None) is False

    @pytest.mark.asyncio
    async def test_sweep_removes_only_expired(self, store):
        old_id = await store.save(b"old")
        new_id = await store.save(b"new")
        old_time = time.time() - 7 * 3600
        os.utime(store.path_for(old_id), (old_time, old_time))

        removed = store.sweep(ttl_seconds=6 * 3600)

        assert removed == [old_id]
        assert not store.exists(old_id)
        assert store.exists(new_id)

    def test_sweep_ignores_directories(self, store):
        (store.upload_dir / "subdir").mkdir()
        assert store.sweep(ttl_seconds=0, now=time.time() + 10) == []
