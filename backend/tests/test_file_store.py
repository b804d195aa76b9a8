"""
Six Cities Backend — File Store Unit Tests
============================================

What:  Extension and size validation, storage under a random name, cleanup.
How:   Real files in a per-test temporary directory.
"""

import io
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from starlette.datastructures import Headers, UploadFile

from sixcities.exceptions import FileStorageError, UploadFailureError
from sixcities.services.file_store import FileStore


def make_upload(content: bytes, filename: str, content_type: str = "image/jpeg") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        size=len(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestFileValidation:
    def setup_method(self):
        self.store = FileStore(max_file_size=1024)

    # ── Extension Validation ──────────────────────────────────────────────

    @pytest.mark.parametrize("filename", ["photo.jpg", "photo.jpeg", "photo.png", "photo.JPG"])
    def test_allowed_extensions(self, filename):
        assert self.store.validate_extension(filename) == Path(filename).suffix.lower()

    @pytest.mark.parametrize("filename", ["animation.gif", "document.pdf", "noextension", "malware.exe"])
    def test_rejected_extensions(self, filename):
        with pytest.raises(UploadFailureError, match="not supported"):
            self.store.validate_extension(filename, field_name="avatar")

    def test_rejection_names_field(self):
        with pytest.raises(UploadFailureError) as exc_info:
            self.store.validate_extension("x.gif", field_name="avatar")
        assert exc_info.value.details[0].field == "avatar"

    # ── Size Validation ───────────────────────────────────────────────────

    def test_size_within_limit(self):
        self.store.validate_size(1024)

    def test_size_over_limit(self):
        with pytest.raises(UploadFailureError, match="exceeds maximum"):
            self.store.validate_size(1025)

    def test_reported_size_over_limit(self):
        with pytest.raises(UploadFailureError, match="exceeds maximum"):
            self.store.validate_reported_size(10_000)

    def test_unknown_reported_size_passes(self):
        self.store.validate_reported_size(None)

    def test_empty_file(self):
        with pytest.raises(UploadFailureError, match="empty"):
            self.store.validate_size(0)


class TestFileStorage:
    def setup_method(self):
        self.store = FileStore(max_file_size=1024)

    @pytest.mark.asyncio
    async def test_save_writes_random_name(self, temp_storage, sample_image_bytes):
        stored = await self.store.save(make_upload(sample_image_bytes, "../../etc/room.JPG"), temp_storage)

        assert stored.filename.endswith(".jpg")
        assert "room" not in stored.filename
        assert Path(stored.path).parent == Path(temp_storage).resolve()
        assert Path(stored.path).read_bytes() == sample_image_bytes
        assert stored.original_name == "../../etc/room.JPG"
        assert stored.content_type == "image/jpeg"
        assert stored.size == len(sample_image_bytes)

    @pytest.mark.asyncio
    async def test_save_creates_directory(self, tmp_path, sample_image_bytes):
        target = tmp_path / "nested" / "upload"

        stored = await self.store.save(make_upload(sample_image_bytes, "a.png", "image/png"), str(target))

        assert Path(stored.path).exists()

    @pytest.mark.asyncio
    async def test_two_uploads_never_collide(self, temp_storage, sample_image_bytes):
        first = await self.store.save(make_upload(sample_image_bytes, "a.jpg"), temp_storage)
        second = await self.store.save(make_upload(sample_image_bytes, "a.jpg"), temp_storage)

        assert first.filename != second.filename

    @pytest.mark.asyncio
    async def test_oversized_upload_not_written(self, temp_storage):
        with pytest.raises(UploadFailureError):
            await self.store.save(make_upload(b"x" * 2048, "big.jpg"), temp_storage)

        assert os.listdir(temp_storage) == []

    @pytest.mark.asyncio
    async def test_os_error_is_storage_error(self, temp_storage, sample_image_bytes):
        with patch("sixcities.services.file_store.aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(FileStorageError) as exc_info:
                await self.store.save(make_upload(sample_image_bytes, "a.jpg"), temp_storage)

        assert "disk full" not in exc_info.value.message
        assert exc_info.value.context["os_error"] == "disk full"

    @pytest.mark.asyncio
    async def test_cleanup_removes_file(self, temp_storage, sample_image_bytes):
        stored = await self.store.save(make_upload(sample_image_bytes, "a.jpg"), temp_storage)

        await self.store.cleanup(stored.path)

        assert not Path(stored.path).exists()

    @pytest.mark.asyncio
    async def test_cleanup_missing_file_is_quiet(self, temp_storage):
        await self.store.cleanup(os.path.join(temp_storage, "never-existed.jpg"))
