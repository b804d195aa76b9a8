"""
Six Cities Backend — Upload File Store
========================================

What:  Validates and writes multipart uploads (offer images, avatars) into the
       upload directory, and removes them again when a handler rejects them.
Who:   The UploadFile route middleware (save) and controllers (cleanup).

Security Model:
    1. Extension check:  only .png / .jpg / .jpeg
    2. Size check:       reported size first, then the bytes actually read
    3. Random filename:  no user input reaches the file system path
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
from starlette.datastructures import UploadFile

from sixcities.exceptions import FileStorageError, UploadFailureError
from sixcities.rest.types import StoredFile

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg"}


class FileStore:
    def __init__(self, max_file_size: int):
        self.max_file_size = max_file_size

    def validate_extension(self, filename: str, field_name: str = "file") -> str:
        """Return the lowercase extension, or raise UploadFailureError."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise UploadFailureError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field=field_name,
                source="FileStore",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_reported_size(self, reported_size: Optional[int], field_name: str = "file") -> None:
        """Reject an oversized upload before its bytes are read."""
        if reported_size and reported_size > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            raise UploadFailureError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB",
                field=field_name,
                source="FileStore",
                context={"reported_size": reported_size},
            )

    def validate_size(self, actual_size: int, field_name: str = "file") -> None:
        """Check the bytes actually read; catches clients that under-report."""
        max_mb = self.max_file_size / (1024 * 1024)
        if actual_size > self.max_file_size:
            raise UploadFailureError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB",
                field=field_name,
                source="FileStore",
                context={"actual_size": actual_size},
            )
        if actual_size == 0:
            raise UploadFailureError(
                message="Uploaded file is empty", field=field_name, source="FileStore"
            )

    async def save(
        self,
        upload: UploadFile,
        target_directory: str,
        field_name: str = "file",
    ) -> StoredFile:
        """Validate `upload` and write it to `target_directory` under a random name."""
        original_name = upload.filename or ""
        try:
            ext = self.validate_extension(original_name, field_name)
            self.validate_reported_size(upload.size, field_name)
            content = await upload.read()
        finally:
            await upload.close()
        self.validate_size(len(content), field_name)

        directory = Path(target_directory).resolve()
        filename = f"{uuid.uuid4().hex}{ext}"
        path = directory / filename
        try:
            directory.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", path, str(e))
            raise FileStorageError(
                source="FileStore",
                context={"path": str(path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", filename, len(content))
        return StoredFile(
            filename=filename,
            path=str(path),
            original_name=original_name,
            content_type=upload.content_type,
            size=len(content),
        )

    async def cleanup(self, file_path: str) -> None:
        """
        Remove a stored upload that a handler decided not to keep.

        Best-effort: a missing file is ignored and an OS failure is logged,
        since the client response does not depend on it.
        """
        path = Path(file_path)
        try:
            os.remove(path)
            logger.info("Cleaned up file: %s", path.name)
        except FileNotFoundError:
            logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))
