"""Hash-addressed file storage for attachment bytes.

Files are written under ``<base_path>/YYYY/MM/<hash>.<ext>`` where ``hash`` is
the first 16 hex characters of the content's SHA-256. Storing the same bytes
twice in the same month reuses the existing file.

Example:
    storage = FileStorageService(settings.uploads_path, settings.max_upload_bytes)
    stored = await storage.store_file(data, "image/jpeg", "IMG_0042.jpg")
    # stored.relative_path == "2026/10/3f2a9c0d1e4b5a67.jpg"
"""

from __future__ import annotations

import asyncio
import hashlib
import os
import uuid
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiofiles
import aiofiles.os

from homemaint.core.exceptions import (
    FileStorageError,
    FileTooLargeError,
    StoredFileNotFoundError,
    UnsafePathError,
)
from homemaint.core.logging import get_logger, sanitize_error
from homemaint.models.types import ensure_utc, utcnow

logger = get_logger(__name__)

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB
HASH_LENGTH = 16

MIME_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/heic": "heic",
    "application/pdf": "pdf",
    "text/plain": "txt",
}
DEFAULT_EXTENSION = "dat"


@dataclass(frozen=True, slots=True)
class StoredFile:
    """Result of storing a file."""

    relative_path: str
    file_size: int
    was_deduplicated: bool


def content_hash(data: bytes) -> str:
    """Return the truncated SHA-256 hex digest used as the stored file name."""
    return hashlib.sha256(data).hexdigest()[:HASH_LENGTH]


def extension_for(filename: str, mime_type: str) -> str:
    """Pick the stored file extension.

    The original file name's extension wins; otherwise it is derived from the
    MIME type, falling back to ``dat``.
    """
    suffix = Path(filename).suffix.lstrip(".")
    if suffix and suffix.isalnum():
        return suffix
    return MIME_EXTENSIONS.get(mime_type.split(";")[0].strip().lower(), DEFAULT_EXTENSION)


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    value = size / 1024
    for unit in ("KB", "MB"):
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


class FileStorageService:
    """Local filesystem store for attachment files.

    Attributes:
        base_path: Absolute root directory for stored files
        max_file_size: Largest payload accepted by store_file(), in bytes
    """

    def __init__(self, base_path: str | Path, max_file_size: int = DEFAULT_MAX_FILE_SIZE) -> None:
        self.base_path = Path(base_path).expanduser().resolve()
        self.max_file_size = max_file_size

    def _validate_path(self, relative_path: str) -> Path:
        """Resolve a relative path, refusing anything outside base_path.

        Raises:
            UnsafePathError: If the path escapes the storage directory
        """
        full_path = (self.base_path / relative_path).resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError:
            raise UnsafePathError(relative_path) from None
        if full_path == self.base_path:
            raise UnsafePathError(relative_path)
        return full_path

    async def ensure_base_path(self) -> None:
        await aiofiles.os.makedirs(self.base_path, exist_ok=True)

    async def store_file(
        self,
        data: bytes,
        mime_type: str,
        filename: str,
        now: datetime | None = None,
    ) -> StoredFile:
        """Store file bytes, deduplicating identical content.

        Args:
            data: File content
            mime_type: MIME type reported by the caller
            filename: Original file name, used only for its extension
            now: Time used for the YYYY/MM directory (defaults to now, UTC)

        Returns:
            StoredFile with the path relative to base_path.

        Raises:
            FileTooLargeError: If data exceeds max_file_size
            FileStorageError: If the file cannot be written
        """
        size = len(data)
        if size > self.max_file_size:
            raise FileTooLargeError(size, self.max_file_size)

        now = ensure_utc(now) if now is not None else utcnow()
        relative_path = (
            f"{now.year:04d}/{now.month:02d}/{content_hash(data)}.{extension_for(filename, mime_type)}"
        )
        full_path = self._validate_path(relative_path)

        # Reused files get a fresh mtime so the orphan sweep treats them as new
        if await self._touch(full_path):
            logger.debug(f"File already exists (deduplicated): {relative_path}")
            return StoredFile(relative_path=relative_path, file_size=size, was_deduplicated=True)

        # Write to a temporary name and rename so readers never see a partial file
        tmp_path = full_path.with_name(f".{full_path.name}.{uuid.uuid4().hex}.tmp")
        try:
            await aiofiles.os.makedirs(full_path.parent, exist_ok=True)
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(data)
            await aiofiles.os.replace(tmp_path, full_path)
        except OSError as e:
            if await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
            raise FileStorageError(f"Failed to store file: {sanitize_error(e)}") from e

        logger.info(f"File stored: {relative_path} ({format_bytes(size)})")
        return StoredFile(relative_path=relative_path, file_size=size, was_deduplicated=False)

    async def _touch(self, full_path: Path) -> bool:
        try:
            await asyncio.to_thread(os.utime, full_path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise FileStorageError(f"Failed to store file: {sanitize_error(e)}") from e
        return True

    async def get_file(self, relative_path: str) -> bytes:
        """Read a stored file.

        Raises:
            StoredFileNotFoundError: If no file exists at relative_path
            UnsafePathError: If the path escapes the storage directory
        """
        full_path = self._validate_path(relative_path)
        if not await aiofiles.os.path.isfile(full_path):
            raise StoredFileNotFoundError(relative_path)

        async with aiofiles.open(full_path, "rb") as f:
            return await f.read()

    async def delete_file(self, relative_path: str) -> None:
        """Delete a stored file.

        Raises:
            StoredFileNotFoundError: If no file exists at relative_path
            UnsafePathError: If the path escapes the storage directory
        """
        full_path = self._validate_path(relative_path)
        try:
            await aiofiles.os.remove(full_path)
        except FileNotFoundError:
            raise StoredFileNotFoundError(relative_path) from None
        except OSError as e:
            raise FileStorageError(f"Failed to delete file: {sanitize_error(e)}") from e
        logger.info(f"File deleted: {relative_path}")

    async def file_exists(self, relative_path: str) -> bool:
        return await aiofiles.os.path.isfile(self._validate_path(relative_path))

    async def stat_file(self, relative_path: str) -> os.stat_result:
        """Return filesystem metadata for a stored file.

        Raises:
            StoredFileNotFoundError: If no file exists at relative_path
        """
        full_path = self._validate_path(relative_path)
        try:
            return await aiofiles.os.stat(full_path)
        except FileNotFoundError:
            raise StoredFileNotFoundError(relative_path) from None

    async def get_total_storage_used(self) -> int:
        """Total size in bytes of every stored file."""
        sizes = await asyncio.to_thread(lambda: [size for _, size in self._walk()])
        return sum(sizes)

    async def get_file_count(self) -> int:
        return len(await self.iter_relative_paths())

    async def iter_relative_paths(self) -> list[str]:
        """List the relative path of every stored file."""
        return await asyncio.to_thread(lambda: [path for path, _ in self._walk()])

    def _walk(self) -> Iterator[tuple[str, int]]:
        if not self.base_path.exists():
            return
        for root, _, filenames in os.walk(self.base_path):
            for filename in filenames:
                # In-flight temporary writes
                if filename.startswith(".") and filename.endswith(".tmp"):
                    continue
                full_path = Path(root) / filename
                try:
                    size = full_path.stat().st_size
                except FileNotFoundError:
                    continue
                yield full_path.relative_to(self.base_path).as_posix(), size
