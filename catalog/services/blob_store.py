"""
Catalog Backend - Blob Store
==============================

What:  Writes uploaded file bytes to disk and returns a stored reference.
How:   Names each file `<timestamp-ms><original extension>`, writes it under
       the storage root with async I/O, and returns multer-style metadata.
Who:   Used by the upload route and by ProductService for product images.

Reference format:
    storage_root/1700000000000.png   ← bytes on disk
    "uploads/1700000000000.png"      ← stored reference (public_prefix/filename)

    The storage root is mounted read-only at /<public_prefix>, so a client
    fetches a reference with GET /<reference>.

Not done here:
    No dedup, no content hashing, no size or type validation, no retry.
    The store has no idea which products point at which files; deleting a
    product leaves its files in place.
"""

import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import aiofiles

from catalog.exceptions import FileStorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingFile:
    """An uploaded file read into memory by a route handler."""
    filename: str
    content: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class StoredFile:
    """Metadata for a file the store has written."""
    fieldname: str
    originalname: str
    mimetype: Optional[str]
    destination: str
    filename: str
    path: str
    size: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class BlobStore:
    """
    Timestamp-keyed file store rooted at a single directory.

    Timestamps are milliseconds since the epoch and strictly increase within
    one process, so several files stored during the same millisecond (e.g.
    five images in one request) still get distinct names. Two processes
    writing the same extension in the same millisecond can still collide.
    """

    def __init__(self, storage_root: str, public_prefix: str = "uploads"):
        self.storage_root = Path(storage_root).resolve()
        self.public_prefix = public_prefix.strip("/")
        self.storage_root.mkdir(parents=True, exist_ok=True)
        self._last_stamp = 0
        logger.info("BlobStore initialized with storage_root=%s", self.storage_root)

    def _next_stamp(self) -> int:
        stamp = time.time_ns() // 1_000_000
        if stamp <= self._last_stamp:
            stamp = self._last_stamp + 1
        self._last_stamp = stamp
        return stamp

    def generate_filename(self, original_name: str) -> str:
        """
        Build the on-disk name for an upload.

        Example:
            >>> store.generate_filename("photo.JPG")
            '1700000000000.JPG'
        """
        # Path.suffix keeps only the last extension and never a directory part
        return f"{self._next_stamp()}{Path(original_name).suffix}"

    def reference_for(self, filename: str) -> str:
        return f"{self.public_prefix}/{filename}"

    def resolve(self, reference: str) -> Path:
        """Maps a stored reference back to its absolute path on disk."""
        prefix = f"{self.public_prefix}/"
        name = reference[len(prefix):] if reference.startswith(prefix) else reference
        return self.storage_root / Path(name).name

    async def store(
        self,
        content: bytes,
        original_name: str,
        content_type: Optional[str] = None,
        field_name: str = "file",
    ) -> StoredFile:
        """
        Write one upload and return its metadata.

        Raises:
            FileStorageError if the directory or file cannot be written.
        """
        filename = self.generate_filename(original_name)
        absolute_path = self.storage_root / filename

        try:
            self.storage_root.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message=f"Failed to save uploaded file: {e.strerror or e}",
                context={"path": str(absolute_path), "os_error": str(e)},
            ) from e

        reference = self.reference_for(filename)
        logger.info("File stored: %s (%d bytes)", reference, len(content))

        return StoredFile(
            fieldname=field_name,
            originalname=original_name,
            mimetype=content_type,
            destination=self.public_prefix,
            filename=filename,
            path=reference,
            size=len(content),
        )

    async def store_incoming(self, incoming: IncomingFile, field_name: str = "file") -> StoredFile:
        return await self.store(
            incoming.content,
            incoming.filename,
            content_type=incoming.content_type,
            field_name=field_name,
        )
