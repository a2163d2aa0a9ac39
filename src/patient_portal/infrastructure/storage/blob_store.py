"""Filesystem-based blob storage for uploaded document bytes."""

import logging
import re
import secrets
import time
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from ...core.exceptions import (
    BlobNotFoundError,
    PayloadTooLargeError,
    StorageFailureError,
    UnsupportedMediaTypeError,
)

logger = logging.getLogger(__name__)

DEFAULT_NAME = "document.pdf"
MAX_NAME_LENGTH = 120
_SEPARATORS = re.compile(r"[\\/]")


class BlobStore:
    """Flat directory of files keyed by server-generated storage keys.

    Keys have the form ``<timestamp_ns>-<random>-<original_name>`` so the
    original extension survives for manual inspection. Files are created with
    exclusive-create semantics, so two uploads can never share a key.
    """

    def __init__(
        self,
        root: Path,
        allowed_media_type: str = "application/pdf",
        max_bytes: int = 10 * 1024 * 1024,
        max_key_attempts: int = 5,
    ):
        """Initialize blob store.

        Args:
            root: Directory holding the blob files
            allowed_media_type: The only declared media type accepted by put()
            max_bytes: Inclusive upper bound on payload size
            max_key_attempts: Fresh keys to try if a generated name is taken
        """
        self.root = Path(root)
        self.allowed_media_type = allowed_media_type
        self.max_bytes = max_bytes
        self.max_key_attempts = max_key_attempts

    async def initialize(self) -> None:
        """Create the blob directory if it does not exist."""
        await aiofiles.os.makedirs(self.root, exist_ok=True)
        logger.info(f"Blob store ready at {self.root.resolve()}")

    async def is_ready(self) -> bool:
        return bool(await aiofiles.os.path.isdir(self.root))

    @staticmethod
    def safe_name(original_name: Optional[str]) -> str:
        """Reduce a client filename to a basename usable inside a storage key."""
        name = _SEPARATORS.split(original_name or "")[-1].replace("\x00", "").strip()
        if name in ("", ".", ".."):
            return DEFAULT_NAME
        if len(name) > MAX_NAME_LENGTH:
            suffix = Path(name).suffix[:16]
            name = name[: MAX_NAME_LENGTH - len(suffix)] + suffix
        return name

    def generate_key(self, original_name: Optional[str]) -> str:
        return f"{time.time_ns()}-{secrets.randbelow(10**9)}-{self.safe_name(original_name)}"

    def _resolve(self, storage_key: str) -> Path:
        if not storage_key or _SEPARATORS.search(storage_key) or storage_key in (".", ".."):
            raise BlobNotFoundError()
        return self.root / storage_key

    async def put(
        self, data: bytes, declared_media_type: Optional[str], original_name: Optional[str]
    ) -> str:
        """Persist bytes under a freshly generated storage key.

        Args:
            data: Complete file contents
            declared_media_type: Media type declared by the client
            original_name: Client-supplied filename

        Returns:
            The storage key

        Raises:
            UnsupportedMediaTypeError: Declared type is not the allowed type
            PayloadTooLargeError: Payload exceeds max_bytes
            StorageFailureError: The filesystem rejected the write
        """
        if declared_media_type != self.allowed_media_type:
            raise UnsupportedMediaTypeError()
        if len(data) > self.max_bytes:
            raise PayloadTooLargeError(
                f"File exceeds the maximum allowed size of {self.max_bytes} bytes"
            )

        for _ in range(self.max_key_attempts):
            storage_key = self.generate_key(original_name)
            path = self.root / storage_key

            try:
                handle = await aiofiles.open(path, "xb")
            except FileExistsError:
                logger.warning(f"Storage key collision on {storage_key}, regenerating")
                continue
            except OSError as e:
                logger.error(f"Failed to create blob {storage_key}: {e}", exc_info=True)
                raise StorageFailureError(f"Failed to store file: {e}") from e

            try:
                await handle.write(data)
            except OSError as e:
                logger.error(f"Failed to write blob {storage_key}: {e}", exc_info=True)
                await handle.close()
                await self._discard(path)
                raise StorageFailureError(f"Failed to store file: {e}") from e
            await handle.close()

            logger.info(f"Stored blob {storage_key} ({len(data)} bytes)")
            return storage_key

        raise StorageFailureError("Could not allocate a unique storage key")

    async def get_path(self, storage_key: str) -> Path:
        """Resolve a storage key to an existing file path.

        Raises:
            BlobNotFoundError: No file exists for the key
        """
        path = self._resolve(storage_key)
        if not await aiofiles.os.path.isfile(path):
            logger.warning(f"Blob not found for key: {storage_key}")
            raise BlobNotFoundError()
        return path

    async def open(self, storage_key: str):
        """Open a blob for reading.

        The returned handle keeps working if the file is unlinked afterwards,
        so a concurrent delete cannot truncate a stream already started.
        """
        path = self._resolve(storage_key)
        try:
            return await aiofiles.open(path, "rb")
        except FileNotFoundError as e:
            logger.warning(f"Blob vanished before it could be opened: {storage_key}")
            raise BlobNotFoundError() from e
        except OSError as e:
            logger.error(f"Failed to open blob {storage_key}: {e}", exc_info=True)
            raise StorageFailureError(f"Failed to read file: {e}") from e

    async def delete(self, storage_key: str) -> bool:
        """Remove a blob.

        Returns:
            True if a file was removed, False if it was already absent

        Raises:
            StorageFailureError: Removal failed for any other reason
        """
        try:
            path = self._resolve(storage_key)
            await aiofiles.os.remove(path)
        except (FileNotFoundError, BlobNotFoundError):
            logger.warning(f"Blob already absent: {storage_key}")
            return False
        except OSError as e:
            logger.error(f"File delete error for {storage_key}: {e}", exc_info=True)
            raise StorageFailureError("Failed to delete file from storage") from e

        logger.info(f"Deleted blob {storage_key}")
        return True

    async def _discard(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove partial blob {path}: {e}")
