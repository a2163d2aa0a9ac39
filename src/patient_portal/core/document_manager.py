"""Document management business logic.

Keeps the catalog (SQL rows) and the blob store (files) consistent across the
document lifecycle: upload writes the blob before the row, delete removes the
blob before the row. Neither sequence is transactional.
"""

import logging
from typing import AsyncIterator, List, Optional, Protocol

from ..infrastructure.database.client import DatabaseClient
from ..infrastructure.storage.blob_store import DEFAULT_NAME, BlobStore
from ..models.document import Document
from .exceptions import (
    BlobNotFoundError,
    CatalogFailureError,
    DocumentNotFoundError,
    MissingFileError,
)

logger = logging.getLogger(__name__)


class UploadSource(Protocol):
    """The parts of an uploaded multipart file the manager relies on."""

    filename: Optional[str]
    content_type: Optional[str]

    async def read(self, size: int = -1) -> bytes: ...


class DocumentDownload:
    """An opened blob ready to be streamed under the document's display name."""

    def __init__(self, document: Document, handle, chunk_size: int = 64 * 1024):
        self.document = document
        self.filename = document.display_name
        self._handle = handle
        self._chunk_size = chunk_size
        self.closed = False

    async def close(self) -> None:
        """Release the file handle. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        await self._handle.close()

    async def iter_chunks(self) -> AsyncIterator[bytes]:
        """Yield file contents and close the handle when exhausted."""
        try:
            while True:
                chunk = await self._handle.read(self._chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            await self.close()

    async def read_all(self) -> bytes:
        return b"".join([chunk async for chunk in self.iter_chunks()])


class DocumentManager:
    """Business logic for the document lifecycle."""

    def __init__(
        self,
        db_client: DatabaseClient,
        blob_store: BlobStore,
        chunk_size: int = 64 * 1024,
    ):
        """Initialize document manager.

        Args:
            db_client: Catalog of document metadata
            blob_store: Storage for document bytes
            chunk_size: Bytes per chunk when streaming downloads
        """
        self.db = db_client
        self.blobs = blob_store
        self.chunk_size = chunk_size

    async def upload_document(self, upload: Optional[UploadSource]) -> Document:
        """Store an uploaded file and record it in the catalog.

        Args:
            upload: The multipart file, or None if the request carried none

        Returns:
            Created document

        Raises:
            InvalidInputError: No file, wrong media type, or oversize payload
            StorageFailureError: The blob could not be written
            CatalogFailureError: The row could not be inserted
        """
        if upload is None:
            raise MissingFileError()

        # One byte past the limit is enough to reject oversize payloads.
        data = await upload.read(self.blobs.max_bytes + 1)
        display_name = upload.filename or DEFAULT_NAME

        storage_key = await self.blobs.put(data, upload.content_type, display_name)

        try:
            row = await self.db.insert_document(
                filename=display_name, filepath=storage_key, filesize=len(data)
            )
        except CatalogFailureError:
            logger.error(f"Catalog insert failed, blob {storage_key} is orphaned")
            raise

        document = Document.from_model(row)
        logger.info(f"Uploaded document {document.id} ({display_name}, {document.size_bytes} bytes)")
        return document

    async def list_documents(self) -> List[Document]:
        """List all documents, newest first."""
        rows = await self.db.list_documents()
        return [Document.from_model(row) for row in rows]

    async def get_document(self, document_id: int) -> Document:
        """Get document by ID.

        Raises:
            DocumentNotFoundError: No row with this id
        """
        row = await self.db.get_document(document_id)
        if row is None:
            raise DocumentNotFoundError()
        return Document.from_model(row)

    async def open_download(self, document_id: int) -> DocumentDownload:
        """Resolve a document to an opened blob for streaming.

        Raises:
            DocumentNotFoundError: No row with this id
            BlobNotFoundError: Row exists but its file is missing
        """
        document = await self.get_document(document_id)
        try:
            # get_path is the existence check; open covers a blob removed since.
            await self.blobs.get_path(document.storage_key)
            handle = await self.blobs.open(document.storage_key)
        except BlobNotFoundError:
            logger.warning(
                f"Document {document_id} is catalogued but blob {document.storage_key} is missing"
            )
            raise
        return DocumentDownload(document, handle, self.chunk_size)

    async def delete_document(self, document_id: int) -> Document:
        """Delete a document: blob first, then the catalog row.

        A blob that is already absent does not block the row removal. Any
        other storage fault aborts before the row is touched.

        Raises:
            DocumentNotFoundError: No row with this id
            StorageFailureError: The blob could not be removed
            CatalogFailureError: The row could not be removed
        """
        document = await self.get_document(document_id)

        await self.blobs.delete(document.storage_key)

        deleted = await self.db.delete_document(document_id)
        if not deleted:
            # Another request removed the row between lookup and delete.
            raise DocumentNotFoundError()

        logger.info(f"Deleted document {document_id}")
        return document
