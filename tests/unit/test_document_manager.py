"""Unit tests for document lifecycle orchestration."""

from unittest.mock import AsyncMock

import pytest

from patient_portal.core.exceptions import (
    BlobNotFoundError,
    CatalogFailureError,
    DocumentNotFoundError,
    InvalidInputError,
    MissingFileError,
    NotFoundError,
    StorageFailureError,
)


@pytest.mark.unit
class TestUpload:
    @pytest.mark.asyncio
    async def test_upload_records_document(self, doc_manager, make_upload, pdf_bytes):
        document = await doc_manager.upload_document(make_upload(pdf_bytes, "lab results.pdf"))

        assert document.id == 1
        assert document.display_name == "lab results.pdf"
        assert document.size_bytes == len(pdf_bytes)
        assert document.storage_key != document.display_name
        assert document.storage_key.endswith("-lab results.pdf")

        listed = await doc_manager.list_documents()
        assert [d.id for d in listed] == [document.id]

    @pytest.mark.asyncio
    async def test_missing_file_is_invalid_input(self, doc_manager):
        with pytest.raises(MissingFileError):
            await doc_manager.upload_document(None)

    @pytest.mark.asyncio
    async def test_non_pdf_leaves_no_trace(self, doc_manager, make_upload, blob_store):
        with pytest.raises(InvalidInputError):
            await doc_manager.upload_document(make_upload(b"plain", "notes.txt", "text/plain"))

        assert await doc_manager.list_documents() == []
        assert list(blob_store.root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_oversize_payload_is_rejected(self, doc_manager, make_upload):
        with pytest.raises(InvalidInputError):
            await doc_manager.upload_document(make_upload(b"x" * 1025))

        assert await doc_manager.list_documents() == []

    @pytest.mark.asyncio
    async def test_empty_filename_gets_default_display_name(self, doc_manager, make_upload, pdf_bytes):
        document = await doc_manager.upload_document(make_upload(pdf_bytes, filename=""))
        assert document.display_name == "document.pdf"

    @pytest.mark.asyncio
    async def test_catalog_failure_leaves_orphaned_blob(
        self, doc_manager, make_upload, pdf_bytes, blob_store, monkeypatch
    ):
        monkeypatch.setattr(
            doc_manager.db, "insert_document", AsyncMock(side_effect=CatalogFailureError())
        )

        with pytest.raises(CatalogFailureError):
            await doc_manager.upload_document(make_upload(pdf_bytes))

        assert len(list(blob_store.root.iterdir())) == 1


@pytest.mark.unit
class TestDownload:
    @pytest.mark.asyncio
    async def test_round_trip_uses_display_name(self, doc_manager, make_upload, pdf_bytes):
        document = await doc_manager.upload_document(make_upload(pdf_bytes, "scan.pdf"))

        download = await doc_manager.open_download(document.id)

        assert download.filename == "scan.pdf"
        assert await download.read_all() == pdf_bytes

    @pytest.mark.asyncio
    async def test_unknown_id(self, doc_manager):
        with pytest.raises(DocumentNotFoundError):
            await doc_manager.open_download(999)

    @pytest.mark.asyncio
    async def test_missing_blob_is_not_found(self, doc_manager, make_upload, pdf_bytes, blob_store):
        document = await doc_manager.upload_document(make_upload(pdf_bytes))
        (blob_store.root / document.storage_key).unlink()

        with pytest.raises(BlobNotFoundError) as exc_info:
            await doc_manager.open_download(document.id)
        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.message == "File not found on server"

        # The row itself is left alone.
        assert (await doc_manager.get_document(document.id)).id == document.id

    @pytest.mark.asyncio
    async def test_blob_removed_after_lookup_is_not_found(
        self, doc_manager, make_upload, pdf_bytes, blob_store, monkeypatch
    ):
        document = await doc_manager.upload_document(make_upload(pdf_bytes))
        path = blob_store.root / document.storage_key
        path.unlink()
        monkeypatch.setattr(doc_manager.blobs, "get_path", AsyncMock(return_value=path))

        with pytest.raises(BlobNotFoundError):
            await doc_manager.open_download(document.id)

    @pytest.mark.asyncio
    async def test_close_without_reading(self, doc_manager, make_upload, pdf_bytes):
        document = await doc_manager.upload_document(make_upload(pdf_bytes))
        download = await doc_manager.open_download(document.id)

        await download.close()
        await download.close()

        assert download.closed

    @pytest.mark.asyncio
    async def test_close_after_streaming(self, doc_manager, make_upload, pdf_bytes):
        document = await doc_manager.upload_document(make_upload(pdf_bytes))
        download = await doc_manager.open_download(document.id)

        assert await download.read_all() == pdf_bytes
        assert download.closed
        await download.close()


@pytest.mark.unit
class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_removes_blob_and_row(self, doc_manager, make_upload, pdf_bytes, blob_store):
        document = await doc_manager.upload_document(make_upload(pdf_bytes))

        await doc_manager.delete_document(document.id)

        assert await doc_manager.list_documents() == []
        assert not (blob_store.root / document.storage_key).exists()
        with pytest.raises(DocumentNotFoundError):
            await doc_manager.open_download(document.id)
        with pytest.raises(DocumentNotFoundError):
            await doc_manager.delete_document(document.id)

    @pytest.mark.asyncio
    async def test_delete_with_blob_already_missing(self, doc_manager, make_upload, pdf_bytes, blob_store):
        document = await doc_manager.upload_document(make_upload(pdf_bytes))
        (blob_store.root / document.storage_key).unlink()

        await doc_manager.delete_document(document.id)

        assert await doc_manager.list_documents() == []

    @pytest.mark.asyncio
    async def test_storage_failure_keeps_row(self, doc_manager, make_upload, pdf_bytes, monkeypatch):
        document = await doc_manager.upload_document(make_upload(pdf_bytes))
        monkeypatch.setattr(
            doc_manager.blobs, "delete", AsyncMock(side_effect=StorageFailureError())
        )

        with pytest.raises(StorageFailureError):
            await doc_manager.delete_document(document.id)

        assert [d.id for d in await doc_manager.list_documents()] == [document.id]

    @pytest.mark.asyncio
    async def test_unknown_id(self, doc_manager):
        with pytest.raises(DocumentNotFoundError):
            await doc_manager.delete_document(12345)

    @pytest.mark.asyncio
    async def test_row_removed_concurrently(self, doc_manager, make_upload, pdf_bytes, monkeypatch):
        document = await doc_manager.upload_document(make_upload(pdf_bytes))
        monkeypatch.setattr(doc_manager.db, "delete_document", AsyncMock(return_value=False))

        with pytest.raises(DocumentNotFoundError):
            await doc_manager.delete_document(document.id)
