"""Shared fixtures: isolated catalog database and blob directory per test."""

from pathlib import Path
from typing import Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from patient_portal.config.settings import Settings
from patient_portal.core.document_manager import DocumentManager
from patient_portal.infrastructure.database.client import DatabaseClient
from patient_portal.infrastructure.storage.blob_store import BlobStore
from patient_portal.main import create_app

PDF_BYTES = (
    b"%PDF-1.4\n1 0 obj\n<</Type/Catalog/Pages 2 0 R>>\nendobj\n"
    b"2 0 obj\n<</Type/Pages/Count 0/Kids[]>>\nendobj\ntrailer\n<</Root 1 0 R>>\n%%EOF\n"
)


class FakeUpload:
    """Stand-in for a multipart UploadFile."""

    def __init__(self, data: bytes, filename: Optional[str] = "report.pdf",
                 content_type: Optional[str] = "application/pdf"):
        self.filename = filename
        self.content_type = content_type
        self._data = data

    async def read(self, size: int = -1) -> bytes:
        return self._data if size < 0 else self._data[:size]


@pytest.fixture
def pdf_bytes() -> bytes:
    return PDF_BYTES


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def settings(tmp_path: Path, upload_dir: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        upload_dir=str(upload_dir),
    )


@pytest_asyncio.fixture
async def db_client(settings: Settings):
    client = DatabaseClient(settings.database_url)
    await client.initialize()
    yield client
    await client.close()


@pytest_asyncio.fixture
async def blob_store(upload_dir: Path) -> BlobStore:
    store = BlobStore(upload_dir, max_bytes=1024)
    await store.initialize()
    return store


@pytest.fixture
def doc_manager(db_client: DatabaseClient, blob_store: BlobStore) -> DocumentManager:
    return DocumentManager(db_client, blob_store)


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def make_upload():
    return FakeUpload
