"""Database client for document metadata storage."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional
from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ...core.exceptions import CatalogFailureError
from .models import Base, DocumentModel

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value; larger ids cannot exist.
MIN_ID = -(2**63)
MAX_ID = 2**63 - 1


class DatabaseClient:
    """Async catalog of uploaded documents.

    Rows are only ever inserted or deleted, never updated in place.
    """

    def __init__(self, database_url: str):
        """Initialize database client.

        Args:
            database_url: SQLAlchemy database URL (e.g., sqlite+aiosqlite:///./db.sqlite)
        """
        self.engine = create_async_engine(database_url, echo=False)
        self.async_session = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.async_session() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Catalog {operation} failed: {e}", exc_info=True)
            raise CatalogFailureError(f"Document catalog error during {operation}") from e

    async def verify_connection(self):
        """Verify the database answers a trivial query."""
        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")

    async def ping(self) -> bool:
        try:
            await self.verify_connection()
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False
        return True

    async def initialize(self):
        """Create database tables."""
        await self.verify_connection()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")

    async def insert_document(self, filename: str, filepath: str, filesize: int) -> DocumentModel:
        """Insert a new document row; id and created_at are assigned here."""
        async with self._session("insert") as session:
            document = DocumentModel(filename=filename, filepath=filepath, filesize=filesize)
            session.add(document)
            await session.commit()
            await session.refresh(document)
            return document

    async def list_documents(self) -> List[DocumentModel]:
        """List every document, newest first."""
        async with self._session("list") as session:
            result = await session.execute(
                select(DocumentModel).order_by(
                    DocumentModel.created_at.desc(), DocumentModel.id.desc()
                )
            )
            return list(result.scalars().all())

    async def get_document(self, document_id: int) -> Optional[DocumentModel]:
        """Get document by ID."""
        if not MIN_ID <= document_id <= MAX_ID:
            return None
        async with self._session("get") as session:
            result = await session.execute(
                select(DocumentModel).where(DocumentModel.id == document_id)
            )
            return result.scalar_one_or_none()

    async def delete_document(self, document_id: int) -> bool:
        """Delete document row. Returns False if no row matched."""
        if not MIN_ID <= document_id <= MAX_ID:
            return False
        async with self._session("delete") as session:
            result = await session.execute(
                delete(DocumentModel).where(DocumentModel.id == document_id)
            )
            await session.commit()
            return result.rowcount > 0

    async def close(self):
        """Close database connections."""
        await self.engine.dispose()
