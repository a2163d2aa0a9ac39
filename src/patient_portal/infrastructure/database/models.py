"""SQLAlchemy ORM models for document metadata."""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DocumentModel(Base):
    """Document metadata stored in SQLite.

    ``filename`` is the client-facing display name; ``filepath`` is the blob
    store key and is never exposed through the API.
    """
    __tablename__ = "documents"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String(255), nullable=False)
    filepath = Column(String(512), nullable=False, unique=True)
    filesize = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True, default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<DocumentModel(id={self.id}, filename={self.filename})>"
