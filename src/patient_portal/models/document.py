"""Document data models."""

from datetime import datetime, timezone
from typing import Any
from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """Full document record, including the internal storage key."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    display_name: str = Field(..., validation_alias="filename")
    storage_key: str = Field(..., validation_alias="filepath")
    size_bytes: int = Field(..., validation_alias="filesize")
    created_at: datetime

    @classmethod
    def from_model(cls, row: Any) -> "Document":
        """Build from a DocumentModel row (columns filename/filepath/filesize)."""
        return cls.model_validate(row)


class DocumentResponse(BaseModel):
    """API response model for a single document. Never carries the storage key."""
    id: int
    filename: str
    filesize: int
    created_at: str

    @classmethod
    def from_document(cls, doc: Document):
        """Convert Document to DocumentResponse."""
        created_at = doc.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(
            id=doc.id,
            filename=doc.display_name,
            filesize=doc.size_bytes,
            created_at=created_at.isoformat(),
        )

