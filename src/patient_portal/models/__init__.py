"""Data models for the patient portal."""

from .document import Document, DocumentResponse
from .requests import DeleteResponse, ErrorResponse, HealthResponse

__all__ = [
    "Document",
    "DocumentResponse",
    "DeleteResponse",
    "ErrorResponse",
    "HealthResponse",
]
