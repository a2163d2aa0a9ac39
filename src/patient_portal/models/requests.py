"""Request and response models for API endpoints."""

from pydantic import BaseModel


class DeleteResponse(BaseModel):
    """Confirmation returned after a document is deleted."""
    message: str = "Document deleted successfully"
    id: int


class ErrorResponse(BaseModel):
    """Structured error payload."""
    error: str
    code: str


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str
    version: str
    database_connected: bool
    storage_ready: bool
