"""Error taxonomy for the document lifecycle.

Every error carries the HTTP status it maps to, so the API layer can translate
any ``PortalError`` into a response with a single exception handler.
"""

from typing import Optional


class PortalError(Exception):
    """Base class for document portal errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


class InvalidInputError(PortalError):
    """The request payload cannot be accepted."""

    status_code = 400
    default_message = "Invalid input"


class MissingFileError(InvalidInputError):
    default_message = "No file uploaded or invalid file type (PDF only)"


class UnsupportedMediaTypeError(InvalidInputError):
    default_message = "Only PDF files are allowed!"


class PayloadTooLargeError(InvalidInputError):
    default_message = "File exceeds the maximum allowed size"


class NotFoundError(PortalError):
    """The requested document or its blob does not exist."""

    status_code = 404
    default_message = "Not found"


class DocumentNotFoundError(NotFoundError):
    default_message = "Document not found"


class BlobNotFoundError(NotFoundError):
    default_message = "File not found on server"


class StorageFailureError(PortalError):
    """Filesystem fault other than an already-absent blob."""

    status_code = 500
    default_message = "Failed to access file storage"


class CatalogFailureError(PortalError):
    """The metadata database is unavailable or rejected a statement."""

    status_code = 500
    default_message = "Document catalog unavailable"
