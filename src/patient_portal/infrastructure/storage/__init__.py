"""Local filesystem blob storage."""

from .blob_store import BlobStore

__all__ = ["BlobStore"]
