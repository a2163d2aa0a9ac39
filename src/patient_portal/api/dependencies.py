"""Shared API dependencies."""

from fastapi import Request

from ..core.document_manager import DocumentManager


def get_document_manager(request: Request) -> DocumentManager:
    """Return the document manager built during application startup."""
    return request.app.state.document_manager
