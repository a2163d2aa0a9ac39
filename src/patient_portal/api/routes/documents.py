"""Document upload, listing, download and deletion endpoints."""

import logging
from typing import List, Union
from urllib.parse import quote
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask
from starlette.datastructures import UploadFile as StarletteUploadFile

from ...api.dependencies import get_document_manager
from ...core.document_manager import DocumentManager
from ...models.document import DocumentResponse
from ...models.requests import DeleteResponse, ErrorResponse

router = APIRouter(prefix="/api/documents", tags=["documents"])
logger = logging.getLogger(__name__)


def content_disposition(filename: str) -> str:
    """Build an attachment Content-Disposition header for a display name."""
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


@router.post(
    "/upload",
    response_model=DocumentResponse,
    status_code=201,
    summary="Upload Document",
    description="""
Upload a single PDF file.

**Workflow**:
1. Require exactly one multipart field named `file`
2. Reject anything not declared as `application/pdf`
3. Reject payloads larger than 10 MiB
4. Write the bytes to the blob directory under a generated storage key
5. Insert a catalog row referencing that key
6. Return the created document

**Response Example**:
```json
{
  "id": 7,
  "filename": "lab-results.pdf",
  "filesize": 48213,
  "created_at": "2025-12-15T10:30:00.123456+00:00"
}
```
    """,
    responses={
        201: {"description": "Document uploaded successfully"},
        400: {"model": ErrorResponse, "description": "No file, wrong type, or too large"},
        500: {"model": ErrorResponse, "description": "Storage or catalog failure"},
    },
)
async def upload_document(
    file: Union[UploadFile, str, None] = File(None),
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    """Upload a document."""
    # A plain form field named "file" carries no upload.
    upload = file if isinstance(file, StarletteUploadFile) else None
    try:
        document = await doc_manager.upload_document(upload)
    finally:
        if upload is not None:
            await upload.close()
    return DocumentResponse.from_document(document)


@router.get(
    "",
    response_model=List[DocumentResponse],
    summary="List Documents",
    description="List every uploaded document, newest first. No pagination.",
    responses={
        200: {"description": "Document list retrieved successfully"},
        500: {"model": ErrorResponse, "description": "Catalog failure"},
    },
)
async def list_documents(doc_manager: DocumentManager = Depends(get_document_manager)):
    """List documents."""
    documents = await doc_manager.list_documents()
    return [DocumentResponse.from_document(doc) for doc in documents]


@router.get(
    "/{document_id}",
    summary="Download Document",
    description="""
Stream the stored file as an attachment named after the original upload.

Returns 404 both when the id is unknown and when the catalog row exists but
its file is missing from the blob directory.
    """,
    response_class=StreamingResponse,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "File stream"},
        404: {"model": ErrorResponse, "description": "Document or file not found"},
        500: {"model": ErrorResponse, "description": "Catalog failure"},
    },
)
async def download_document(
    document_id: int,
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    """Download a document."""
    download = await doc_manager.open_download(document_id)
    logger.debug(f"Streaming document {document_id} as {download.filename}")
    return StreamingResponse(
        download.iter_chunks(),
        media_type=doc_manager.blobs.allowed_media_type,
        headers={"Content-Disposition": content_disposition(download.filename)},
        background=BackgroundTask(download.close),
    )


@router.delete(
    "/{document_id}",
    response_model=DeleteResponse,
    summary="Delete Document",
    description="""
Permanently delete a document.

**Workflow**:
1. Look up the catalog row (404 if absent)
2. Remove the file from the blob directory; an already-missing file is fine
3. Remove the catalog row

If the file cannot be removed for any other reason the row is left intact
and 500 is returned.
    """,
    responses={
        200: {"description": "Document deleted successfully"},
        404: {"model": ErrorResponse, "description": "Document not found"},
        500: {"model": ErrorResponse, "description": "Storage or catalog failure"},
    },
)
async def delete_document(
    document_id: int,
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    """Delete a document."""
    document = await doc_manager.delete_document(document_id)
    return DeleteResponse(id=document.id)
