"""Main FastAPI application for the patient document portal."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config.settings import get_settings, Settings
from .infrastructure.database.client import DatabaseClient
from .infrastructure.storage.blob_store import BlobStore
from .core.document_manager import DocumentManager
from .core.exceptions import PortalError
from .api.routes import documents
from .models.requests import HealthResponse

VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.service_name} v{VERSION}")

    logger.info("Initializing blob store...")
    blob_store = BlobStore(
        Path(settings.upload_dir),
        allowed_media_type=settings.allowed_media_type,
        max_bytes=settings.max_upload_bytes,
    )
    await blob_store.initialize()

    logger.info("Initializing database...")
    db_client = DatabaseClient(settings.database_url)
    await db_client.initialize()

    app.state.db_client = db_client
    app.state.blob_store = blob_store
    app.state.document_manager = DocumentManager(
        db_client, blob_store, chunk_size=settings.download_chunk_size
    )

    logger.info(f"{settings.service_name} is ready")

    yield

    # Cleanup
    logger.info("Shutting down...")
    await db_client.close()
    logger.info("Shutdown complete")


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Translate lifecycle errors into structured JSON responses."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path} ({exc.status_code}): {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.url.path} ({exc.status_code}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; tests pass their own settings."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Patient Portal Document Service",
        description="Upload, list, download and delete patient PDF documents",
        version=VERSION,
        lifespan=lifespan
    )
    app.state.settings = settings

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PortalError, portal_error_handler)
    app.include_router(documents.router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint."""
        db_client: Optional[DatabaseClient] = getattr(request.app.state, "db_client", None)
        blob_store: Optional[BlobStore] = getattr(request.app.state, "blob_store", None)

        db_connected = db_client is not None and await db_client.ping()
        storage_ready = blob_store is not None and await blob_store.is_ready()

        return HealthResponse(
            status="healthy" if (db_connected and storage_ready) else "degraded",
            service=settings.service_name,
            version=VERSION,
            database_connected=db_connected,
            storage_ready=storage_ready
        )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.service_name,
            "version": VERSION,
            "status": "running"
        }

    return app


configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "patient_portal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development"
    )
