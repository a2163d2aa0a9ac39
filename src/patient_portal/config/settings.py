"""Settings module using pydantic-settings for configuration management."""

from functools import lru_cache
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Service Configuration
    service_name: str = Field(default="patient-portal")
    environment: str = Field(default="development")
    port: int = Field(default=5000)
    host: str = Field(default="0.0.0.0")

    # Database Configuration (SQLite for document metadata)
    database_url: str = Field(default="sqlite+aiosqlite:///./patient_portal.db")

    # Blob storage
    upload_dir: str = Field(default="./uploads")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, ge=1)
    allowed_media_type: str = Field(default="application/pdf")
    download_chunk_size: int = Field(default=64 * 1024, ge=1)

    # CORS for the browser client
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = Field(default="INFO")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
