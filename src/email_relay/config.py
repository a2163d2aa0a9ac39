"""Settings for the contact-form email relay."""

from functools import lru_cache
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Relay settings loaded from environment variables.

    SMTP credentials have no defaults and must come from the environment.
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    service_name: str = Field(default="email-relay")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=587)
    smtp_username: Optional[str] = Field(default=None)
    smtp_password: Optional[str] = Field(default=None)
    smtp_use_tls: bool = Field(default=True)
    smtp_timeout: float = Field(default=30.0)

    from_email: Optional[str] = Field(default=None)
    from_name: str = Field(default="H&M Healthcare")
    # Staff inbox for the notification copy; falls back to the submitter.
    notify_email: Optional[str] = Field(default=None)

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
