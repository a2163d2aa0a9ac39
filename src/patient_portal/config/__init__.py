"""Configuration module for the patient portal."""

from .settings import get_settings, Settings

__all__ = ["get_settings", "Settings"]
