"""Patient document portal service."""
