"""Infrastructure adapters (catalog database, blob storage)."""
