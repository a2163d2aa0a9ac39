"""Contact-form email relay service."""
