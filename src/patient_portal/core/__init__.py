"""Document lifecycle business logic."""
