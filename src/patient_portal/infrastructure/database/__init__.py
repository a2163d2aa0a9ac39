"""Document catalog persistence."""
