"""Documents, sharing and tags."""
