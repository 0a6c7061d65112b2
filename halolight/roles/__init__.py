"""Role management."""
