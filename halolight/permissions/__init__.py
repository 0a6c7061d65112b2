"""Permission catalogue."""
