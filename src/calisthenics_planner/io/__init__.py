"""Input validation and JSON serialization."""
