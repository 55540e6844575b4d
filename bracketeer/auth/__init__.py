"""Session-based access control for the JSON endpoints."""
