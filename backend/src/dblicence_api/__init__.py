"""Database licence compliance API."""
