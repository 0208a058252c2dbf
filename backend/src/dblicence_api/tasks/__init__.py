"""Background tasks package."""
