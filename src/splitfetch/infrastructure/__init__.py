"""Infrastructure concerns shared across the package."""
