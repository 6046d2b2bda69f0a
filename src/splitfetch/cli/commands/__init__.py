"""CLI commands."""

from .download import download

__all__ = ["download"]
