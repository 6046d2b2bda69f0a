"""Application configuration."""

from .settings import (
    DEFAULT_CHUNK_SIZE,
    MAX_WORKERS,
    Environment,
    LogLevel,
    Settings,
    build_settings,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "MAX_WORKERS",
    "Environment",
    "LogLevel",
    "Settings",
    "build_settings",
]
