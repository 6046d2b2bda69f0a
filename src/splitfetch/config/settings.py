import enum
import os
import typing as t
from dataclasses import dataclass, field, replace
from pathlib import Path

# Upper bound on concurrent range workers for a single job.
MAX_WORKERS = 100

DEFAULT_CHUNK_SIZE = 32 * 1024


def _default_workers() -> int:
    return max(1, min(os.cpu_count() or 1, MAX_WORKERS))


class Environment(enum.Enum):
    """Runtime environment for the application.

    Kept small and explicit to support simple environment-driven behavior
    without introducing configuration dependencies.
    """

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(enum.StrEnum):
    """Log levels understood by the logging setup."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class Settings:
    """Process-wide defaults used to bootstrap the app and build jobs.

    Per-job values (URL, save directory, worker count) end up in an immutable
    JobConfig; Settings only supplies the defaults the CLI falls back to.
    """

    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.INFO
    save_dir: Path = Path(".")
    workers: int = field(default_factory=_default_workers)
    resume: bool = True
    chunk_size: int = DEFAULT_CHUNK_SIZE


def build_settings(**overrides: t.Any) -> Settings:
    """Build Settings from defaults, applying only overrides that are not None."""
    applied = {key: value for key, value in overrides.items() if value is not None}
    return replace(Settings(), **applied)
