"""splitfetch - segmented, resumable HTTP downloads."""

from .app import App, create_app
from .config import Settings
from .domain import (
    CancellationToken,
    JobConfig,
    JobOutcome,
    JobResult,
    Part,
    PartStatus,
    SplitFetchError,
)
from .segments import Coordinator

__all__ = [
    "App",
    "create_app",
    "Settings",
    "Coordinator",
    "CancellationToken",
    "JobConfig",
    "JobOutcome",
    "JobResult",
    "Part",
    "PartStatus",
    "SplitFetchError",
]
