"""Custom exceptions for segmented downloads.

Every error below is fatal for the job that raised it. Resilience comes
only from the checkpoint written by an earlier, fully drained cycle.
"""

from pathlib import Path


class SplitFetchError(Exception):
    """Base exception for all splitfetch errors."""

    pass


class CoordinatorNotInitializedError(SplitFetchError):
    """Raised when the Coordinator's HTTP client is used before it exists.

    This occurs when the coordinator is neither entered as an async context
    manager nor constructed with an explicit client session.
    """

    pass


class MetadataError(SplitFetchError):
    """Raised when probing the resource fails or returns unusable headers."""

    def __init__(self, message: str, *, url: str) -> None:
        self.url = url
        super().__init__(f"{message} ({url})")


class NetworkError(SplitFetchError):
    """Raised when a range fetch fails at the transport or HTTP level."""

    def __init__(self, message: str, *, part_index: int) -> None:
        self.part_index = part_index
        super().__init__(f"part {part_index}: {message}")


class FilesystemError(SplitFetchError):
    """Raised when a partial, checkpoint or final file cannot be accessed."""

    def __init__(self, message: str, *, path: Path) -> None:
        self.path = path
        super().__init__(f"{message}: {path}")


class SerializationError(SplitFetchError):
    """Raised when the checkpoint cannot be encoded or decoded."""

    pass


class CheckpointCorruptError(SerializationError):
    """Raised when an existing checkpoint is unreadable or inconsistent.

    Resuming never falls back to a fresh split on corruption, since that
    would silently discard partial progress.
    """

    def __init__(self, message: str, *, path: Path) -> None:
        self.path = path
        super().__init__(f"Corrupt checkpoint {path}: {message}")
