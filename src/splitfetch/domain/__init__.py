"""Domain models and exceptions."""

from .cancellation import CancellationToken
from .exceptions import (
    CheckpointCorruptError,
    CoordinatorNotInitializedError,
    FilesystemError,
    MetadataError,
    NetworkError,
    SerializationError,
    SplitFetchError,
)
from .job import JobConfig, JobOutcome, JobResult, ResourceMetadata
from .parts import Part, PartReport, PartStatus

__all__ = [
    "CancellationToken",
    # Jobs
    "JobConfig",
    "JobOutcome",
    "JobResult",
    "ResourceMetadata",
    # Parts
    "Part",
    "PartReport",
    "PartStatus",
    # Errors
    "SplitFetchError",
    "CoordinatorNotInitializedError",
    "MetadataError",
    "NetworkError",
    "FilesystemError",
    "SerializationError",
    "CheckpointCorruptError",
]
