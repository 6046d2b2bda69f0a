"""Job-level domain models: configuration, probed metadata and outcome."""

import enum
import typing as t
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from ..config.settings import DEFAULT_CHUNK_SIZE, MAX_WORKERS, Settings
from .parts import Part


class JobConfig(BaseModel):
    """Immutable description of one segmented download job.

    Built once per run (normally from CLI input on top of Settings) and
    handed to the Coordinator at construction.
    """

    model_config = ConfigDict(frozen=True)

    resource_url: HttpUrl = Field(description="URL of the resource to fetch")
    save_dir: Path = Field(description="Directory for partial, checkpoint and final files")
    workers: int = Field(
        default=1,
        ge=1,
        le=MAX_WORKERS,
        description="Requested number of concurrent range workers",
    )
    resume: bool = Field(
        default=True, description="Continue from an existing checkpoint if present"
    )
    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        gt=0,
        description="Bytes read per increment between cancellation checks",
    )

    @property
    def url(self) -> str:
        return str(self.resource_url)

    @classmethod
    def from_settings(
        cls, resource_url: str, settings: Settings, **overrides: t.Any
    ) -> "JobConfig":
        """Create a job config from settings defaults plus non-None overrides."""
        values: dict[str, t.Any] = {
            "resource_url": resource_url,
            "save_dir": settings.save_dir,
            "workers": settings.workers,
            "resume": settings.resume,
            "chunk_size": settings.chunk_size,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class ResourceMetadata(BaseModel):
    """What a metadata probe learned about the remote resource."""

    model_config = ConfigDict(frozen=True)

    total_size: int = Field(ge=0, description="Resource length in bytes")
    supports_ranges: bool = Field(description="Server advertises byte ranges")
    filename: str = Field(min_length=1, description="Resolved local filename")


class JobOutcome(enum.StrEnum):
    """How a coordination cycle ended."""

    COMPLETED = "completed"
    INTERRUPTED = "interrupted"


class JobResult(BaseModel):
    """Result of one Coordinator run."""

    outcome: JobOutcome
    output_path: Path
    parts: list[Part] = Field(default_factory=list)

    @property
    def bytes_read(self) -> int:
        return sum(part.read_length for part in self.parts)

    @property
    def total_bytes(self) -> int:
        return sum(part.size for part in self.parts)
