"""Events emitted by the Coordinator at job milestones."""

from pydantic import Field

from .base_event import BaseEvent


class JobEvent(BaseEvent):
    """Base class for job lifecycle events."""

    event_type: str = Field(default="job.base", description="Event type identifier")
    url: str = Field(description="URL of the resource")
    filename: str = Field(description="Resolved filename of the resource")


class JobStartedEvent(JobEvent):
    """Emitted once parts are known and workers are about to launch."""

    event_type: str = Field(default="job.started")
    total_bytes: int = Field(ge=0, description="Size of the resource")
    part_count: int = Field(ge=1, description="Number of parts in this cycle")
    resumed: bool = Field(default=False, description="Parts came from a checkpoint")
    read_bytes: int = Field(default=0, ge=0, description="Bytes already on disk")


class CheckpointSavedEvent(JobEvent):
    """Emitted after the part set has been persisted."""

    event_type: str = Field(default="job.checkpoint_saved")
    checkpoint_path: str = Field(description="Where the checkpoint was written")


class JobCompletedEvent(JobEvent):
    """Emitted after the final file has been merged and transients removed."""

    event_type: str = Field(default="job.completed")
    output_path: str = Field(description="Path of the assembled file")
    total_bytes: int = Field(ge=0, description="Size of the assembled file")


class JobInterruptedEvent(JobEvent):
    """Emitted when a cycle ends with incomplete parts."""

    event_type: str = Field(default="job.interrupted")
    read_bytes: int = Field(ge=0, description="Bytes on disk across all parts")
    total_bytes: int = Field(ge=0, description="Size of the resource")
