"""Events emitted by PartWorker while fetching a byte range."""

from pydantic import Field

from .base_event import BaseEvent


class PartEvent(BaseEvent):
    """Base class for part lifecycle events.

    All part events carry the part index and the byte range it covers, so
    observers can attribute progress without holding the Part itself.
    """

    event_type: str = Field(default="part.base", description="Event type identifier")
    index: int = Field(ge=0, description="Index of the part")
    url: str = Field(description="URL of the resource being fetched")
    size: int = Field(ge=0, description="Total bytes covered by the part")


class PartStartedEvent(PartEvent):
    """Emitted when a worker sends the range request for its part."""

    event_type: str = Field(default="part.started")
    offset: int = Field(ge=0, description="First byte requested")
    read_length: int = Field(
        default=0, ge=0, description="Bytes already on disk before this request"
    )


class PartProgressEvent(PartEvent):
    """Emitted after each increment has been written and flushed."""

    event_type: str = Field(default="part.progress")
    chunk_size: int = Field(default=0, ge=0, description="Bytes in this increment")
    read_length: int = Field(default=0, ge=0, description="Bytes written so far")


class PartCompletedEvent(PartEvent):
    """Emitted when every byte of the part is on disk.

    `skipped` is set when the part was already complete and no request
    was made.
    """

    event_type: str = Field(default="part.completed")
    partial_path: str = Field(default="", description="Path of the partial file")
    skipped: bool = Field(default=False, description="Completed by an earlier run")


class PartInterruptedEvent(PartEvent):
    """Emitted when a worker stops before its part is complete."""

    event_type: str = Field(default="part.interrupted")
    read_length: int = Field(default=0, ge=0, description="Bytes kept on disk")
    reason: str = Field(default="", description="Why the worker stopped")


class PartFailedEvent(PartEvent):
    """Emitted when fetching the part raised an error."""

    event_type: str = Field(default="part.failed")
    error_message: str = Field(default="", description="Error message")
    error_type: str = Field(default="", description="Exception type name")
