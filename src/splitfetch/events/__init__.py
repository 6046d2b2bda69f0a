"""Event infrastructure - event emitter and event types."""

from .base import BaseEmitter, EventHandler
from .base_event import BaseEvent
from .emitter import EventEmitter
from .job_events import (
    CheckpointSavedEvent,
    JobCompletedEvent,
    JobEvent,
    JobInterruptedEvent,
    JobStartedEvent,
)
from .null import NullEmitter
from .part_events import (
    PartCompletedEvent,
    PartEvent,
    PartFailedEvent,
    PartInterruptedEvent,
    PartProgressEvent,
    PartStartedEvent,
)

__all__ = [
    # Base and implementations
    "BaseEmitter",
    "BaseEvent",
    "EventEmitter",
    "EventHandler",
    "NullEmitter",
    # Part events
    "PartEvent",
    "PartStartedEvent",
    "PartProgressEvent",
    "PartCompletedEvent",
    "PartInterruptedEvent",
    "PartFailedEvent",
    # Job events
    "JobEvent",
    "JobStartedEvent",
    "CheckpointSavedEvent",
    "JobCompletedEvent",
    "JobInterruptedEvent",
]
