"""Base model shared by every event."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class BaseEvent(BaseModel):
    """Fields common to every event: when it happened and what it is."""

    event_type: str = Field(default="base", description="Event type identifier")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event was created (UTC)",
    )
