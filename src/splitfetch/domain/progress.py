"""Progress state models used by trackers."""

from pydantic import BaseModel, Field

from .parts import PartStatus


class PartProgress(BaseModel):
    """Observed state of one part.

    Contains status, byte counts and the error message if fetching failed.
    """

    index: int = Field(ge=0, description="Index of the part")
    status: PartStatus = Field(
        default=PartStatus.PENDING, description="Current status of the part"
    )
    size: int = Field(default=0, ge=0, description="Bytes covered by the part")
    read_length: int = Field(default=0, ge=0, description="Bytes on disk so far")
    error: str | None = Field(default=None, description="Error message if failed")

    def get_progress(self) -> float:
        """Calculate progress as fraction (0.0 to 1.0)."""
        if self.size == 0:
            return 1.0 if self.status == PartStatus.COMPLETED else 0.0
        return min(self.read_length / self.size, 1.0)

    def is_terminal(self) -> bool:
        """Check if the part reached a terminal state."""
        return self.status in (
            PartStatus.COMPLETED,
            PartStatus.INTERRUPTED,
            PartStatus.FAILED,
        )


class JobProgress(BaseModel):
    """Aggregate progress across all tracked parts."""

    parts: int = Field(ge=0, description="Number of parts tracked")
    completed: int = Field(ge=0, description="Parts fully on disk")
    interrupted: int = Field(ge=0, description="Parts stopped before completion")
    failed: int = Field(ge=0, description="Parts that raised an error")
    read_bytes: int = Field(ge=0, description="Bytes on disk across all parts")
    total_bytes: int = Field(ge=0, description="Bytes covered by all parts")

    def get_progress(self) -> float:
        if self.total_bytes == 0:
            return 0.0
        return min(self.read_bytes / self.total_bytes, 1.0)
