"""Part domain models: byte ranges of a resource and their fetch progress."""

import enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PartStatus(enum.StrEnum):
    """Part lifecycle states.

    Flow: PENDING -> FETCHING -> (COMPLETED | INTERRUPTED | FAILED)
    """

    PENDING = "pending"
    FETCHING = "fetching"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"
    FAILED = "failed"


class Part(BaseModel):
    """One contiguous, inclusive byte range of the resource.

    Field aliases match the checkpoint's record keys. A zero-length part
    (end == start - 1) is legal and is completed from the moment it exists.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    index: int = Field(alias="Index", ge=0, description="Order and file suffix")
    start: int = Field(alias="Start", ge=0, description="First byte offset")
    end: int = Field(alias="End", ge=-1, description="Last byte offset, inclusive")
    read_length: int = Field(
        default=0,
        alias="ReadLength",
        ge=0,
        description="Bytes durably written to the partial file",
    )
    filename: str = Field(
        alias="Filename", min_length=1, description="Name of the whole resource"
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> "Part":
        if self.end < self.start - 1:
            raise ValueError(f"end {self.end} precedes start {self.start}")
        if self.read_length > self.size:
            raise ValueError(
                f"read_length {self.read_length} exceeds part size {self.size}"
            )
        return self

    @property
    def size(self) -> int:
        return self.end - self.start + 1

    @property
    def completed(self) -> bool:
        return self.read_length == self.size

    @property
    def next_offset(self) -> int:
        """First byte offset not yet written for this part."""
        return self.start + self.read_length

    @property
    def remaining(self) -> int:
        return self.size - self.read_length

    def range_header(self) -> str:
        """Value of the Range header requesting the unread tail of the part."""
        return f"bytes={self.next_offset}-{self.end}"


class PartReport(BaseModel):
    """Terminal report a worker hands back to the coordinator."""

    part: Part
    status: PartStatus
