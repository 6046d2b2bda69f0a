"""Abstract base class for part trackers.

Trackers are observers that store part state. They do NOT emit events.
Events are emitted by part workers using the part.* namespace and wired
onto tracker methods by the coordinator.
"""

from abc import ABC, abstractmethod

from ..domain.progress import JobProgress, PartProgress


class BaseTracker(ABC):
    """Abstract base class for part trackers."""

    @abstractmethod
    def get_part_info(self, index: int) -> PartProgress | None:
        """Get current state of a part, or None if it was never tracked."""
        pass

    @abstractmethod
    def get_progress(self) -> JobProgress:
        """Aggregate state across all tracked parts."""
        pass

    @abstractmethod
    async def track_started(self, index: int, size: int, read_length: int) -> None:
        """Track a part's range request being sent."""
        pass

    @abstractmethod
    async def track_progress(self, index: int, read_length: int) -> None:
        """Track bytes flushed for a part."""
        pass

    @abstractmethod
    async def track_completed(self, index: int, size: int) -> None:
        """Track a part having every byte on disk."""
        pass

    @abstractmethod
    async def track_interrupted(
        self, index: int, size: int, read_length: int
    ) -> None:
        """Track a part stopping before completion."""
        pass

    @abstractmethod
    async def track_failed(self, index: int, error: Exception) -> None:
        """Track a part failing with an error."""
        pass
