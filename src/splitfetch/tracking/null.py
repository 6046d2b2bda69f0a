"""Tracker that records nothing."""

from ..domain.progress import JobProgress, PartProgress
from .base import BaseTracker


class NullTracker(BaseTracker):
    """Null object tracker for callers that do not want progress state."""

    def get_part_info(self, index: int) -> PartProgress | None:
        return None

    def get_progress(self) -> JobProgress:
        return JobProgress(
            parts=0, completed=0, interrupted=0, failed=0, read_bytes=0, total_bytes=0
        )

    async def track_started(self, index: int, size: int, read_length: int) -> None:
        pass

    async def track_progress(self, index: int, read_length: int) -> None:
        pass

    async def track_completed(self, index: int, size: int) -> None:
        pass

    async def track_interrupted(
        self, index: int, size: int, read_length: int
    ) -> None:
        pass

    async def track_failed(self, index: int, error: Exception) -> None:
        pass
