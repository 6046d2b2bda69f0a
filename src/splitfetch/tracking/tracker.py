"""In-memory tracker of part progress."""

import asyncio
import typing as t
from collections import Counter

from ..domain.parts import PartStatus
from ..domain.progress import JobProgress, PartProgress
from ..infrastructure.logging import get_logger
from .base import BaseTracker

if t.TYPE_CHECKING:
    import loguru


class PartTracker(BaseTracker):
    """Stores PartProgress per part index.

    Updates are serialised with an asyncio lock since every worker task
    reports into the same tracker.

    Usage:
        tracker = PartTracker()
        await tracker.track_started(0, size=250, read_length=0)
        await tracker.track_progress(0, read_length=100)

        info = tracker.get_part_info(0)
        print(f"Status: {info.status}, Progress: {info.get_progress()}")
    """

    def __init__(self, logger: "loguru.Logger" = get_logger(__name__)) -> None:
        self._parts: dict[int, PartProgress] = {}
        self._lock = asyncio.Lock()
        self._logger = logger

    def get_part_info(self, index: int) -> PartProgress | None:
        return self._parts.get(index)

    def get_all_parts(self) -> list[PartProgress]:
        """Snapshot of tracked parts ordered by index."""
        return [self._parts[index] for index in sorted(self._parts)]

    def get_progress(self) -> JobProgress:
        statuses = Counter(info.status for info in self._parts.values())
        return JobProgress(
            parts=len(self._parts),
            completed=statuses[PartStatus.COMPLETED],
            interrupted=statuses[PartStatus.INTERRUPTED],
            failed=statuses[PartStatus.FAILED],
            read_bytes=sum(info.read_length for info in self._parts.values()),
            total_bytes=sum(info.size for info in self._parts.values()),
        )

    def _get_or_create(self, index: int) -> PartProgress:
        if index not in self._parts:
            self._parts[index] = PartProgress(index=index)
        return self._parts[index]

    async def track_started(self, index: int, size: int, read_length: int) -> None:
        async with self._lock:
            info = self._get_or_create(index)
            info.status = PartStatus.FETCHING
            info.size = size
            info.read_length = read_length

    async def track_progress(self, index: int, read_length: int) -> None:
        async with self._lock:
            info = self._get_or_create(index)
            info.read_length = read_length

    async def track_completed(self, index: int, size: int) -> None:
        async with self._lock:
            info = self._get_or_create(index)
            info.status = PartStatus.COMPLETED
            info.size = size
            info.read_length = size
        self._logger.debug(f"Part {index} tracked as completed")

    async def track_interrupted(
        self, index: int, size: int, read_length: int
    ) -> None:
        async with self._lock:
            info = self._get_or_create(index)
            info.status = PartStatus.INTERRUPTED
            info.size = size
            info.read_length = read_length

    async def track_failed(self, index: int, error: Exception) -> None:
        async with self._lock:
            info = self._get_or_create(index)
            info.status = PartStatus.FAILED
            info.error = str(error)
        self._logger.debug(f"Part {index} tracked as failed: {error}")
