"""Base interface for part workers."""

from abc import ABC, abstractmethod
from pathlib import Path

from ...domain.cancellation import CancellationToken
from ...domain.parts import Part, PartReport
from ...events import BaseEmitter


class BasePartWorker(ABC):
    """Abstract base class for workers that fetch one part of a resource.

    A worker exclusively owns the Part it is given for the duration of
    fetch(): it is the only writer of the part's read_length and of its
    partial file.
    """

    @property
    @abstractmethod
    def emitter(self) -> BaseEmitter:
        """Event emitter for broadcasting part events.

        The coordinator wires events from this emitter to its tracker.
        """
        pass

    @abstractmethod
    async def fetch(
        self,
        url: str,
        part: Part,
        partial_path: Path,
        cancel_token: CancellationToken,
        *,
        chunk_size: int,
    ) -> PartReport:
        """Fetch the unread tail of part into partial_path.

        Returns:
            A report with status COMPLETED or INTERRUPTED.

        Raises:
            NetworkError: On transport or HTTP failures.
            FilesystemError: If the partial file cannot be written.
        """
        pass
