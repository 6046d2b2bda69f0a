"""HTTP range worker that appends one part of a resource to its partial file.

This module provides the PartWorker class which resumes a part from its
recorded read_length, streams the remaining bytes in increments, and stops
cooperatively between increments when cancellation is requested.
"""

import asyncio
import typing as t
from http import HTTPStatus
from pathlib import Path

import aiofiles
import aiohttp
from aiofiles.threadpool.binary import AsyncBufferedIOBase
from aiohttp import hdrs

from ...config.settings import DEFAULT_CHUNK_SIZE
from ...domain.cancellation import CancellationToken
from ...domain.exceptions import FilesystemError, NetworkError
from ...domain.parts import Part, PartReport, PartStatus
from ...events import (
    BaseEmitter,
    EventEmitter,
    PartCompletedEvent,
    PartFailedEvent,
    PartInterruptedEvent,
    PartProgressEvent,
    PartStartedEvent,
)
from ...infrastructure.logging import get_logger
from .base import BasePartWorker

if t.TYPE_CHECKING:
    import loguru


class PartWorker(BasePartWorker):
    """Fetches a single byte range with resume and cooperative cancellation.

    Behaviour per part:
    - A part that is already complete is reported COMPLETED without any
      request being made.
    - Otherwise only bytes [start + read_length, end] are requested and
      appended to the partial file, so repeated runs accumulate correctly.
    - Each increment is written and flushed before read_length grows, so
      read_length never counts bytes that are not on disk.
    - The cancellation token is checked before every increment. A set token
      ends the fetch with an INTERRUPTED report.

    Implementation decisions:
    - Uses dependency injection for client, logger and emitter to enable easy
      testing and configuration
    - Never deletes the partial file: partial bytes are progress to resume
      from, not corruption
    - Translates transport errors into NetworkError and file errors into
      FilesystemError after logging, and never retries
    """

    def __init__(
        self,
        client: aiohttp.ClientSession,
        logger: "loguru.Logger" = get_logger(__name__),
        emitter: BaseEmitter | None = None,
    ) -> None:
        """Initialize the part worker.

        Args:
            client: Configured aiohttp ClientSession for making HTTP requests
            logger: Logger instance for recording part events and errors
            emitter: Event emitter for broadcasting part lifecycle events.
                    If None, a new EventEmitter will be created.
        """
        self.client = client
        self.logger = logger
        self._emitter = emitter or EventEmitter(logger)

    @property
    def emitter(self) -> BaseEmitter:
        """Event emitter for broadcasting part events."""
        return self._emitter

    async def _read_increment(
        self, response: aiohttp.ClientResponse, chunk_size: int
    ) -> bytes:
        """Read up to chunk_size bytes of body. Empty bytes mean end of stream."""
        return await response.content.read(chunk_size)

    async def _write_chunk_to_file(
        self, chunk: bytes, file_handle: AsyncBufferedIOBase
    ) -> None:
        """Append an increment to the partial file and flush it."""
        await file_handle.write(chunk)
        await file_handle.flush()

    def _log_and_categorize_error(
        self, exception: Exception, url: str, part: Part
    ) -> None:
        """Log a part failure with a category matching the exception type."""
        match exception:
            case NetworkError() | FilesystemError():
                error_category = "Failed"
            case aiohttp.ClientConnectorError():
                error_category = "Failed to connect"
            case aiohttp.ClientResponseError():
                error_category = f"HTTP {exception.status} error"
            case aiohttp.ClientPayloadError():
                error_category = "Invalid response payload"
            case aiohttp.ClientError():
                error_category = "Network error"
            case asyncio.TimeoutError():
                error_category = "Timeout"
            case PermissionError():
                error_category = "Permission denied writing partial file"
            case OSError():
                error_category = "File system error"
            case _:
                error_category = "Unexpected error"
                self.logger.debug(
                    f"Uncaught exception of type {type(exception).__name__}: {exception}"
                )

        self.logger.error(
            f"{error_category} fetching part {part.index} of {url}: {exception}"
        )

    def _translate_error(
        self, exception: Exception, part: Part, partial_path: Path
    ) -> Exception:
        """Map library exceptions onto the job's error taxonomy."""
        match exception:
            case NetworkError() | FilesystemError():
                return exception
            case aiohttp.ClientResponseError():
                return NetworkError(
                    f"HTTP {exception.status} for range {part.range_header()}",
                    part_index=part.index,
                )
            case aiohttp.ClientError() | asyncio.TimeoutError():
                return NetworkError(
                    f"{type(exception).__name__}: {exception}", part_index=part.index
                )
            case OSError():
                return FilesystemError(
                    f"Cannot write partial file ({exception})", path=partial_path
                )
            case _:
                return exception

    async def fetch(
        self,
        url: str,
        part: Part,
        partial_path: Path,
        cancel_token: CancellationToken,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> PartReport:
        """Fetch the unread tail of a part into its partial file.

        Args:
            url: HTTP/HTTPS URL of the resource
            part: The part to fetch; its read_length is advanced in place
            partial_path: Partial file for this part, opened in append mode
            cancel_token: Token polled before every increment
            chunk_size: Maximum bytes read and written per increment

        Returns:
            PartReport with status COMPLETED or INTERRUPTED.

        Raises:
            NetworkError: For transport errors, HTTP error statuses, ignored
                range requests and bodies longer than the requested range
            FilesystemError: If the partial file cannot be opened or written
        """
        if part.completed:
            self.logger.debug(f"Part {part.index} already complete, no request made")
            await self.emitter.emit(
                "part.completed",
                PartCompletedEvent(
                    index=part.index,
                    url=url,
                    size=part.size,
                    partial_path=str(partial_path),
                    skipped=True,
                ),
            )
            return PartReport(part=part, status=PartStatus.COMPLETED)

        try:
            return await self._fetch_range(
                url, part, partial_path, cancel_token, chunk_size
            )
        except asyncio.CancelledError:
            # Task cancellation only happens when another part failed; the
            # bytes already flushed stay on disk for a later resume.
            self.logger.debug(
                f"Part {part.index} task cancelled at "
                f"{part.read_length}/{part.size} bytes"
            )
            raise
        except Exception as fetch_error:
            self._log_and_categorize_error(fetch_error, url, part)
            await self.emitter.emit(
                "part.failed",
                PartFailedEvent(
                    index=part.index,
                    url=url,
                    size=part.size,
                    error_message=str(fetch_error),
                    error_type=type(fetch_error).__name__,
                ),
            )
            translated = self._translate_error(fetch_error, part, partial_path)
            if translated is fetch_error:
                raise
            raise translated from fetch_error

    async def _fetch_range(
        self,
        url: str,
        part: Part,
        partial_path: Path,
        cancel_token: CancellationToken,
        chunk_size: int,
    ) -> PartReport:
        if cancel_token.is_cancelled:
            return await self._report_interrupted(url, part, "cancelled before request")

        range_header = part.range_header()
        self.logger.debug(f"Fetching part {part.index}: {range_header} -> {partial_path}")

        async with self.client.get(url, headers={hdrs.RANGE: range_header}) as response:
            response.raise_for_status()
            # A full-body answer is only usable when the tail starts at byte 0;
            # anything else would append the wrong bytes.
            if response.status != HTTPStatus.PARTIAL_CONTENT and part.next_offset != 0:
                raise NetworkError(
                    f"server ignored {range_header} (HTTP {response.status})",
                    part_index=part.index,
                )

            await self.emitter.emit(
                "part.started",
                PartStartedEvent(
                    index=part.index,
                    url=url,
                    size=part.size,
                    offset=part.next_offset,
                    read_length=part.read_length,
                ),
            )

            async with aiofiles.open(partial_path, "ab") as file_handle:
                while True:
                    if cancel_token.is_cancelled:
                        return await self._report_interrupted(url, part, "cancelled")

                    chunk = await self._read_increment(response, chunk_size)
                    if not chunk:
                        break
                    if len(chunk) > part.remaining:
                        # The whole increment is dropped, in-range prefix included.
                        raise NetworkError(
                            f"body exceeds requested range {range_header}",
                            part_index=part.index,
                        )

                    await self._write_chunk_to_file(chunk, file_handle)
                    part.read_length += len(chunk)

                    if self.emitter.has_listeners("part.progress"):
                        await self.emitter.emit(
                            "part.progress",
                            PartProgressEvent(
                                index=part.index,
                                url=url,
                                size=part.size,
                                chunk_size=len(chunk),
                                read_length=part.read_length,
                            ),
                        )

        if not part.completed:
            self.logger.warning(
                f"Stream for part {part.index} ended early at "
                f"{part.read_length}/{part.size} bytes"
            )
            return await self._report_interrupted(url, part, "stream ended early")

        self.logger.debug(f"Part {part.index} completed: {partial_path}")
        await self.emitter.emit(
            "part.completed",
            PartCompletedEvent(
                index=part.index,
                url=url,
                size=part.size,
                partial_path=str(partial_path),
            ),
        )
        return PartReport(part=part, status=PartStatus.COMPLETED)

    async def _report_interrupted(self, url: str, part: Part, reason: str) -> PartReport:
        self.logger.debug(
            f"Part {part.index} interrupted at {part.read_length}/{part.size} "
            f"bytes: {reason}"
        )
        await self.emitter.emit(
            "part.interrupted",
            PartInterruptedEvent(
                index=part.index,
                url=url,
                size=part.size,
                read_length=part.read_length,
                reason=reason,
            ),
        )
        return PartReport(part=part, status=PartStatus.INTERRUPTED)
