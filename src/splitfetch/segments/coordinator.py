"""Coordinator for one segmented download job.

This module provides the Coordinator class which probes the resource,
decides between a fresh split and a checkpoint resume, runs one PartWorker
per part, persists the checkpoint and assembles the final file.
"""

import asyncio
import ssl
import typing as t

import aiofiles.os
import aiohttp
import certifi

from ..domain.cancellation import CancellationToken
from ..domain.exceptions import (
    CheckpointCorruptError,
    CoordinatorNotInitializedError,
    FilesystemError,
)
from ..domain.job import JobConfig, JobOutcome, JobResult, ResourceMetadata
from ..domain.parts import Part, PartReport
from ..events import (
    BaseEmitter,
    CheckpointSavedEvent,
    EventEmitter,
    EventHandler,
    JobCompletedEvent,
    JobInterruptedEvent,
    JobStartedEvent,
)
from ..infrastructure.logging import get_logger
from ..tracking.base import BaseTracker
from ..tracking.tracker import PartTracker
from .assembler import PartAssembler
from .checkpoint import CheckpointStore
from .paths import JobPaths
from .probe import RangeProber
from .splitter import check_partition, split_parts
from .worker.factory import PartWorkerFactory
from .worker.worker import PartWorker

if t.TYPE_CHECKING:
    import loguru


def _create_event_wiring(tracker: BaseTracker) -> dict[str, EventHandler]:
    """Create event wiring mapping from part events to tracker methods."""

    return {
        "part.started": lambda e: tracker.track_started(
            e.index, e.size, e.read_length
        ),
        "part.progress": lambda e: tracker.track_progress(e.index, e.read_length),
        "part.completed": lambda e: tracker.track_completed(e.index, e.size),
        "part.interrupted": lambda e: tracker.track_interrupted(
            e.index, e.size, e.read_length
        ),
        "part.failed": lambda e: tracker.track_failed(
            e.index, Exception(f"{e.error_type}: {e.error_message}")
        ),
    }


class Coordinator:
    """Runs one coordination cycle of a segmented download.

    A cycle launches a worker task for every part before awaiting any of
    them, then drains terminal reports until every part has reported. Only
    then is the checkpoint saved, so it always reflects a consistent,
    fully drained state. If every part is complete the partial files are
    merged in index order and all transient files are removed; otherwise
    the cycle ends INTERRUPTED and a later run resumes from the checkpoint.

    Key responsibilities:
    - HTTP session lifecycle management
    - Fresh split vs. checkpoint resume
    - Cooperative interruption through a shared CancellationToken
    - Whole-job abort on the first worker failure

    Usage:
        config = JobConfig(resource_url=url, save_dir=Path("./downloads"))
        async with Coordinator(config) as coordinator:
            result = await coordinator.run()

    Interruption:
        coordinator.request_cancel()  # e.g. from a signal handler
    """

    def __init__(
        self,
        config: JobConfig,
        client: aiohttp.ClientSession | None = None,
        worker_factory: PartWorkerFactory | None = None,
        tracker: BaseTracker | None = None,
        emitter: BaseEmitter | None = None,
        prober: RangeProber | None = None,
        checkpoint_store: CheckpointStore | None = None,
        assembler: PartAssembler | None = None,
        cancel_token: CancellationToken | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
    ) -> None:
        """Initialise the coordinator.

        Args:
            config: Immutable job configuration.
            client: HTTP session. If None, one is created on context entry.
            worker_factory: Factory for part workers. Defaults to PartWorker.
            tracker: Tracker receiving part events. If None, a PartTracker is
                    created. Pass NullTracker() to disable tracking.
            emitter: Emitter shared by the coordinator and its workers.
            prober: Metadata prober. Defaults to a RangeProber on the client.
            checkpoint_store: Checkpoint persistence. Defaults to CheckpointStore.
            assembler: Merger/cleaner. Defaults to PartAssembler.
            cancel_token: Token shared with workers. If None, one is created;
                    request_cancel() sets whichever token is in use.
            logger: Logger instance for recording job events.
        """
        self.config = config
        self._client = client
        self._owns_client = False
        self._worker_factory = worker_factory or PartWorker
        self._logger = logger
        self._tracker = (
            tracker if tracker is not None else PartTracker(logger=logger)
        )
        self._emitter = emitter or EventEmitter(logger)
        self._prober = prober
        self._checkpoint_store = checkpoint_store or CheckpointStore(logger=logger)
        self._assembler = assembler or PartAssembler(
            checkpoint_store=self._checkpoint_store, logger=logger
        )
        self._cancel_token = cancel_token or CancellationToken()

        for event_type, handler in _create_event_wiring(self._tracker).items():
            self._emitter.on(event_type, handler)

    @property
    def tracker(self) -> BaseTracker:
        """Tracker holding per-part progress of the current cycle."""
        return self._tracker

    @property
    def emitter(self) -> BaseEmitter:
        """Emitter carrying part.* and job.* events."""
        return self._emitter

    @property
    def cancel_token(self) -> CancellationToken:
        return self._cancel_token

    @property
    def client(self) -> aiohttp.ClientSession:
        """Get the HTTP client session.

        Raises:
            CoordinatorNotInitializedError: If accessed before entering the
                context manager without an injected client.
        """
        if self._client is None:
            raise CoordinatorNotInitializedError(
                "Coordinator must be used as a context manager or "
                "initialized with a client"
            )
        return self._client

    async def __aenter__(self) -> "Coordinator":
        await self.open()
        return self

    async def __aexit__(self, *args: t.Any) -> None:
        await self.close()

    async def open(self) -> None:
        """Create the HTTP session if none was injected."""
        if self._client is None:
            # certifi's bundle gives portable certificate verification
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            connector = aiohttp.TCPConnector(ssl=ssl_context)
            # Reads block until data arrives or the job is interrupted.
            timeout = aiohttp.ClientTimeout(
                total=None, connect=None, sock_connect=None, sock_read=None
            )
            self._client = aiohttp.ClientSession(connector=connector, timeout=timeout)
            self._owns_client = True

    async def close(self) -> None:
        """Close the HTTP session if this coordinator created it. Idempotent."""
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None
            self._owns_client = False

    def request_cancel(self) -> None:
        """Ask every worker to stop at its next increment boundary.

        Safe to call from a signal handler running on the event loop, and
        safe to call more than once.
        """
        self._cancel_token.cancel()

    async def run(self) -> JobResult:
        """Run one coordination cycle.

        Returns:
            JobResult with outcome COMPLETED (final file assembled, transient
            files removed) or INTERRUPTED (checkpoint and partial files kept).

        Raises:
            MetadataError: If the probe fails.
            CheckpointCorruptError: If resuming from an unusable checkpoint.
            NetworkError: If any part fails to fetch.
            FilesystemError: If any file operation fails.
            SerializationError: If the checkpoint cannot be encoded.
        """
        url = self.config.url
        await self._ensure_save_dir()

        prober = self._prober or RangeProber(self.client, logger=self._logger)
        metadata = await prober.probe(url)
        paths = JobPaths(self.config.save_dir, metadata.filename)

        parts, resumed = await self._prepare_parts(metadata, paths)
        await self._emitter.emit(
            "job.started",
            JobStartedEvent(
                url=url,
                filename=metadata.filename,
                total_bytes=metadata.total_size,
                part_count=len(parts),
                resumed=resumed,
                read_bytes=sum(part.read_length for part in parts),
            ),
        )

        reports = await self._run_workers(parts, paths)
        parts = sorted((report.part for report in reports), key=lambda p: p.index)

        await self._checkpoint_store.save(paths.checkpoint_path, parts)
        await self._emitter.emit(
            "job.checkpoint_saved",
            CheckpointSavedEvent(
                url=url,
                filename=metadata.filename,
                checkpoint_path=str(paths.checkpoint_path),
            ),
        )

        if not all(part.completed for part in parts):
            return await self._finish_interrupted(metadata, paths, parts)

        await self._assembler.merge(paths, parts)
        await self._assembler.clean(paths, parts)

        self._logger.info(
            f"Downloaded {metadata.total_size} bytes to {paths.output_path}"
        )
        await self._emitter.emit(
            "job.completed",
            JobCompletedEvent(
                url=url,
                filename=metadata.filename,
                output_path=str(paths.output_path),
                total_bytes=metadata.total_size,
            ),
        )
        return JobResult(
            outcome=JobOutcome.COMPLETED, output_path=paths.output_path, parts=parts
        )

    async def _ensure_save_dir(self) -> None:
        save_dir = self.config.save_dir
        try:
            await aiofiles.os.makedirs(save_dir, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(
                f"Cannot create save directory ({exc})", path=save_dir
            ) from exc

    async def _prepare_parts(
        self, metadata: ResourceMetadata, paths: JobPaths
    ) -> tuple[list[Part], bool]:
        """Load parts from the checkpoint or compute a fresh split.

        Returns:
            (parts, resumed)
        """
        workers = self.config.workers
        if not metadata.supports_ranges and workers > 1:
            self._logger.warning(
                "Range requests are not supported, falling back to 1 worker"
            )
            workers = 1

        checkpoint_path = paths.checkpoint_path
        if self.config.resume and await self._checkpoint_store.exists(checkpoint_path):
            parts = await self._checkpoint_store.load(checkpoint_path)
            try:
                check_partition(parts, metadata.total_size)
            except ValueError as exc:
                raise CheckpointCorruptError(
                    f"does not match the remote resource ({exc})", path=checkpoint_path
                ) from exc
            await self._assembler.reconcile_partials(paths, parts)

            read_bytes = sum(part.read_length for part in parts)
            self._logger.info(
                f"Resuming {metadata.filename} from checkpoint: "
                f"{read_bytes}/{metadata.total_size} bytes on disk"
            )
            return parts, True

        parts = split_parts(metadata.total_size, workers, metadata.filename)
        # Partial files are appended to, so leftovers from an abandoned run
        # would corrupt a fresh split.
        await self._assembler.discard_partials(paths, parts)
        self._logger.info(
            f"Downloading {metadata.filename} ({metadata.total_size} bytes) "
            f"with {len(parts)} part(s)"
        )
        return parts, False

    async def _run_workers(
        self, parts: list[Part], paths: JobPaths
    ) -> list[PartReport]:
        """Launch every part worker, then drain one report per part.

        An interruption request does not stop draining; workers observe the
        token themselves and report INTERRUPTED. The first worker failure
        cancels the remaining tasks and propagates.
        """
        pending = {
            asyncio.create_task(
                self._fetch_part(part, paths), name=f"part-{part.index}"
            )
            for part in parts
        }
        cancel_watch = asyncio.create_task(self._cancel_token.wait())
        reports: list[PartReport] = []
        interrupt_logged = False

        try:
            while pending:
                waiting = pending if cancel_watch.done() else pending | {cancel_watch}
                done, _ = await asyncio.wait(
                    waiting, return_when=asyncio.FIRST_COMPLETED
                )
                if cancel_watch in done and not interrupt_logged:
                    self._logger.info(
                        f"Interruption requested, waiting for {len(pending)} "
                        "part(s) to stop"
                    )
                    interrupt_logged = True

                for task in done - {cancel_watch}:
                    pending.discard(task)
                    # Re-raises the worker's exception, aborting the job.
                    reports.append(task.result())
        finally:
            cancel_watch.cancel()
            await self._abort(pending)

        return reports

    async def _fetch_part(self, part: Part, paths: JobPaths) -> PartReport:
        worker = self._worker_factory(self.client, self._logger, self._emitter)
        return await worker.fetch(
            self.config.url,
            part,
            paths.part_path(part.index),
            self._cancel_token,
            chunk_size=self.config.chunk_size,
        )

    async def _abort(self, tasks: set[asyncio.Task[PartReport]]) -> None:
        """Cancel unfinished worker tasks and wait for them to unwind."""
        if not tasks:
            return
        self._logger.debug(f"Aborting {len(tasks)} unfinished part(s)")
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _finish_interrupted(
        self, metadata: ResourceMetadata, paths: JobPaths, parts: list[Part]
    ) -> JobResult:
        read_bytes = sum(part.read_length for part in parts)
        self._logger.info(
            f"Interrupted at {read_bytes}/{metadata.total_size} bytes, "
            f"checkpoint kept at {paths.checkpoint_path}"
        )
        await self._emitter.emit(
            "job.interrupted",
            JobInterruptedEvent(
                url=self.config.url,
                filename=metadata.filename,
                read_bytes=read_bytes,
                total_bytes=metadata.total_size,
            ),
        )
        return JobResult(
            outcome=JobOutcome.INTERRUPTED, output_path=paths.output_path, parts=parts
        )
