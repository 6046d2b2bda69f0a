"""Merge partial files into the final file and clean up transients."""

import typing as t

import aiofiles
import aiofiles.os
from aiofiles.threadpool.binary import AsyncBufferedIOBase

from ..domain.exceptions import CheckpointCorruptError, FilesystemError
from ..domain.parts import Part
from ..infrastructure.logging import get_logger
from .checkpoint import CheckpointStore
from .paths import JobPaths

if t.TYPE_CHECKING:
    import loguru

_COPY_BUFFER_SIZE = 1024 * 1024


class PartAssembler:
    """Concatenates partial files in index order and removes leftovers.

    merge() and clean() are separate steps so that cleanup only ever runs
    after a merge that returned normally. A failed merge leaves every
    partial file and the checkpoint in place.
    """

    def __init__(
        self,
        checkpoint_store: CheckpointStore | None = None,
        logger: "loguru.Logger" = get_logger(__name__),
        copy_buffer_size: int = _COPY_BUFFER_SIZE,
    ) -> None:
        self.logger = logger
        self._checkpoint_store = checkpoint_store or CheckpointStore(logger)
        self._copy_buffer_size = copy_buffer_size

    async def merge(self, paths: JobPaths, parts: t.Sequence[Part]) -> None:
        """Write the final file as the byte-exact concatenation of all parts.

        Parts are processed in ascending index order regardless of the order
        given. Zero-length parts own no partial file and are skipped.

        Raises:
            FilesystemError: If the final file or any partial file cannot be
                opened, read or written, or a partial file's size differs
                from its part's size.
        """
        output_path = paths.output_path
        ordered = sorted(parts, key=lambda part: part.index)
        try:
            async with aiofiles.open(output_path, "wb") as output:
                for part in ordered:
                    if part.size == 0:
                        continue
                    await self._append_part(output, paths, part)
        except OSError as exc:
            raise FilesystemError(
                f"Cannot write output file ({exc})", path=output_path
            ) from exc

        self.logger.debug(f"Merged {len(ordered)} parts into {output_path}")

    async def _append_part(
        self, output: AsyncBufferedIOBase, paths: JobPaths, part: Part
    ) -> None:
        partial_path = paths.part_path(part.index)
        try:
            on_disk = (await aiofiles.os.stat(partial_path)).st_size
            if on_disk != part.size:
                raise FilesystemError(
                    f"Partial file for part {part.index} holds {on_disk} bytes, "
                    f"expected {part.size}",
                    path=partial_path,
                )
            async with aiofiles.open(partial_path, "rb") as source:
                while chunk := await source.read(self._copy_buffer_size):
                    await output.write(chunk)
        except OSError as exc:
            raise FilesystemError(
                f"Cannot merge part {part.index} ({exc})", path=partial_path
            ) from exc

    async def reconcile_partials(
        self, paths: JobPaths, parts: t.Sequence[Part]
    ) -> None:
        """Bring each partial file back in line with its checkpointed read_length.

        A cycle that aborted after some workers had flushed bytes leaves
        partial files longer than the checkpoint records. Those extra bytes
        are truncated away so the next fetch appends at the right offset.

        Raises:
            CheckpointCorruptError: If a partial file is missing or shorter
                than the checkpoint claims.
            FilesystemError: If a partial file cannot be inspected or truncated.
        """
        for part in parts:
            partial_path = paths.part_path(part.index)
            try:
                on_disk = (await aiofiles.os.stat(partial_path)).st_size
            except FileNotFoundError:
                on_disk = 0
            except OSError as exc:
                raise FilesystemError(
                    f"Cannot inspect partial file ({exc})", path=partial_path
                ) from exc

            if on_disk < part.read_length:
                raise CheckpointCorruptError(
                    f"part {part.index} records {part.read_length} bytes but "
                    f"{partial_path.name} holds {on_disk}",
                    path=paths.checkpoint_path,
                )
            if on_disk == part.read_length:
                continue

            self.logger.warning(
                f"Truncating {partial_path.name} from {on_disk} to "
                f"{part.read_length} bytes"
            )
            try:
                async with aiofiles.open(partial_path, "r+b") as handle:
                    await handle.truncate(part.read_length)
            except OSError as exc:
                raise FilesystemError(
                    f"Cannot truncate partial file ({exc})", path=partial_path
                ) from exc

    async def clean(self, paths: JobPaths, parts: t.Sequence[Part]) -> None:
        """Remove every partial file, then the checkpoint.

        Raises:
            FilesystemError: If an existing file cannot be removed.
        """
        await self.discard_partials(paths, parts)
        await self._checkpoint_store.remove(paths.checkpoint_path)
        self.logger.debug(f"Cleaned transient files for {paths.filename}")

    async def discard_partials(self, paths: JobPaths, parts: t.Sequence[Part]) -> None:
        """Remove the partial files of parts, ignoring ones that do not exist.

        Raises:
            FilesystemError: If an existing partial file cannot be removed.
        """
        for part in parts:
            partial_path = paths.part_path(part.index)
            try:
                await aiofiles.os.remove(partial_path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise FilesystemError(
                    f"Cannot remove partial file ({exc})", path=partial_path
                ) from exc
