"""Durable storage of a job's part set.

The checkpoint is a JSON array of part records keyed Index, Start, End,
ReadLength and Filename. It is written only by the coordinator after every
worker of a cycle has reported, so no locking is needed.
"""

import typing as t
from pathlib import Path

import aiofiles
import aiofiles.os
from pydantic import TypeAdapter, ValidationError

from ..domain.exceptions import (
    CheckpointCorruptError,
    FilesystemError,
    SerializationError,
)
from ..domain.parts import Part
from ..infrastructure.logging import get_logger
from .splitter import check_partition

if t.TYPE_CHECKING:
    import loguru

_PARTS_ADAPTER = TypeAdapter(list[Part])


class CheckpointStore:
    """Saves and loads part sets as JSON files."""

    def __init__(self, logger: "loguru.Logger" = get_logger(__name__)) -> None:
        self.logger = logger

    async def exists(self, path: Path) -> bool:
        return await aiofiles.os.path.exists(path)

    async def save(self, path: Path, parts: t.Sequence[Part]) -> None:
        """Persist parts to path, replacing any previous checkpoint.

        The payload is written to a sibling temporary file first and then
        moved over the checkpoint, so readers never see a half-written file.

        Raises:
            SerializationError: If the parts cannot be encoded.
            FilesystemError: If the file cannot be written.
        """
        ordered = sorted(parts, key=lambda part: part.index)
        try:
            payload = _PARTS_ADAPTER.dump_json(ordered, by_alias=True)
        except ValueError as exc:
            raise SerializationError(f"Cannot encode checkpoint: {exc}") from exc

        temp_path = path.with_name(f"{path.name}.tmp")
        try:
            async with aiofiles.open(temp_path, "wb") as file_handle:
                await file_handle.write(payload)
            await aiofiles.os.replace(temp_path, path)
        except OSError as exc:
            raise FilesystemError(f"Cannot write checkpoint ({exc})", path=path) from exc

        self.logger.debug(f"Saved checkpoint with {len(ordered)} parts: {path}")

    async def load(self, path: Path) -> list[Part]:
        """Read and validate the part set stored at path.

        Raises:
            CheckpointCorruptError: If the file cannot be read, is not valid
                JSON, holds invalid records or does not form a partition.
        """
        try:
            async with aiofiles.open(path, "rb") as file_handle:
                data = await file_handle.read()
        except OSError as exc:
            raise CheckpointCorruptError(f"cannot read file ({exc})", path=path) from exc

        try:
            parts = _PARTS_ADAPTER.validate_json(data)
        except ValidationError as exc:
            raise CheckpointCorruptError(
                f"{exc.error_count()} invalid field(s): {exc.errors()[0]['msg']}",
                path=path,
            ) from exc

        try:
            covered = max((part.end + 1 for part in parts), default=0)
            check_partition(parts, covered)
        except ValueError as exc:
            raise CheckpointCorruptError(str(exc), path=path) from exc

        parts.sort(key=lambda part: part.index)
        self.logger.debug(f"Loaded checkpoint with {len(parts)} parts: {path}")
        return parts

    async def remove(self, path: Path) -> None:
        """Delete the checkpoint if present.

        Raises:
            FilesystemError: If an existing checkpoint cannot be removed.
        """
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise FilesystemError(
                f"Cannot remove checkpoint ({exc})", path=path
            ) from exc
        self.logger.debug(f"Removed checkpoint: {path}")
