"""Partitioning of a resource into contiguous byte ranges."""

import typing as t

from ..domain.parts import Part


def split_parts(total_size: int, worker_count: int, filename: str) -> list[Part]:
    """Split [0, total_size - 1] into worker_count contiguous parts.

    Every part gets total_size // worker_count bytes and the last part also
    absorbs the remainder, so it can be up to worker_count - 1 bytes larger
    than the others. When total_size < worker_count the leading parts are
    zero-length (end == start - 1).

    Raises:
        ValueError: If worker_count < 1 or total_size < 0.
    """
    if worker_count < 1:
        raise ValueError(f"worker_count must be >= 1, got {worker_count}")
    if total_size < 0:
        raise ValueError(f"total_size must be >= 0, got {total_size}")

    base_size = total_size // worker_count
    parts = []
    for index in range(worker_count):
        start = index * base_size
        end = start + base_size - 1
        if index == worker_count - 1:
            end = total_size - 1
        parts.append(Part(index=index, start=start, end=end, filename=filename))
    return parts


def check_partition(parts: t.Sequence[Part], total_size: int) -> None:
    """Verify that parts form a valid partition of [0, total_size - 1].

    Checks dense indexes, contiguity, exact coverage and a shared filename.
    Per-part bounds (read_length within size) are enforced by Part itself.

    Raises:
        ValueError: Describing the first violation found.
    """
    if not parts:
        raise ValueError("part set is empty")

    ordered = sorted(parts, key=lambda part: part.index)
    indexes = [part.index for part in ordered]
    if indexes != list(range(len(ordered))):
        raise ValueError(f"part indexes are not dense from 0: {indexes}")

    filenames = {part.filename for part in ordered}
    if len(filenames) != 1:
        raise ValueError(f"parts disagree on filename: {sorted(filenames)}")

    expected_start = 0
    for part in ordered:
        # Zero-length parts sit wherever the base size puts them.
        if part.size == 0:
            continue
        if part.start != expected_start:
            raise ValueError(
                f"part {part.index} starts at {part.start}, expected {expected_start}"
            )
        expected_start = part.end + 1

    if expected_start != total_size:
        raise ValueError(
            f"parts cover {expected_start} bytes, resource has {total_size}"
        )
