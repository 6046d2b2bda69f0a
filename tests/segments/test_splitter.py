"""Tests for splitting a resource into parts and checking part sets."""

import pytest

from splitfetch.domain.parts import Part
from splitfetch.segments import check_partition, split_parts


def _bounds(parts):
    return [(part.start, part.end) for part in parts]


class TestSplitParts:
    def test_even_split(self):
        parts = split_parts(1000, 4, "a.bin")

        assert _bounds(parts) == [(0, 249), (250, 499), (500, 749), (750, 999)]
        assert [part.index for part in parts] == [0, 1, 2, 3]
        assert all(part.read_length == 0 for part in parts)
        assert all(part.filename == "a.bin" for part in parts)

    def test_remainder_goes_to_last_part(self):
        parts = split_parts(1001, 4, "a.bin")

        assert _bounds(parts) == [(0, 249), (250, 499), (500, 749), (750, 1000)]
        assert parts[-1].size == 251

    def test_last_part_absorbs_remainder(self):
        parts = split_parts(10, 3, "a.bin")

        assert _bounds(parts) == [(0, 2), (3, 5), (6, 9)]
        assert parts[-1].size == 4

    def test_single_worker_covers_everything(self):
        parts = split_parts(1000, 1, "a.bin")
        assert _bounds(parts) == [(0, 999)]

    def test_fewer_bytes_than_workers(self):
        parts = split_parts(2, 4, "a.bin")

        assert [part.size for part in parts] == [0, 0, 0, 2]
        assert parts[-1].start == 0
        assert parts[-1].end == 1
        assert all(part.completed for part in parts[:-1])

    def test_empty_resource(self):
        parts = split_parts(0, 1, "a.bin")

        assert len(parts) == 1
        assert parts[0].size == 0
        assert parts[0].completed is True

    @pytest.mark.parametrize(
        "total_size, workers", [(1, 1), (7, 2), (999, 8), (1000, 100), (12345, 7)]
    )
    def test_split_is_a_partition(self, total_size, workers):
        parts = split_parts(total_size, workers, "a.bin")

        assert len(parts) == workers
        assert sum(part.size for part in parts) == total_size
        check_partition(parts, total_size)
        base = total_size // workers
        assert all(part.size == base for part in parts[:-1])
        assert base <= parts[-1].size < base + workers

    def test_rejects_zero_workers(self):
        with pytest.raises(ValueError, match="worker_count"):
            split_parts(100, 0, "a.bin")

    def test_rejects_negative_size(self):
        with pytest.raises(ValueError, match="total_size"):
            split_parts(-1, 2, "a.bin")


class TestCheckPartition:
    def test_empty_set_rejected(self):
        with pytest.raises(ValueError, match="empty"):
            check_partition([], 0)

    def test_sparse_indexes_rejected(self):
        parts = [
            Part(index=0, start=0, end=4, filename="a.bin"),
            Part(index=2, start=5, end=9, filename="a.bin"),
        ]
        with pytest.raises(ValueError, match="dense"):
            check_partition(parts, 10)

    def test_gap_rejected(self):
        parts = [
            Part(index=0, start=0, end=4, filename="a.bin"),
            Part(index=1, start=6, end=9, filename="a.bin"),
        ]
        with pytest.raises(ValueError, match="starts at 6"):
            check_partition(parts, 10)

    def test_coverage_mismatch_rejected(self):
        parts = split_parts(1000, 4, "a.bin")
        with pytest.raises(ValueError, match="cover 1000 bytes"):
            check_partition(parts, 2000)

    def test_mixed_filenames_rejected(self):
        parts = [
            Part(index=0, start=0, end=4, filename="a.bin"),
            Part(index=1, start=5, end=9, filename="b.bin"),
        ]
        with pytest.raises(ValueError, match="filename"):
            check_partition(parts, 10)

    def test_order_of_input_is_irrelevant(self):
        parts = list(reversed(split_parts(1000, 4, "a.bin")))
        check_partition(parts, 1000)
