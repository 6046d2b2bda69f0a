"""Segmented download pipeline - probe, split, fetch, checkpoint and merge."""

from .assembler import PartAssembler
from .checkpoint import CheckpointStore
from .coordinator import Coordinator
from .paths import JobPaths
from .probe import RangeProber
from .splitter import check_partition, split_parts
from .worker import BasePartWorker, PartWorker, PartWorkerFactory

__all__ = [
    "Coordinator",
    "PartWorker",
    "BasePartWorker",
    "PartWorkerFactory",
    "RangeProber",
    "CheckpointStore",
    "PartAssembler",
    "JobPaths",
    "split_parts",
    "check_partition",
]
