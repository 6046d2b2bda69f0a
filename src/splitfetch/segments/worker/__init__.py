"""Part worker implementations."""

from .base import BasePartWorker
from .factory import PartWorkerFactory
from .worker import PartWorker

__all__ = ["BasePartWorker", "PartWorker", "PartWorkerFactory"]
