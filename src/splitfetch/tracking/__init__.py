"""Part progress tracking."""

from .base import BaseTracker
from .null import NullTracker
from .tracker import PartTracker

__all__ = ["BaseTracker", "NullTracker", "PartTracker"]
