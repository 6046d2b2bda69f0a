"""CLI state container."""

import typing as t

from ..config.settings import Settings
from ..domain.job import JobConfig
from ..segments import Coordinator

CoordinatorFactory = t.Callable[..., Coordinator]


class CLIState:
    """Application state container for CLI commands.

    Holds Settings and the factory used to build a Coordinator for a job,
    so tests can substitute a mocked coordinator.
    """

    def __init__(
        self,
        settings: Settings,
        coordinator_factory: CoordinatorFactory | None = None,
    ) -> None:
        self.settings = settings
        self._coordinator_factory = coordinator_factory or Coordinator

    def create_coordinator(self, config: JobConfig, **kwargs: t.Any) -> Coordinator:
        """Create a Coordinator for config using the configured factory."""
        return self._coordinator_factory(config, **kwargs)
