from dataclasses import dataclass

from .config.settings import Settings
from .infrastructure.logging import setup_logging


@dataclass(frozen=True)
class App:
    """Process-level wiring for library callers.

    Carries the Settings a program was started with, so jobs can be built
    from them with JobConfig.from_settings().
    """

    settings: Settings


def create_app(settings: Settings | None = None) -> App:
    """Bootstrap splitfetch: resolve settings and install the log sink."""
    resolved = settings if settings is not None else Settings()
    setup_logging(resolved)
    return App(settings=resolved)
