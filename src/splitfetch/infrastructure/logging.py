"""Logging setup built on loguru.

Modules obtain a logger through get_logger(__name__). The first call
configures a stderr sink with defaults if nothing else has configured
logging yet, so library users get sensible output without any setup.
"""

import sys
import typing as t

from loguru import logger

from ..config.settings import Environment, LogLevel, Settings

if t.TYPE_CHECKING:
    import loguru

_DEVELOPMENT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

_configured = False


def configure_logger(
    level: LogLevel | str = LogLevel.INFO,
    environment: Environment = Environment.DEVELOPMENT,
) -> None:
    """Replace all loguru sinks with one stderr sink for the environment.

    Production emits JSON records for log shippers; other environments get
    a coloured, human-readable line format.
    """
    global _configured

    logger.remove()
    logger.configure(extra={"name": "splitfetch"})
    if environment is Environment.PRODUCTION:
        logger.add(sys.stderr, level=str(level), serialize=True)
    else:
        logger.add(
            sys.stderr,
            level=str(level),
            format=_DEVELOPMENT_FORMAT,
            colorize=environment is Environment.DEVELOPMENT,
        )
    _configured = True


def setup_logging(settings: Settings) -> None:
    """Configure logging from application settings."""
    configure_logger(level=settings.log_level, environment=settings.environment)


def get_logger(name: str) -> "loguru.Logger":
    """Return the shared logger bound to a module name."""
    if not _configured:
        configure_logger()
    return logger.bind(name=name)


def reset_logging() -> None:
    """Drop every sink so the next get_logger call reconfigures from scratch."""
    global _configured

    logger.remove()
    _configured = False
