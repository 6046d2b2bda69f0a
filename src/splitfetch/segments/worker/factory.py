"""Worker factory types for dependency injection."""

import typing as t

import aiohttp

from ...events import BaseEmitter
from .base import BasePartWorker

if t.TYPE_CHECKING:
    import loguru

# Factory signature: creates worker given client, logger, emitter
PartWorkerFactory = t.Callable[
    [aiohttp.ClientSession, "loguru.Logger", BaseEmitter],
    BasePartWorker,
]
