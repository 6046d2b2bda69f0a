"""Pytest configuration and fixtures for splitfetch tests."""

import asyncio
import re
import typing as t
from http import HTTPStatus

import loguru
import pytest
import pytest_asyncio
from aiohttp import ClientSession
from aioresponses import CallbackResult
from blockbuster import BlockBuster, blockbuster_ctx
from typer.testing import CliRunner

from splitfetch.app import create_app
from splitfetch.cli.app import create_cli_app
from splitfetch.config.settings import Environment, LogLevel, Settings
from splitfetch.domain.cancellation import CancellationToken
from splitfetch.events import BaseEmitter, EventEmitter
from splitfetch.infrastructure.logging import reset_logging
from splitfetch.tracking import PartTracker

_RANGE_PATTERN = re.compile(r"bytes=(\d+)-(\d+)")


class RangeServer:
    """Serves one payload through aioresponses, honouring Range headers.

    Every GET is recorded in `requested_ranges` (None for requests without
    a Range header) so tests can assert exactly which bytes were asked for.

    Knobs for misbehaving servers:
        ignore_ranges: answer 200 with the full body regardless of Range
        short_by: drop this many bytes from the end of every 206 body
        extra_bytes: append this many junk bytes to every 206 body
        status: fixed error status returned for every GET
        fail_ranges: Range values answered with HTTP 500
        release: event awaited before answering a range in fail_ranges
    """

    def __init__(
        self,
        payload: bytes,
        *,
        ignore_ranges: bool = False,
        short_by: int = 0,
        extra_bytes: int = 0,
        status: int | None = None,
        fail_ranges: t.Collection[str] = (),
        release: asyncio.Event | None = None,
    ) -> None:
        self.payload = payload
        self.ignore_ranges = ignore_ranges
        self.short_by = short_by
        self.extra_bytes = extra_bytes
        self.status = status
        self.fail_ranges = set(fail_ranges)
        self.release = release
        self.requested_ranges: list[str | None] = []

    @staticmethod
    def _range_header(headers: t.Mapping[str, str] | None) -> str | None:
        for key, value in (headers or {}).items():
            if key.lower() == "range":
                return value
        return None

    async def handle_get(self, url: t.Any, **kwargs: t.Any) -> CallbackResult:
        range_header = self._range_header(kwargs.get("headers"))
        self.requested_ranges.append(range_header)

        if self.status is not None:
            return CallbackResult(
                status=self.status, body=b"error", reason=HTTPStatus(self.status).phrase
            )
        if range_header in self.fail_ranges:
            if self.release is not None:
                await self.release.wait()
            return CallbackResult(
                status=500, body=b"error", reason=HTTPStatus(500).phrase
            )

        match = _RANGE_PATTERN.fullmatch(range_header or "")
        if match is None or self.ignore_ranges:
            return CallbackResult(status=200, body=self.payload)

        start, end = int(match.group(1)), int(match.group(2))
        body = self.payload[start : end + 1]
        if self.short_by:
            body = body[: -self.short_by]
        body += b"!" * self.extra_bytes
        return CallbackResult(
            status=206,
            body=body,
            headers={"Content-Range": f"bytes {start}-{end}/{len(self.payload)}"},
        )

    def register(
        self,
        mock: t.Any,
        url: str,
        *,
        accept_ranges: bool = True,
        content_disposition: str | None = None,
    ) -> None:
        """Register HEAD and GET handlers for url on an aioresponses mock."""
        headers = {"Content-Length": str(len(self.payload))}
        if accept_ranges:
            headers["Accept-Ranges"] = "bytes"
        if content_disposition is not None:
            headers["Content-Disposition"] = content_disposition
        mock.head(url, status=200, headers=headers, repeat=True)
        mock.get(url, callback=self.handle_get, repeat=True)


def make_payload(size: int) -> bytes:
    """Deterministic payload where every offset is distinguishable."""
    return bytes(i % 251 for i in range(size))


@pytest.fixture(autouse=True)
def blockbuster() -> t.Iterator[BlockBuster]:
    """Detect blocking calls in async event loop during tests.

    Raises BlockingError if splitfetch code performs synchronous I/O
    (like a plain file.write()) while the event loop is running.
    """
    with blockbuster_ctx(
        scanned_modules=["splitfetch"],
    ) as bb:
        # Third party modules use these functions, so we deactivate them
        # for now
        bb.functions["os.path.abspath"].deactivate()

        yield bb


@pytest.fixture
def test_settings():
    """Provide test-specific settings."""
    return Settings(
        environment=Environment.TESTING,
        log_level=LogLevel.CRITICAL,  # Minimal logging during tests
        workers=4,
    )


@pytest.fixture
def test_app(test_settings):
    """Provide a test app with clean logging state."""
    reset_logging()
    app = create_app(settings=test_settings)
    yield app
    reset_logging()


@pytest.fixture
def mock_logger(mocker):
    """Provide a mock logger for testing that captures log calls."""
    logger = mocker.Mock(spec=loguru.logger)
    return logger


@pytest.fixture
def mock_emitter(mocker):
    """Provide a mock event emitter for testing event emission."""
    emitter = mocker.Mock(spec=BaseEmitter)
    return emitter


@pytest.fixture
def real_emitter(mock_logger):
    """Provide a real EventEmitter for tests whose handlers must run.

    For tests that only verify emit() was called, use mock_emitter instead.
    """
    return EventEmitter(mock_logger)


@pytest.fixture(autouse=True)
def clean_logging_state():
    """Automatically reset logging before each test for isolation."""
    reset_logging()
    yield
    reset_logging()


@pytest_asyncio.fixture
async def aio_client():
    """Provide a real aiohttp ClientSession (requests are mocked per test)."""
    session = ClientSession()
    yield session
    await session.close()


@pytest_asyncio.fixture
async def cancel_token():
    """Provide a CancellationToken created inside the running loop."""
    return CancellationToken()


@pytest.fixture
def tracker(mock_logger):
    """Provide a PartTracker with mocked logger for testing."""
    return PartTracker(logger=mock_logger)


@pytest.fixture
def payload():
    """1000-byte resource used by most transfer tests."""
    return make_payload(1000)


@pytest.fixture
def range_server(payload):
    """Range-honouring server for the default payload."""
    return RangeServer(payload)


@pytest.fixture
def make_range_server(payload):
    """Factory for servers with custom payloads or misbehaviour knobs."""

    def _make(data: bytes | None = None, **kwargs: t.Any) -> RangeServer:
        return RangeServer(payload if data is None else data, **kwargs)

    return _make


# CLI-specific fixtures (shared across all tests)


@pytest.fixture
def cli_runner():
    """Provide Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def default_app():
    """Provide CLI app with default settings."""
    return create_cli_app()
