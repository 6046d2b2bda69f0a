"""Shared fixtures for CLI tests."""

import pytest

from splitfetch.cli.app import create_cli_app
from splitfetch.cli.state import CLIState
from splitfetch.config.settings import LogLevel, Settings
from splitfetch.domain.job import JobOutcome, JobResult
from splitfetch.domain.parts import Part
from splitfetch.events import EventEmitter
from splitfetch.segments import Coordinator


@pytest.fixture
def test_settings(tmp_path):
    """Provide test Settings with known values."""
    return Settings(
        log_level=LogLevel.CRITICAL,
        save_dir=tmp_path,
        workers=3,
        chunk_size=4096,
    )


@pytest.fixture
def test_app(test_settings):
    """Provide CLI app with test settings injected."""
    return create_cli_app(settings=test_settings)


@pytest.fixture
def completed_result(tmp_path):
    return JobResult(
        outcome=JobOutcome.COMPLETED,
        output_path=tmp_path / "file.zip",
        parts=[Part(index=0, start=0, end=99, read_length=100, filename="file.zip")],
    )


@pytest.fixture
def interrupted_result(tmp_path):
    return JobResult(
        outcome=JobOutcome.INTERRUPTED,
        output_path=tmp_path / "file.zip",
        parts=[Part(index=0, start=0, end=99, read_length=40, filename="file.zip")],
    )


@pytest.fixture
def mock_coordinator(mocker, mock_logger, completed_result):
    """Provide fully mocked Coordinator with spec for type safety."""
    mock = mocker.AsyncMock(spec=Coordinator)
    mock.__aenter__.return_value = mock
    mock.__aexit__.return_value = None
    mock.emitter = EventEmitter(mock_logger)
    mock.request_cancel = mocker.Mock()
    mock.run.return_value = completed_result
    return mock


@pytest.fixture
def coordinator_factory(mocker, mock_coordinator):
    """Factory recording the JobConfig each command builds."""
    return mocker.Mock(return_value=mock_coordinator)


@pytest.fixture
def cli_state_with_mock_coordinator(test_settings, coordinator_factory):
    return CLIState(test_settings, coordinator_factory=coordinator_factory)


@pytest.fixture
def app_with_mock_coordinator(cli_state_with_mock_coordinator):
    """CLI app with mocked coordinator factory for testing."""
    return create_cli_app(state=cli_state_with_mock_coordinator)


@pytest.fixture
def config_of(coordinator_factory):
    """Return the JobConfig passed to the coordinator factory by the last command."""
    return lambda: coordinator_factory.call_args.args[0]
