"""Tests for CLI app factory and context wiring."""

from pathlib import Path

import typer

from splitfetch.cli.state import CLIState
from splitfetch.config.settings import LogLevel


def _capture_state(app: typer.Typer):
    captured = {}

    @app.command()
    def test_cmd(ctx: typer.Context):
        captured["state"] = ctx.obj

    return captured


class TestCLIAppFactory:
    """Test create_cli_app factory."""

    def test_returns_typer_app(self, default_app):
        assert isinstance(default_app, typer.Typer)
        assert default_app.info.name == "splitfetch"

    def test_no_args_shows_help(self, cli_runner, default_app):
        result = cli_runner.invoke(default_app, [])

        assert "download" in result.output


class TestContextInjection:
    """Test our context injection and state wiring."""

    def test_commands_receive_cli_state(self, cli_runner, default_app):
        captured = _capture_state(default_app)

        result = cli_runner.invoke(default_app, ["test-cmd"])

        assert result.exit_code == 0
        assert isinstance(captured["state"], CLIState)

    def test_injected_settings_available_in_context(
        self, cli_runner, test_app, test_settings
    ):
        captured = _capture_state(test_app)

        result = cli_runner.invoke(test_app, ["test-cmd"])

        assert result.exit_code == 0
        assert captured["state"].settings is test_settings

    def test_injected_state_takes_precedence(
        self, cli_runner, app_with_mock_coordinator, cli_state_with_mock_coordinator
    ):
        captured = _capture_state(app_with_mock_coordinator)

        cli_runner.invoke(app_with_mock_coordinator, ["test-cmd"])

        assert captured["state"] is cli_state_with_mock_coordinator


class TestGlobalOptions:
    """Test global CLI flag handling."""

    def test_verbose_sets_debug_level(self, cli_runner, default_app):
        captured = _capture_state(default_app)

        result = cli_runner.invoke(default_app, ["--verbose", "test-cmd"])

        assert result.exit_code == 0
        assert captured["state"].settings.log_level == LogLevel.DEBUG

    def test_default_log_level_is_info(self, cli_runner, default_app):
        captured = _capture_state(default_app)

        cli_runner.invoke(default_app, ["test-cmd"])

        assert captured["state"].settings.log_level == LogLevel.INFO

    def test_save_dir_and_workers(self, cli_runner, default_app, tmp_path):
        captured = _capture_state(default_app)

        result = cli_runner.invoke(
            default_app, ["-d", str(tmp_path), "-w", "7", "test-cmd"]
        )

        assert result.exit_code == 0
        assert captured["state"].settings.save_dir == Path(tmp_path)
        assert captured["state"].settings.workers == 7

    def test_workers_out_of_range_rejected(self, cli_runner, default_app):
        _capture_state(default_app)

        result = cli_runner.invoke(default_app, ["--workers", "0", "test-cmd"])

        assert result.exit_code != 0
