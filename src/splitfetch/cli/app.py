"""CLI application factory."""

from pathlib import Path
from typing import Optional

import typer

from ..config.settings import MAX_WORKERS, LogLevel, Settings, build_settings
from ..infrastructure.logging import setup_logging
from .commands.download import download
from .state import CLIState


def create_cli_app(
    settings: Settings | None = None,
    state: CLIState | None = None,
) -> typer.Typer:
    """Create CLI application with optional settings or state override.

    Args:
        settings: Optional Settings override for testing
        state: Optional fully built CLIState (e.g. with a mocked coordinator
               factory) for testing. Takes precedence over settings.

    Returns:
        Configured Typer application with commands registered
    """
    app = typer.Typer(
        name="splitfetch",
        help="Segmented HTTP downloads with concurrent range workers and resume",
        no_args_is_help=True,
    )

    @app.callback()
    def setup(
        ctx: typer.Context,
        save_dir: Optional[Path] = typer.Option(
            None,
            "--save-dir",
            "-d",
            help="Directory for the downloaded file and its checkpoint",
        ),
        workers: Optional[int] = typer.Option(
            None,
            "--workers",
            "-w",
            help="Number of concurrent range workers",
            min=1,
            max=MAX_WORKERS,
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Enable verbose output (DEBUG logging)",
        ),
    ) -> None:
        """Global options available to all commands."""
        if state is not None:
            resolved_state = state
        elif settings is not None:
            resolved_state = CLIState(settings)
        else:
            resolved_state = CLIState(
                build_settings(
                    save_dir=save_dir,
                    workers=workers,
                    log_level=LogLevel.DEBUG if verbose else None,
                )
            )

        setup_logging(resolved_state.settings)
        ctx.obj = resolved_state

    app.command()(download)
    return app
