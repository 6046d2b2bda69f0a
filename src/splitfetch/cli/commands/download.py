"""Download command implementation."""

import asyncio
import contextlib
import signal
import time
import typing as t
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from ...config.settings import MAX_WORKERS
from ...domain.exceptions import SplitFetchError
from ...domain.job import JobConfig, JobOutcome, JobResult
from ...infrastructure.logging import get_logger
from ..output.progress import (
    attach_progress_output,
    display_download_complete,
    display_download_error,
    display_download_interrupted,
    display_elapsed,
)
from ..state import CLIState

logger = get_logger(__name__)

# Signals that request a cooperative stop; missing ones are skipped per platform.
_INTERRUPT_SIGNALS = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGTERM", "SIGHUP", "SIGQUIT")
    if hasattr(signal, name)
)


def build_job_config(url: str, state: CLIState, **overrides: t.Any) -> JobConfig:
    """Validate CLI input into a JobConfig.

    Raises:
        typer.Exit: If the URL or any option is invalid
    """
    try:
        return JobConfig.from_settings(url, state.settings, **overrides)
    except ValidationError as e:
        typer.secho(f"✗ Invalid arguments for {url}", fg=typer.colors.RED)
        for error in e.errors():
            location = ".".join(str(item) for item in error["loc"])
            typer.secho(f"  {location}: {error['msg']}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


def install_signal_handlers(
    loop: asyncio.AbstractEventLoop, callback: t.Callable[[], None]
) -> list[signal.Signals]:
    """Route interrupt signals to callback. Returns the signals installed."""
    installed = []
    for sig in _INTERRUPT_SIGNALS:
        try:
            loop.add_signal_handler(sig, callback)
        except (NotImplementedError, RuntimeError, ValueError) as exc:
            logger.debug(f"Cannot install handler for {sig!r}: {exc}")
            continue
        installed.append(sig)
    return installed


def remove_signal_handlers(
    loop: asyncio.AbstractEventLoop, installed: t.Iterable[signal.Signals]
) -> None:
    for sig in installed:
        with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
            loop.remove_signal_handler(sig)


async def run_job(config: JobConfig, state: CLIState) -> JobResult:
    """Run one coordination cycle with signal-driven interruption.

    Args:
        config: Validated job configuration
        state: CLI state providing the coordinator factory

    Raises:
        SplitFetchError: Any fatal job error
    """
    async with state.create_coordinator(config) as coordinator:
        attach_progress_output(coordinator.emitter)
        loop = asyncio.get_running_loop()
        installed = install_signal_handlers(loop, coordinator.request_cancel)
        try:
            return await coordinator.run()
        finally:
            remove_signal_handlers(loop, installed)


def download(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL of the resource to download"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Save directory (overrides --save-dir)"
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--parts",
        "-p",
        help="Number of concurrent range workers for this download",
        min=1,
        max=MAX_WORKERS,
    ),
    resume: Optional[bool] = typer.Option(
        None,
        "--resume/--no-resume",
        help="Continue from an existing checkpoint",
    ),
    chunk_size: Optional[int] = typer.Option(
        None, "--chunk-size", help="Bytes read per increment", min=1
    ),
) -> None:
    """Download a resource in concurrent byte ranges.

    Examples:
        splitfetch download https://example.com/file.iso
        splitfetch -w 8 download https://example.com/file.iso -o ./downloads
        splitfetch download https://example.com/file.iso --no-resume
    """
    state: CLIState = ctx.obj

    config = build_job_config(
        url,
        state,
        save_dir=output,
        workers=workers,
        resume=resume,
        chunk_size=chunk_size,
    )

    started = time.monotonic()
    try:
        result = asyncio.run(run_job(config, state))
    except SplitFetchError as e:
        logger.error(f"Download failed: {e}")
        display_download_error(e)
        raise typer.Exit(code=1)
    finally:
        display_elapsed(time.monotonic() - started)

    if result.outcome == JobOutcome.INTERRUPTED:
        display_download_interrupted(result)
        return

    display_download_complete(result)
