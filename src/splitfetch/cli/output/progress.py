"""Progress display functions for CLI."""

import typer

from ...domain.exceptions import SplitFetchError
from ...domain.job import JobResult
from ...events import (
    BaseEmitter,
    JobStartedEvent,
    PartCompletedEvent,
    PartFailedEvent,
    PartInterruptedEvent,
)


def display_job_started(event: JobStartedEvent) -> None:
    """Display what is about to be downloaded."""
    mode = "resuming" if event.resumed else "starting"
    typer.echo(
        f"Downloading {event.filename} ({event.total_bytes} bytes, "
        f"{event.part_count} part(s), {mode})"
    )


def display_part_completed(event: PartCompletedEvent) -> None:
    if event.skipped:
        typer.echo(f"  part {event.index}: already complete")
        return
    typer.secho(f"  ✓ part {event.index}: {event.size} bytes", fg=typer.colors.GREEN)


def display_part_interrupted(event: PartInterruptedEvent) -> None:
    typer.secho(
        f"  … part {event.index}: stopped at {event.read_length}/{event.size} bytes",
        fg=typer.colors.YELLOW,
    )


def display_part_failed(event: PartFailedEvent) -> None:
    typer.secho(f"  ✗ part {event.index}: {event.error_message}", fg=typer.colors.RED)


def attach_progress_output(emitter: BaseEmitter) -> None:
    """Subscribe the display functions to a coordinator's emitter."""
    emitter.on("job.started", display_job_started)
    emitter.on("part.completed", display_part_completed)
    emitter.on("part.interrupted", display_part_interrupted)
    emitter.on("part.failed", display_part_failed)


def display_download_complete(result: JobResult) -> None:
    typer.secho(f"✓ Downloaded: {result.output_path}", fg=typer.colors.GREEN)


def display_download_interrupted(result: JobResult) -> None:
    """Display interruption summary; the checkpoint allows a later resume."""
    typer.secho(
        f"Interrupted: {result.bytes_read}/{result.total_bytes} bytes on disk. "
        "Run the same command again to resume.",
        fg=typer.colors.YELLOW,
    )


def display_download_error(error: SplitFetchError) -> None:
    typer.secho(f"✗ Download failed: {error}", fg=typer.colors.RED, err=True)


def display_elapsed(seconds: float) -> None:
    typer.echo(f"Time elapsed: {seconds:.2f} seconds")
