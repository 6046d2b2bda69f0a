#!/usr/bin/env python3
"""
02_interrupt_and_resume.py - Stop a download halfway and pick it up again

Demonstrates:
- Subscribing to part.progress events
- Requesting a cooperative stop with request_cancel()
- Reading per-part state from the tracker
- Resuming from the checkpoint with a second Coordinator run
Note: Requires internet connection to run
"""

import asyncio
from pathlib import Path

from splitfetch import Coordinator, JobConfig, JobOutcome
from splitfetch.events import PartProgressEvent

STOP_AFTER_BYTES = 2 * 1024 * 1024


async def run_until(config: JobConfig, stop_after: int | None) -> None:
    async with Coordinator(config) as coordinator:
        read = 0

        def on_progress(event: PartProgressEvent) -> None:
            nonlocal read
            read += event.chunk_size
            if stop_after is not None and read >= stop_after:
                coordinator.request_cancel()

        coordinator.emitter.on("part.progress", on_progress)
        result = await coordinator.run()

        for info in coordinator.tracker.get_all_parts():
            print(
                f"  part {info.index}: {info.status} "
                f"{info.read_length}/{info.size} bytes ({info.get_progress():.0%})"
            )

    if result.outcome == JobOutcome.INTERRUPTED:
        print(f"Interrupted with {result.bytes_read}/{result.total_bytes} bytes on disk")
    else:
        print(f"Completed: {result.output_path}")


async def main() -> None:
    config = JobConfig(
        resource_url="https://proof.ovh.net/files/10Mb.dat",
        save_dir=Path("./downloads"),
        workers=4,
    )

    print("First run, stopping early...")
    await run_until(config, stop_after=STOP_AFTER_BYTES)

    print("Second run, resuming from checkpoint...")
    await run_until(config, stop_after=None)


if __name__ == "__main__":
    asyncio.run(main())
