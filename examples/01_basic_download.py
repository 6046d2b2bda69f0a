#!/usr/bin/env python3
"""
01_basic_download.py - Simplest possible segmented download

Demonstrates: Coordinator usage with four range workers
Note: Requires internet connection to run
"""
import asyncio
from pathlib import Path

from splitfetch import Coordinator, JobConfig


async def main() -> None:
    """Download a single file to ./downloads in four parts."""
    print("Starting basic download example...")

    config = JobConfig(
        resource_url="https://proof.ovh.net/files/1Mb.dat",
        save_dir=Path("./downloads"),
        workers=4,
    )

    async with Coordinator(config) as coordinator:
        result = await coordinator.run()

    print(f"{result.outcome}: {result.bytes_read} bytes -> {result.output_path}")


if __name__ == "__main__":
    asyncio.run(main())
