"""On-disk layout of a job inside its save directory."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class JobPaths:
    """Locations of the final, checkpoint and partial files for one resource.

    Layout:
        <save_dir>/<filename>           final file
        <save_dir>/<filename>.json      checkpoint
        <save_dir>/<filename>.part<N>   partial file of part N
    """

    save_dir: Path
    filename: str

    @property
    def output_path(self) -> Path:
        return self.save_dir / self.filename

    @property
    def checkpoint_path(self) -> Path:
        return self.save_dir / f"{self.filename}.json"

    def part_path(self, index: int) -> Path:
        return self.save_dir / f"{self.filename}.part{index}"
