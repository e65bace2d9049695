"""XYZ trajectory format implementation."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from ..base import TrajectoryReader, TrajectoryWriter

if TYPE_CHECKING:
    from ...system import MCState


class XYZWriter(TrajectoryWriter):
    """
    Minimal XYZ trajectory writer.

    Each frame is:
        N
        <empty comment line>
        Ar x y z
        ...

    The particle count may change from frame to frame (grand canonical
    runs), which VMD and similar viewers accept.
    """

    def __init__(
        self,
        filename: str | Path,
        element: str = "Ar",
        precision: int = 6,
        append: bool = False,
    ) -> None:
        """
        Initialize XYZ writer.

        Args:
            filename: Output file path.
            element: Element symbol written for every particle.
            precision: Decimal places for coordinates.
            append: Append to an existing file instead of truncating it.
        """
        super().__init__(filename, append=append)
        self.element = element
        self.precision = precision

    def write(self, state: MCState) -> None:
        """
        Write a single frame in XYZ format.

        Args:
            state: Monte Carlo state to write.
        """
        if self._file is None:
            raise RuntimeError("File not open. Use context manager or call open().")

        p = self.precision
        lines = [f"{state.n_particles}\n", "\n"]
        lines.extend(
            f"{self.element} {x:.{p}f} {y:.{p}f} {z:.{p}f}\n"
            for x, y, z in state.positions
        )
        self._file.write("".join(lines))
        self._file.flush()

        self._n_frames += 1


class XYZReader(TrajectoryReader):
    """XYZ format trajectory reader with a per-frame particle count."""

    def __init__(self, filename: str | Path) -> None:
        """
        Initialize XYZ reader.

        Args:
            filename: Input file path.
        """
        super().__init__(filename)
        self._frame_offsets: list[int] = []

    def open(self) -> None:
        """Open file and index frame positions."""
        super().open()
        self._index_frames()

    def _index_frames(self) -> None:
        """Build index of frame positions in file."""
        self._frame_offsets = []

        if self._file is None:
            return

        self._file.seek(0)
        while True:
            offset = self._file.tell()
            line = self._file.readline()

            if not line:
                break

            try:
                n_particles = int(line.strip())
            except ValueError:
                break

            self._frame_offsets.append(offset)

            # Skip comment and particle lines
            self._file.readline()
            for _ in range(n_particles):
                self._file.readline()

    def read_frame(self, index: int) -> dict:
        """
        Read a specific frame.

        Args:
            index: Frame index (0-based).

        Returns:
            Dictionary with 'positions', 'elements', 'comment' and 'n_particles'.
        """
        if self._file is None:
            raise RuntimeError("File not open.")

        if index < 0 or index >= len(self._frame_offsets):
            raise IndexError(f"Frame index {index} out of range")

        self._file.seek(self._frame_offsets[index])

        n_particles = int(self._file.readline().strip())
        comment = self._file.readline().strip()

        elements = []
        positions = np.zeros((n_particles, 3))
        for i in range(n_particles):
            parts = self._file.readline().split()
            elements.append(parts[0])
            positions[i] = [float(parts[1]), float(parts[2]), float(parts[3])]

        return {
            "positions": positions,
            "elements": elements,
            "comment": comment,
            "n_particles": n_particles,
        }

    def __iter__(self) -> Iterator[dict]:
        """Iterate over all frames."""
        for i in range(len(self)):
            yield self.read_frame(i)

    def __len__(self) -> int:
        """Return number of frames."""
        return len(self._frame_offsets)

    def __getitem__(self, index: int) -> dict:
        """Get frame by index."""
        return self.read_frame(index)
