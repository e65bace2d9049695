"""Base classes for trajectory I/O."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..system import MCState


class TrajectoryWriter(ABC):
    """
    Abstract base class for trajectory writers.

    Writers stream one frame per Monte Carlo step. The file is truncated
    on open unless ``append`` is set, and flushed after every frame so an
    interrupted run leaves a readable trajectory.

    Example:
        with XYZWriter("positions.xyz") as writer:
            for step in simulation:
                writer.write(state)
    """

    def __init__(self, filename: str | Path, append: bool = False) -> None:
        """
        Initialize trajectory writer.

        Args:
            filename: Output file path.
            append: Append to an existing file instead of truncating it.
        """
        self.filename = Path(filename)
        self.append = append
        self._file = None
        self._n_frames = 0

    @abstractmethod
    def write(self, state: MCState) -> None:
        """
        Write a single frame.

        Args:
            state: Monte Carlo state to write.
        """
        ...

    def open(self) -> None:
        """Open file for writing."""
        self._file = self.filename.open("a" if self.append else "w")

    def close(self) -> None:
        """Close file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> TrajectoryWriter:
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def n_frames(self) -> int:
        """Number of frames written."""
        return self._n_frames


class TrajectoryReader(ABC):
    """
    Abstract base class for trajectory readers.

    Example:
        with XYZReader("positions.xyz") as reader:
            for frame in reader:
                analyze(frame)
    """

    def __init__(self, filename: str | Path) -> None:
        """
        Initialize trajectory reader.

        Args:
            filename: Input file path.
        """
        self.filename = Path(filename)
        self._file = None

    @abstractmethod
    def read_frame(self, index: int) -> dict:
        """
        Read a specific frame.

        Args:
            index: Frame index (0-based).

        Returns:
            Dictionary with frame data.
        """
        ...

    @abstractmethod
    def __iter__(self) -> Iterator[dict]:
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    def open(self) -> None:
        """Open file for reading."""
        self._file = self.filename.open()

    def close(self) -> None:
        """Close file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> TrajectoryReader:
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
