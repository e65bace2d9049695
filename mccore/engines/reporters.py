"""Reporter implementations for simulation output."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

import numpy as np

from ..io import XYZWriter

if TYPE_CHECKING:
    from ..analysis import StepStatistics
    from ..system import MCState

logger = logging.getLogger(__name__)


class Reporter(ABC):
    """
    Abstract base class for simulation reporters.

    ``initialize`` receives the starting configuration and its energy
    (step 0); ``report`` is called after every step that matches the
    reporter's frequency.
    """

    @abstractmethod
    def report(self, state: MCState, stats: StepStatistics, **kwargs: Any) -> None:
        """
        Generate report for the step that just finished.

        Args:
            state: Current simulation state.
            stats: Observables of this step.
            **kwargs: Additional information ('recorded_energy', 'move').
        """
        ...

    @property
    def frequency(self) -> int:
        """Return reporting frequency (every N steps)."""
        return 1

    def should_report(self, step: int) -> bool:
        """Check if reporter should run at this step."""
        return step % self.frequency == 0

    def initialize(self, state: MCState, energy: float) -> None:
        """Initialize reporter (called before the first step)."""
        pass

    def finalize(self, state: MCState) -> None:
        """Finalize reporter (called after the last step)."""
        pass


class ReporterGroup:
    """Collection of reporters with automatic frequency handling."""

    def __init__(self, reporters: list[Reporter] | None = None) -> None:
        self._reporters: list[Reporter] = reporters if reporters else []

    def __len__(self) -> int:
        return len(self._reporters)

    def add(self, reporter: Reporter) -> None:
        """Add a reporter to the group."""
        self._reporters.append(reporter)

    def remove(self, reporter: Reporter) -> None:
        """Remove a reporter from the group."""
        self._reporters.remove(reporter)

    def initialize(self, state: MCState, energy: float) -> None:
        """Initialize all reporters."""
        for reporter in self._reporters:
            reporter.initialize(state, energy)

    def report(self, state: MCState, stats: StepStatistics, **kwargs: Any) -> None:
        """Run all reporters that should fire at this step."""
        for reporter in self._reporters:
            if reporter.should_report(stats.step):
                reporter.report(state, stats, **kwargs)

    def finalize(self, state: MCState) -> None:
        """Finalize every reporter, even if one of them fails."""
        errors = []
        for reporter in self._reporters:
            try:
                reporter.finalize(state)
            except Exception as exc:
                errors.append(exc)
        if errors:
            raise errors[0]


class _ColumnFileReporter(Reporter):
    """Writes ``"<step> <value>"`` lines to a text file."""

    def __init__(self, filename: str | Path, precision: int = 6) -> None:
        self.filename = Path(filename)
        self.precision = precision
        self._file: TextIO | None = None

    def initialize(self, state: MCState, energy: float) -> None:
        self._file = self.filename.open("w")

    def finalize(self, state: MCState) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def _write(self, step: int, value: float) -> None:
        if self._file is None:
            raise RuntimeError(f"{type(self).__name__} used before initialize()")
        self._file.write(f"{step} {value:.{self.precision}f}\n")
        self._file.flush()


class EnergyLogReporter(_ColumnFileReporter):
    """
    Energy log, one line per step.

    Step 0 holds the initial energy. Later lines hold the energy the
    ensemble chooses to record for the step.
    """

    def initialize(self, state: MCState, energy: float) -> None:
        super().initialize(state, energy)
        self._write(0, energy)

    def report(self, state: MCState, stats: StepStatistics, **kwargs: Any) -> None:
        self._write(stats.step, kwargs.get("recorded_energy", stats.energy))


class QSTReporter(_ColumnFileReporter):
    """Isosteric heat log (grand canonical runs)."""

    def report(self, state: MCState, stats: StepStatistics, **kwargs: Any) -> None:
        if stats.qst is not None:
            self._write(stats.step, stats.qst)


class FreeEnergyReporter(_ColumnFileReporter):
    """Free-energy estimate log (canonical runs)."""

    def report(self, state: MCState, stats: StepStatistics, **kwargs: Any) -> None:
        if stats.helmholtz is not None:
            self._write(stats.step, stats.helmholtz)


class TrajectoryReporter(Reporter):
    """
    Reporter that streams XYZ frames to disk.

    Frame 0 is the starting configuration; one frame follows per step,
    written after an accepted move is kept or a rejected one undone. A
    grand canonical run starting empty therefore opens with a frame of
    zero particles.
    """

    def __init__(self, filename: str | Path, element: str = "Ar") -> None:
        """
        Initialize trajectory reporter.

        Args:
            filename: Output XYZ path.
            element: Element symbol for every particle.
        """
        self._writer = XYZWriter(filename, element=element)

    @property
    def filename(self) -> Path:
        return self._writer.filename

    @property
    def n_frames(self) -> int:
        """Return number of frames written."""
        return self._writer.n_frames

    def initialize(self, state: MCState, energy: float) -> None:
        self._writer.open()
        self._writer.write(state)

    def report(self, state: MCState, stats: StepStatistics, **kwargs: Any) -> None:
        self._writer.write(state)

    def finalize(self, state: MCState) -> None:
        self._writer.close()


class TimeSeriesReporter(Reporter):
    """
    Reporter that keeps per-step observables in memory.

    Index 0 of every series is the starting configuration.
    """

    def __init__(self, frequency: int = 1) -> None:
        """
        Initialize time series reporter.

        Args:
            frequency: Reporting frequency.
        """
        self._frequency = frequency
        self.clear()

    @property
    def frequency(self) -> int:
        return self._frequency

    def initialize(self, state: MCState, energy: float) -> None:
        self.clear()
        self._steps.append(0)
        self._energy.append(energy)
        self._recorded_energy.append(energy)
        self._n_particles.append(state.n_particles)
        self._accepted.append(True)
        self._average_energy.append(energy)
        self._average_particles.append(float(state.n_particles))
        self._qst.append(np.nan)
        self._helmholtz.append(np.nan)

    def report(self, state: MCState, stats: StepStatistics, **kwargs: Any) -> None:
        self._steps.append(stats.step)
        self._energy.append(stats.energy)
        self._recorded_energy.append(kwargs.get("recorded_energy", stats.energy))
        self._n_particles.append(stats.n_particles)
        self._accepted.append(stats.accepted)
        self._average_energy.append(stats.average_energy)
        self._average_particles.append(stats.average_particles)
        self._qst.append(np.nan if stats.qst is None else stats.qst)
        self._helmholtz.append(np.nan if stats.helmholtz is None else stats.helmholtz)

    @property
    def steps(self) -> np.ndarray:
        return np.array(self._steps, dtype=np.int64)

    @property
    def energy(self) -> np.ndarray:
        """Energy of the configuration kept after each step."""
        return np.array(self._energy)

    @property
    def recorded_energy(self) -> np.ndarray:
        """Energy written to the energy log at each step."""
        return np.array(self._recorded_energy)

    @property
    def n_particles(self) -> np.ndarray:
        return np.array(self._n_particles, dtype=np.int64)

    @property
    def accepted(self) -> np.ndarray:
        return np.array(self._accepted, dtype=bool)

    @property
    def average_energy(self) -> np.ndarray:
        return np.array(self._average_energy)

    @property
    def average_particles(self) -> np.ndarray:
        return np.array(self._average_particles)

    @property
    def qst(self) -> np.ndarray:
        return np.array(self._qst)

    @property
    def helmholtz(self) -> np.ndarray:
        return np.array(self._helmholtz)

    def clear(self) -> None:
        """Clear stored data."""
        self._steps: list[int] = []
        self._energy: list[float] = []
        self._recorded_energy: list[float] = []
        self._n_particles: list[int] = []
        self._accepted: list[bool] = []
        self._average_energy: list[float] = []
        self._average_particles: list[float] = []
        self._qst: list[float] = []
        self._helmholtz: list[float] = []


class ConsoleReporter(Reporter):
    """Logs progress at INFO level every ``frequency`` steps."""

    def __init__(self, frequency: int = 1000) -> None:
        if frequency < 1:
            raise ValueError(f"frequency must be >= 1, got {frequency}")
        self._frequency = frequency

    @property
    def frequency(self) -> int:
        return self._frequency

    def report(self, state: MCState, stats: StepStatistics, **kwargs: Any) -> None:
        logger.info(
            "step %d: E=%.6f <E>=%.6f N=%d <N>=%.3f",
            stats.step,
            stats.energy,
            stats.average_energy,
            stats.n_particles,
            stats.average_particles,
        )


class CallbackReporter(Reporter):
    """Reporter that calls a user-defined function."""

    def __init__(
        self,
        callback: Callable[[MCState, StepStatistics], None],
        frequency: int = 1,
    ) -> None:
        """
        Initialize callback reporter.

        Args:
            callback: Function to call with (state, stats).
            frequency: Reporting frequency.
        """
        self._callback = callback
        self._frequency = frequency

    @property
    def frequency(self) -> int:
        return self._frequency

    def report(self, state: MCState, stats: StepStatistics, **kwargs: Any) -> None:
        self._callback(state, stats)
