"""
Simple high-level simulation API.

This module wires a configuration into a box, state, potential, ensemble,
engine and reporters, runs it, and returns the collected results.

Example:
    >>> from mccore import simulate
    >>> result = simulate.gcmc(n_steps=1000, seed=7, write_files=False)
    >>> print(result.average_particles)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import SimulationConfig
from .engines import (
    ConsoleReporter,
    EnergyLogReporter,
    FreeEnergyReporter,
    MCEngine,
    QSTReporter,
    TimeSeriesReporter,
    TrajectoryReporter,
)
from .ensembles import CanonicalEnsemble, Ensemble, GrandCanonicalEnsemble
from .exceptions import ConfigurationError
from .io import read_starting_positions
from .potentials import LennardJonesPotential
from .system import Box, MCState

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """Results from a simulation run. Index 0 of every series is step 0."""

    ensemble: str = ""

    # Time series
    steps: NDArray[np.integer] = field(default_factory=lambda: np.array([], dtype=int))
    energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    recorded_energy: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    n_particles: NDArray[np.integer] = field(
        default_factory=lambda: np.array([], dtype=int)
    )
    accepted: NDArray[np.bool_] = field(default_factory=lambda: np.array([], dtype=bool))
    average_energy_series: NDArray[np.floating] = field(
        default_factory=lambda: np.array([])
    )
    qst: NDArray[np.floating] = field(default_factory=lambda: np.array([]))
    helmholtz: NDArray[np.floating] = field(default_factory=lambda: np.array([]))

    # Summary statistics
    average_energy: float = 0.0
    average_particles: float = 0.0
    acceptance_ratio: float = 0.0
    final_energy: float = 0.0

    # Final configuration
    positions: NDArray[np.floating] = field(default_factory=lambda: np.zeros((0, 3)))

    # Metadata
    n_steps: int = 0
    temperature: float = 0.0
    box_length: float = 0.0
    seed: int | None = None
    wall_time: float = 0.0
    output_files: dict[str, Path] = field(default_factory=dict)


def build_ensemble(config: SimulationConfig) -> Ensemble:
    """Create the ensemble named by ``config.ensemble``."""
    if config.ensemble == "gcmc":
        return GrandCanonicalEnsemble(
            temperature=config.temperature,
            boltzmann=config.boltzmann,
            mass=config.mass,
            planck=config.planck,
        )
    return CanonicalEnsemble(temperature=config.temperature, boltzmann=config.boltzmann)


def build_state(
    config: SimulationConfig, positions: ArrayLike | None = None
) -> MCState:
    """
    Create the starting state.

    NVT runs read ``config.starting_positions`` unless ``positions`` is
    given; GCMC runs start empty unless ``positions`` is given.

    Raises:
        ConfigurationError: If the starting configuration is unusable.
    """
    box = Box.cubic(config.box_length)

    if positions is not None:
        positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
        if not box.contains(positions):
            raise ConfigurationError(
                f"Starting coordinates must lie in [0, {box.length})"
            )
        return MCState(positions=positions, box=box)

    if config.ensemble == "gcmc":
        return MCState.empty(box)

    positions = read_starting_positions(
        config.starting_positions, n_particles=config.n_particles, box=box
    )
    return MCState(positions=positions, box=box)


def _add_file_reporters(engine: MCEngine, config: SimulationConfig) -> dict[str, Path]:
    """Attach the per-step output files of the configured ensemble."""
    config.output_dir.mkdir(parents=True, exist_ok=True)

    files = {
        "trajectory": config.output_path("trajectory"),
        "energies": config.output_path("energies"),
    }
    engine.add_reporter(TrajectoryReporter(files["trajectory"]))
    engine.add_reporter(EnergyLogReporter(files["energies"]))

    if config.ensemble == "gcmc":
        files["qsts"] = config.output_path("qsts")
        engine.add_reporter(QSTReporter(files["qsts"]))
    else:
        files["free_energies"] = config.output_path("free_energies")
        engine.add_reporter(FreeEnergyReporter(files["free_energies"]))
    return files


def run(
    config: SimulationConfig,
    positions: ArrayLike | None = None,
    rng: np.random.Generator | None = None,
    write_files: bool = True,
) -> SimulationResult:
    """
    Run a simulation described by ``config``.

    Args:
        config: Simulation configuration; ``n_steps`` must be set.
        positions: Optional starting positions overriding the file (NVT)
            or the empty start (GCMC).
        rng: Optional random generator, overriding ``config.seed``.
        write_files: Write trajectory and logs under ``config.output_dir``.

    Returns:
        SimulationResult with time series and summary statistics.

    Raises:
        ConfigurationError: On invalid configuration or starting input.
    """
    config.validate()
    if config.n_steps is None:
        raise ConfigurationError("n_steps must be set before running")

    state = build_state(config, positions)
    engine = MCEngine(
        state=state,
        potential=LennardJonesPotential(epsilon=config.epsilon, sigma=config.sigma),
        ensemble=build_ensemble(config),
        rng=rng,
        seed=config.seed,
        incremental_energy=config.incremental_energy,
    )

    series = TimeSeriesReporter()
    engine.add_reporter(series)
    engine.add_reporter(ConsoleReporter(frequency=config.report_frequency))
    output_files = _add_file_reporters(engine, config) if write_files else {}

    final_state = engine.run(config.n_steps)
    stats = engine.statistics

    return SimulationResult(
        ensemble=config.ensemble,
        steps=series.steps,
        energy=series.energy,
        recorded_energy=series.recorded_energy,
        n_particles=series.n_particles,
        accepted=series.accepted,
        average_energy_series=series.average_energy,
        qst=series.qst,
        helmholtz=series.helmholtz,
        average_energy=stats.average_energy,
        average_particles=stats.average_particles,
        acceptance_ratio=stats.acceptance_ratio,
        final_energy=engine.energy,
        positions=final_state.positions.copy(),
        n_steps=stats.step,
        temperature=config.temperature,
        box_length=config.box_length,
        seed=engine.seed,
        wall_time=engine.wall_time,
        output_files=output_files,
    )


def nvt(
    n_steps: int,
    positions: ArrayLike | None = None,
    seed: int | None = None,
    write_files: bool = False,
    **overrides: Any,
) -> SimulationResult:
    """
    Run a canonical (NVT) simulation.

    Args:
        n_steps: Number of Monte Carlo steps.
        positions: Starting positions; read from the starting
            configuration file when omitted.
        seed: Random seed.
        write_files: Write trajectory and logs.
        **overrides: Other ``SimulationConfig`` fields.

    Example:
        >>> result = nvt(n_steps=500, positions=[[0, 0, 0], [1, 0, 0]],
        ...              box_length=200.0, seed=1)
        >>> print(f"<E> = {result.average_energy:.3f}")
    """
    if positions is not None and "n_particles" not in overrides:
        overrides["n_particles"] = len(np.asarray(positions).reshape(-1, 3))
    config = SimulationConfig.for_ensemble(
        "nvt", n_steps=n_steps, seed=seed, **overrides
    )
    return run(config, positions=positions, write_files=write_files)


def gcmc(
    n_steps: int,
    seed: int | None = None,
    write_files: bool = False,
    **overrides: Any,
) -> SimulationResult:
    """
    Run a grand canonical (muVT) simulation from an empty box.

    Args:
        n_steps: Number of Monte Carlo steps.
        seed: Random seed.
        write_files: Write trajectory and logs.
        **overrides: Other ``SimulationConfig`` fields.
    """
    config = SimulationConfig.for_ensemble(
        "gcmc", n_steps=n_steps, seed=seed, **overrides
    )
    return run(config, write_files=write_files)
