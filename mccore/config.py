"""
Simulation configuration.

Defaults are the argon runs:

- NVT: 1000 particles read from ``startingpositions.txt``, T = 77, L = 200.
- GCMC: starts empty, T = 101, L = 22.

Energies are in Kelvin with k = 1, lengths in Angstrom.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .ensembles import ARGON_MASS, PLANCK
from .exceptions import ConfigurationError
from .potentials import ARGON_EPSILON, ARGON_SIGMA

ENSEMBLES = ("nvt", "gcmc")

_ENSEMBLE_DEFAULTS: dict[str, dict[str, Any]] = {
    "nvt": {"n_particles": 1000, "temperature": 77.0, "box_length": 200.0},
    "gcmc": {"n_particles": None, "temperature": 101.0, "box_length": 22.0},
}


@dataclass
class OutputFiles:
    """Names of the per-step output files, relative to the output directory."""

    trajectory: str = "positions.xyz"
    energies: str = "energies.dat"
    free_energies: str = "free_energies.dat"
    qsts: str = "qsts.dat"


@dataclass
class SimulationConfig:
    """
    All inputs of a Monte Carlo run.

    Attributes:
        ensemble: "nvt" or "gcmc".
        n_particles: Particles to read from the starting configuration (NVT).
        temperature: Temperature T.
        box_length: Side length L of the cubic box.
        boltzmann: Boltzmann constant k.
        epsilon: Lennard-Jones well depth.
        sigma: Lennard-Jones size parameter.
        mass: Particle mass (thermal wavelength, GCMC).
        planck: Planck constant (thermal wavelength, GCMC).
        n_steps: Number of steps; None means ask on the console.
        seed: Random seed; None means seed from the wall clock.
        starting_positions: Starting configuration file (NVT).
        output_dir: Directory receiving the output files.
        incremental_energy: Update energies from the moved particle only.
        report_frequency: Console progress interval in steps.
        outputs: Output file names.
    """

    ensemble: str = "nvt"
    n_particles: int | None = 1000
    temperature: float = 77.0
    box_length: float = 200.0
    boltzmann: float = 1.0
    epsilon: float = ARGON_EPSILON
    sigma: float = ARGON_SIGMA
    mass: float = ARGON_MASS
    planck: float = PLANCK
    n_steps: int | None = None
    seed: int | None = None
    starting_positions: Path = Path("startingpositions.txt")
    output_dir: Path = Path(".")
    incremental_energy: bool = False
    report_frequency: int = 1000
    outputs: OutputFiles = field(default_factory=OutputFiles)

    def __post_init__(self) -> None:
        self.starting_positions = Path(self.starting_positions)
        self.output_dir = Path(self.output_dir)

    @classmethod
    def for_ensemble(cls, ensemble: str, **overrides: Any) -> SimulationConfig:
        """
        Create the default configuration of an ensemble.

        Args:
            ensemble: "nvt" or "gcmc".
            **overrides: Field values replacing the defaults. None values
                are ignored so unset command-line options keep defaults.

        Returns:
            Validated configuration.
        """
        ensemble = ensemble.lower()
        if ensemble not in _ENSEMBLE_DEFAULTS:
            raise ConfigurationError(
                f"Unknown ensemble {ensemble!r}; expected one of {ENSEMBLES}"
            )
        values = dict(_ENSEMBLE_DEFAULTS[ensemble])
        values.update({k: v for k, v in overrides.items() if v is not None})
        config = cls(ensemble=ensemble, **values)
        config.validate()
        return config

    def with_steps(self, n_steps: int) -> SimulationConfig:
        """Return a copy with ``n_steps`` set."""
        config = replace(self, n_steps=n_steps)
        config.validate()
        return config

    def validate(self) -> None:
        """
        Check every field.

        Raises:
            ConfigurationError: On the first invalid value.
        """
        if self.ensemble not in ENSEMBLES:
            raise ConfigurationError(
                f"Unknown ensemble {self.ensemble!r}; expected one of {ENSEMBLES}"
            )
        if self.ensemble == "nvt" and self.n_particles is None:
            raise ConfigurationError("NVT runs need n_particles")
        if self.n_particles is not None and self.n_particles < 0:
            raise ConfigurationError(
                f"n_particles must be non-negative, got {self.n_particles}"
            )

        positive = {
            "temperature": self.temperature,
            "box_length": self.box_length,
            "boltzmann": self.boltzmann,
            "sigma": self.sigma,
            "mass": self.mass,
            "planck": self.planck,
            "report_frequency": self.report_frequency,
        }
        for name, value in positive.items():
            if not value > 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")

        if self.epsilon < 0:
            raise ConfigurationError(
                f"epsilon must be non-negative, got {self.epsilon}"
            )
        if self.n_steps is not None and self.n_steps < 0:
            raise ConfigurationError(
                f"n_steps must be non-negative, got {self.n_steps}"
            )

    def output_path(self, name: str) -> Path:
        """Full path of an output file, e.g. ``output_path("energies")``."""
        return self.output_dir / getattr(self.outputs, name)


def parse_step_count(text: str) -> int:
    """
    Parse a step count typed by the user.

    Args:
        text: Raw input.

    Returns:
        Non-negative step count. Zero is a valid no-op run.

    Raises:
        ConfigurationError: If the input is not an integer or is negative.
    """
    try:
        n_steps = int(text.strip())
    except ValueError as exc:
        raise ConfigurationError(
            f"Step count must be an integer, got {text.strip()!r}"
        ) from exc
    if n_steps < 0:
        raise ConfigurationError(f"Step count must be non-negative, got {n_steps}")
    return n_steps
