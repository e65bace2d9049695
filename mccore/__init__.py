"""
mccore - Metropolis Monte Carlo for Lennard-Jones fluids.

Supports the canonical (NVT) ensemble with displacement moves and the
grand canonical (muVT) ensemble with displacement, insertion and deletion
moves in a cubic periodic box.

Quick Start:
    >>> from mccore import simulate
    >>> result = simulate.gcmc(n_steps=1000, seed=42)
    >>> print(f"<N> = {result.average_particles:.2f}")
"""

__version__ = "0.1.0"

# High-level APIs
from . import plotting, simulate
from .config import SimulationConfig
from .engines import MCEngine
from .ensembles import CanonicalEnsemble, GrandCanonicalEnsemble
from .exceptions import ConfigurationError, MCError
from .moves import MoveKind, MoveProposer, MoveRecord
from .potentials import LennardJonesPotential

# Core components for advanced users
from .system import Box, MCState

__all__ = [
    "simulate",
    "plotting",
    "SimulationConfig",
    "MCEngine",
    "CanonicalEnsemble",
    "GrandCanonicalEnsemble",
    "LennardJonesPotential",
    "MoveKind",
    "MoveProposer",
    "MoveRecord",
    "Box",
    "MCState",
    "MCError",
    "ConfigurationError",
]
