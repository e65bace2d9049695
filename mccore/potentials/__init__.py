"""Potential energy providers."""

from .base import EnergyProvider
from .lj import ARGON_EPSILON, ARGON_SIGMA, LennardJonesPotential

__all__ = ["EnergyProvider", "LennardJonesPotential", "ARGON_EPSILON", "ARGON_SIGMA"]
