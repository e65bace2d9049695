"""Simulation box and particle state."""

from .box import Box
from .state import MCState

__all__ = ["Box", "MCState"]
