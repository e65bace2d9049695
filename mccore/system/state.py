"""Particle set owned by a Monte Carlo simulation."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .box import Box


@dataclass
class MCState:
    """
    Single source of truth for the particle configuration.

    The particles form an ordered, variable-length collection. Canonical
    runs never change its length; grand canonical runs grow and shrink it
    through insertion and deletion moves.

    Attributes:
        positions: Particle positions, shape (N, 3).
        box: Simulation box.
        step: Current Monte Carlo step number.
    """

    positions: NDArray[np.floating]
    box: Box
    step: int = 0

    def __post_init__(self) -> None:
        """Validate and convert positions."""
        positions = np.asarray(self.positions, dtype=np.float64)
        if positions.size == 0:
            positions = positions.reshape(0, 3)
        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ValueError(
                f"positions must have shape (N, 3), got {positions.shape}"
            )
        self.positions = positions

    @classmethod
    def empty(cls, box: Box) -> MCState:
        """Create a state with no particles."""
        return cls(positions=np.zeros((0, 3)), box=box)

    @property
    def n_particles(self) -> int:
        """Return number of particles."""
        return len(self.positions)

    def append(self, position: ArrayLike) -> int:
        """
        Add a particle at the end of the collection.

        Args:
            position: Coordinates of the new particle, shape (3,).

        Returns:
            Index of the new particle.
        """
        position = np.asarray(position, dtype=np.float64).reshape(1, 3)
        self.positions = np.concatenate([self.positions, position])
        return self.n_particles - 1

    def insert(self, index: int, position: ArrayLike) -> None:
        """Insert a particle at ``index``; later particles shift up."""
        if not 0 <= index <= self.n_particles:
            raise IndexError(
                f"Insertion index {index} out of range [0, {self.n_particles}]"
            )
        position = np.asarray(position, dtype=np.float64).reshape(1, 3)
        self.positions = np.concatenate(
            [self.positions[:index], position, self.positions[index:]]
        )

    def remove(self, index: int) -> NDArray[np.floating]:
        """
        Remove a particle; later particles shift down by one.

        Args:
            index: Index of the particle to remove.

        Returns:
            Coordinates of the removed particle.
        """
        if not 0 <= index < self.n_particles:
            raise IndexError(
                f"Particle index {index} out of range [0, {self.n_particles})"
            )
        removed = self.positions[index].copy()
        self.positions = np.delete(self.positions, index, axis=0)
        return removed

    def others(self, index: int) -> NDArray[np.floating]:
        """Return positions of every particle except ``index``."""
        return np.delete(self.positions, index, axis=0)

    def copy(self) -> MCState:
        """Create a deep copy of this state."""
        return MCState(
            positions=self.positions.copy(),
            box=self.box,  # Box is immutable
            step=self.step,
        )
