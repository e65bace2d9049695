"""Periodic simulation box."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray


@dataclass(frozen=True)
class Box:
    """
    Cubic periodic simulation box.

    Coordinates live in the half-open interval [0, L) on every axis. The
    interaction cutoff is half the box length.

    Attributes:
        length: Side length L of the cube.
    """

    length: float

    def __post_init__(self) -> None:
        """Validate and convert the side length."""
        length = float(self.length)
        if not np.isfinite(length) or length <= 0.0:
            raise ValueError(f"Box length must be positive, got {self.length}")
        # Use object.__setattr__ since dataclass is frozen
        object.__setattr__(self, "length", length)

    @classmethod
    def cubic(cls, length: float) -> Box:
        """Create a cubic box with given side length."""
        return cls(length)

    @property
    def lengths(self) -> NDArray[np.floating]:
        """Return box lengths [L, L, L]."""
        return np.full(3, self.length)

    @property
    def volume(self) -> float:
        """Return box volume L^3."""
        return self.length**3

    @property
    def cutoff(self) -> float:
        """Return the interaction cutoff, L/2."""
        return 0.5 * self.length

    def wrap_positions(self, positions: ArrayLike) -> NDArray[np.floating]:
        """
        Wrap positions into [0, L) using periodic boundary conditions.

        Works for displacements of any size, not only those shorter than
        one box length.

        Args:
            positions: Positions array of shape (3,) or (N, 3).

        Returns:
            Wrapped positions with the same shape.
        """
        positions = np.asarray(positions, dtype=np.float64)
        wrapped = positions - self.length * np.floor(positions / self.length)
        # A tiny negative value rounds up to exactly L
        return np.where(wrapped >= self.length, wrapped - self.length, wrapped)

    def contains(self, positions: ArrayLike) -> bool:
        """Check that every coordinate lies in [0, L)."""
        positions = np.asarray(positions, dtype=np.float64)
        return bool(np.all((positions >= 0.0) & (positions < self.length)))

    def pairwise_distance(
        self, r1: ArrayLike, r2: ArrayLike
    ) -> float | NDArray[np.floating]:
        """
        Compute the periodic distance between positions.

        Each axis separation larger than the cutoff is shortened by the
        cutoff (half the box length), not by the full box length as in the
        textbook minimum-image rule. Energies produced by this package are
        defined in terms of this rule.

        Args:
            r1: First position(s), shape (3,) or (N, 3).
            r2: Second position(s), shape (3,) or (N, 3).

        Returns:
            Distance(s) between r1 and r2.
        """
        delta = np.abs(np.asarray(r1, dtype=np.float64) - np.asarray(r2, dtype=np.float64))
        delta = np.where(delta > self.cutoff, delta - self.cutoff, delta)
        return np.sqrt(np.sum(delta * delta, axis=-1))
