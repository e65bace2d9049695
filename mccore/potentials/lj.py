"""Lennard-Jones potential energy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .base import EnergyProvider

if TYPE_CHECKING:
    from ..system import Box, MCState

# Argon parameters: epsilon in Kelvin (k absorbed), sigma in Angstrom
ARGON_EPSILON = 128.326802
ARGON_SIGMA = 3.371914


class LennardJonesPotential(EnergyProvider):
    """
    Lennard-Jones 12-6 potential for a single particle species.

    V(r) = 4 * epsilon * [(sigma/r)^12 - (sigma/r)^6]

    Pair separations come from ``Box.pairwise_distance``. Pairs whose
    distance is *below* the box cutoff (L/2) are skipped and only pairs at
    or beyond it contribute. This is the opposite of the usual
    truncation, so compare against textbook LJ fluids with care.

    Attributes:
        epsilon: Well depth, in the energy units of the simulation.
        sigma: Size parameter, in the length units of the box.
    """

    def __init__(
        self, epsilon: float = ARGON_EPSILON, sigma: float = ARGON_SIGMA
    ) -> None:
        """
        Initialize Lennard-Jones potential.

        Args:
            epsilon: Well depth.
            sigma: Size parameter.
        """
        if epsilon < 0:
            raise ValueError(f"epsilon must be non-negative, got {epsilon}")
        if sigma <= 0:
            raise ValueError(f"sigma must be positive, got {sigma}")

        self.epsilon = float(epsilon)
        self.sigma = float(sigma)

        # Precomputed powers of sigma
        sigma2 = self.sigma * self.sigma
        self._sigma6 = sigma2 * sigma2 * sigma2
        self._sigma12 = self._sigma6 * self._sigma6

    def pair_energy(self, r: ArrayLike) -> NDArray[np.floating]:
        """
        Evaluate the bare 12-6 form at distance(s) ``r`` (no cutoff).

        Args:
            r: Pair distance(s).

        Returns:
            Pair energies with the same shape as ``r``.
        """
        r_inv = 1.0 / np.asarray(r, dtype=np.float64)
        r2 = r_inv * r_inv
        r6 = r2 * r2 * r2
        r12 = r6 * r6
        return 4.0 * self.epsilon * (self._sigma12 * r12 - self._sigma6 * r6)

    def _sum_beyond_cutoff(self, r: NDArray[np.floating], cutoff: float) -> float:
        """Sum pair energies over distances at or beyond the cutoff."""
        r = r[r >= cutoff]
        if len(r) == 0:
            return 0.0
        return float(np.sum(self.pair_energy(r)))

    def total_energy(self, state: MCState) -> float:
        """
        Compute Lennard-Jones energy of every unordered pair.

        Brute force over all N(N-1)/2 pairs.

        Args:
            state: Current Monte Carlo state.

        Returns:
            Total potential energy.
        """
        n = state.n_particles
        if n < 2:
            return 0.0

        i_indices, j_indices = np.triu_indices(n, k=1)
        r = state.box.pairwise_distance(
            state.positions[i_indices], state.positions[j_indices]
        )
        return self._sum_beyond_cutoff(r, state.box.cutoff)

    def interaction_energy(
        self, position: ArrayLike, others: ArrayLike, box: Box
    ) -> float:
        """Compute the energy of one particle with each of ``others``."""
        others = np.asarray(others, dtype=np.float64).reshape(-1, 3)
        if len(others) == 0:
            return 0.0

        r = np.atleast_1d(box.pairwise_distance(others, position))
        return self._sum_beyond_cutoff(r, box.cutoff)
