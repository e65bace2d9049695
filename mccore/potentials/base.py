"""Base interface for potential energy providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from numpy.typing import ArrayLike

if TYPE_CHECKING:
    from ..system import Box, MCState


class EnergyProvider(ABC):
    """
    Abstract base class for potential energy evaluation.

    Monte Carlo needs energies only, never forces. Every pair potential
    implements both the full configurational sum and the interaction of a
    single point with a set of other points, so a driver can either
    recompute from scratch or update incrementally.
    """

    @abstractmethod
    def total_energy(self, state: MCState) -> float:
        """
        Compute the total potential energy of a configuration.

        Args:
            state: Current Monte Carlo state.

        Returns:
            Potential energy summed over all unordered particle pairs.
        """
        ...

    @abstractmethod
    def interaction_energy(
        self, position: ArrayLike, others: ArrayLike, box: Box
    ) -> float:
        """
        Compute the energy of one particle with a set of other particles.

        Args:
            position: Position of the particle, shape (3,).
            others: Positions of the other particles, shape (M, 3).
            box: Simulation box supplying the distance rule.

        Returns:
            Sum of pair energies between ``position`` and each of ``others``.
        """
        ...

    def __call__(self, state: MCState) -> float:
        return self.total_energy(state)

