"""Base interface for statistical ensembles."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from ..moves import MoveProposer, MoveRecord
    from ..system import MCState


def metropolis(delta_energy: float, beta: float, rng: np.random.Generator) -> bool:
    """
    Metropolis test for an uphill move.

    Args:
        delta_energy: Energy change of the move (>= 0).
        beta: Inverse thermal energy 1/(kT).
        rng: Random generator supplying the uniform draw.

    Returns:
        True if a uniform draw in [0, 1) falls below exp(-beta * dE).
    """
    probability = math.exp(-beta * delta_energy)
    return rng.random() < probability


class Ensemble(ABC):
    """
    Abstract base class for Monte Carlo ensembles.

    An ensemble decides which moves are proposed and whether a proposed
    move is kept. Any move that lowers the energy is kept, whatever the
    ensemble or move kind; only uphill moves reach ``_accept_uphill``.

    Attributes:
        temperature: Temperature T.
        boltzmann: Boltzmann constant k (1.0 in reduced units).
    """

    #: Whether the particle count fluctuates.
    grand_canonical: bool = False

    def __init__(self, temperature: float, boltzmann: float = 1.0) -> None:
        """
        Initialize ensemble.

        Args:
            temperature: Temperature T.
            boltzmann: Boltzmann constant k.
        """
        if temperature <= 0:
            raise ValueError(f"temperature must be positive, got {temperature}")
        if boltzmann <= 0:
            raise ValueError(f"boltzmann must be positive, got {boltzmann}")
        self.temperature = float(temperature)
        self.boltzmann = float(boltzmann)

    @property
    @abstractmethod
    def name(self) -> str:
        """Short ensemble name."""
        ...

    @property
    def kT(self) -> float:
        """Return thermal energy k*T."""
        return self.boltzmann * self.temperature

    @property
    def beta(self) -> float:
        """Return inverse thermal energy 1/(k*T)."""
        return 1.0 / self.kT

    @abstractmethod
    def propose(self, proposer: MoveProposer, state: MCState) -> MoveRecord:
        """
        Make one trial move on ``state``.

        Args:
            proposer: Move generator.
            state: State to modify in place.

        Returns:
            Record of the move, used to undo it on rejection.
        """
        ...

    def accept(
        self,
        old_energy: float,
        new_energy: float,
        record: MoveRecord,
        state: MCState,
        rng: np.random.Generator,
    ) -> bool:
        """
        Decide whether to keep a trial move.

        Args:
            old_energy: Energy before the move.
            new_energy: Energy after the move.
            record: Record of the move.
            state: State after the move.
            rng: Random generator for stochastic tests.

        Returns:
            True to keep the move, False to undo it.
        """
        delta_energy = new_energy - old_energy
        if delta_energy < 0:
            return True
        return self._accept_uphill(delta_energy, record, state, rng)

    @abstractmethod
    def _accept_uphill(
        self,
        delta_energy: float,
        record: MoveRecord,
        state: MCState,
        rng: np.random.Generator,
    ) -> bool:
        """Acceptance test for a move with dE >= 0."""
        ...

    @abstractmethod
    def recorded_energy(
        self, old_energy: float, new_energy: float, accepted: bool
    ) -> float:
        """Energy written to the energy log for this step."""
        ...
