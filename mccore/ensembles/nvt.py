"""Canonical (NVT) ensemble."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ..moves import MoveKind
from .base import Ensemble, metropolis

if TYPE_CHECKING:
    from ..moves import MoveProposer, MoveRecord
    from ..system import MCState


class CanonicalEnsemble(Ensemble):
    """
    Fixed N, V, T.

    Only displacement moves are proposed, and uphill moves pass the
    Metropolis test. The energy log holds the energy of the configuration
    kept after each step.
    """

    @property
    def name(self) -> str:
        return "nvt"

    def propose(self, proposer: MoveProposer, state: MCState) -> MoveRecord:
        return proposer.displace(state)

    def _accept_uphill(
        self,
        delta_energy: float,
        record: MoveRecord,
        state: MCState,
        rng: np.random.Generator,
    ) -> bool:
        if record.kind is not MoveKind.DISPLACEMENT:
            raise ValueError(
                f"Canonical ensemble only supports displacement, got {record.kind}"
            )
        return metropolis(delta_energy, self.beta, rng)

    def recorded_energy(
        self, old_energy: float, new_energy: float, accepted: bool
    ) -> float:
        return new_energy if accepted else old_energy
