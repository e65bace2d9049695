"""Grand canonical (muVT) ensemble."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from ..moves import MoveKind
from .base import Ensemble, metropolis

if TYPE_CHECKING:
    from ..moves import MoveProposer, MoveRecord
    from ..system import MCState

PLANCK = 6.626e-34
ARGON_MASS = 39.948  # amu


class GrandCanonicalEnsemble(Ensemble):
    """
    Fixed mu, V, T with fluctuating particle count.

    Displacements pass the Metropolis test. Uphill insertions and deletions
    are decided by deterministic thresholds built from a relative chemical
    potential that depends on the instantaneous density:

        mu     = kT * ln(lambda^3) * rho
        mu_rel = mu - kT * ln(lambda^3)

    Insertion is kept when  -beta*dE + beta*mu_rel + ln(V / (N + 1)) < 0.
    Deletion is kept when   N / (V * exp(-beta*dE - beta*mu_rel)) < 1.

    N is the particle count after the trial move. Conventional GCMC instead
    compares min(1, ...) against a uniform draw; these thresholds are
    deterministic.
    Both tests are evaluated on the log scale, which gives the same decision
    without overflow when the exponent is large.

    Attributes:
        mass: Particle mass used for the thermal wavelength.
        planck: Planck constant used for the thermal wavelength.
    """

    grand_canonical = True

    def __init__(
        self,
        temperature: float,
        boltzmann: float = 1.0,
        mass: float = ARGON_MASS,
        planck: float = PLANCK,
    ) -> None:
        """
        Initialize grand canonical ensemble.

        Args:
            temperature: Temperature T.
            boltzmann: Boltzmann constant k.
            mass: Particle mass m.
            planck: Planck constant h.
        """
        super().__init__(temperature, boltzmann)
        if mass <= 0:
            raise ValueError(f"mass must be positive, got {mass}")
        if planck <= 0:
            raise ValueError(f"planck must be positive, got {planck}")
        self.mass = float(mass)
        self.planck = float(planck)

    @property
    def name(self) -> str:
        return "gcmc"

    @property
    def thermal_wavelength(self) -> float:
        """Return lambda = h / sqrt(2 pi m k T)."""
        return self.planck / math.sqrt(2.0 * math.pi * self.mass * self.kT)

    @property
    def log_wavelength_cubed(self) -> float:
        """Return ln(lambda^3)."""
        return 3.0 * math.log(self.thermal_wavelength)

    def relative_chemical_potential(self, n_particles: int, volume: float) -> float:
        """
        Chemical potential relative to the ideal-gas reference.

        Args:
            n_particles: Current particle count.
            volume: Box volume.

        Returns:
            mu_rel = kT ln(lambda^3) * (N/V) - kT ln(lambda^3).
        """
        density = n_particles / volume
        reference = self.kT * self.log_wavelength_cubed
        return reference * density - reference

    def propose(self, proposer: MoveProposer, state: MCState) -> MoveRecord:
        return proposer.choose(state)

    def insertion_exponent(
        self, delta_energy: float, n_particles: int, volume: float
    ) -> float:
        """Return -beta*dE + beta*mu_rel + ln(V / (N + 1))."""
        mu_rel = self.relative_chemical_potential(n_particles, volume)
        return (
            -self.beta * delta_energy
            + self.beta * mu_rel
            + math.log(volume / (n_particles + 1))
        )

    def _insertion_acceptance(
        self, delta_energy: float, n_particles: int, volume: float
    ) -> bool:
        """Keep the insertion when exp(exponent) < 1."""
        return self.insertion_exponent(delta_energy, n_particles, volume) < 0.0

    def _deletion_acceptance(
        self, delta_energy: float, n_particles: int, volume: float
    ) -> bool:
        """Keep the deletion when N / (V * exp(-beta*dE - beta*mu_rel)) < 1."""
        if n_particles == 0:
            return True
        mu_rel = self.relative_chemical_potential(n_particles, volume)
        log_term = -self.beta * delta_energy - self.beta * mu_rel
        return math.log(n_particles) - math.log(volume) - log_term < 0.0

    def _accept_uphill(
        self,
        delta_energy: float,
        record: MoveRecord,
        state: MCState,
        rng: np.random.Generator,
    ) -> bool:
        n_particles = state.n_particles
        volume = state.box.volume

        if record.kind is MoveKind.DISPLACEMENT:
            return metropolis(delta_energy, self.beta, rng)
        if record.kind is MoveKind.INSERTION:
            return self._insertion_acceptance(delta_energy, n_particles, volume)
        if record.kind is MoveKind.DELETION:
            return self._deletion_acceptance(delta_energy, n_particles, volume)
        raise ValueError(f"Unknown move kind: {record.kind}")

    def recorded_energy(
        self, old_energy: float, new_energy: float, accepted: bool
    ) -> float:
        # The energy log always carries the proposed energy
        return new_energy
