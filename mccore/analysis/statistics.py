"""Running statistics of a Monte Carlo run."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


def isosteric_heat(
    average_particles: float, average_energy: float, kT: float, step: int
) -> float:
    """
    Isosteric heat estimate from running first moments.

        QST = kT - (<NU> - <N><U>) / (<N^2> - <N>^2)

    The second moments are approximated from the first: <N^2> is taken as
    (<N>^2)^2 and <NU> as <N><U> / step. No sum of squares is kept.

    Args:
        average_particles: <N>, the particle-count sum over the step number.
        average_energy: <U>, the energy sum over the step number.
        kT: Thermal energy.
        step: Current step number (>= 1).

    Returns:
        QST, or NaN when the denominator vanishes (<N> of 0 or 1).
    """
    n_squared = average_particles * average_particles
    average_of_n_squared = n_squared * n_squared
    average_n_times_u = average_particles * average_energy / step

    numerator = average_n_times_u - average_particles * average_energy
    denominator = average_of_n_squared - n_squared
    if denominator == 0.0:
        return float("nan")
    return kT - numerator / denominator


def helmholtz_estimate(delta_energy: float, kT: float, step: int) -> float:
    """
    Free-energy-like quantity kT * ln(exp(-dE/kT) / step).

    Evaluated as -dE - kT ln(step), which is the same value without the
    exponential underflowing for large dE.
    """
    return -delta_energy - kT * math.log(step)


@dataclass(frozen=True)
class StepStatistics:
    """Observables after one Monte Carlo step."""

    step: int
    energy: float
    n_particles: int
    accepted: bool
    average_energy: float
    average_particles: float
    qst: float | None = None
    helmholtz: float | None = None


class StatisticsAccumulator:
    """
    Running sums and derived averages.

    The initial configuration is sample 0; each step adds one sample
    whether or not its move was accepted. The reported averages divide the
    sums by the sample count. Grand canonical runs also derive an isosteric
    heat per step, whose moments divide the same sums by the step number;
    canonical runs derive a free-energy estimate instead.
    """

    def __init__(self, kT: float, grand_canonical: bool = False) -> None:
        """
        Initialize accumulator.

        Args:
            kT: Thermal energy k*T.
            grand_canonical: Derive QST (True) or helmholtz (False).
        """
        self.kT = kT
        self.grand_canonical = grand_canonical
        self.reset()

    @property
    def name(self) -> str:
        return "statistics"

    def reset(self) -> None:
        """Reset all sums."""
        self._n_samples = 0
        self._step = 0
        self._n_accepted = 0
        self._sum_energy = 0.0
        self._sum_past_energy = 0.0
        self._sum_particles = 0.0
        self._last_qst: float | None = None
        self._last_helmholtz: float | None = None

    def start(self, energy: float, n_particles: int) -> None:
        """Record the initial configuration as sample 0."""
        self.reset()
        self._sum_energy = energy
        self._sum_particles = float(n_particles)
        self._n_samples = 1

    def update(
        self,
        step: int,
        energy: float,
        n_particles: int,
        previous_energy: float,
        accepted: bool,
        sampled_particles: int | None = None,
    ) -> StepStatistics:
        """
        Add one step.

        Args:
            step: Step number (>= 1).
            energy: Energy of the configuration kept after the step.
            n_particles: Particle count kept after the step.
            previous_energy: Energy before the step's move.
            accepted: Whether the move was kept.
            sampled_particles: Particle count added to the running sum.
                Grand canonical runs pass the count right after the trial
                move, before a rejected move is undone. Defaults to
                ``n_particles``.

        Returns:
            Observables for this step.
        """
        if self._n_samples == 0:
            raise RuntimeError("start() must be called before update()")
        if step < 1:
            raise ValueError(f"step must be >= 1, got {step}")

        self._step = step
        self._n_samples += 1
        self._sum_energy += energy
        if sampled_particles is None:
            sampled_particles = n_particles
        self._sum_particles += sampled_particles
        if accepted:
            self._n_accepted += 1
            self._sum_past_energy += previous_energy

        qst = None
        helmholtz = None
        if self.grand_canonical:
            qst = isosteric_heat(
                self._sum_particles / step, self._sum_energy / step, self.kT, step
            )
            self._last_qst = qst
        else:
            delta = self._sum_energy - self._sum_past_energy if accepted else 0.0
            helmholtz = helmholtz_estimate(delta, self.kT, step)
            self._last_helmholtz = helmholtz

        return StepStatistics(
            step=step,
            energy=energy,
            n_particles=n_particles,
            accepted=accepted,
            average_energy=self.average_energy,
            average_particles=self.average_particles,
            qst=qst,
            helmholtz=helmholtz,
        )

    @property
    def n_samples(self) -> int:
        """Number of samples, including the initial one."""
        return self._n_samples

    @property
    def step(self) -> int:
        """Last step recorded."""
        return self._step

    @property
    def average_energy(self) -> float:
        """Running average energy."""
        if self._n_samples == 0:
            return 0.0
        return self._sum_energy / self._n_samples

    @property
    def average_particles(self) -> float:
        """Running average particle count."""
        if self._n_samples == 0:
            return 0.0
        return self._sum_particles / self._n_samples

    @property
    def acceptance_ratio(self) -> float:
        """Fraction of steps whose move was kept."""
        if self._step == 0:
            return 0.0
        return self._n_accepted / self._step

    def result(self) -> dict[str, Any]:
        """Summary of the accumulated statistics."""
        results: dict[str, Any] = {
            "n_samples": self._n_samples,
            "n_steps": self._step,
            "average_energy": self.average_energy,
            "average_particles": self.average_particles,
            "acceptance_ratio": self.acceptance_ratio,
        }
        if self.grand_canonical:
            results["qst"] = self._last_qst
        else:
            results["helmholtz"] = self._last_helmholtz
        return results
