"""Monte Carlo simulation engine implementation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np

from ..analysis import StatisticsAccumulator
from ..moves import MoveKind, MoveProposer
from .reporters import Reporter, ReporterGroup

if TYPE_CHECKING:
    from ..analysis import StepStatistics
    from ..ensembles import Ensemble
    from ..moves import MoveRecord
    from ..potentials import EnergyProvider
    from ..system import MCState

logger = logging.getLogger(__name__)


class MCEngine:
    """
    Metropolis Monte Carlo simulation engine.

    Every step runs the same cycle:
    1. Propose a move (the ensemble picks the kind)
    2. Evaluate the new energy
    3. Accept, or undo the move using its record
    4. Update running statistics
    5. Report

    Exactly one move is attempted per step and every step is recorded,
    accepted or not.

    Example usage:
        engine = MCEngine(
            state=MCState(positions, Box.cubic(200.0)),
            potential=LennardJonesPotential(),
            ensemble=CanonicalEnsemble(temperature=77.0),
            seed=1234,
        )
        engine.add_reporter(EnergyLogReporter("energies.dat"))
        engine.run(nsteps=10000)

    Attributes:
        state: Current particle configuration.
        potential: Energy evaluator.
        ensemble: Move policy and acceptance rules.
    """

    def __init__(
        self,
        state: MCState,
        potential: EnergyProvider,
        ensemble: Ensemble,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
        incremental_energy: bool = False,
    ) -> None:
        """
        Initialize Monte Carlo engine.

        Args:
            state: Initial configuration (copied).
            potential: Energy evaluator.
            ensemble: Ensemble providing move choice and acceptance.
            rng: Random generator for every draw of the run. Takes
                precedence over ``seed``.
            seed: Seed for a new generator. Defaults to the wall clock.
            incremental_energy: Update the energy from the touched particle
                only instead of recomputing every pair.
        """
        self._state = state.copy()
        self._potential = potential
        self._ensemble = ensemble
        self._incremental_energy = incremental_energy

        if rng is None:
            if seed is None:
                seed = time.time_ns()
            rng = np.random.default_rng(seed)
            logger.info("Random seed: %d", seed)
        self._seed = seed
        self._rng = rng
        self._proposer = MoveProposer(rng)

        self._statistics = StatisticsAccumulator(
            kT=ensemble.kT, grand_canonical=ensemble.grand_canonical
        )
        self._reporters = ReporterGroup()

        # Tracking
        self._started = False
        self._running = False
        self._total_steps = 0
        self._wall_time = 0.0

        self._energy = self._potential.total_energy(self._state)
        logger.info(
            "%s engine: N=%d, L=%g, T=%g, initial energy %.6f",
            ensemble.name.upper(),
            self._state.n_particles,
            self._state.box.length,
            ensemble.temperature,
            self._energy,
        )

    @property
    def state(self) -> MCState:
        """Return current simulation state."""
        return self._state

    @property
    def potential(self) -> EnergyProvider:
        return self._potential

    @property
    def ensemble(self) -> Ensemble:
        return self._ensemble

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    @property
    def seed(self) -> int | None:
        """Seed the generator was built from, if the engine built it."""
        return self._seed

    @property
    def proposer(self) -> MoveProposer:
        return self._proposer

    @property
    def statistics(self) -> StatisticsAccumulator:
        return self._statistics

    @property
    def energy(self) -> float:
        """Return potential energy of the current configuration."""
        return self._energy

    @property
    def wall_time(self) -> float:
        """Wall-clock seconds spent in ``run``."""
        return self._wall_time

    @property
    def performance(self) -> dict[str, float]:
        """Return performance statistics."""
        if self._wall_time == 0:
            return {"steps_per_second": 0.0, "wall_time": 0.0, "total_steps": 0}
        return {
            "steps_per_second": self._total_steps / self._wall_time,
            "wall_time": self._wall_time,
            "total_steps": self._total_steps,
        }

    def add_reporter(self, reporter: Reporter) -> None:
        """Add a reporter."""
        self._reporters.add(reporter)

    def remove_reporter(self, reporter: Reporter) -> None:
        """Remove a reporter."""
        self._reporters.remove(reporter)

    def _proposed_energy(self, record: MoveRecord) -> float:
        """Energy of the configuration after the move in ``record``."""
        if not self._incremental_energy:
            return self._potential.total_energy(self._state)

        state = self._state
        box = state.box
        if record.kind is MoveKind.DISPLACEMENT:
            others = state.others(record.index)
            delta = self._potential.interaction_energy(
                state.positions[record.index], others, box
            ) - self._potential.interaction_energy(record.position, others, box)
        elif record.kind is MoveKind.INSERTION:
            others = state.others(record.index)
            delta = self._potential.interaction_energy(record.position, others, box)
        else:
            delta = -self._potential.interaction_energy(
                record.position, state.positions, box
            )
        return self._energy + delta

    def _start(self) -> None:
        """Record the starting configuration as step 0."""
        self._state.step = 0
        self._statistics.start(self._energy, self._state.n_particles)
        self._reporters.initialize(self._state, self._energy)
        self._started = True

    def step(self) -> StepStatistics:
        """
        Perform a single Monte Carlo step.

        Outside ``run()`` the first call opens the reporters with the
        current configuration as step 0; call ``close()`` when done.

        Returns:
            Observables after the step.
        """
        if not self._started:
            self._start()

        state = self._state
        state.step += 1
        old_energy = self._energy

        record = self._ensemble.propose(self._proposer, state)
        new_energy = self._proposed_energy(record)
        accepted = self._ensemble.accept(
            old_energy, new_energy, record, state, self._rng
        )
        recorded_energy = self._ensemble.recorded_energy(
            old_energy, new_energy, accepted
        )

        # The particle sum counts the trial configuration, even if undone
        sampled_particles = state.n_particles
        if accepted:
            self._energy = new_energy
        else:
            self._proposer.undo(state, record)
        logger.debug(
            "step %d: %s %s, dE=%.6f",
            state.step,
            record.kind.value,
            "accepted" if accepted else "rejected",
            new_energy - old_energy,
        )

        stats = self._statistics.update(
            state.step,
            self._energy,
            state.n_particles,
            old_energy,
            accepted,
            sampled_particles=sampled_particles,
        )
        self._reporters.report(
            state, stats, recorded_energy=recorded_energy, move=record
        )
        return stats

    def run(
        self,
        nsteps: int,
        callback: Callable[[MCEngine], bool] | None = None,
    ) -> MCState:
        """
        Run the simulation for a fixed number of steps.

        Each call is a fresh run from the current configuration: reporters
        are initialized with it as step 0 and finalized when the run ends.
        Zero steps records only step 0.

        Args:
            nsteps: Number of steps to run (>= 0).
            callback: Optional callback called each step.
                     Return True to stop simulation early.

        Returns:
            Final simulation state.
        """
        if nsteps < 0:
            raise ValueError(f"nsteps must be non-negative, got {nsteps}")

        self.close()
        self._running = True
        start_time = time.perf_counter()
        logger.info("Running %d steps", nsteps)

        try:
            self._start()
            for _ in range(nsteps):
                if not self._running:
                    break

                self.step()
                self._total_steps += 1

                if callback is not None and callback(self):
                    break
        finally:
            self._wall_time += time.perf_counter() - start_time
            self._running = False
            self.close()

        logger.info(
            "Finished after %d steps in %.3f s, <E>=%.6f, acceptance %.3f",
            self._statistics.step,
            self._wall_time,
            self._statistics.average_energy,
            self._statistics.acceptance_ratio,
        )
        return self._state

    def stop(self) -> None:
        """Signal simulation to stop."""
        self._running = False

    def close(self) -> None:
        """Finalize reporters opened by ``run()`` or a standalone ``step()``."""
        if not self._started:
            return
        self._started = False
        self._reporters.finalize(self._state)
