"""Elementary Monte Carlo moves and their inverses."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from ..system import MCState

logger = logging.getLogger(__name__)


class MoveKind(Enum):
    """Kind of elementary perturbation."""

    DISPLACEMENT = "displacement"
    INSERTION = "insertion"
    DELETION = "deletion"


@dataclass(frozen=True)
class MoveRecord:
    """
    Everything needed to reverse one move.

    Attributes:
        kind: Which move was made.
        index: Index of the affected particle at the time of the move.
        position: Prior position for a displacement, the new particle's
            coordinates for an insertion, the removed particle's coordinates
            for a deletion.
        offset: Displacement vector (zero for insertion and deletion).
    """

    kind: MoveKind
    index: int
    position: NDArray[np.floating]
    offset: NDArray[np.floating]

    def __post_init__(self) -> None:
        position = np.array(self.position, dtype=np.float64)
        offset = np.array(self.offset, dtype=np.float64)
        position.flags.writeable = False
        offset.flags.writeable = False
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "offset", offset)


class MoveProposer:
    """
    Generates displacement, insertion and deletion moves.

    Every move mutates the state in place and returns a ``MoveRecord``;
    ``undo`` applies the exact inverse. Displacement offsets are drawn
    uniformly in [-L/2, L/2) per axis, insertion coordinates uniformly in
    [0, L) per axis. The move size is fixed by the box, not tuned.

    Attributes:
        rng: Random number generator shared with the rest of the run.
    """

    def __init__(self, rng: np.random.Generator) -> None:
        """
        Initialize move proposer.

        Args:
            rng: NumPy random generator used for every draw.
        """
        self.rng = rng

    def _pick_particle(self, state: MCState) -> int:
        """Pick a uniformly random particle index."""
        return int(self.rng.integers(state.n_particles))

    def displace(self, state: MCState) -> MoveRecord:
        """
        Move a random particle by a random offset and wrap it into the box.

        Args:
            state: State to modify in place.

        Returns:
            Record holding the particle index, its old position and the
            offset applied.
        """
        if state.n_particles == 0:
            raise ValueError("Cannot displace a particle in an empty system")

        index = self._pick_particle(state)
        length = state.box.length
        offset = (self.rng.random(3) - 0.5) * length

        old_position = state.positions[index].copy()
        state.positions[index] = state.box.wrap_positions(old_position + offset)

        return MoveRecord(MoveKind.DISPLACEMENT, index, old_position, offset)

    def insert(self, state: MCState) -> MoveRecord:
        """Append a particle at a uniformly random position in the box."""
        position = self.rng.random(3) * state.box.length
        index = state.append(position)
        return MoveRecord(MoveKind.INSERTION, index, position, np.zeros(3))

    def delete(self, state: MCState) -> MoveRecord:
        """Remove a uniformly random particle."""
        if state.n_particles == 0:
            raise ValueError("Cannot delete a particle from an empty system")

        index = self._pick_particle(state)
        removed = state.remove(index)
        return MoveRecord(MoveKind.DELETION, index, removed, np.zeros(3))

    def choose(self, state: MCState) -> MoveRecord:
        """
        Make one grand canonical move.

        An empty system always gets an insertion. Otherwise a uniform value
        in [0, 3) selects the move: below 1 displaces, above 2 inserts, and
        anything in [1, 2] deletes.

        Args:
            state: State to modify in place.

        Returns:
            Record of the move that was made.
        """
        if state.n_particles == 0:
            return self.insert(state)

        choice = self.rng.random() * 3.0
        if choice < 1.0:
            return self.displace(state)
        if choice > 2.0:
            return self.insert(state)
        return self.delete(state)

    def undo(self, state: MCState, record: MoveRecord) -> None:
        """
        Reverse a move previously made on ``state``.

        Args:
            state: State the move was applied to.
            record: Record returned when the move was made.
        """
        if record.kind is MoveKind.DISPLACEMENT:
            state.positions[record.index] = record.position
        elif record.kind is MoveKind.INSERTION:
            state.remove(record.index)
        elif record.kind is MoveKind.DELETION:
            state.insert(min(record.index, state.n_particles), record.position)
        else:
            raise ValueError(f"Unknown move kind: {record.kind}")
        logger.debug("Undid %s of particle %d", record.kind.value, record.index)
