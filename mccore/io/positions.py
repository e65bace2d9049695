"""Starting configuration files.

A starting configuration is plain text with one particle per line,
``x y z`` separated by whitespace.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..system import Box

logger = logging.getLogger(__name__)


def read_starting_positions(
    filename: str | Path,
    n_particles: int | None = None,
    box: Box | None = None,
) -> NDArray[np.floating]:
    """
    Read particle positions from a starting configuration file.

    Args:
        filename: Path of the file to read.
        n_particles: Number of particles to read. Lines past this count are
            ignored. If None, every line is read.
        box: If given, every coordinate must lie inside it.

    Returns:
        Positions array of shape (N, 3).

    Raises:
        ConfigurationError: If the file is missing, holds fewer than
            ``n_particles`` lines, has a malformed line, or places a particle
            outside ``box``.
    """
    path = Path(filename)
    if not path.is_file():
        raise ConfigurationError(f"Starting configuration not found: {path}")

    rows: list[list[float]] = []
    with path.open() as f:
        for lineno, line in enumerate(f, start=1):
            if n_particles is not None and len(rows) >= n_particles:
                break
            parts = line.split()
            if not parts:
                continue
            if len(parts) != 3:
                raise ConfigurationError(
                    f"{path}:{lineno}: expected 'x y z', got {line.strip()!r}"
                )
            try:
                rows.append([float(p) for p in parts])
            except ValueError as exc:
                raise ConfigurationError(
                    f"{path}:{lineno}: non-numeric coordinate in {line.strip()!r}"
                ) from exc

    if n_particles is not None and len(rows) < n_particles:
        raise ConfigurationError(
            f"{path}: expected {n_particles} particles, found {len(rows)}"
        )

    positions = np.array(rows, dtype=np.float64).reshape(-1, 3)
    if box is not None and not box.contains(positions):
        raise ConfigurationError(
            f"{path}: coordinates must lie in [0, {box.length})"
        )

    logger.info("Read %d starting positions from %s", len(positions), path)
    return positions


def write_starting_positions(filename: str | Path, positions: ArrayLike) -> None:
    """Write positions in the starting configuration format."""
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    with Path(filename).open("w") as f:
        for x, y, z in positions:
            f.write(f"{x:.6f} {y:.6f} {z:.6f}\n")
