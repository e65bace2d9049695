"""I/O layer for starting configurations and trajectories."""

from .base import TrajectoryReader, TrajectoryWriter
from .formats.xyz import XYZReader, XYZWriter
from .positions import read_starting_positions, write_starting_positions

__all__ = [
    # Base classes
    "TrajectoryReader",
    "TrajectoryWriter",
    # Starting configurations
    "read_starting_positions",
    "write_starting_positions",
    # Formats
    "XYZReader",
    "XYZWriter",
]
