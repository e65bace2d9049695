"""Monte Carlo moves."""

from .proposer import MoveKind, MoveProposer, MoveRecord

__all__ = ["MoveKind", "MoveProposer", "MoveRecord"]
