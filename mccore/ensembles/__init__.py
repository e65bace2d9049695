"""Statistical ensembles and their acceptance rules."""

from .base import Ensemble, metropolis
from .gcmc import ARGON_MASS, PLANCK, GrandCanonicalEnsemble
from .nvt import CanonicalEnsemble

__all__ = [
    "Ensemble",
    "CanonicalEnsemble",
    "GrandCanonicalEnsemble",
    "metropolis",
    "ARGON_MASS",
    "PLANCK",
]
