"""Simulation engine and reporters."""

from .engine import MCEngine
from .reporters import (
    CallbackReporter,
    ConsoleReporter,
    EnergyLogReporter,
    FreeEnergyReporter,
    QSTReporter,
    Reporter,
    ReporterGroup,
    TimeSeriesReporter,
    TrajectoryReporter,
)

__all__ = [
    "MCEngine",
    "Reporter",
    "ReporterGroup",
    "EnergyLogReporter",
    "TrajectoryReporter",
    "QSTReporter",
    "FreeEnergyReporter",
    "TimeSeriesReporter",
    "ConsoleReporter",
    "CallbackReporter",
]
