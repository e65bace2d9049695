"""Analysis of Monte Carlo runs."""

from .statistics import (
    StatisticsAccumulator,
    StepStatistics,
    helmholtz_estimate,
    isosteric_heat,
)

__all__ = [
    "StatisticsAccumulator",
    "StepStatistics",
    "helmholtz_estimate",
    "isosteric_heat",
]
