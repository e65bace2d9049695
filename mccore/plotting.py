"""
Built-in plotting utilities for simulation results.

Example:
    >>> from mccore import simulate, plotting
    >>> result = simulate.gcmc(n_steps=2000, seed=3)
    >>> plotting.particle_count(result)
    >>> plotting.save("gcmc_particles.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .simulate import SimulationResult

# Try to import matplotlib, but don't fail if not available
try:
    import matplotlib.pyplot as plt

    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False
    plt = None


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not HAS_MATPLOTLIB:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with: pip install mccore[plot]"
        )


def energy(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 5),
):
    """
    Plot the energy per step with its running average.

    Args:
        result: SimulationResult from a simulation.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.

    Returns:
        The matplotlib Figure.
    """
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(result.steps, result.recorded_energy, "b-", alpha=0.6, lw=0.6, label="E")
    ax.plot(result.steps, result.average_energy_series, "k-", lw=1.5, label="<E>")
    ax.set_xlabel("Step")
    ax.set_ylabel("Energy (K)")
    ax.set_title(
        f"{result.ensemble.upper()} energy (acceptance {result.acceptance_ratio:.2f})"
    )
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def particle_count(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
):
    """Plot the particle count per step and its mean."""
    _check_matplotlib()

    fig, ax = plt.subplots(figsize=figsize)
    ax.step(result.steps, result.n_particles, "b-", where="post", lw=0.8)
    ax.axhline(
        y=result.average_particles,
        color="r",
        linestyle="--",
        lw=1.5,
        label=f"<N> = {result.average_particles:.2f}",
    )
    ax.set_xlabel("Step")
    ax.set_ylabel("N")
    ax.set_title("Particle count")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def qst(
    result: SimulationResult,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
):
    """
    Plot the per-step isosteric heat of a grand canonical run.

    Steps where QST is undefined (NaN) are left as gaps.
    """
    _check_matplotlib()

    if np.all(np.isnan(result.qst)):
        raise ValueError("Result has no QST values; run a GCMC simulation")

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(result.steps, result.qst, "g-", lw=0.8)
    ax.set_xlabel("Step")
    ax.set_ylabel("QST (K)")
    ax.set_title("Isosteric heat")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save the current figure to a file.

    Args:
        filename: Output filename (e.g., "plot.png", "plot.pdf").
        dpi: Resolution in dots per inch.
    """
    _check_matplotlib()
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")


def show() -> None:
    """Display all pending plots."""
    _check_matplotlib()
    plt.show()
