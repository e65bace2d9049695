#!/usr/bin/env python
"""
Canonical (NVT) argon simulation from a starting configuration file.

This example demonstrates:
- Writing and reading the starting configuration format
- Energy and free-energy logs written per step
- Running average of the energy

Usage:
    python examples/run_nvt_simulation.py
"""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend

import matplotlib.pyplot as plt
import numpy as np

from mccore import simulate
from mccore.io import write_starting_positions


def main():
    print("=" * 60)
    print("NVT Argon Simulation")
    print("=" * 60)

    output_dir = Path("nvt_output")
    output_dir.mkdir(exist_ok=True)

    # 200 argon atoms at random in a 40 A box
    start = output_dir / "startingpositions.txt"
    rng = np.random.default_rng(7)
    write_starting_positions(start, rng.random((200, 3)) * 40.0)

    result = simulate.nvt(
        n_steps=3000,
        starting_positions=start,
        n_particles=200,
        box_length=40.0,
        temperature=77.0,
        seed=3,
        write_files=True,
        output_dir=output_dir,
    )

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax = axes[0]
    ax.plot(result.steps, result.energy, "b-", linewidth=0.5, alpha=0.7, label="E")
    ax.plot(result.steps, result.average_energy_series, "k-", label="<E>")
    ax.set_xlabel("Step")
    ax.set_ylabel("Energy (K)")
    ax.set_title("Energy vs Step")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(result.steps[1:], result.helmholtz[1:], "g-", linewidth=0.5)
    ax.set_xlabel("Step")
    ax.set_ylabel("Free energy estimate (K)")
    ax.set_title("Free Energy Log")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig("nvt_simulation.png", dpi=150)
    print("\nPlot saved to nvt_simulation.png")

    print("\nSummary:")
    print(f"  Mean energy: {result.average_energy:.4f} K")
    print(f"  Final energy: {result.final_energy:.4f} K")
    print(f"  Acceptance ratio: {result.acceptance_ratio:.3f}")
    print(f"  Wall time: {result.wall_time:.2f} s")


if __name__ == "__main__":
    main()
