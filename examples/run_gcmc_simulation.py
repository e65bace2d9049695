#!/usr/bin/env python
"""
Grand canonical (muVT) Lennard-Jones simulation in reduced units.

This example demonstrates:
- Insertion and deletion moves changing the particle count
- Choosing mass and Planck constant to set the thermal wavelength
- Per-step isosteric heat and particle count series

Usage:
    python examples/run_gcmc_simulation.py
"""

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend

import matplotlib.pyplot as plt
import numpy as np

from mccore import simulate


def main():
    print("=" * 60)
    print("GCMC Lennard-Jones Simulation")
    print("=" * 60)

    # lambda = e, so ln(lambda^3) = 3 and the small box can fill
    result = simulate.gcmc(
        n_steps=5000,
        seed=11,
        box_length=2.0,
        temperature=1.0,
        epsilon=1.0,
        sigma=1.0,
        mass=1.0,
        planck=np.e * np.sqrt(2.0 * np.pi),
        write_files=True,
        output_dir="gcmc_output",
    )

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax = axes[0]
    ax.step(result.steps, result.n_particles, "b-", where="post", linewidth=0.5)
    ax.axhline(
        y=result.average_particles,
        color="r",
        linestyle="--",
        label=f"<N> = {result.average_particles:.2f}",
    )
    ax.set_xlabel("Step")
    ax.set_ylabel("N")
    ax.set_title("Particle Count")
    ax.legend()
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    counts = np.bincount(result.n_particles)
    ax.bar(np.arange(len(counts)), counts / counts.sum(), color="blue", alpha=0.7)
    ax.set_xlabel("N")
    ax.set_ylabel("Probability")
    ax.set_title("Particle Count Distribution")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig("gcmc_simulation.png", dpi=150)
    print("\nPlot saved to gcmc_simulation.png")

    print("\nSummary:")
    print(f"  Mean particle count: {result.average_particles:.4f}")
    print(f"  Mean energy: {result.average_energy:.4f}")
    print(f"  Acceptance ratio: {result.acceptance_ratio:.3f}")
    print(f"  Output files: {', '.join(str(p) for p in result.output_files.values())}")


if __name__ == "__main__":
    main()
