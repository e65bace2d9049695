#!/usr/bin/env python
"""
Quick start example - the simplest way to run a simulation.

Runs a short canonical run on a random argon configuration and a short
grand canonical run from an empty box, without writing any files.

Usage:
    python examples/quickstart.py
"""

import numpy as np

from mccore import simulate


def main():
    print("=" * 60)
    print("Monte Carlo Quick Start")
    print("=" * 60)

    # 1. NVT on 64 argon atoms placed at random in a 30 A box
    print("\n1. NVT argon:")
    print("-" * 40)
    rng = np.random.default_rng(0)
    result = simulate.nvt(
        n_steps=2000,
        positions=rng.random((64, 3)) * 30.0,
        box_length=30.0,
        seed=1,
    )
    print(f"   <E> = {result.average_energy:.4f} K")
    print(f"   acceptance = {result.acceptance_ratio:.3f}")

    # 2. GCMC with the argon defaults
    print("\n2. GCMC argon (T = 101 K, L = 22 A):")
    print("-" * 40)
    result = simulate.gcmc(n_steps=2000, seed=2)
    print(f"   <N> = {result.average_particles:.3f}")
    print(f"   <E> = {result.average_energy:.4f} K")

    print("\n" + "=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
