"""Command-line interface."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from . import simulate
from .config import ENSEMBLES, SimulationConfig, parse_step_count
from .exceptions import ConfigurationError
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

STEP_PROMPT = "How many tries do you want to do?"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mccore",
        description="Metropolis Monte Carlo for a Lennard-Jones fluid (NVT or GCMC)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m mccore nvt --start startingpositions.txt --steps 10000
  python -m mccore gcmc --steps 5000 --seed 42 --output-dir run1
  python -m mccore gcmc            # asks for the number of steps
""",
    )
    parser.add_argument("ensemble", choices=ENSEMBLES, help="Statistical ensemble")
    parser.add_argument(
        "--steps", "-s", type=str, default=None,
        help="Number of Monte Carlo steps (asked on stdin when omitted)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--start", type=Path, default=None, dest="starting_positions",
        help="Starting configuration file (NVT, default: startingpositions.txt)",
    )
    parser.add_argument(
        "--particles", "-n", type=int, default=None, dest="n_particles",
        help="Number of particles to read from the starting configuration (NVT)",
    )
    parser.add_argument("--temperature", "-T", type=float, default=None)
    parser.add_argument("--box-length", "-L", type=float, default=None)
    parser.add_argument("--output-dir", "-o", type=Path, default=None)
    parser.add_argument(
        "--incremental", action="store_true", default=None,
        dest="incremental_energy",
        help="Update energies from the moved particle only",
    )
    parser.add_argument(
        "--report-frequency", type=int, default=None,
        help="Log progress every N steps (default: 1000)",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument("--log-file", default=None, help="Also write the log here")
    return parser


def prompt_step_count(read: Callable[[str], str] = input) -> int:
    """Ask for the number of steps on the console."""
    print(STEP_PROMPT, flush=True)
    try:
        text = read("")
    except EOFError as exc:
        raise ConfigurationError("No step count given") from exc
    return parse_step_count(text)


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for CLI.

    Returns:
        Process exit status: 0 on success, 2 on a configuration error.
    """
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    try:
        config = SimulationConfig.for_ensemble(
            args.ensemble,
            seed=args.seed,
            starting_positions=args.starting_positions,
            n_particles=args.n_particles,
            temperature=args.temperature,
            box_length=args.box_length,
            output_dir=args.output_dir,
            incremental_energy=args.incremental_energy,
            report_frequency=args.report_frequency,
        )
        if args.steps is not None:
            n_steps = parse_step_count(args.steps)
        else:
            n_steps = prompt_step_count()
        result = simulate.run(config.with_steps(n_steps))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(f"Done! This run took {result.wall_time:f} seconds.")
    print(f"The average energy was {result.average_energy:f}.")
    if config.ensemble == "gcmc":
        print(f"The average number of particles was {result.average_particles:f}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
