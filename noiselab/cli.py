"""
noiselab CLI: Command-line interface for noise experiments.

Provides commands for:
- run: Run the configured experiment suite and print a results table
- generators: List the available sequence generators
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import math
import sys
from dataclasses import replace
from pathlib import Path


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="noiselab",
        description="noiselab: Monte Carlo experiments on colored and low-discrepancy noise",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # run
    run_parser = subparsers.add_parser(
        "run",
        help="Run the experiment suite",
    )
    run_parser.add_argument(
        "--config", "-c",
        help="Config file (default: nearest .noiselab.toml, else built-in defaults)",
    )
    run_parser.add_argument(
        "--deterministic",
        action="store_true",
        default=None,
        help="Use a fixed run seed instead of OS entropy",
    )
    run_parser.add_argument(
        "--seed",
        type=int,
        help="Run seed for deterministic mode (implies --deterministic)",
    )
    run_parser.add_argument(
        "--experiment", "-e",
        action="append",
        dest="experiments",
        help="Experiment to run (repeatable; default: all configured)",
    )
    run_parser.add_argument(
        "--generator", "-g",
        action="append",
        dest="generators",
        help="Generator to run (repeatable; default: all configured)",
    )
    run_parser.add_argument(
        "--executor",
        help="Executor type (serial, thread, process)",
    )
    run_parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of workers for thread/process executors",
    )
    run_parser.add_argument(
        "--progress",
        choices=["rich", "simple", "none"],
        help="Progress display style",
    )
    run_parser.add_argument(
        "--csv",
        help="Write the results table to this CSV path (requires pandas)",
    )

    # generators
    subparsers.add_parser(
        "generators",
        help="List available sequence generators",
    )

    args = parser.parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "run":
        return handle_run(args)
    elif args.command == "generators":
        return handle_generators(args)
    else:
        parser.print_help()
        return 0


def handle_generators(args: argparse.Namespace) -> int:
    """Handle the generators command."""
    from noiselab.sequences import list_generators

    for kind in list_generators():
        print(f"{kind.value:<26} {kind.label}")
    return 0


def handle_run(args: argparse.Namespace) -> int:
    """Handle the run command."""
    from rich.console import Console

    from noiselab.config import ExecutorSettings, ProjectConfig, ProgressSettings, RunSettings
    from noiselab.progress import create_progress_tracker, display_results
    from noiselab.runner import count_pairs, run_suite

    try:
        config = ProjectConfig.load(path=Path(args.config) if args.config else None)

        run = config.run
        if args.seed is not None:
            run = RunSettings(deterministic=True, seed=args.seed)
        elif args.deterministic:
            run = RunSettings(deterministic=True, seed=run.seed)

        executor_settings = config.executor
        if args.executor is not None or args.workers is not None:
            options = dict(executor_settings.options)
            if args.workers is not None:
                options["workers"] = args.workers
            executor_settings = ExecutorSettings(
                type=args.executor or executor_settings.type,
                options=options,
            )

        progress = config.progress
        if args.progress is not None:
            progress = ProgressSettings(style=args.progress, interval=progress.interval)

        config = replace(config, run=run, executor=executor_settings, progress=progress)
        config = config.select(experiments=args.experiments, generators=args.generators)
        run_seed = config.run.run_seed()
        executor = config.executor.create()
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    console = Console()
    console.print(f"e   = {math.e:.10f}")
    console.print(f"1/e = {1.0 / math.e:.10f}")
    console.print(
        f"run seed = {run_seed.value} "
        f"({'deterministic' if run_seed.deterministic else 'entropy'})"
    )

    tracker = None
    if config.progress.style != "none":
        tracker = create_progress_tracker(
            total=count_pairs(config),
            title="noiselab",
            style=config.progress.style,
        )

    with contextlib.ExitStack() as stack:
        if executor is not None:
            stack.enter_context(executor)
        if tracker is not None:
            stack.enter_context(tracker)
        results = run_suite(config, run_seed, executor=executor, on_event=tracker)

    display_results(results, console=console)

    if args.csv:
        try:
            path = results.to_csv(args.csv)
        except ImportError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        console.print(f"Results written to {path}")

    return 1 if len(results.failed) else 0


if __name__ == "__main__":
    sys.exit(main())
