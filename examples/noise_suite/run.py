"""
Minimal Working Example: every generator under every rule.

Usage:
    python examples/noise_suite/run.py

This demonstrates the core noiselab workflow:
- Load the suite from .noiselab.toml (next to this script)
- Resolve the run seed once
- Run the suite on a process pool with a live progress display
- Display results and compare against the analytic references
"""

import math
from pathlib import Path

import noiselab
from noiselab.progress import create_progress_tracker, display_results
from noiselab.runner import count_pairs


def main():
    config = noiselab.ProjectConfig.load(start_dir=Path(__file__).parent)

    # One seed for the whole run; every trial gets its own stream index.
    run_seed = config.run.run_seed()
    print(f"e = {math.e:.6f}, 1/e = {1 / math.e:.6f}, run seed = {run_seed.value}")

    executor = config.executor.create()  # None means inline
    with create_progress_tracker(total=count_pairs(config), style="rich") as tracker:
        if executor is None:
            results = noiselab.run_suite(config, run_seed, on_event=tracker)
        else:
            with executor:
                results = noiselab.run_suite(config, run_seed, executor=executor, on_event=tracker)

    display_results(results)

    # Sum-to-one should need about e samples for white noise
    white = results.filter(rule="sum", generator="white")[0]
    print(f"\nwhite noise sum-to-one: {white.mean:.4f} (expected {math.e:.4f})")


if __name__ == "__main__":
    main()
