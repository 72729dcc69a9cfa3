"""
Progress tracking module for noiselab experiments.

Trackers are event callbacks: pass one as ``on_event`` to ``run_experiment``
or ``run_suite`` and use it as a context manager around the run.

Example:
    from noiselab.progress import create_progress_tracker

    with create_progress_tracker(total=config_pairs, style="simple") as tracker:
        results = run_suite(config, run_seed, on_event=tracker)
"""

from noiselab.progress.base import ProgressTracker, SimpleProgressTracker
from noiselab.progress.display import display_results
from noiselab.progress.factory import create_progress_tracker
from noiselab.progress.rich import RichProgressTracker

__all__ = [
    "ProgressTracker",
    "RichProgressTracker",
    "SimpleProgressTracker",
    "create_progress_tracker",
    "display_results",
]
