"""
Factory function for creating progress trackers.
"""

from __future__ import annotations

from typing import Any, Literal

from noiselab.progress.base import ProgressTracker, SimpleProgressTracker


def create_progress_tracker(
    total: int = 0,
    title: str = "noiselab",
    style: Literal["rich", "simple"] = "rich",
    **kwargs: Any,
) -> ProgressTracker:
    """
    Create a progress tracker.

    Args:
        total: Total number of experiment/generator pairs expected.
        title: Title for the progress display.
        style: Progress style to use:
            - "rich": Live rich display
            - "simple": Plain text lines
        **kwargs: Additional arguments passed to the tracker.

    Returns:
        A ProgressTracker instance.

    Raises:
        ValueError: If style is not recognised.

    Example:
        tracker = create_progress_tracker(total=44, title="Lottery")
        with tracker:
            run_suite(config, run_seed, on_event=tracker)
    """
    if style == "simple":
        return SimpleProgressTracker(total=total, title=title, **kwargs)

    if style == "rich":
        from noiselab.progress.rich import RichProgressTracker

        return RichProgressTracker(total=total, title=title, **kwargs)

    raise ValueError(f"Unknown progress style: {style!r}. Use 'rich' or 'simple'.")
