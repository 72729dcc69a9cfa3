"""
Base classes for progress tracking.

Provides the ProgressTracker protocol and SimpleProgressTracker implementation.
"""

from __future__ import annotations

import sys
import time
from typing import TYPE_CHECKING, Any, Protocol, TextIO, runtime_checkable

if TYPE_CHECKING:
    from noiselab.events import Event


@runtime_checkable
class ProgressTracker(Protocol):
    """
    Protocol for progress trackers.

    Progress trackers receive events from the harness and display progress
    information to the user. They are only ever called from the coordinating
    thread.

    Trackers should be usable as context managers for setup/teardown.
    """

    total: int
    completed: int
    failed: int

    def __call__(self, event: Event) -> None:
        """Handle an event from the harness."""
        ...

    def __enter__(self) -> ProgressTracker:
        """Enter the context (start display)."""
        ...

    def __exit__(self, *args: Any) -> None:
        """Exit the context (cleanup display)."""
        ...


class SimpleProgressTracker:
    """
    Simple text-based progress tracker.

    Writes one line per progress event and one per finished experiment.

    Example:
        with SimpleProgressTracker(total=4) as tracker:
            results = run_suite(config, run_seed, on_event=tracker)
    """

    def __init__(
        self,
        total: int = 0,
        title: str = "noiselab",
        show_failures: bool = True,
        stream: TextIO | None = None,
    ) -> None:
        """
        Initialize the simple progress tracker.

        Args:
            total: Total number of experiment/generator pairs expected.
            title: Title for the progress display.
            show_failures: Whether to print failed bucket details.
            stream: Output stream (default: stdout).
        """
        self.total = total
        self.title = title
        self.show_failures = show_failures
        self.stream = stream or sys.stdout

        self.completed = 0
        self.failed = 0
        self.start_time = time.time()

    def _print(self, text: str) -> None:
        print(text, file=self.stream)

    def __call__(self, event: "Event") -> None:
        """Handle noiselab events."""
        from noiselab.events import EventKind

        if event.kind == EventKind.PROGRESS:
            percent = event.payload.get("percent", 0.0)
            self._print(f"  [{event.experiment_id}] {percent:3.0f}%")

        elif event.kind == EventKind.BUCKET_FAILED:
            self.failed += 1
            if self.show_failures:
                error = event.payload.get("error", "unknown")[:60]
                bucket = event.payload.get("bucket")
                self._print(f"  [FAIL] {event.experiment_id} bucket {bucket} ({error})")

        elif event.kind == EventKind.EXPERIMENT_FINISHED:
            self.completed += 1
            mean = event.payload.get("mean", float("nan"))
            std_dev = event.payload.get("std_dev", float("nan"))
            self._print(
                f"  [{self.title}] {self.completed}/{self.total} "
                f"{event.experiment_id}: mean={mean:.4f} std={std_dev:.4f}"
            )

        elif event.kind == EventKind.LOG:
            level = event.payload.get("level", "info")
            if level != "debug":
                self._print(f"  [{level}] {event.experiment_id}: {event.payload.get('message', '')}")

    def __enter__(self) -> "SimpleProgressTracker":
        """Start tracking."""
        self._print(f"\n{self.title}")
        self._print("-" * 60)
        return self

    def __exit__(self, *args: Any) -> None:
        """Finish tracking."""
        elapsed = time.time() - self.start_time
        self._print("-" * 60)
        self._print(f"Completed in {elapsed:.1f}s")
        self._print(f"  Experiments: {self.completed}")
        self._print(f"  Failed buckets: {self.failed}")
