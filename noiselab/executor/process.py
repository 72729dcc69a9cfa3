"""
ProcessExecutor: Process-based parallel execution.

Runs bucket tasks in a ProcessPoolExecutor. The worker function and tasks are
pickled, so the function must be defined at module level.
"""

from __future__ import annotations

from concurrent.futures import Future, ProcessPoolExecutor
from typing import Any, Callable, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class ProcessExecutor:
    """
    Executor using ProcessPoolExecutor.

    Each bucket runs in a worker process with no shared state other than what
    the task carries (run seed, stream block, rule settings).
    """

    def __init__(self, max_workers: int = 4) -> None:
        """
        Initialize the process executor.

        Args:
            max_workers: Maximum number of worker processes.
        """
        self._max_workers = max_workers
        self._pool = ProcessPoolExecutor(max_workers=max_workers)

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def submit(self, fn: Callable[[T], R], tasks: Sequence[T]) -> list[Future[R]]:
        """
        Submit tasks for execution.

        Args:
            fn: Module-level worker function (pickle-safe).
            tasks: Picklable bucket tasks.

        Returns:
            One future per task, in task order.
        """
        return [self._pool.submit(fn, task) for task in tasks]

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the process pool."""
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> ProcessExecutor:
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return f"ProcessExecutor(max_workers={self._max_workers})"
