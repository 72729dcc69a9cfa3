"""
ThreadExecutor: Thread-based parallel execution.

Runs bucket tasks in a ThreadPoolExecutor within the same process.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ThreadExecutor:
    """
    Executor using ThreadPoolExecutor.

    Since threads share memory, tasks are passed directly without pickling.
    Buckets are numpy-heavy, so threads overlap where numpy releases the GIL.
    """

    def __init__(self, max_workers: int = 4) -> None:
        """
        Initialize the thread executor.

        Args:
            max_workers: Maximum number of worker threads.
        """
        self._max_workers = max_workers
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="noiselab"
        )

        # Track worker numbers for logging
        self._worker_counter = 0
        self._worker_counter_lock = threading.Lock()

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def _get_worker_id(self) -> str:
        """Get a unique worker ID for logging."""
        with self._worker_counter_lock:
            self._worker_counter += 1
            return f"thread:{self._worker_counter}"

    def _run_one(self, fn: Callable[[T], R], task: T) -> R:
        worker_id = self._get_worker_id()
        logger.debug("%s running %r", worker_id, task)
        return fn(task)

    def submit(self, fn: Callable[[T], R], tasks: Sequence[T]) -> list[Future[R]]:
        """
        Submit tasks for execution.

        Args:
            fn: Worker function applied to each task.
            tasks: Bucket tasks.

        Returns:
            One future per task, in task order.
        """
        with self._worker_counter_lock:
            self._worker_counter = 0
        return [self._pool.submit(self._run_one, fn, task) for task in tasks]

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the thread pool."""
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> ThreadExecutor:
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return f"ThreadExecutor(max_workers={self._max_workers})"
