"""
Executor protocol: Platform-agnostic execution interface.

The Executor abstraction supports:
- Threads (same process)
- Processes (multiple processes)

A harness with no executor runs buckets inline on the calling thread.
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, Protocol, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class Executor(Protocol):
    """
    Protocol for execution backends.

    Key design decisions:
    - submit() takes all tasks at once and returns one future per task
    - Tasks and the worker function must be picklable (module-level function,
      dataclass tasks) so process pools can run them
    - Executors never emit events; the caller reports progress as futures finish
    """

    def submit(self, fn: Callable[[T], R], tasks: Sequence[T]) -> list[Future[R]]:
        """
        Submit ``fn(task)`` for every task.

        Args:
            fn: Module-level worker function.
            tasks: Task objects, one per bucket.

        Returns:
            Futures in the same order as ``tasks``.
        """
        ...

    def shutdown(self, wait: bool = True) -> None:
        """
        Shutdown the executor.

        Args:
            wait: If True, wait for pending tasks to complete.
        """
        ...

    def __enter__(self) -> Any:
        ...

    def __exit__(self, *args: Any) -> None:
        ...
