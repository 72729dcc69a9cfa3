"""Local executor configurations: serial, thread pool and process pool."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, ClassVar

from noiselab.executor.config import ExecutorConfig, ExecutorConfigRegistry


def _workers(d: dict[str, Any]) -> int | None:
    workers = d.get("workers")
    if workers is None:
        return None
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise ValueError(f"workers must be a positive integer, got {workers!r}")
    return workers


@ExecutorConfigRegistry.register
@dataclass
class SerialExecutorConfig(ExecutorConfig):
    """Run every bucket inline on the calling thread."""

    executor_type: ClassVar[str] = "serial"

    def create(self) -> None:
        return None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SerialExecutorConfig:
        return cls()


@ExecutorConfigRegistry.register
@dataclass
class ThreadExecutorConfig(ExecutorConfig):
    """
    Configuration for thread pool execution.

    Attributes:
        workers: Pool size (default: CPU count).
    """

    executor_type: ClassVar[str] = "thread"
    workers: int | None = None

    def create(self):
        from noiselab.executor.thread import ThreadExecutor

        return ThreadExecutor(max_workers=self.workers or os.cpu_count() or 1)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ThreadExecutorConfig:
        return cls(workers=_workers(d))


@ExecutorConfigRegistry.register
@dataclass
class ProcessExecutorConfig(ExecutorConfig):
    """
    Configuration for process pool execution.

    Creates a ProcessExecutor for multi-worker, or None for a single worker.
    """

    executor_type: ClassVar[str] = "process"
    workers: int | None = None

    def create(self):
        """Create executor: ProcessExecutor for workers>1, None for serial."""
        workers = self.workers or os.cpu_count() or 1
        if workers == 1:
            return None
        from noiselab.executor.process import ProcessExecutor

        return ProcessExecutor(max_workers=workers)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ProcessExecutorConfig:
        """Parse from a config dict.

        Args:
            d: Configuration dictionary with optional 'workers' key.

        Returns:
            A ProcessExecutorConfig instance.
        """
        return cls(workers=_workers(d))
