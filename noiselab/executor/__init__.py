"""
Executor module: Platform-agnostic execution layer.

Provides:

- Executor: Protocol for execution backends
- ThreadExecutor: Thread-based parallel execution
- ProcessExecutor: Process-based parallel execution
- ExecutorConfig: Base configuration class for executor backends
- ExecutorConfigRegistry: Registry mapping type names to config classes
- executor_from_config: Factory function for config-driven executor creation
"""

from noiselab.executor.base import Executor
from noiselab.executor.config import (
    ExecutorConfig,
    ExecutorConfigRegistry,
    executor_from_config,
)
from noiselab.executor.local_config import (
    ProcessExecutorConfig,
    SerialExecutorConfig,
    ThreadExecutorConfig,
)  # triggers auto-registration
from noiselab.executor.process import ProcessExecutor
from noiselab.executor.thread import ThreadExecutor

__all__ = [
    "Executor",
    "ExecutorConfig",
    "ExecutorConfigRegistry",
    "executor_from_config",
    "ProcessExecutor",
    "ProcessExecutorConfig",
    "SerialExecutorConfig",
    "ThreadExecutor",
    "ThreadExecutorConfig",
]
