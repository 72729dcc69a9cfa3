"""Tests for noiselab.executor config and local_config modules."""

from __future__ import annotations

import pytest

from noiselab.executor import ProcessExecutor, ThreadExecutor
from noiselab.executor.config import ExecutorConfigRegistry, executor_from_config
from noiselab.executor.local_config import (
    ProcessExecutorConfig,
    SerialExecutorConfig,
    ThreadExecutorConfig,
)

# ---------------------------------------------------------------------------
# ExecutorConfigRegistry
# ---------------------------------------------------------------------------


class TestExecutorConfigRegistry:
    def test_builtin_types_registered(self):
        types = ExecutorConfigRegistry.types()
        assert {"serial", "thread", "process"} <= set(types)

    def test_get(self):
        assert ExecutorConfigRegistry.get("thread") is ThreadExecutorConfig

    def test_get_missing(self):
        assert ExecutorConfigRegistry.get("nonexistent") is None


# ---------------------------------------------------------------------------
# executor_from_config
# ---------------------------------------------------------------------------


class TestExecutorFromConfig:
    def test_serial(self):
        assert executor_from_config("serial", {}) is None  # None means inline execution

    def test_thread(self):
        executor = executor_from_config("thread", {"workers": 2})
        assert isinstance(executor, ThreadExecutor)
        assert executor.max_workers == 2
        executor.shutdown()

    def test_process_single_worker_is_serial(self):
        assert executor_from_config("process", {"workers": 1}) is None

    def test_process_parallel(self):
        executor = executor_from_config("process", {"workers": 2})
        assert isinstance(executor, ProcessExecutor)
        executor.shutdown()

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="Unknown executor type"):
            executor_from_config("nonexistent", {})


# ---------------------------------------------------------------------------
# Local config classes
# ---------------------------------------------------------------------------


class TestLocalExecutorConfigs:
    def test_serial_ignores_options(self):
        assert SerialExecutorConfig.from_dict({"workers": 8}).create() is None

    def test_thread_defaults_to_cpu_count(self):
        config = ThreadExecutorConfig.from_dict({})
        assert config.workers is None
        executor = config.create()
        assert executor.max_workers >= 1
        executor.shutdown()

    def test_process_custom_workers(self):
        config = ProcessExecutorConfig.from_dict({"workers": 8})
        assert config.workers == 8

    @pytest.mark.parametrize("workers", [0, -2, "4", True])
    def test_invalid_workers(self, workers):
        with pytest.raises(ValueError, match="workers"):
            ThreadExecutorConfig.from_dict({"workers": workers})
