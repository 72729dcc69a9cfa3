"""
Config-driven executor construction.

The ``[executor]`` table names a backend by ``type``; the remaining keys are
that backend's options. Built-in backends (serial, thread, process) register
on import. Other packages can add backends through the ``noiselab.executors``
entry point group, which is scanned the first time a type is looked up.

Usage:
    executor = executor_from_config("thread", {"workers": 8})
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from noiselab.executor.base import Executor

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "noiselab.executors"


@dataclass
class ExecutorConfig(ABC):
    """
    Options for one executor backend.

    Subclasses set ``executor_type`` and implement ``from_dict`` and ``create``.
    """

    executor_type: ClassVar[str] = ""

    @classmethod
    @abstractmethod
    def from_dict(cls, d: dict[str, Any]) -> ExecutorConfig:
        """Parse backend options, raising ValueError on bad values."""

    @abstractmethod
    def create(self) -> Executor | None:
        """Build the executor; None means buckets run inline."""


class ExecutorConfigRegistry:
    """Backend type name -> ExecutorConfig subclass."""

    _configs: dict[str, type[ExecutorConfig]] = {}
    _scanned = False

    @classmethod
    def register(cls, config_class: type[ExecutorConfig]) -> type[ExecutorConfig]:
        if not config_class.executor_type:
            raise ValueError(f"{config_class.__name__} has no executor_type")
        cls._configs[config_class.executor_type] = config_class
        return config_class

    @classmethod
    def _scan_entry_points(cls) -> None:
        if cls._scanned:
            return
        cls._scanned = True
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            if ep.name in cls._configs:
                continue
            try:
                cls._configs[ep.name] = ep.load()
            except Exception:  # noqa: BLE001
                logger.warning("Could not load executor backend %r from %s", ep.name, ep.value)

    @classmethod
    def get(cls, name: str) -> type[ExecutorConfig] | None:
        cls._scan_entry_points()
        return cls._configs.get(name)

    @classmethod
    def types(cls) -> list[str]:
        cls._scan_entry_points()
        return sorted(cls._configs)


def executor_from_config(
    executor_type: str,
    config: dict[str, Any] | None = None,
) -> Executor | None:
    """
    Build an executor from a backend type and its options.

    Raises:
        ValueError: On an unregistered type or invalid options.
    """
    config_class = ExecutorConfigRegistry.get(executor_type)
    if config_class is None:
        known = ", ".join(ExecutorConfigRegistry.types())
        raise ValueError(f"Unknown executor type: {executor_type!r}. Available: {known}")
    return config_class.from_dict(dict(config or {})).create()
