"""
Events system: Stable event schema for hooks and progress tracking.

Ordering guarantees:
- Single emitter: Events are emitted from the coordinating thread only, never
  from bucket workers
- Best-effort delivery: If callback raises, exception is logged but run continues
- Per-experiment ordering: experiment_started < bucket_* / progress < experiment_finished
- Cross-bucket ordering: NOT guaranteed (buckets finish in any order)
- Crash behavior: Events before crash are delivered; no buffering/persistence
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Types of events emitted by the harness."""

    EXPERIMENT_STARTED = "experiment_started"
    EXPERIMENT_FINISHED = "experiment_finished"
    BUCKET_FINISHED = "bucket_finished"
    BUCKET_FAILED = "bucket_failed"
    PROGRESS = "progress"
    LOG = "log"


@dataclass(frozen=True)
class Event:
    """
    An event emitted during experiment execution.

    Attributes:
        kind: The type of event.
        experiment_id: The experiment/generator pair this event relates to
            (None for global events).
        timestamp: When the event occurred.
        payload: Event-specific data.
    """

    kind: EventKind
    experiment_id: str | None
    timestamp: datetime
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def experiment_started(cls, experiment_id: str, **extra: Any) -> Event:
        """Create an experiment_started event."""
        return cls(
            kind=EventKind.EXPERIMENT_STARTED,
            experiment_id=experiment_id,
            timestamp=datetime.now(),
            payload=extra,
        )

    @classmethod
    def experiment_finished(cls, experiment_id: str, **extra: Any) -> Event:
        """Create an experiment_finished event."""
        return cls(
            kind=EventKind.EXPERIMENT_FINISHED,
            experiment_id=experiment_id,
            timestamp=datetime.now(),
            payload=extra,
        )

    @classmethod
    def bucket_finished(cls, experiment_id: str, bucket: int, **extra: Any) -> Event:
        """Create a bucket_finished event."""
        return cls(
            kind=EventKind.BUCKET_FINISHED,
            experiment_id=experiment_id,
            timestamp=datetime.now(),
            payload={"bucket": bucket, **extra},
        )

    @classmethod
    def bucket_failed(cls, experiment_id: str, bucket: int, error: str) -> Event:
        """Create a bucket_failed event."""
        return cls(
            kind=EventKind.BUCKET_FAILED,
            experiment_id=experiment_id,
            timestamp=datetime.now(),
            payload={"bucket": bucket, "error": error},
        )

    @classmethod
    def progress(
        cls,
        experiment_id: str | None,
        current: int,
        total: int,
        message: str = "",
    ) -> Event:
        """Create a progress event."""
        percent = (100.0 * current / total) if total > 0 else 100.0
        return cls(
            kind=EventKind.PROGRESS,
            experiment_id=experiment_id,
            timestamp=datetime.now(),
            payload={
                "current": current,
                "total": total,
                "percent": percent,
                "message": message,
            },
        )

    @classmethod
    def log(cls, experiment_id: str | None, message: str, level: str = "info") -> Event:
        """Create a log event."""
        return cls(
            kind=EventKind.LOG,
            experiment_id=experiment_id,
            timestamp=datetime.now(),
            payload={"message": message, "level": level},
        )


# Type alias for event callbacks
EventCallback = Callable[[Event], None]


def emit_event(callback: EventCallback | None, event: Event) -> None:
    """
    Emit an event to a callback, with best-effort delivery.

    If the callback raises an exception, it is logged but the run continues.

    Args:
        callback: The event callback (may be None).
        event: The event to emit.
    """
    if callback is None:
        return

    try:
        callback(event)
    except Exception as e:
        logger.warning(f"Event callback failed for {event.kind}: {e}")
        # Do NOT re-raise; run continues


class ProgressThrottle:
    """
    Decides when a progress event is worth emitting.

    A report goes out when at least ``min_interval`` seconds have passed since
    the last one and the whole percentage has changed, and always for the final
    step.
    """

    def __init__(self, total: int, min_interval: float = 0.25) -> None:
        self.total = total
        self.min_interval = min_interval
        self._last_time: float | None = None
        self._last_percent = -1

    def should_emit(self, current: int) -> bool:
        if current >= self.total:
            return True
        percent = int(100 * current / self.total) if self.total > 0 else 100
        now = time.monotonic()
        if percent == self._last_percent:
            return False
        if self._last_time is not None and now - self._last_time < self.min_interval:
            return False
        self._last_time = now
        self._last_percent = percent
        return True


class EventEmitter:
    """
    Helper class for emitting events.

    Wraps a callback and provides convenience methods for common events.
    """

    def __init__(
        self,
        callback: EventCallback | None = None,
        experiment_id: str | None = None,
    ) -> None:
        """
        Initialize the emitter.

        Args:
            callback: The event callback (may be None for no-op).
            experiment_id: Default experiment id stamped on every event.
        """
        self._callback = callback
        self._experiment_id = experiment_id

    @property
    def enabled(self) -> bool:
        return self._callback is not None

    def emit(self, event: Event) -> None:
        """Emit an event."""
        emit_event(self._callback, event)

    def experiment_started(self, **extra: Any) -> None:
        self.emit(Event.experiment_started(self._experiment_id or "", **extra))

    def experiment_finished(self, **extra: Any) -> None:
        self.emit(Event.experiment_finished(self._experiment_id or "", **extra))

    def bucket_finished(self, bucket: int, **extra: Any) -> None:
        self.emit(Event.bucket_finished(self._experiment_id or "", bucket, **extra))

    def bucket_failed(self, bucket: int, error: str) -> None:
        self.emit(Event.bucket_failed(self._experiment_id or "", bucket, error))

    def progress(self, current: int, total: int, message: str = "") -> None:
        """Emit a progress event."""
        self.emit(Event.progress(self._experiment_id, current, total, message))

    def log(self, message: str, level: str = "info") -> None:
        """Emit a log event."""
        self.emit(Event.log(self._experiment_id, message, level))
