"""
Rich live display for suite runs.

Two bars (all experiment/generator pairs, and the buckets of the pair running
now) above a table of the pairs finished so far, each shown next to its
analytic reference.
"""

from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING, Any

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

if TYPE_CHECKING:
    from noiselab.events import Event

_SUITE = "suite"


class RichProgressTracker:
    """
    Live suite progress with converged means as they arrive.

    Example:
        with RichProgressTracker(total=count_pairs(config)) as tracker:
            results = run_suite(config, run_seed, on_event=tracker)
    """

    def __init__(
        self,
        total: int = 0,
        title: str = "noiselab",
        max_rows: int = 12,
        console: Console | None = None,
    ) -> None:
        """
        Args:
            total: Number of experiment/generator pairs in the suite.
            title: Panel title.
            max_rows: Finished pairs kept in the live table (newest last).
            console: Console to draw on (a new one if None).
        """
        self.total = total
        self.title = title
        self.max_rows = max_rows
        self.console = console or Console()

        self.completed = 0
        self.failed = 0
        self.exhausted = 0
        self.finished: list[tuple[str, float, float, float | None]] = []
        self._expected: dict[str, float | None] = {}
        self._started_at = time.monotonic()

        self.progress = Progress(
            TextColumn("{task.description:<32}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
        )
        self._suite_task: TaskID | None = None
        self._bucket_task: TaskID | None = None
        self._live: Live | None = None

    def _results_table(self) -> Table:
        table = Table(box=None, header_style="bold", padding=(0, 2))
        table.add_column("pair")
        table.add_column("mean", justify="right")
        table.add_column("std", justify="right")
        table.add_column("reference", justify="right", style="dim")
        for experiment_id, mean, std_dev, expected in self.finished[-self.max_rows:]:
            reference = "-" if expected is None else f"{expected:.4f}"
            shown = "n/a" if math.isnan(mean) else f"{mean:.4f}"
            table.add_row(experiment_id, shown, f"{std_dev:.4f}", reference)
        return table

    def _render(self) -> Panel:
        footer = (
            f"[green]{self.completed}[/green] finished  "
            f"[red]{self.failed}[/red] failed buckets  "
            f"[yellow]{self.exhausted}[/yellow] exhausted trials"
        )
        parts: list[Any] = [self.progress]
        if self.finished:
            parts.append(self._results_table())
        parts.append(footer)
        return Panel(Group(*parts), title=f"[bold]{self.title}[/bold]", border_style="blue")

    def _refresh(self) -> None:
        if self._live is not None:
            self._live.update(self._render())

    def __call__(self, event: "Event") -> None:
        """Handle noiselab events."""
        from noiselab.events import EventKind

        kind = event.kind
        experiment_id = event.experiment_id or ""

        if kind == EventKind.EXPERIMENT_STARTED:
            if self._bucket_task is not None:
                self.progress.remove_task(self._bucket_task)
            self._bucket_task = self.progress.add_task(
                experiment_id, total=event.payload.get("buckets") or None
            )
            self._expected[experiment_id] = _reference(event.payload.get("rule"))
        elif kind == EventKind.PROGRESS and self._bucket_task is not None:
            self.progress.update(
                self._bucket_task,
                completed=event.payload.get("current", 0),
                total=event.payload.get("total"),
            )
        elif kind == EventKind.BUCKET_FAILED:
            self.failed += 1
            self.console.log(
                f"[red]{experiment_id} bucket {event.payload.get('bucket')} failed:[/red] "
                f"{event.payload.get('error', 'unknown')}"
            )
        elif kind == EventKind.EXPERIMENT_FINISHED:
            self.completed += 1
            self.exhausted += event.payload.get("exhausted", 0)
            self.finished.append((
                experiment_id,
                event.payload.get("mean", math.nan),
                event.payload.get("std_dev", math.nan),
                self._expected.get(experiment_id),
            ))
            if self._suite_task is not None:
                self.progress.advance(self._suite_task)
        else:
            return

        self._refresh()

    def __enter__(self) -> "RichProgressTracker":
        self._suite_task = self.progress.add_task(_SUITE, total=self.total or None)
        self._live = Live(self._render(), console=self.console, refresh_per_second=8)
        self._live.__enter__()
        return self

    def __exit__(self, *args: Any) -> None:
        if self._live is not None:
            self._live.__exit__(*args)
            self._live = None
        elapsed = time.monotonic() - self._started_at
        self.console.print(
            f"[green]Execution complete[/green] in {elapsed:.1f}s: "
            f"{self.completed} pairs, {self.failed} failed buckets, "
            f"{self.exhausted} exhausted trials"
        )


def _reference(rule: str | None) -> float | None:
    from noiselab.types import RuleKind

    if rule is None:
        return None
    try:
        return RuleKind(rule).expected
    except ValueError:
        return None
