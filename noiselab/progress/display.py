"""
Display utilities for experiment results.

Provides rich formatting for the per-generator result table.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from noiselab.result import SuiteResults


def _fmt(value: float | None, digits: int = 4) -> str:
    if value is None:
        return "-"
    if math.isnan(value):
        return "n/a"
    return f"{value:.{digits}f}"


def display_results(
    results: "SuiteResults",
    console: Console | None = None,
) -> None:
    """
    Display suite results as one rich table per rule.

    Args:
        results: The SuiteResults object.
        console: Optional rich Console instance.

    Example:
        results = run_suite(config, run_seed)
        display_results(results)
    """
    if console is None:
        console = Console()

    if not len(results):
        console.print("[yellow]No results to display.[/yellow]")
        return

    for rule in results.rules():
        rows = results.filter(rule=rule)
        first = rows[0]
        lottery = first.loss_percentage is not None

        table = Table(
            title=f"{first.rule.value} (expected {_fmt(first.expected)})",
            show_header=True,
            header_style="bold",
        )
        table.add_column("Generator", style="cyan")
        table.add_column("Mean", justify="right")
        table.add_column("Std dev", justify="right")
        for name in first.rule.outcome_names[1:]:
            table.add_column(f"{name} mean", justify="right")
        if lottery:
            table.add_column("Loss %", justify="right")
        table.add_column("Scored", justify="right")
        table.add_column("Exhausted", justify="right")
        table.add_column("Failed", justify="right")

        for result in rows:
            cells = [result.generator.label, _fmt(result.mean), _fmt(result.std_dev)]
            for name in result.rule.outcome_names[1:]:
                cells.append(_fmt(result.stats[name].mean))
            if lottery:
                cells.append(_fmt(result.loss_percentage, digits=2))
            cells.append(str(result.scored))
            cells.append(f"[yellow]{result.exhausted}[/yellow]" if result.exhausted else "0")
            cells.append(f"[red]{result.failed_buckets}[/red]" if result.failed_buckets else "0")
            table.add_row(*cells)

        console.print(table)
