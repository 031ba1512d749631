"""
Rendering utilities for the terminal report.
"""

from __future__ import annotations

import json
from typing import Sequence

from rich import box
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ChartPoint, RunStats


def _ascii_plot(series: Sequence[ChartPoint], width: int = 40) -> list[str]:
    if not series:
        return []
    max_count = max(point.citations for point in series) or 1
    lines: list[str] = []
    for point in series:
        length = int(round((point.citations / max_count) * width))
        bar = "█" * max(length, 1)
        lines.append(f"{bar:<{width}}")
    return lines


def render_series(
    console: Console,
    series: Sequence[ChartPoint],
    query: str,
    options: dict[str, str] | None = None,
) -> None:
    """
    Print the per-year counts as a table with an inline bar plot.
    """

    header = Text("citetrend — publications per year", style="bold green")
    console.print(header)

    options = options or {}
    bullet = "✦"
    console.print(Text(f"{bullet} Query: \"{query}\"", style="cyan"))
    console.print(Text(f"{bullet} Page size: {options.get('page_size', 'n/a')}", style="cyan"))
    if options.get("max_pages"):
        console.print(Text(f"{bullet} Page limit: {options['max_pages']}", style="cyan"))
    console.print()

    if not series:
        console.print(Text("No publications with a usable year were found.", style="yellow"))
        return

    total = sum(point.citations for point in series)
    first, last = series[0].year, series[-1].year
    table = Table(
        show_lines=False,
        box=box.SIMPLE_HEAD,
        header_style="bold cyan",
        padding=(0, 1),
        title=f"{total} publication{'s' if total != 1 else ''}, {first}–{last}",
    )
    table.add_column("Year", style="magenta", no_wrap=True)
    table.add_column("Publications", justify="right", style="bold cyan")
    table.add_column("", style="green", no_wrap=True)

    for point, bar in zip(series, _ascii_plot(series)):
        table.add_row(str(point.year), str(point.citations), bar)

    console.print(table)


def render_debug(console: Console, stats: RunStats) -> None:
    """
    Print run diagnostics and the first record of the first page.
    """

    lines = Text()
    lines.append(f"Total results: {stats.total_results}\n")
    lines.append(f"Processed results: {stats.processed_results}\n")
    lines.append(f"Pages fetched: {stats.pages_fetched}\n")
    lines.append(f"Years found: {stats.years_found}")
    console.print(Panel(lines, title="Debug information", border_style="dim", expand=False))

    if stats.sample_record is not None:
        sample = JSON(json.dumps(stats.sample_record, default=str))
        console.print(Panel(sample, title="Sample paper", border_style="dim"))
    else:
        console.print(Text("Sample paper: none", style="dim"))
