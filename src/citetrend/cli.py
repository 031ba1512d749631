"""
Command line interface powered by Typer.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .errors import ExportError
from .export import read_csv, write_csv, write_png
from .fetcher import DEFAULT_PAGE_SIZE
from .models import Done, Failed, RunState, Running, SearchSettings
from .reporting import render_debug, render_series
from .session import SearchSession

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("citetrend")


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


async def _search_with_progress(session: SearchSession, query: str) -> RunState:
    progress = Progress(
        SpinnerColumn(style="green"),
        TextColumn("{task.description}", justify="left"),
        BarColumn(bar_width=24, style="cyan"),
        TextColumn("{task.completed}/{task.total}", style="cyan"),
        TimeElapsedColumn(),
        transient=True,
        console=console,
    )

    with progress:
        task_id = progress.add_task(Running().describe(), total=None)

        def on_change(state: RunState) -> None:
            if isinstance(state, Running) and state.total:
                progress.update(
                    task_id,
                    completed=state.processed,
                    total=state.total,
                    description=state.describe(),
                )

        session.on_change = on_change
        return await session.search(query)


@app.command()
def search(
    query: str = typer.Argument(..., help="Europe PMC search term."),
    csv_path: Optional[Path] = typer.Option(
        None,
        "--csv",
        help="Save the per-year counts as CSV (file or directory).",
        show_default=False,
    ),
    png_path: Optional[Path] = typer.Option(
        None,
        "--png",
        help="Save the chart as PNG (file or directory).",
        show_default=False,
    ),
    page_size: int = typer.Option(
        DEFAULT_PAGE_SIZE,
        "--page-size",
        min=1,
        max=1000,
        envvar="CITETREND_PAGE_SIZE",
        help="Records requested per API call.",
    ),
    timeout: float = typer.Option(
        30.0,
        "--timeout",
        min=1.0,
        envvar="CITETREND_TIMEOUT",
        help="Seconds to wait for each page before giving up.",
    ),
    max_pages: Optional[int] = typer.Option(
        None,
        "--max-pages",
        min=1,
        envvar="CITETREND_MAX_PAGES",
        help="Stop after this many pages even if results remain.",
        show_default=False,
    ),
    debug: bool = typer.Option(False, "--debug", help="Show run diagnostics and a sample record."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """
    Count publications per year for QUERY and chart the result.
    """

    _configure_logging(verbose)

    if not query.strip():
        err_console.print("[red]Please provide a non-empty search term.[/red]")
        raise typer.Exit(2)

    settings = SearchSettings(page_size=page_size, timeout=timeout, max_pages=max_pages)
    session = SearchSession(settings)

    console.print(f"[bold]Searching[/bold] Europe PMC for [italic]{query.strip()}[/italic]…")
    state = asyncio.run(_search_with_progress(session, query))

    if isinstance(state, Failed):
        err_console.print(f"[red]{state.message}[/red]")
        raise typer.Exit(1)
    if not isinstance(state, Done):
        err_console.print("[yellow]Search did not complete.[/yellow]")
        raise typer.Exit(1)

    option_context = {
        "page_size": str(page_size),
        "max_pages": str(max_pages) if max_pages else "",
    }
    render_series(console, state.series, query.strip(), option_context)
    if debug:
        render_debug(console, state.stats)

    if csv_path is not None:
        destination = write_csv(state.series, csv_path)
        if destination is not None:
            console.print(f"[green]CSV saved to[/green] {destination}")
        else:
            console.print("[yellow]No data to export; CSV not written.[/yellow]")
    if png_path is not None:
        _export_png(state.series, png_path, title=query.strip())


def _export_png(series, path: Path, title: Optional[str] = None) -> None:
    try:
        destination = write_png(series, path, title=title)
    except ExportError as error:
        logger.error("Chart export skipped: %s", error)
        return
    console.print(f"[green]Chart saved to[/green] {destination}")


@app.command()
def plot(
    csv_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV written by `search --csv`."),
    png_path: Optional[Path] = typer.Option(
        None,
        "--png",
        help="Where to save the chart (file or directory).",
        show_default=False,
    ),
    title: Optional[str] = typer.Option(None, "--title", help="Chart title.", show_default=False),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """
    Re-draw the chart from a previously exported CSV file.
    """

    _configure_logging(verbose)

    try:
        series = read_csv(csv_file.read_text(encoding="utf-8"))
    except ValueError as error:
        err_console.print(f"[red]Could not read {csv_file}:[/red] {error}")
        raise typer.Exit(1) from error

    render_series(console, series, title or csv_file.stem)
    _export_png(series, png_path or csv_file.with_suffix(".png"), title=title)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
