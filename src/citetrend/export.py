"""
CSV and PNG export of a publication series.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .chart import render_png
from .models import ChartPoint


CSV_FILENAME = "publication_counts.csv"
PNG_FILENAME = "citations.png"
CSV_HEADER = ("Year", "Publications")

logger = logging.getLogger(__name__)


def series_to_csv(series: Sequence[ChartPoint]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for point in series:
        writer.writerow((point.year, point.citations))
    return buffer.getvalue()


def read_csv(text: str) -> List[ChartPoint]:
    """
    Parse text produced by :func:`series_to_csv`.
    """

    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None:
        return []
    if tuple(cell.strip() for cell in header) != CSV_HEADER:
        raise ValueError(f"Unexpected CSV header: {header!r}")
    points: List[ChartPoint] = []
    for row in reader:
        if not row:
            continue
        year, citations = row
        points.append(ChartPoint(year=int(year), citations=int(citations)))
    return points


def _resolve(path: Optional[Path], default_name: str) -> Path:
    if path is None:
        return Path(default_name)
    if path.is_dir() or (not path.exists() and path.suffix == ""):
        return path / default_name
    return path


def write_csv(series: Sequence[ChartPoint], path: Optional[Path] = None) -> Optional[Path]:
    """
    Save ``series`` as CSV. With no data nothing is written and ``None`` is returned.
    """

    if not series:
        logger.warning("No publication data to export; skipping CSV")
        return None
    destination = _resolve(path, CSV_FILENAME)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(series_to_csv(series), encoding="utf-8")
    logger.info("Wrote %d rows to %s", len(series), destination)
    return destination


def write_png(
    series: Sequence[ChartPoint],
    path: Optional[Path] = None,
    title: Optional[str] = None,
) -> Path:
    """
    Render the chart for ``series`` to a PNG file.

    Raises :class:`~citetrend.errors.ExportError` when there is no data.
    """

    image = render_png(series, title=title)
    destination = _resolve(path, PNG_FILENAME)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(image)
    logger.info("Wrote chart to %s", destination)
    return destination
