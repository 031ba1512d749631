"""
Chart series building and PNG rendering.
"""

from __future__ import annotations

import io
from typing import List, Mapping, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.ticker import MaxNLocator  # noqa: E402

from .errors import ExportError  # noqa: E402
from .models import ChartPoint  # noqa: E402


LINE_COLOR = "#2563eb"
DPI = 300


def build_series(counts: Mapping[int, int]) -> List[ChartPoint]:
    """
    Turn a year tally into points sorted by year. Missing years stay missing.
    """

    return [ChartPoint(year=year, citations=count) for year, count in sorted(counts.items())]


def render_png(series: Sequence[ChartPoint], title: str | None = None) -> bytes:
    """
    Draw ``series`` as a line chart and return the PNG bytes.
    """

    if not series:
        raise ExportError("No chart data to render.")

    years = [point.year for point in series]
    citations = [point.citations for point in series]

    fig, ax = plt.subplots(figsize=(8, 4))
    try:
        ax.plot(
            years,
            citations,
            color=LINE_COLOR,
            linewidth=2,
            marker="o",
            markersize=4,
            label="Publications",
        )
        ax.grid(True, linestyle="--", alpha=0.5)
        ax.set_xlabel("Year")
        ax.set_ylabel("Number of Publications")
        ax.xaxis.set_major_locator(MaxNLocator(integer=True))
        if title:
            ax.set_title(title)
        ax.legend()
        fig.tight_layout()

        buffer = io.BytesIO()
        fig.savefig(buffer, format="png", dpi=DPI)
    finally:
        plt.close(fig)
    return buffer.getvalue()
