"""
Pagination loop that tallies publications per year.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from .errors import SearchCancelled
from .fetcher import DEFAULT_PAGE_SIZE, START_CURSOR, EuropePMCFetcher
from .models import Page, RunStats, YearCounts
from .years import extract_year


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def accumulate(
    counts: Mapping[int, int],
    page: Page,
    current_year: Optional[int] = None,
) -> YearCounts:
    """
    Fold one page into ``counts`` and return the new tally.
    """

    tally = dict(counts)
    for record in page.records:
        year = extract_year(record, current_year)
        if year is None:
            continue
        tally[year] = tally.get(year, 0) + 1
    return tally


@dataclass
class AggregateResult:
    counts: YearCounts = field(default_factory=dict)
    stats: RunStats = field(default_factory=RunStats)


class Aggregator:
    """
    Walk every result page for a query, one request at a time.
    """

    def __init__(
        self,
        fetcher: EuropePMCFetcher,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: Optional[int] = None,
        current_year: Optional[int] = None,
    ) -> None:
        self._fetcher = fetcher
        self._page_size = page_size
        self._max_pages = max_pages
        self._current_year = current_year

    async def run(
        self,
        query: str,
        on_progress: Optional[ProgressCallback] = None,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> AggregateResult:
        counts: YearCounts = {}
        stats = RunStats()
        cursor = START_CURSOR

        async with self._fetcher.open_client() as client:
            while True:
                if should_stop is not None and should_stop():
                    logger.info("Search for %r cancelled after %d page(s)", query, stats.pages_fetched)
                    raise SearchCancelled(query)

                page = await self._fetcher.fetch_page(client, query, self._page_size, cursor)
                if stats.pages_fetched == 0:
                    stats.total_results = page.hit_count
                    if page.records:
                        stats.sample_record = page.records[0].raw
                    logger.info("Found %d results for %r", page.hit_count, query)

                stats.pages_fetched += 1
                counts = accumulate(counts, page, self._current_year)
                stats.processed_results += len(page.records)
                if on_progress is not None:
                    on_progress(stats.processed_results, stats.total_results)

                if stats.processed_results >= stats.total_results:
                    break
                if not page.records:
                    logger.warning(
                        "Empty page after %d of %d results; stopping",
                        stats.processed_results,
                        stats.total_results,
                    )
                    break
                if not page.next_cursor or page.next_cursor == cursor:
                    logger.warning("Cursor did not advance (%s); stopping", cursor)
                    break
                if self._max_pages is not None and stats.pages_fetched >= self._max_pages:
                    logger.warning("Reached page limit of %d; stopping", self._max_pages)
                    break
                cursor = page.next_cursor

        stats.years_found = len(counts)
        return AggregateResult(counts=counts, stats=stats)
