"""
Run-state tracking around the aggregator.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from .aggregator import Aggregator
from .chart import build_series
from .errors import (
    DecodeError,
    NetworkError,
    SearchCancelled,
    SearchInProgressError,
)
from .fetcher import EuropePMCFetcher
from .models import Done, Failed, Idle, RunState, Running, SearchSettings


FAILURE_MESSAGE = "Failed to fetch citation data. Please try again."

logger = logging.getLogger(__name__)

StateListener = Callable[[RunState], None]


class SearchSession:
    """
    Owns the state of the current search. At most one run is active at a time.
    """

    def __init__(
        self,
        settings: Optional[SearchSettings] = None,
        fetcher: Optional[EuropePMCFetcher] = None,
        on_change: Optional[StateListener] = None,
        current_year: Optional[int] = None,
    ) -> None:
        self._settings = settings or SearchSettings()
        self._fetcher = fetcher or EuropePMCFetcher(timeout=self._settings.timeout)
        self.on_change = on_change
        self._current_year = current_year
        self._state: RunState = Idle()
        self._active = False
        self._cancel_requested = False

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def active(self) -> bool:
        return self._active

    def _set_state(self, state: RunState) -> None:
        self._state = state
        if self.on_change is not None:
            self.on_change(state)

    def cancel(self) -> None:
        """
        Ask the active run to stop before its next request.
        """

        if self._active:
            self._cancel_requested = True

    async def search(self, query: str) -> RunState:
        """
        Run a full search for ``query`` and return the final state.

        Blank queries are ignored and leave the state untouched.
        """

        query = query.strip()
        if not query:
            return self._state
        if self._active:
            raise SearchInProgressError(query)

        self._active = True
        self._cancel_requested = False
        self._set_state(Running())

        aggregator = Aggregator(
            self._fetcher,
            page_size=self._settings.page_size,
            max_pages=self._settings.max_pages,
            current_year=self._current_year,
        )

        def report(processed: int, total: int) -> None:
            self._set_state(Running(processed=processed, total=total))

        try:
            result = await aggregator.run(
                query,
                on_progress=report,
                should_stop=lambda: self._cancel_requested,
            )
        except SearchCancelled:
            self._set_state(Idle())
        except asyncio.CancelledError:
            self._set_state(Idle())
            raise
        except (NetworkError, DecodeError):
            logger.exception("Search for %r failed", query)
            self._set_state(Failed(FAILURE_MESSAGE))
        else:
            self._set_state(Done(series=build_series(result.counts), stats=result.stats))
        finally:
            if isinstance(self._state, Running):
                logger.error("Search for %r ended unexpectedly", query)
                self._set_state(Failed(FAILURE_MESSAGE))
            self._active = False
            self._cancel_requested = False
        return self._state
