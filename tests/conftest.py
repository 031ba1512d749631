from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import httpx
import pytest

from citetrend.fetcher import EuropePMCFetcher


CURRENT_YEAR = 2026


def make_payload(
    results: List[Dict[str, Any]],
    hit_count: int,
    next_cursor: Optional[str],
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "version": "6.9",
        "hitCount": hit_count,
        "request": {},
        "resultList": {"result": results},
    }
    if next_cursor is not None:
        payload["nextCursorMark"] = next_cursor
    return payload


class FakeEuropePMC:
    """
    Serve canned pages keyed by cursorMark and record every request.
    """

    def __init__(self, pages: Dict[str, Any], delay: float = 0.0) -> None:
        self.pages = pages
        self.delay = delay
        self.requests: List[httpx.Request] = []

    @property
    def cursors(self) -> List[str]:
        return [request.url.params["cursorMark"] for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        cursor = request.url.params["cursorMark"]
        page = self.pages.get(cursor)
        if page is None:
            return httpx.Response(500, text="no such cursor")
        if isinstance(page, httpx.Response):
            return page
        return httpx.Response(200, json=page)

    async def slow_handler(self, request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(self.delay)
        return self.handler(request)

    def fetcher(self) -> EuropePMCFetcher:
        handler = self.slow_handler if self.delay else self.handler
        return EuropePMCFetcher(timeout=5.0, transport=httpx.MockTransport(handler))


@pytest.fixture
def fake_api():
    def build(pages: Dict[str, Any], delay: float = 0.0) -> FakeEuropePMC:
        return FakeEuropePMC(pages, delay=delay)

    return build
