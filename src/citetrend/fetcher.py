"""
Cursor-paged search backed by the Europe PMC REST API.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from . import __version__
from .errors import DecodeError, NetworkError
from .models import DEFAULT_PAGE_SIZE, Page, Record


BASE_URL = "https://www.ebi.ac.uk/europepmc/webservices/rest/search"
USER_AGENT = f"citetrend/{__version__}"
START_CURSOR = "*"

logger = logging.getLogger(__name__)


def _decode_page(payload: Any) -> Page:
    if not isinstance(payload, dict):
        raise DecodeError("Search response is not a JSON object.")

    try:
        hit_count = int(payload["hitCount"])
    except (KeyError, TypeError, ValueError) as error:
        raise DecodeError("Search response has no usable hitCount.") from error

    result_list = payload.get("resultList")
    if not isinstance(result_list, dict):
        raise DecodeError("Search response has no resultList.")
    results = result_list.get("result", [])
    if not isinstance(results, list):
        raise DecodeError("resultList.result is not a list.")

    records: List[Record] = []
    for item in results:
        if not isinstance(item, dict):
            raise DecodeError("Search result entry is not a JSON object.")
        records.append(Record.from_json(item))

    next_cursor = payload.get("nextCursorMark")
    if next_cursor is not None:
        next_cursor = str(next_cursor)

    return Page(hit_count=hit_count, next_cursor=next_cursor, records=records)


class EuropePMCFetcher:
    """
    Retrieve single result pages from Europe PMC.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    @property
    def timeout(self) -> float:
        return self._timeout

    def open_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            headers={"User-Agent": USER_AGENT},
            transport=self._transport,
        )

    async def fetch_page(
        self,
        client: httpx.AsyncClient,
        query: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        cursor: str = START_CURSOR,
    ) -> Page:
        params = {
            "query": query,
            "format": "json",
            "resultType": "lite",
            "pageSize": str(page_size),
            "cursorMark": cursor,
        }

        logger.debug("GET %s cursor=%s pageSize=%s", BASE_URL, cursor, page_size)
        try:
            response = await client.get(BASE_URL, params=params)
            response.raise_for_status()
        except httpx.HTTPError as error:
            raise NetworkError(f"Europe PMC request failed: {error}") from error

        try:
            payload = response.json()
        except ValueError as error:
            raise DecodeError("Search response is not valid JSON.") from error

        return _decode_page(payload)
