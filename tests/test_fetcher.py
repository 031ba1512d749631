import asyncio

import httpx
import pytest

from citetrend.errors import DecodeError, NetworkError
from citetrend.fetcher import BASE_URL, USER_AGENT, EuropePMCFetcher

from conftest import make_payload


def _fetch(fetcher, query="test", page_size=1000, cursor="*"):
    async def go():
        async with fetcher.open_client() as client:
            return await fetcher.fetch_page(client, query, page_size, cursor)

    return asyncio.run(go())


def test_fetch_page_sends_expected_request(fake_api):
    api = fake_api({"*": make_payload([{"pubYear": "2020"}], 1, "AoE")})

    page = _fetch(api.fetcher(), query="malaria vaccine")

    assert len(api.requests) == 1
    request = api.requests[0]
    assert str(request.url).startswith(BASE_URL)
    assert request.url.params["query"] == "malaria vaccine"
    assert request.url.params["format"] == "json"
    assert request.url.params["resultType"] == "lite"
    assert request.url.params["pageSize"] == "1000"
    assert request.url.params["cursorMark"] == "*"
    assert request.headers["User-Agent"] == USER_AGENT

    assert page.hit_count == 1
    assert page.next_cursor == "AoE"
    assert [record.pub_year for record in page.records] == ["2020"]


def test_http_error_status_raises_network_error(fake_api):
    api = fake_api({"*": httpx.Response(503, text="unavailable")})
    with pytest.raises(NetworkError):
        _fetch(api.fetcher())


def test_transport_failure_raises_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = EuropePMCFetcher(transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError) as excinfo:
        _fetch(fetcher)
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_non_json_body_raises_decode_error(fake_api):
    api = fake_api({"*": httpx.Response(200, text="<html>oops</html>")})
    with pytest.raises(DecodeError):
        _fetch(api.fetcher())


@pytest.mark.parametrize(
    "body",
    [
        [],
        {"resultList": {"result": []}},
        {"hitCount": "many", "resultList": {"result": []}},
        {"hitCount": 1},
        {"hitCount": 1, "resultList": {"result": "nope"}},
        {"hitCount": 1, "resultList": {"result": ["nope"]}},
    ],
)
def test_unexpected_shape_raises_decode_error(fake_api, body):
    api = fake_api({"*": httpx.Response(200, json=body)})
    with pytest.raises(DecodeError):
        _fetch(api.fetcher())


def test_missing_cursor_decodes_as_none(fake_api):
    api = fake_api({"*": make_payload([], 0, None)})
    page = _fetch(api.fetcher())
    assert page.next_cursor is None
    assert page.records == []


def test_timeout_raises_network_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    fetcher = EuropePMCFetcher(transport=httpx.MockTransport(handler))
    with pytest.raises(NetworkError) as excinfo:
        _fetch(fetcher)
    assert isinstance(excinfo.value.__cause__, httpx.TimeoutException)
