"""Tests for the HTTP search client."""

from __future__ import annotations

import httpx
import pytest

from codesearch_bot.config import SearchSettings
from codesearch_bot.services.exceptions import SearchServiceError
from codesearch_bot.services.search import SearchService, parse_search_payload
from codesearch_bot.utils.query import encode_query

SETTINGS = SearchSettings(endpoint="http://search.local:3000")


@pytest.mark.asyncio
async def test_search_sends_encoded_query_and_parses_results():
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "results": [
                    {"path": "src/lib.rs", "line": 12, "body": "let a = b.c();", "line_range": {"start": 9, "end": 15}},
                    {"path": "src/main.rs", "line": 3, "body": "fn main() {}"},
                ],
                "time": "0.0421",
            },
        )

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as client:
        service = SearchService(client, settings=SETTINGS)
        response = await service.search(encode_query("b.c()"))

    request = seen[0]
    assert request.method == "GET"
    assert request.url.host == "search.local"
    assert request.url.path == "/search"
    assert request.url.params["text"] == r"b\.c\(\)"
    assert [result.path for result in response.results] == ["src/lib.rs", "src/main.rs"]
    assert response.results[0].line_range.start == 9
    assert response.time == pytest.approx(0.0421)


@pytest.mark.asyncio
async def test_search_does_not_encode_query_twice():
    async def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["text"] == "foo bar"
        return httpx.Response(200, json={"results": []})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as client:
        service = SearchService(client, settings=SETTINGS)
        response = await service.search(encode_query("foo bar"))

    assert response.results == []


def test_request_url_joins_endpoint():
    service = SearchService(httpx.AsyncClient(), settings=SearchSettings(endpoint="http://search.local:3000/"))
    assert service.request_url("foo%20bar") == "http://search.local:3000/search?text=foo%20bar"


@pytest.mark.asyncio
async def test_missing_fields_default_to_empty_and_unknown_time():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as client:
        response = await SearchService(client, settings=SETTINGS).search("q")

    assert response.results == []
    assert response.time is None


@pytest.mark.asyncio
async def test_http_error_is_terminal():
    calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(502, text="bad gateway")

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as client:
        service = SearchService(client, settings=SETTINGS)
        with pytest.raises(SearchServiceError, match="502"):
            await service.search("q")

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_transport_error_is_wrapped():
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as client:
        service = SearchService(client, settings=SETTINGS)
        with pytest.raises(SearchServiceError, match="connection refused"):
            await service.search("q")


@pytest.mark.asyncio
async def test_invalid_json_is_wrapped():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as client:
        service = SearchService(client, settings=SETTINGS)
        with pytest.raises(SearchServiceError):
            await service.search("q")


def test_malformed_items_are_skipped():
    payload = {
        "results": [
            {"path": "ok.py", "line": 1, "body": "x = 1"},
            {"line": 2, "body": "no path"},
            {"path": "", "line": 3, "body": "empty path"},
            {"path": "no_body.py", "line": 4},
            {"path": "bad_line.py", "line": 0, "body": "y"},
            "not an object",
        ],
        "time": 1.5,
    }

    response = parse_search_payload(payload)

    assert [result.path for result in response.results] == ["ok.py"]
    assert response.time == 1.5


@pytest.mark.parametrize("payload", [[], "results", {"results": "nope"}])
def test_unexpected_payload_shapes_raise(payload):
    with pytest.raises(SearchServiceError):
        parse_search_payload(payload)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, None), ("abc", None), (True, None), (2, 2.0), ("nan", None), (float("inf"), None)],
)
def test_time_field_parsing(value, expected):
    assert parse_search_payload({"results": [], "time": value}).time == expected
