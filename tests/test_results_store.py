"""Tests for per-chat result storage and the stale-response guard."""

from __future__ import annotations

from codesearch_bot.domain.models import SearchResponse
from codesearch_bot.services.results import ResultStore, ResultStoreRegistry


def _lines(results):
    return [result.line for result in results]


def test_current_slice_walks_pages(make_results):
    store = ResultStore()
    store.reset(make_results(25))

    assert _lines(store.current_slice(10)) == list(range(1, 11))
    store.set_page(3)
    assert _lines(store.current_slice(10)) == [21, 22, 23, 24, 25]


def test_out_of_range_page_yields_empty_slice(make_results):
    store = ResultStore()
    store.reset(make_results(5))
    store.set_page(4)
    assert store.current_slice(10) == []
    store.set_page(0)
    assert store.current_slice(10) == []


def test_reset_returns_to_first_page(make_results):
    store = ResultStore()
    store.reset(make_results(30))
    store.set_page(3)

    store.reset(make_results(12), query="needle", elapsed=0.25)

    assert store.current_page == 1
    assert store.total == 12
    assert store.query == "needle"
    assert store.elapsed == 0.25


def test_latest_request_wins_even_when_it_resolves_first(make_results):
    store = ResultStore()
    first = store.begin_request()
    second = store.begin_request()

    assert store.accept(second, SearchResponse(results=make_results(3)), query="second")
    assert not store.accept(first, SearchResponse(results=make_results(8)), query="first")

    assert store.total == 3
    assert store.query == "second"
    assert store.generation == second


def test_older_response_is_discarded_when_it_resolves_first(make_results):
    store = ResultStore()
    first = store.begin_request()
    second = store.begin_request()

    assert not store.accept(first, SearchResponse(results=make_results(8)))
    assert store.total == 0
    assert store.accept(second, SearchResponse(results=make_results(2), time=0.5))
    assert store.total == 2
    assert store.elapsed == 0.5


def test_page_state_survives_inflight_request(make_results):
    store = ResultStore()
    token = store.begin_request()
    store.accept(token, SearchResponse(results=make_results(25)))
    store.set_page(2)

    store.begin_request()

    assert store.current_page == 2
    assert store.generation == token


def test_registry_keeps_one_store_per_chat():
    registry = ResultStoreRegistry()
    assert registry.peek(1) is None

    store = registry.get(1)

    assert registry.get(1) is store
    assert registry.get(2) is not store
    assert len(registry) == 2
