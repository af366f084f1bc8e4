"""Tests for the query result cache and its clear-all eviction policy."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from app.schemas import SearchResponse, SearchResultItem
from app.services.result_cache import ResultCache, make_cache_key


def _response(n=0):
    return SearchResponse(total_results=n, results=[])


@pytest.mark.parametrize("query, mode, expected", [
    ("猫", None, "猫_default"),
    ("猫", "", "猫_default"),
    ("猫", "exact", "猫_exact"),
    (" 猫 #n", "any", " 猫 #n_any"),
    ("#n_x", None, "#n_x_default"),
    ("#n", "x_default", "#n_x_default"),
])
def test_cache_key(query, mode, expected):
    assert make_cache_key(query, mode) == expected


def test_get_missing_returns_none():
    assert ResultCache().get("missing") is None


def test_put_then_get_returns_equal_copy():
    cache = ResultCache()
    response = _response(3)
    cache.put("k", response)
    assert cache.get("k") == response
    assert cache.get("k") is not response
    assert "k" in cache


def test_mutating_returned_response_does_not_change_entry():
    cache = ResultCache()
    original = SearchResponse(total_results=1, results=[SearchResultItem(term="猫", reading="ねこ", meanings=["cat"])])
    cache.put("k", original)

    cache.get("k").results[0].meanings.append("kitty")
    original.results.clear()

    assert cache.get("k").results[0].meanings == ["cat"]


def test_bound_clears_everything_before_insert():
    cache = ResultCache(max_entries=2)
    cache.put("a", _response())
    cache.put("b", _response())
    cache.put("c", _response())

    assert len(cache) == 1
    assert cache.get("a") is None
    assert cache.get("b") is None
    assert cache.get("c") is not None


def test_overwriting_existing_key_at_capacity_does_not_clear():
    cache = ResultCache(max_entries=2)
    cache.put("a", _response())
    cache.put("b", _response())
    cache.put("b", _response(1))

    assert len(cache) == 2
    assert cache.get("b").total_results == 1


def test_zero_bound_is_unbounded():
    cache = ResultCache(max_entries=0)
    for i in range(500):
        cache.put(str(i), _response())
    assert len(cache) == 500


def test_clear():
    cache = ResultCache()
    cache.put("a", _response())
    cache.clear()
    assert len(cache) == 0


def test_concurrent_puts_are_not_lost():
    cache = ResultCache()
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda i: cache.put(f"k{i}", _response(i)), range(200)))
    assert len(cache) == 200
    assert cache.get("k123").total_results == 123
