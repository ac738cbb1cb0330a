"""Insertion-ordered cache eviction tests."""

import logging

import pytest

from solar_almanac.cache import InsertionOrderCache


def filled(count, **kwargs):
    cache = InsertionOrderCache(**kwargs)
    for i in range(count):
        cache.set(i, str(i))
    return cache


class TestInsertionOrderCache:
    def test_fills_to_ceiling(self):
        cache = filled(100)
        assert len(cache) == 100

    def test_overflow_evicts_oldest_tenth(self):
        cache = filled(100)
        cache.set(100, "100")
        assert len(cache) == 91
        assert all(i not in cache for i in range(10))
        assert 10 in cache
        assert 100 in cache

    def test_eviction_ignores_use(self):
        cache = filled(100)
        cache.get(0)
        cache.get_or_compute(1, lambda: "never")
        cache.set(100, "100")
        assert 0 not in cache
        assert 1 not in cache

    def test_overwrite_does_not_evict(self):
        cache = filled(100)
        cache.set(50, "fifty")
        assert len(cache) == 100
        assert cache.get(50) == "fifty"

    def test_keys_in_insertion_order(self):
        cache = filled(3)
        assert cache.keys() == [0, 1, 2]

    def test_fraction_rounds_up(self):
        cache = filled(10, max_entries=10, eviction_fraction=0.25)
        cache.set(10, "10")
        assert len(cache) == 8

    def test_evicts_at_least_one(self):
        cache = filled(5, max_entries=5, eviction_fraction=0.01)
        cache.set(5, "5")
        assert len(cache) == 5
        assert 0 not in cache

    def test_get_or_compute_computes_once(self):
        cache = InsertionOrderCache()
        calls = []

        def compute():
            calls.append(1)
            return "value"

        assert cache.get_or_compute("k", compute) == "value"
        assert cache.get_or_compute("k", compute) == "value"
        assert len(calls) == 1

    def test_missing_key(self):
        assert InsertionOrderCache().get("absent") is None

    def test_clear(self):
        cache = filled(10)
        cache.clear()
        assert len(cache) == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_entries": 0},
            {"eviction_fraction": 0.0},
            {"eviction_fraction": 1.5},
        ],
    )
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            InsertionOrderCache(**kwargs)

    def test_eviction_logged(self, caplog):
        cache = filled(100, name="test cache")
        with caplog.at_level(logging.DEBUG, logger="solar_almanac.cache"):
            cache.set(100, "100")
        assert "test cache: evicted 10 oldest entries" in caplog.text
