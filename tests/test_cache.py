"""Unit tests for StepCache.

Tests cover:
- Cache hits (a repeated segment is parsed once)
- LRU eviction (silent eviction at max_size; evicted segments re-parse)
- Instance isolation (separate StepCache instances do not share state)
- Invalid segments are never cached
- Properties (max_size and curr_size return correct values)
"""

from __future__ import annotations

import pytest

from flatpath.cache import StepCache
from flatpath.codec.paths import Step
from flatpath.errors import FormatError


class TestRepeatedSegmentsParsedOnce:
    def test_second_parse_is_a_hit(self) -> None:
        cache = StepCache()
        first = cache.parse("Item[2]")
        second = cache.parse("Item[2]")

        assert first == Step("Item", 2)
        assert second is first
        assert (cache.hits, cache.misses) == (1, 1)

    def test_distinct_segments_are_misses(self) -> None:
        cache = StepCache()
        cache.parse("Item[1]")
        cache.parse("Item[2]")
        cache.parse("Item")

        assert cache.misses == 3
        assert cache.hits == 0
        assert cache.curr_size == 3


class TestLRUEviction:
    def test_eviction_does_not_raise(self) -> None:
        cache = StepCache(max_size=3)
        for segment in ("A", "B", "C", "D"):
            cache.parse(segment)
        assert cache.curr_size == 3

    def test_evicted_segment_is_parsed_again(self) -> None:
        cache = StepCache(max_size=3)
        cache.parse("A")
        cache.parse("B")
        cache.parse("C")
        # "A" becomes recently used, so "B" is evicted by "D"
        cache.parse("A")
        cache.parse("D")
        misses = cache.misses

        cache.parse("B")
        assert cache.misses == misses + 1

        cache.parse("D")
        assert cache.misses == misses + 1


class TestInstanceIsolation:
    def test_separate_instances_have_isolated_caches(self) -> None:
        cache1 = StepCache()
        cache2 = StepCache()

        cache1.parse("Fund")

        assert cache2.curr_size == 0, f"Expected cache2.curr_size == 0, got {cache2.curr_size}"


class TestInvalidSegments:
    @pytest.mark.parametrize("segment", ["", "Item[0]", "Item[x]", "a b"])
    def test_invalid_segment_raises_every_time(self, segment: str) -> None:
        cache = StepCache()
        for _ in range(2):
            with pytest.raises(FormatError):
                cache.parse(segment)
        assert cache.curr_size == 0
        assert cache.misses == 2


class TestProperties:
    def test_max_size_default(self) -> None:
        assert StepCache().max_size == 1024

    def test_max_size_custom(self) -> None:
        assert StepCache(max_size=16).max_size == 16

    def test_curr_size_empty_initially(self) -> None:
        assert StepCache().curr_size == 0
