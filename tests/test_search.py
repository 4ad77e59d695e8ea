"""Tests for binary search insertion points."""

import operator

import pytest

from activity_frame.search import bsearch


class TestLowerBound:
    """Tests for the default <= comparator."""

    @pytest.mark.parametrize("value", [-1, 0, 1, 2, 3, 4, 5, 6, 7, 10])
    def test_insertion_point_splits_sequence(self, value):
        """Everything before the index is smaller, everything after is >=."""
        data = [0, 1, 1, 3, 5, 5, 5, 7]
        index = bsearch(data, value)
        assert all(x < value for x in data[:index])
        assert all(x >= value for x in data[index:])

    def test_ties_resolve_to_leftmost(self):
        """Searching an existing value returns its first position."""
        data = [1, 2, 2, 2, 3]
        assert bsearch(data, 2) == 1

    def test_smaller_than_all(self):
        assert bsearch([10, 20, 30], 5) == 0

    def test_larger_than_all(self):
        assert bsearch([10, 20, 30], 35) == 3

    def test_empty_sequence(self):
        """An empty sequence always gives 0, whatever the range."""
        assert bsearch([], 5) == 0
        assert bsearch([], 5, start=3, end=10) == 0


class TestRanges:
    """Tests for sub-range searches."""

    def test_subrange_bounds(self):
        data = [1, 2, 3, 4, 5, 6]
        assert bsearch(data, 0, start=2, end=5) == 2
        assert bsearch(data, 10, start=2, end=5) == 5
        assert bsearch(data, 4, start=2, end=5) == 3

    def test_out_of_range_is_clamped(self):
        data = [1, 2, 3]
        assert bsearch(data, 10, start=-5, end=99) == 3
        assert bsearch(data, 0, start=-5, end=99) == 0

    def test_reversed_range_is_swapped(self):
        data = [1, 2, 3, 4, 5]
        assert bsearch(data, 4, start=4, end=1) == bsearch(data, 4, start=1, end=4)


class TestComparatorAndKey:
    """Tests for custom ordering and key projection."""

    def test_descending_order(self):
        data = [9, 7, 5, 3, 1]
        assert bsearch(data, 5, cmp=operator.ge) == 2
        assert bsearch(data, 6, cmp=operator.ge) == 2
        assert bsearch(data, 0, cmp=operator.ge) == 5

    def test_key_projection(self):
        data = [(0, "a"), (10, "b"), (20, "c")]
        assert bsearch(data, 15, key=lambda item: item[0]) == 2
