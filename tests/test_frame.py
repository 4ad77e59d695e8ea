"""Tests for the frame container and its traversal pipeline."""

import pytest

from activity_frame.column import Column
from activity_frame.exceptions import (
    ColumnNotFoundError,
    InvalidRangeError,
    InvariantViolation,
    NotFoundError,
    NotSortedError,
)
from activity_frame.frame import USE_DEFAULT, Frame


@pytest.fixture
def frame():
    return Frame([
        Column("a", [1, 2, 3]),
        Column("b", [10, 20, 30]),
        Column("t", [0, 5, 10], sorted=True),
    ])


class TestConstruction:
    """Tests for frame construction and column management."""

    def test_empty_columns_dropped(self):
        frame = Frame([Column("a", [1, 2]), Column("empty", [None, None])])
        assert frame.column_names() == ["a"]

    def test_zero_valued_column_kept(self):
        frame = Frame([Column("zeros", [0, 0, 0])])
        assert frame.has("zeros")

    def test_has_and_has_any(self, frame):
        assert frame.has("a", "b")
        assert not frame.has("a", "missing")
        assert frame.has_any("missing", "b")
        assert not frame.has_any("x", "y")
        assert "a" in frame

    def test_get_column(self, frame):
        assert frame.get_column("a").values == (1, 2, 3)

    def test_get_column_not_found(self, frame):
        with pytest.raises(ColumnNotFoundError) as exc_info:
            frame.get_column("missing")
        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.details["resource_id"] == "missing"

    def test_add_column_replaces(self, frame):
        frame.add_column(Column("a", [7, 8, 9]))
        assert frame.select("a") == (7, 8, 9)
        assert frame.column_names().count("a") == 1


class TestProperties:
    """Tests for the property bag and default weight column."""

    def test_put_and_get(self, frame):
        frame.put_property("sport", "cycling")
        assert frame.get_property("sport") == "cycling"
        assert frame.get_property("unknown") is None
        assert frame.get_property("unknown", 42) == 42
        assert "sport" in frame.property_names()

    def test_initial_properties(self):
        frame = Frame([Column("a", [1])], properties={"session_id": 7})
        assert frame.get_property("session_id") == 7

    def test_default_weight_column(self, frame):
        assert frame.get_default_weight_column() is None
        frame.set_default_weight_column("t")
        assert frame.get_default_weight_column() == "t"
        assert frame.resolve_weight_column(USE_DEFAULT) == "t"
        assert frame.resolve_weight_column(None) is None
        assert frame.resolve_weight_column("a") == "a"


class TestRowCount:
    """Tests for row counting with equal and unequal column lengths."""

    def test_equal_lengths(self, frame):
        assert frame.row_count() == 3

    def test_empty_frame(self):
        assert Frame().row_count() == 0

    def test_unequal_lengths_raise(self):
        frame = Frame([Column("a", [1, 2, 3]), Column("b", [1, 2])])
        with pytest.raises(InvariantViolation):
            frame.row_count()


class TestSelect:
    """Tests for single and multi column selection."""

    def test_select_full(self, frame):
        assert list(frame.select("a")) == [1, 2, 3]

    def test_select_range(self, frame):
        assert list(frame.select("a", start=1)) == [2, 3]
        assert list(frame.select("a", start=0, end=2)) == [1, 2]

    def test_select_with_predicate(self):
        frame = Frame([Column("hr", [120, None, 0, 130])])
        assert frame.select("hr", predicate=lambda v: v is not None) == [120, 0, 130]

    def test_select_invalid_range(self, frame):
        with pytest.raises(InvalidRangeError):
            frame.select("a", start=2, end=1)
        with pytest.raises(InvalidRangeError):
            frame.select("a", end=10)

    def test_select_many_aligns_rows(self, frame):
        assert frame.select_many("a", "b") == [(1, 10), (2, 20), (3, 30)]

    def test_select_many_column_order(self, frame):
        assert frame.select_many("b", "a", start=1) == [(20, 2), (30, 3)]

    def test_select_many_predicate(self, frame):
        rows = frame.select_many("a", "b", predicate=lambda row: row[0] % 2 == 1)
        assert rows == [(1, 10), (3, 30)]

    def test_select_many_unequal_lengths(self):
        frame = Frame([Column("a", [1, 2, 3]), Column("b", [1, 2])])
        with pytest.raises(InvariantViolation):
            frame.select_many("a", "b")
        assert frame.select_many("a", "b", end=2) == [(1, 1), (2, 2)]
        with pytest.raises(InvalidRangeError):
            frame.select_many("a", "b", end=3)


class TestIndexOf:
    """Tests for frame level sorted lookups."""

    def test_index_of(self, frame):
        assert frame.index_of("t", 5) == 1
        assert frame.index_of_many("t", 0, 6, 11) == [0, 2, 3]

    def test_index_of_unsorted(self, frame):
        with pytest.raises(NotSortedError):
            frame.index_of("a", 2)


class TestTraversal:
    """Tests for map and fold in single and paired forms."""

    def test_map_single_column(self, frame):
        assert list(frame.map("a", lambda v: v * 2)) == [2, 4, 6]

    def test_map_many_columns(self, frame):
        assert list(frame.map(["a", "b"], lambda row: row[0] + row[1])) == [11, 22, 33]

    def test_map_is_lazy(self, frame):
        calls = []

        def fn(v):
            calls.append(v)
            return v

        result = frame.map("a", fn)
        assert calls == []
        assert next(result) == 1
        assert calls == [1]

    def test_map_paired(self, frame):
        pairs = list(frame.map_paired("a", lambda prev, v: (prev, v)))
        assert pairs == [(None, 1), (1, 2), (2, 3)]

    def test_map_paired_range_starts_fresh(self, frame):
        pairs = list(frame.map_paired(["a", "b"], lambda prev, row: prev, start=1))
        assert pairs == [None, (2, 20)]

    def test_fold(self, frame):
        assert frame.fold("b", 0, lambda acc, v: acc + v) == 60

    def test_fold_visits_rows_in_order(self, frame):
        seen = frame.fold(["a", "b"], [], lambda acc, row: acc + [row])
        assert seen == [(1, 10), (2, 20), (3, 30)]

    def test_fold_paired(self, frame):
        def step(acc, prev, row):
            if prev is not None:
                acc.append(row - prev)
            return acc

        assert frame.fold_paired("t", [], step) == [5, 5]

    def test_fold_empty_range(self, frame):
        assert frame.fold("a", "init", lambda acc, v: acc + str(v), start=2, end=2) == "init"

    def test_invalid_range_raises_eagerly(self, frame):
        with pytest.raises(InvalidRangeError):
            frame.map("a", lambda v: v, end=99)


class TestDerivedColumns:
    """Tests for derived columns."""

    def test_add_derived_column(self, frame):
        column = frame.add_derived_column("sum", ["a", "b"], lambda row: row[0] + row[1])
        assert column.values == (11, 22, 33)
        assert frame.select("sum") == (11, 22, 33)

    def test_add_derived_column_paired(self, frame):
        frame.add_derived_column(
            "dt", "t", lambda prev, v: None if prev is None else v - prev, paired=True
        )
        assert frame.select("dt") == (None, 5, 5)
