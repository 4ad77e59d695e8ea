"""Tests for frame descriptions."""

import pytest
from rich.console import Console

from activity_frame.column import Column
from activity_frame.frame import Frame
from activity_frame.summary import ColumnSummary, FrameDescription, describe, print_description


@pytest.fixture
def frame():
    frame = Frame(
        [
            Column("hr", [120, None, 140]),
            Column("sport", ["bike", "bike", None]),
        ],
        properties={"session_id": 42},
    )
    return frame


class TestDescribe:
    """Tests for describe()."""

    def test_numeric_column(self, frame):
        description = describe(frame)
        hr = next(c for c in description.columns if c.name == "hr")
        assert hr.count == 3
        assert hr.missing == 1
        assert hr.min == 120
        assert hr.max == 140
        assert hr.mean == pytest.approx(130.0)
        assert hr.stddev == pytest.approx(10.0)

    def test_text_column(self, frame):
        description = describe(frame)
        sport = next(c for c in description.columns if c.name == "sport")
        assert sport.missing == 1
        assert sport.mean is None

    def test_properties(self, frame):
        assert describe(frame).properties == {"session_id": 42}

    def test_serializes(self, frame):
        data = describe(frame).model_dump()
        assert [c["name"] for c in data["columns"]] == ["hr", "sport"]


class TestPrintDescription:
    """Tests for rich rendering."""

    def test_renders_table(self, frame):
        console = Console(record=True, width=120)
        description = print_description(frame, console=console)
        output = console.export_text()
        assert isinstance(description, FrameDescription)
        assert "hr" in output
        assert "130.00" in output
        assert "session_id" in output

    def test_summary_model_defaults(self):
        summary = ColumnSummary(name="x", count=0, missing=0)
        assert summary.min is None
