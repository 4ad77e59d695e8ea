"""Shared fixtures for activity frame tests."""

import pytest

from activity_frame.column import Column
from activity_frame.config import get_settings
from activity_frame.frame import Frame


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test see settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ride_frame():
    """A short ride sampled unevenly, with a gap in heart rate."""
    frame = Frame([
        Column("elapsed", [0, 1, 2, 4, 5, 8, 9, 10], sorted=True),
        Column("power", [100, 200, 300, 300, 250, 150, 200, 100]),
        Column("hr", [120, 125, None, 140, 142, 138, 135, 130]),
        Column("cadence", [80, 85, 90, 90, 88, 70, 75, 80]),
    ])
    frame.set_default_weight_column("elapsed")
    return frame


@pytest.fixture
def constant_frame():
    """Factory for frames sampled once per second with a constant power."""

    def make(value, seconds):
        frame = Frame([
            Column("elapsed", range(seconds + 1), sorted=True),
            Column("power", [value] * (seconds + 1)),
        ])
        frame.set_default_weight_column("elapsed")
        return frame

    return make
