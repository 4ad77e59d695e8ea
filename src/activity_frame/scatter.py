"""Scatter data and sample-density grouping for 2D plots."""

from collections import Counter
from typing import List, Optional, Tuple

from .column import row_is_present
from .frame import Frame


def scatter_points(
    frame: Frame,
    x: str,
    y: str,
    start: Optional[int] = None,
    end: Optional[int] = None,
) -> List[Tuple[float, float]]:
    """Return the (x, y) pairs where both values are present."""
    if not frame.has(x, y):
        return []
    return frame.select_many(x, y, start=start, end=end, predicate=row_is_present)


def group_samples(
    frame: Frame,
    x: str,
    y: str,
    x_digits: int = 0,
    y_digits: int = 0,
    start: Optional[int] = None,
    end: Optional[int] = None,
) -> List[Tuple[float, float, int]]:
    """
    Count how many samples fall on each rounded (x, y) point.

    Values are rounded to `x_digits` / `y_digits` decimal places (negative
    digits round to tens, hundreds, ...). Used to draw density scatter
    plots where marker size reflects the number of samples.

    Returns:
        (x, y, count) triples sorted by x then y
    """
    counts = Counter(
        (round(px, x_digits), round(py, y_digits))
        for px, py in scatter_points(frame, x, y, start, end)
    )
    return sorted((px, py, n) for (px, py), n in counts.items())
