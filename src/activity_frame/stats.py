"""Time-weighted statistics and quantiles over frame columns."""

import functools
import math
import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .column import is_missing, is_present, row_is_present
from .frame import USE_DEFAULT, Frame

DEFAULT_QUANTILES = (0.0, 0.25, 0.5, 0.75, 1.0)


@dataclass
class Statistics:
    """
    Running mean/variance/min/max accumulator.

    `count` is the total weight folded in: the integer number of samples
    for unweighted data, the covered span (e.g. seconds) for weighted data.
    Variance and standard deviation are population values.
    """

    count: float = 0
    total: float = 0.0
    total_sq: float = 0.0
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def add(self, value: float, weight: float = 1) -> "Statistics":
        """Fold `value` in with multiplicity `weight`; returns self."""
        self.count += weight
        self.total += value * weight
        self.total_sq += value * value * weight
        if self.minimum is None or value < self.minimum:
            self.minimum = value
        if self.maximum is None or value > self.maximum:
            self.maximum = value
        return self

    def merge(self, other: "Statistics") -> "Statistics":
        """Combine two accumulators into a new one."""
        mins = [v for v in (self.minimum, other.minimum) if v is not None]
        maxs = [v for v in (self.maximum, other.maximum) if v is not None]
        return Statistics(
            count=self.count + other.count,
            total=self.total + other.total,
            total_sq=self.total_sq + other.total_sq,
            minimum=min(mins) if mins else None,
            maximum=max(maxs) if maxs else None,
        )

    @property
    def mean(self) -> Optional[float]:
        if self.count <= 0:
            return None
        return self.total / self.count

    @property
    def variance(self) -> Optional[float]:
        if self.count <= 0:
            return None
        mean = self.total / self.count
        # Rounding can push the difference slightly below zero
        return max(0.0, self.total_sq / self.count - mean * mean)

    @property
    def stddev(self) -> Optional[float]:
        variance = self.variance
        return None if variance is None else math.sqrt(variance)

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "count": self.count,
            "min": self.minimum,
            "max": self.maximum,
            "mean": self.mean,
            "stddev": self.stddev,
        }


def weighted_fold_step(
    stats: Statistics,
    prev_row: Optional[Tuple[Any, Any]],
    row: Tuple[Any, Any],
) -> Statistics:
    """
    Fold one (weight, value) interval into `stats`.

    The interval between `prev_row` and `row` contributes the midpoint of
    the two values with multiplicity equal to the weight delta. Intervals
    with a missing cell or a non-positive delta contribute nothing.
    """
    if prev_row is None or not (row_is_present(prev_row) and row_is_present(row)):
        return stats
    dx = row[0] - prev_row[0]
    if dx <= 0:
        return stats
    dy = (prev_row[1] + row[1]) / 2
    return stats.add(dy, dx)


def unweighted_fold_step(stats: Statistics, value: Any) -> Statistics:
    """Fold a single value into `stats` if it is present."""
    if is_present(value):
        stats.add(value)
    return stats


def compute_statistics(
    frame: Frame,
    column: str,
    weight_column: Union[str, None, Any] = USE_DEFAULT,
    start: Optional[int] = None,
    end: Optional[int] = None,
) -> Optional[Statistics]:
    """
    Compute min/max/mean/stddev/count for `column`.

    When a weight column is in effect (the frame default, or an explicit
    name), each interval between consecutive samples is weighted by the
    weight delta, which is what unevenly spaced samples need. Pass
    `weight_column=None` to count every present value once.

    Returns:
        Statistics, or None if `column` or the weight column is absent
    """
    weight = frame.resolve_weight_column(weight_column)
    if not frame.has(column):
        return None
    if weight is not None:
        if not frame.has(weight):
            return None
        return frame.fold_paired([weight, column], Statistics(), weighted_fold_step, start, end)
    return frame.fold(column, Statistics(), unweighted_fold_step, start, end)


def _weighted_pairs(
    frame: Frame,
    column: str,
    weight: str,
    start: Optional[int],
    end: Optional[int],
) -> List[Tuple[Any, float]]:
    """Pair each value of `column` with its row's weight delta."""

    def pair(prev_row, row):
        x, value = row
        if prev_row is None or is_missing(prev_row[0]) or is_missing(x):
            return value, 0.0
        return value, max(0.0, x - prev_row[0])

    return list(frame.map_paired([weight, column], pair, start, end))


def _inverse_cdf(
    values: List[Any],
    weights: List[float],
    q: float,
    less_than: Callable[[Any, Any], bool],
) -> Any:
    """Smallest value whose cumulative weight reaches fraction `q`."""

    def compare(a, b):
        if less_than(a[0], b[0]):
            return -1
        if less_than(b[0], a[0]):
            return 1
        return 0

    pairs = sorted(
        ((v, w) for v, w in zip(values, weights) if w > 0),
        key=functools.cmp_to_key(compare),
    )
    if not pairs:
        return None
    total = sum(w for _, w in pairs)
    target = q * total
    cumulative = 0.0
    for value, w in pairs:
        cumulative += w
        if cumulative >= target:
            return value
    return pairs[-1][0]


def quantile(
    frame: Frame,
    column: str,
    *quantiles: float,
    weight_column: Union[str, None, Any] = USE_DEFAULT,
    less_than: Callable[[Any, Any], bool] = operator.lt,
    start: Optional[int] = None,
    end: Optional[int] = None,
) -> Union[Any, List[Any], None]:
    """
    Return quantiles of the (optionally weighted) distribution of `column`.

    Each value is paired with the weight delta of its row (0 for the first
    row). Rows with a missing value are dropped from both arrays together.
    Values and weights come from one traversal, so columns of different
    lengths raise InvariantViolation.

    Args:
        frame: Source frame
        column: Column to analyze
        *quantiles: Quantiles in [0, 1]; defaults to 0, .25, .5, .75, 1
        weight_column: Weight column, USE_DEFAULT or None for unweighted
        less_than: Ordering used to sort values

    Returns:
        A single value when exactly one quantile is requested, otherwise a
        list; None if a column is absent or no weighted data remains
    """
    weight = frame.resolve_weight_column(weight_column)
    if not frame.has(column) or (weight is not None and not frame.has(weight)):
        return None

    qs = quantiles or DEFAULT_QUANTILES
    if weight is not None:
        pairs = _weighted_pairs(frame, column, weight, start, end)
    else:
        pairs = [(v, 1.0) for v in frame.select(column, start, end)]

    kept = [(v, w) for v, w in pairs if is_present(v)]
    values = [v for v, _ in kept]
    weights = [w for _, w in kept]

    if not values or sum(weights) <= 0:
        return None

    result = [_inverse_cdf(values, weights, q, less_than) for q in qs]
    return result[0] if len(quantiles) == 1 else result
