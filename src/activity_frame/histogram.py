"""Histogram bucketing, gap filling, outlier trimming and merging."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .column import is_present, row_is_present
from .config import get_settings
from .frame import USE_DEFAULT, Frame

logger = logging.getLogger(__name__)

# A dense histogram: (bucket start value, rank) pairs
Histogram = List[Tuple[float, float]]


def _bucket_key(value: float, bucket_width: float) -> int:
    # int() truncates toward zero
    return int(value / bucket_width)


def bucket_samples(
    frame: Frame,
    column: str,
    weight_column: Union[str, None, Any] = USE_DEFAULT,
    bucket_width: float = 1,
    include_zero: bool = True,
    start: Optional[int] = None,
    end: Optional[int] = None,
) -> Optional[Dict[int, float]]:
    """
    Accumulate samples of `column` into fixed-width buckets.

    Unweighted, every present value adds 1 to bucket
    `trunc(value / bucket_width)`. Weighted, every interval between two
    complete samples adds its weight delta to the bucket of the midpoint
    value.

    Returns:
        Mapping of bucket key to accumulated count/weight, or None if the
        column or the weight column is absent
    """
    weight = frame.resolve_weight_column(weight_column)
    if not frame.has(column) or (weight is not None and not frame.has(weight)):
        return None

    def add(buckets: Dict[int, float], key: int, amount: float) -> Dict[int, float]:
        if key != 0 or include_zero:
            buckets[key] = buckets.get(key, 0) + amount
        return buckets

    if weight is None:
        def step(buckets, value):
            if is_present(value):
                add(buckets, _bucket_key(value, bucket_width), 1)
            return buckets

        return frame.fold(column, {}, step, start, end)

    def weighted_step(buckets, prev_row, row):
        if prev_row is None or not (row_is_present(prev_row) and row_is_present(row)):
            return buckets
        dx = row[0] - prev_row[0]
        if dx <= 0:
            return buckets
        dy = (prev_row[1] + row[1]) / 2
        return add(buckets, _bucket_key(dy, bucket_width), dx)

    return frame.fold_paired([weight, column], {}, weighted_step, start, end)


def to_histogram(
    buckets: Optional[Dict[int, float]],
    bucket_width: float = 1,
    as_percentage: bool = False,
) -> Optional[Histogram]:
    """
    Expand a bucket mapping into a dense histogram.

    Entries run from the smallest to the largest key with no gaps; missing
    keys get rank 0. Each entry is `(key * bucket_width, rank)`, with the
    rank expressed as a percentage of the total if `as_percentage`.
    """
    if not buckets:
        return None
    total = sum(buckets.values())
    low, high = min(buckets), max(buckets)
    dense = []
    for key in range(low, high + 1):
        rank = buckets.get(key, 0)
        if as_percentage:
            rank = 100.0 * rank / total if total else 0.0
        dense.append((key * bucket_width, rank))
    return dense


def trim_outliers(hist: Histogram, percent: Optional[float] = None) -> Histogram:
    """
    Drop sparse buckets from both ends of a histogram.

    Buckets are removed from the front (and the back) while their share of
    the total rank is at most `percent`; interior buckets are kept even if
    empty. The histogram is returned unchanged when no bucket exceeds the
    threshold.
    """
    if percent is None:
        percent = get_settings().outlier_trim_percent
    total = sum(rank for _, rank in hist)
    if total <= 0:
        return hist

    def significant(entry: Tuple[float, float]) -> bool:
        return entry[1] / total > percent

    first = next((i for i, entry in enumerate(hist) if significant(entry)), None)
    if first is None:
        return hist
    last = next(i for i in range(len(hist) - 1, -1, -1) if significant(hist[i]))
    trimmed = hist[first:last + 1]
    if len(trimmed) != len(hist):
        logger.debug(f"Trimmed {len(hist) - len(trimmed)} outlier buckets")
    return trimmed


def compute_histogram(
    frame: Frame,
    column: str,
    weight_column: Union[str, None, Any] = USE_DEFAULT,
    bucket_width: float = 1,
    trim: Optional[float] = None,
    include_zero: bool = True,
    as_percentage: bool = False,
    start: Optional[int] = None,
    end: Optional[int] = None,
) -> Optional[Histogram]:
    """Bucket `column`, expand to a dense histogram and optionally trim it."""
    buckets = bucket_samples(frame, column, weight_column, bucket_width, include_zero, start, end)
    result = to_histogram(buckets, bucket_width, as_percentage)
    if result is not None and trim is not None:
        result = trim_outliers(result, trim)
    return result


def merge_bucket_keys(first: Histogram, second: Histogram) -> List[float]:
    """Sorted union of the bucket keys of two histograms."""
    return sorted({key for key, _ in first} | {key for key, _ in second})


def normalize_histogram(hist: Histogram, keys: Sequence[float]) -> Histogram:
    """Re-expand `hist` over `keys`, inserting rank 0 for absent keys."""
    ranks = dict(hist)
    return [(key, ranks.get(key, 0)) for key in keys]


def combine_histograms(first: Histogram, second: Histogram) -> List[Tuple[float, float, float]]:
    """
    Overlay two histograms on a common key set.

    Returns:
        List of (key, rank in first, rank in second)
    """
    keys = merge_bucket_keys(first, second)
    left = normalize_histogram(first, keys)
    right = normalize_histogram(second, keys)
    return [(key, a, b) for (key, a), (_, b) in zip(left, right)]
