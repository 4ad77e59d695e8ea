"""Binary search for insertion points in ordered sequences."""

import operator
from typing import Any, Callable, Optional, Sequence


def bsearch(
    data: Sequence[Any],
    value: Any,
    start: Optional[int] = None,
    end: Optional[int] = None,
    cmp: Callable[[Any, Any], bool] = operator.le,
    key: Optional[Callable[[Any], Any]] = None,
) -> int:
    """
    Find the position where `value` can be inserted to keep `data` sorted.

    This is a lower-bound search: the result is the first index i in
    [start, end) for which cmp(value, key(data[i])) holds. With the default
    `<=` comparator, equal elements resolve to the leftmost match; a value
    smaller than everything returns `start` and a value larger than
    everything returns `end`.

    Args:
        data: Sequence ordered under `cmp`
        value: Value to locate
        start: First index of the search range (clamped into [0, len])
        end: One past the last index of the range (clamped into [0, len])
        cmp: Ordering predicate the sequence is sorted by
        key: Optional projection applied to each element before comparing

    Returns:
        Insertion index in [start, end]
    """
    length = len(data)
    lo = 0 if start is None else min(max(start, 0), length)
    hi = length if end is None else min(max(end, 0), length)
    if lo > hi:
        lo, hi = hi, lo

    while lo < hi:
        mid = (lo + hi) // 2
        item = data[mid] if key is None else key(data[mid])
        if cmp(value, item):
            hi = mid
        else:
            lo = mid + 1
    return lo
