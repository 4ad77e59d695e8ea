"""
Best rolling averages over fixed durations ("mean maximal" curves).

For every duration D in a ladder, the best time-weighted average of a
metric over any contiguous span of exactly D is found with a two-pointer
window over per-interval slices. Each slice is one gap between adjacent
complete samples: its width, its trapezoidal area and its starting position.

The window grows at the tail until it covers at least D, the overshoot
is cut from the last slice proportionally, the candidate average is
recorded at the head position and the head then moves forward by one
whole slice. Each duration is therefore handled in a single pass.

Auxiliary curves report a second metric's plain average over the window
found for the primary metric, e.g. cadence during the best 20 minute
power effort.
"""

import logging
import math
import operator
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from .column import row_is_present
from .config import get_settings
from .exceptions import ValidationError
from .frame import USE_DEFAULT, Frame
from .search import bsearch

logger = logging.getLogger(__name__)

# Durations (seconds) that make good plot ticks
IMPORTANT_DURATIONS: Tuple[int, ...] = (
    1, 5, 10, 15, 30, 45, 60, 90, 120, 180, 300, 600, 900,
    1200, 1800, 2700, 3600, 5400, 7200, 10800,
)


class BestAvgPoint(NamedTuple):
    """One entry of a best-average curve."""
    duration: float
    value: Optional[float]
    position: Optional[float]


class _Slice(NamedTuple):
    width: float
    area: float
    position: float


# ============================================================================
# Duration ladders
# ============================================================================

def _min_step(duration: float) -> int:
    if duration < 600:
        return 5
    if duration < 3600:
        return 10
    return 20


def build_duration_ladder(start: int, limit: int, growth: float = 1.2) -> Tuple[int, ...]:
    """
    Build a front-loaded geometric ladder of durations from start to limit.

    Each step grows the duration by `growth`. Every entry after `start` is
    rounded to a multiple of the minimum step for its scale (5, 10 or 20
    seconds), so short durations are dense and long ones sparse without
    duplicates. `limit` is always the last entry.
    """
    durations = []
    current = start
    while current < limit:
        durations.append(current)
        min_step = _min_step(current)
        step = round(current * (growth - 1) / min_step) * min_step
        following = current + max(min_step, step)
        align = _min_step(following)
        current = int(round(following / align)) * align
    durations.append(limit)
    return tuple(durations)


@lru_cache
def _cached_ladder(start: int, limit: int, growth: float) -> Tuple[int, ...]:
    return build_duration_ladder(start, limit, growth)


def default_best_avg_durations() -> Tuple[int, ...]:
    """Default duration ladder, built once per settings seeds."""
    settings = get_settings()
    return _cached_ladder(settings.best_avg_start, settings.best_avg_limit, settings.best_avg_growth)


def best_avg_ticks(min_duration: float, max_duration: float) -> List[float]:
    """
    Tick positions for a best-average plot spanning [min, max] durations.

    Important durations inside the range are used when there are enough
    of them; otherwise a geometric grid across the range is returned.
    """
    settings = get_settings()
    ticks = [d for d in IMPORTANT_DURATIONS if min_duration <= d <= max_duration]
    if len(ticks) >= settings.min_important_ticks:
        return ticks

    low = max(min_duration, 1)
    if max_duration <= low:
        return [low]
    count = max(settings.tick_count, 2)
    ratio = (max_duration / low) ** (1.0 / (count - 1))
    return sorted({int(round(low * ratio ** i)) for i in range(count)})


def format_duration(seconds: float) -> str:
    """Format a duration as m:ss or h:mm:ss for tick labels."""
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


# ============================================================================
# Slices
# ============================================================================

def _slice_series(
    frame: Frame,
    column: str,
    weight: str,
    start: Optional[int] = None,
    end: Optional[int] = None,
) -> List[_Slice]:
    """
    Build (width, trapezoidal area, start position) for each sample gap.

    Gaps are taken between consecutive complete samples, so a run of
    missing values becomes a single slice spanning it and the slices
    tile the covered x-range without holes.
    """
    rows = frame.select_many(weight, column, start=start, end=end, predicate=row_is_present)
    slices = []
    for (x1, y1), (x2, y2) in zip(rows, rows[1:]):
        dx = x2 - x1
        if dx > 0:
            slices.append(_Slice(dx, dx * (y1 + y2) / 2, x1))
    return slices


def _best_window(slices: Sequence[_Slice], duration: float, inverted: bool) -> BestAvgPoint:
    better = operator.lt if inverted else operator.gt
    best_value: Optional[float] = None
    best_position: Optional[float] = None

    head = 0
    running_duration = 0.0
    running_total = 0.0
    for tail, (width, area, _) in enumerate(slices):
        running_duration += width
        running_total += area
        while running_duration >= duration:
            # Keep only the part of the tail slice that fits in the window
            fraction = (width - (running_duration - duration)) / width
            total = running_total - area + area * fraction
            average = total / duration
            if best_value is None or better(average, best_value):
                best_value = average
                best_position = slices[head].position
            running_duration -= slices[head].width
            running_total -= slices[head].area
            head += 1
            if head > tail:
                running_duration = 0.0
                running_total = 0.0
                break

    return BestAvgPoint(duration, best_value, best_position)


def best_avg(
    frame: Frame,
    column: str,
    weight_column: Union[str, None, Any] = USE_DEFAULT,
    durations: Optional[Iterable[float]] = None,
    inverted: bool = False,
    start: Optional[int] = None,
    end: Optional[int] = None,
) -> Optional[List[BestAvgPoint]]:
    """
    Compute the best-average curve of `column` over a duration ladder.

    Args:
        frame: Source frame
        column: Metric to average (e.g. "power")
        weight_column: Position axis (e.g. "elapsed"); defaults to the
            frame's default weight column
        durations: Durations in weight-column units; defaults to the
            configured ladder
        inverted: Look for the lowest average instead of the highest
            (e.g. for pace)

    Returns:
        One BestAvgPoint per duration in increasing order, with value and
        position None where no window that long exists; an empty list if
        there are fewer than two usable samples; None if a column is absent

    Raises:
        ValidationError: if a duration is not positive
    """
    weight = frame.resolve_weight_column(weight_column)
    if weight is None or not frame.has(column, weight):
        return None

    if durations is None:
        durations = default_best_avg_durations()
    ladder = sorted(set(durations))
    for duration in ladder:
        if duration <= 0:
            raise ValidationError(f"Duration must be positive, got {duration}", field="durations")

    slices = _slice_series(frame, column, weight, start, end)
    if not slices:
        return []

    curve = [_best_window(slices, duration, inverted) for duration in ladder]
    logger.debug(
        f"Best average for '{column}': {len(ladder)} durations over {len(slices)} slices"
    )
    return curve


# ============================================================================
# Auxiliary curves
# ============================================================================

def _window_average(slices: Sequence[_Slice], index: int, duration: float) -> Optional[float]:
    covered = 0.0
    total = 0.0
    for width, area, _ in slices[index:]:
        if covered + width >= duration:
            total += area * (duration - covered) / width
            covered = duration
            break
        covered += width
        total += area
    if covered <= 0:
        return None
    return total / covered


def best_avg_aux(
    frame: Frame,
    column: str,
    curve: Sequence[BestAvgPoint],
    weight_column: Union[str, None, Any] = USE_DEFAULT,
) -> Optional[List[BestAvgPoint]]:
    """
    Average a second metric over the windows of an existing curve.

    For each point of `curve`, the plain time-weighted average of `column`
    is taken over `duration` units starting at the point's position. If
    the series ends early, the average over the covered part is used.

    Returns:
        Curve of (duration, aux average, position), or None if a column is
        absent
    """
    weight = frame.resolve_weight_column(weight_column)
    if weight is None or not frame.has(column, weight):
        return None

    slices = _slice_series(frame, column, weight)
    positions = [s.position for s in slices]
    result = []
    for point in curve:
        if point.position is None or not slices:
            result.append(BestAvgPoint(point.duration, None, None))
            continue
        index = bsearch(positions, point.position)
        value = _window_average(slices, index, point.duration)
        result.append(BestAvgPoint(point.duration, value, point.position))
    return result


@dataclass
class AuxTransform:
    """Affine map from the auxiliary value range onto the primary one."""

    target_min: float
    target_max: float
    source_min: float
    source_max: float

    def transform(self, value: float) -> float:
        source_range = self.source_max - self.source_min
        if source_range == 0:
            return self.target_min
        return self.target_min + (value - self.source_min) / source_range * (
            self.target_max - self.target_min
        )

    def inverse(self, value: float) -> float:
        target_range = self.target_max - self.target_min
        if target_range == 0:
            return self.source_min
        return self.source_min + (value - self.target_min) / target_range * (
            self.source_max - self.source_min
        )


def _value_range(curve: Sequence[BestAvgPoint]) -> Optional[Tuple[float, float]]:
    values = [p.value for p in curve if p.value is not None and not math.isnan(p.value)]
    if not values:
        return None
    return min(values), max(values)


def normalize_aux(
    curve: Sequence[BestAvgPoint],
    aux_curve: Sequence[BestAvgPoint],
    zero_base: bool = False,
) -> Tuple[List[BestAvgPoint], Optional[AuxTransform]]:
    """
    Rescale an auxiliary curve into the value range of the primary curve.

    The returned transform's `inverse` turns plotted values back into aux
    units, for labelling a secondary axis. With `zero_base`, both ranges
    start at 0.

    Returns:
        (rescaled aux curve, transform); the curve is returned unchanged
        with a None transform if either curve has no values
    """
    target = _value_range(curve)
    source = _value_range(aux_curve)
    if target is None or source is None:
        return list(aux_curve), None

    target_min, target_max = target
    source_min, source_max = source
    if zero_base:
        target_min = 0.0
        source_min = 0.0
    transform = AuxTransform(target_min, target_max, source_min, source_max)
    rescaled = [
        BestAvgPoint(
            p.duration,
            None if p.value is None else transform.transform(p.value),
            p.position,
        )
        for p in aux_curve
    ]
    return rescaled, transform
