"""In-memory columnar data frame for activity sample streams."""

from .column import MISSING, Column, is_missing, is_present
from .frame import USE_DEFAULT, Frame
from .exceptions import (
    ActivityFrameError,
    ColumnNotFoundError,
    ErrorCode,
    InvalidRangeError,
    InvariantViolation,
    NotFoundError,
    NotSortedError,
    ValidationError,
)
from .search import bsearch
from .stats import Statistics, compute_statistics, quantile
from .histogram import (
    bucket_samples,
    combine_histograms,
    compute_histogram,
    merge_bucket_keys,
    normalize_histogram,
    to_histogram,
    trim_outliers,
)
from .meanmax import (
    AuxTransform,
    BestAvgPoint,
    IMPORTANT_DURATIONS,
    best_avg,
    best_avg_aux,
    best_avg_ticks,
    build_duration_ladder,
    default_best_avg_durations,
    format_duration,
    normalize_aux,
)
from .scatter import group_samples, scatter_points
from .summary import ColumnSummary, FrameDescription, describe, print_description
from .ingest import frame_from_rows, frame_from_sql, write_csv

__all__ = [
    # Core containers
    "MISSING",
    "Column",
    "Frame",
    "USE_DEFAULT",
    "is_missing",
    "is_present",
    "bsearch",
    # Errors
    "ActivityFrameError",
    "ColumnNotFoundError",
    "ErrorCode",
    "InvalidRangeError",
    "InvariantViolation",
    "NotFoundError",
    "NotSortedError",
    "ValidationError",
    # Statistics
    "Statistics",
    "compute_statistics",
    "quantile",
    # Histograms
    "bucket_samples",
    "combine_histograms",
    "compute_histogram",
    "merge_bucket_keys",
    "normalize_histogram",
    "to_histogram",
    "trim_outliers",
    # Best averages
    "AuxTransform",
    "BestAvgPoint",
    "IMPORTANT_DURATIONS",
    "best_avg",
    "best_avg_aux",
    "best_avg_ticks",
    "build_duration_ladder",
    "default_best_avg_durations",
    "format_duration",
    "normalize_aux",
    # Scatter
    "group_samples",
    "scatter_points",
    # Description
    "ColumnSummary",
    "FrameDescription",
    "describe",
    "print_description",
    # Ingestion / export
    "frame_from_rows",
    "frame_from_sql",
    "write_csv",
]
