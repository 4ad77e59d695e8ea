"""Column summaries for tabular and textual display."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table
from rich import box

from .column import is_missing
from .frame import Frame
from .stats import compute_statistics


class ColumnSummary(BaseModel):
    """Summary of a single column."""

    name: str
    count: int
    missing: int
    min: Optional[Any] = None
    max: Optional[Any] = None
    mean: Optional[float] = None
    stddev: Optional[float] = None


class FrameDescription(BaseModel):
    """Summary of all columns plus the frame's property bag."""

    columns: List[ColumnSummary] = Field(default_factory=list)
    properties: Dict[str, Any] = Field(default_factory=dict)


def _is_numeric_column(frame: Frame, name: str) -> bool:
    return all(
        isinstance(v, (int, float)) and not isinstance(v, bool)
        for v in frame.get_column(name)
        if not is_missing(v)
    )


def describe(frame: Frame) -> FrameDescription:
    """
    Summarize every column of `frame`.

    Numeric columns get unweighted min/max/mean/stddev; other columns only
    report their size and number of missing values.
    """
    summaries = []
    for name in sorted(frame.column_names()):
        column = frame.get_column(name)
        summary = ColumnSummary(
            name=name,
            count=column.count(),
            missing=column.count_missing(),
        )
        if _is_numeric_column(frame, name):
            stats = compute_statistics(frame, name, weight_column=None)
            summary.min = stats.minimum
            summary.max = stats.maximum
            summary.mean = stats.mean
            summary.stddev = stats.stddev
        summaries.append(summary)
    return FrameDescription(columns=summaries, properties=frame.properties)


def _fmt(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def print_description(frame: Frame, console: Optional[Console] = None) -> FrameDescription:
    """Render the frame description as rich tables and return it."""
    console = console or Console()
    description = describe(frame)

    table = Table(title="Columns", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Missing", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Mean", justify="right")
    table.add_column("Std Dev", justify="right")
    for summary in description.columns:
        missing_style = "yellow" if summary.missing else "green"
        table.add_row(
            summary.name,
            str(summary.count),
            f"[{missing_style}]{summary.missing}[/{missing_style}]",
            _fmt(summary.min),
            _fmt(summary.max),
            _fmt(summary.mean),
            _fmt(summary.stddev),
        )
    console.print(table)

    if description.properties:
        props = Table(title="Properties", box=box.ROUNDED)
        props.add_column("Key", style="cyan")
        props.add_column("Value")
        for key, value in sorted(description.properties.items()):
            props.add_row(key, str(value))
        console.print(props)

    return description
