"""Building frames from tabular rows or SQLite queries, and CSV export."""

import csv
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, TextIO, Union

from .column import Column, is_missing
from .frame import Frame

logger = logging.getLogger(__name__)


def _placeholder_name(index: int) -> str:
    return f"column_{index}"


def frame_from_rows(
    rows: Iterable[Union[Sequence[Any], Mapping[str, Any]]],
    column_names: Optional[Sequence[str]] = None,
) -> Frame:
    """
    Build a frame with one column per field of `rows`.

    Rows may be sequences (matched to `column_names` by position) or
    mappings (looked up by name). Absent cells become missing values.
    Fields without names get placeholder names `column_<i>`.
    """
    rows = list(rows)
    if column_names is None:
        first = rows[0] if rows else ()
        if isinstance(first, Mapping):
            column_names = list(first.keys())
        else:
            column_names = [_placeholder_name(i) for i in range(len(first))]
    names = [name or _placeholder_name(i) for i, name in enumerate(column_names)]

    data: List[List[Any]] = [[] for _ in names]
    for row in rows:
        for i, name in enumerate(names):
            if isinstance(row, Mapping):
                value = row.get(column_names[i])
            else:
                value = row[i] if i < len(row) else None
            data[i].append(value)

    logger.debug(f"Built frame from {len(rows)} rows, {len(names)} fields")
    return Frame(Column(name, values) for name, values in zip(names, data))


@contextmanager
def _get_connection(db_path: Union[str, Path]):
    """Get database connection with context manager."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def frame_from_sql(
    db_path: Union[str, Path],
    query: str,
    params: Sequence[Any] = (),
) -> Frame:
    """
    Run `query` against a SQLite database and build a frame from the result.

    Each result field becomes a column named after the field; NULL cells
    become missing values.
    """
    with _get_connection(db_path) as conn:
        cursor = conn.execute(query, params)
        column_names = [d[0] for d in cursor.description or ()]
        rows = [tuple(row) for row in cursor.fetchall()]
    logger.debug(f"Query returned {len(rows)} rows from {db_path}")
    return frame_from_rows(rows, column_names)


def write_csv(
    frame: Frame,
    destination: Union[str, Path, TextIO],
    columns: Optional[Sequence[str]] = None,
    start: Optional[int] = None,
    end: Optional[int] = None,
) -> int:
    """
    Write columns of `frame` as CSV with a header row.

    Missing values are written as empty cells.

    Returns:
        Number of data rows written
    """
    names = list(columns) if columns is not None else sorted(frame.column_names())
    rows = frame.select_many(*names, start=start, end=end)

    def write(stream: TextIO) -> None:
        writer = csv.writer(stream)
        writer.writerow(names)
        for row in rows:
            writer.writerow(["" if is_missing(v) else v for v in row])

    if isinstance(destination, (str, Path)):
        with open(destination, "w", newline="", encoding="utf-8") as f:
            write(f)
    else:
        write(destination)
    return len(rows)
