"""
Columnar data frame for activity sample streams.

A Frame holds named Columns plus a free-form property bag. All higher
level computations (statistics, histograms, best-average curves) read
data through the traversal pipeline defined here:

- `iter_rows` yields rows in increasing index order, exactly once each
- `map` / `fold` apply a single-row callback `fn(row)`
- `map_paired` / `fold_paired` apply a paired callback
  `fn(prev_row, row)` where `prev_row` is None on the first row

When `columns` is a single name, rows are bare values; when it is a
sequence of names, rows are tuples in the order given.
"""

import logging
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from .column import Column
from .exceptions import ColumnNotFoundError, InvalidRangeError, InvariantViolation

logger = logging.getLogger(__name__)

A = TypeVar("A")

Columns = Union[str, Sequence[str]]

# Property key holding the name of the default weight column
WEIGHT_COLUMN_PROPERTY = "weight_column"


class _UseDefault:
    """Marker for "use the frame's default weight column"."""

    def __repr__(self) -> str:
        return "USE_DEFAULT"


USE_DEFAULT = _UseDefault()


class Frame:
    """
    A named collection of Columns plus key/value metadata.

    Columns without a single valid value are dropped at construction.
    Columns may have different lengths; operations that traverse several
    columns in lock-step require them to agree over the traversed range.
    """

    def __init__(
        self,
        columns: Iterable[Column] = (),
        properties: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._columns: Dict[str, Column] = {}
        self._properties: Dict[str, Any] = dict(properties or {})
        for column in columns:
            if column.has_any_valid():
                self._columns[column.name] = column
            else:
                logger.debug(f"Dropping column '{column.name}': no valid values")

    def __repr__(self) -> str:
        return f"Frame(columns={self.column_names()!r})"

    def __contains__(self, name: str) -> bool:
        return name in self._columns

    # ------------------------------------------------------------------
    # Columns and properties
    # ------------------------------------------------------------------

    def column_names(self) -> List[str]:
        return list(self._columns)

    def property_names(self) -> List[str]:
        return list(self._properties)

    def has(self, *names: str) -> bool:
        """True if every named column is present."""
        return all(name in self._columns for name in names)

    def has_any(self, *names: str) -> bool:
        """True if at least one named column is present."""
        return any(name in self._columns for name in names)

    def get_column(self, name: str) -> Column:
        """
        Return the column called `name`.

        Raises:
            ColumnNotFoundError: if the frame has no such column
        """
        try:
            return self._columns[name]
        except KeyError:
            raise ColumnNotFoundError(name) from None

    def add_column(self, column: Column) -> None:
        """Insert `column`, replacing any column with the same name."""
        self._columns[column.name] = column

    def put_property(self, key: str, value: Any) -> None:
        self._properties[key] = value

    def get_property(self, key: str, default: Any = None) -> Any:
        return self._properties.get(key, default)

    @property
    def properties(self) -> Dict[str, Any]:
        return dict(self._properties)

    def set_default_weight_column(self, name: Optional[str]) -> None:
        self.put_property(WEIGHT_COLUMN_PROPERTY, name)

    def get_default_weight_column(self) -> Optional[str]:
        return self.get_property(WEIGHT_COLUMN_PROPERTY)

    def resolve_weight_column(self, weight_column: Union[str, None, _UseDefault]) -> Optional[str]:
        """Turn USE_DEFAULT into the frame's default weight column name."""
        if weight_column is USE_DEFAULT:
            return self.get_default_weight_column()
        return weight_column

    # ------------------------------------------------------------------
    # Sizes and ranges
    # ------------------------------------------------------------------

    def row_count(self) -> int:
        """
        Return the number of rows shared by all columns.

        Raises:
            InvariantViolation: if the columns have different lengths
        """
        return self._common_length(self.column_names())

    def _common_length(self, names: Sequence[str]) -> int:
        lengths = {name: len(self.get_column(name)) for name in names}
        distinct = set(lengths.values())
        if len(distinct) > 1:
            raise InvariantViolation(
                "Columns have different lengths",
                details={"lengths": lengths},
            )
        return distinct.pop() if distinct else 0

    def _resolve_range(
        self,
        names: Sequence[str],
        start: Optional[int],
        end: Optional[int],
    ) -> Tuple[int, int]:
        if end is None:
            end = self._common_length(names)
        if start is None:
            start = 0
        for name in names:
            length = len(self.get_column(name))
            if not 0 <= start <= end <= length:
                raise InvalidRangeError(start, end, length, column=name)
        return start, end

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(
        self,
        name: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
        predicate: Optional[Callable[[Any], bool]] = None,
    ) -> Sequence[Any]:
        """
        Return the values of one column over [start, end).

        If `predicate` is given, only values for which it returns True are
        kept, in their original order.
        """
        column = self.get_column(name)
        start, end = self._resolve_range([name], start, end)
        values = column.values
        if predicate is not None:
            return [v for v in values[start:end] if predicate(v)]
        if start == 0 and end == len(values):
            return values
        return values[start:end]

    def select_many(
        self,
        *names: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
        predicate: Optional[Callable[[Tuple[Any, ...]], bool]] = None,
    ) -> List[Tuple[Any, ...]]:
        """
        Return row tuples (one value per named column, in the given order).

        Columns are index-aligned: row i is (col1[i], col2[i], ...). Every
        named column must have at least `end` elements.
        """
        rows = self.iter_rows(list(names), start, end)
        if predicate is not None:
            return [row for row in rows if predicate(row)]
        return list(rows)

    def index_of(self, name: str, value: Any) -> Optional[int]:
        """Insertion index of `value` in the sorted column `name`."""
        return self.get_column(name).index_of(value)

    def index_of_many(self, name: str, *values: Any) -> List[Optional[int]]:
        column = self.get_column(name)
        return [column.index_of(value) for value in values]

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def iter_rows(
        self,
        columns: Columns,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> Iterator[Any]:
        """
        Yield rows over [start, end) in increasing index order.

        The range is validated when this is called, not when iteration
        starts. The returned iterator is single-pass.
        """
        if isinstance(columns, str):
            start, end = self._resolve_range([columns], start, end)
            values = self.get_column(columns).values
            return iter(values[start:end])

        names = list(columns)
        start, end = self._resolve_range(names, start, end)
        data = [self.get_column(name).values for name in names]
        return (tuple(vals[i] for vals in data) for i in range(start, end))

    def map(
        self,
        columns: Columns,
        fn: Callable[[Any], Any],
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> Iterator[Any]:
        """Lazily apply `fn(row)` to every row in range."""
        return (fn(row) for row in self.iter_rows(columns, start, end))

    def map_paired(
        self,
        columns: Columns,
        fn: Callable[[Optional[Any], Any], Any],
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> Iterator[Any]:
        """Lazily apply `fn(prev_row, row)` to every row in range."""
        rows = self.iter_rows(columns, start, end)

        def generate():
            prev = None
            for row in rows:
                yield fn(prev, row)
                prev = row

        return generate()

    def fold(
        self,
        columns: Columns,
        init: A,
        fn: Callable[[A, Any], A],
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> A:
        """Reduce the rows in range with `fn(accumulator, row)`."""
        accumulator = init
        for row in self.iter_rows(columns, start, end):
            accumulator = fn(accumulator, row)
        return accumulator

    def fold_paired(
        self,
        columns: Columns,
        init: A,
        fn: Callable[[A, Optional[Any], Any], A],
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> A:
        """Reduce the rows in range with `fn(accumulator, prev_row, row)`."""
        accumulator = init
        prev = None
        for row in self.iter_rows(columns, start, end):
            accumulator = fn(accumulator, prev, row)
            prev = row
        return accumulator

    def add_derived_column(
        self,
        name: str,
        columns: Columns,
        fn: Callable[..., Any],
        paired: bool = False,
    ) -> Column:
        """
        Compute a new column from existing ones and add it to the frame.

        `fn` is called as `fn(row)`, or as `fn(prev_row, row)` when
        `paired` is true. The new column replaces any column of the same
        name and is returned.
        """
        if paired:
            values = list(self.map_paired(columns, fn))
        else:
            values = list(self.map(columns, fn))
        column = Column(name, values)
        self.add_column(column)
        return column
