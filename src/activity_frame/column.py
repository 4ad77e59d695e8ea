"""Named, fixed-length columns of optional values."""

import math
import operator
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple

from .exceptions import InvariantViolation, NotSortedError
from .search import bsearch


# Missing cells are stored as None. NaN values coming from a source are
# treated as missing as well; 0, 0.0, "" and False are ordinary values.
MISSING = None


def is_missing(value: Any) -> bool:
    """Return True if `value` is the missing marker (None or a float NaN)."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def is_present(value: Any) -> bool:
    """Return True if `value` holds actual data."""
    return not is_missing(value)


def row_is_present(row: Any) -> bool:
    """Return True if a row (a bare value or a tuple of values) has no missing cell."""
    if isinstance(row, tuple):
        return all(is_present(v) for v in row)
    return is_present(row)


class Column:
    """
    A named sequence of values forming one field of a data set.

    Values are stored in an immutable tuple. A column can be marked sorted
    under an ordering predicate (default `<=`), which enables positional
    lookups with `index_of`. Sortedness is validated whenever it is set.
    """

    def __init__(
        self,
        name: str,
        values: Iterable[Any],
        sorted: bool = False,
        order: Callable[[Any, Any], bool] = operator.le,
    ) -> None:
        self._name = name
        self._values: Tuple[Any, ...] = tuple(values)
        self._order = order
        self._sorted = False
        if sorted:
            self.set_sorted(True)

    def __repr__(self) -> str:
        return f"Column(name={self._name!r}, count={len(self._values)}, sorted={self._sorted})"

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __getitem__(self, index):
        return self._values[index]

    @property
    def name(self) -> str:
        return self._name

    @property
    def values(self) -> Tuple[Any, ...]:
        return self._values

    @property
    def order(self) -> Callable[[Any, Any], bool]:
        return self._order

    def count(self) -> int:
        """Number of cells, missing ones included."""
        return len(self._values)

    def is_sorted(self) -> bool:
        return self._sorted

    def set_sorted(self, flag: bool) -> None:
        """
        Mark the column as sorted (or unsorted).

        Raises:
            InvariantViolation: if `flag` is true and the data contains a
                missing value or is not ordered under the column's order
        """
        if flag:
            self._check_sorted()
        self._sorted = bool(flag)

    def _check_sorted(self) -> None:
        prev = MISSING
        for index, value in enumerate(self._values):
            if is_missing(value):
                raise InvariantViolation(
                    f"Column '{self._name}' has a missing value at index {index}",
                    details={"column": self._name, "index": index},
                )
            if index > 0 and not self._order(prev, value):
                raise InvariantViolation(
                    f"Column '{self._name}' is not ordered at index {index}",
                    details={"column": self._name, "index": index},
                )
            prev = value

    def count_missing(self) -> int:
        return sum(1 for v in self._values if is_missing(v))

    def has_any_valid(self) -> bool:
        return any(is_present(v) for v in self._values)

    def has_any_missing(self) -> bool:
        return any(is_missing(v) for v in self._values)

    def index_of(self, value: Any) -> Optional[int]:
        """
        Return the insertion index of `value` in this sorted column.

        Returns None when `value` is missing.

        Raises:
            NotSortedError: if the column is not marked sorted
        """
        if not self._sorted:
            raise NotSortedError(self._name)
        if is_missing(value):
            return None
        return bsearch(self._values, value, cmp=self._order)

