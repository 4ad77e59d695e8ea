"""
Custom exceptions for the activity frame library.

This module defines a hierarchy of exceptions raised by the data frame and
its analysis functions. Each exception includes:
- A descriptive message
- An error code
- Optional details for debugging

Analysis functions that work on optional columns (statistics, histograms,
best-average curves) do not raise when a column is absent; they return
None or an empty result instead. The exceptions below signal programmer
or data errors and are never retried.
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_RANGE = "INVALID_RANGE"
    NOT_FOUND = "NOT_FOUND"
    NOT_SORTED = "NOT_SORTED"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"


class ActivityFrameError(Exception):
    """
    Base exception for all activity frame errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for reporting."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


# ============================================================================
# Validation Errors
# ============================================================================

class ValidationError(ActivityFrameError):
    """Raised when an argument is outside its accepted domain."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            details=error_details,
        )


class InvalidRangeError(ValidationError):
    """Raised when a [start, end) row range does not fit a column."""

    def __init__(self, start: int, end: int, length: int, column: Optional[str] = None) -> None:
        message = f"Invalid range [{start}, {end}) for length {length}"
        if column:
            message += f" (column '{column}')"
        super().__init__(
            message=message,
            field=column,
            details={"start": start, "end": end, "length": length},
        )
        self.code = ErrorCode.INVALID_RANGE


# ============================================================================
# Lookup Errors
# ============================================================================

class NotFoundError(ActivityFrameError):
    """Raised when a mandatory column or property does not exist."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        message = f"{resource_type} '{resource_id}' not found"
        error_details = details or {}
        error_details["resource_type"] = resource_type
        error_details["resource_id"] = resource_id
        super().__init__(
            message=message,
            code=ErrorCode.NOT_FOUND,
            details=error_details,
        )


class ColumnNotFoundError(NotFoundError):
    """Raised when a column is not present in a frame."""

    def __init__(self, name: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(resource_type="Column", resource_id=name, details=details)


# ============================================================================
# Data Errors
# ============================================================================

class NotSortedError(ActivityFrameError):
    """Raised when a sorted-only operation is used on an unsorted column."""

    def __init__(self, column: str) -> None:
        super().__init__(
            message=f"Column '{column}' is not sorted",
            code=ErrorCode.NOT_SORTED,
            details={"column": column},
        )


class InvariantViolation(ActivityFrameError):
    """Raised when data does not satisfy a structural invariant.

    Examples are marking a column sorted when it holds missing values or
    out-of-order elements, or traversing columns of different lengths.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.INVARIANT_VIOLATION,
            details=details,
        )
