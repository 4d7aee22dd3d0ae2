"""
Exceptions for the hydro time series package.

All exceptions inherit from TimeSeriesError so callers can catch every
library failure with one clause.
"""

from typing import Optional


class TimeSeriesError(Exception):
    """Base exception for all time series errors."""
    pass


class StructuralParseError(TimeSeriesError):
    """Raised when an identifier, interval or header value cannot be parsed."""
    pass


class IntervalParseError(StructuralParseError):
    """Raised when an interval string has an unrecognized base."""
    pass


class DateValueFormatError(StructuralParseError):
    """Raised when a DateValue header value is malformed (bad date, bad count)."""
    pass


class HeaderConsistencyError(TimeSeriesError):
    """Raised when a DateValue header produced one or more consistency warnings."""

    def __init__(self, warning_count: int, path: Optional[str] = None):
        self.warning_count = warning_count
        self.path = path
        where = f" in \"{path}\"" if path else ""
        super().__init__(
            f"{warning_count} error(s) in the header{where}. Fix and re-read."
        )


class RecordParseError(TimeSeriesError):
    """Raised when DateValue data records produced one or more warnings."""

    def __init__(self, warning_count: int, path: Optional[str] = None):
        self.warning_count = warning_count
        self.path = path
        where = f" in \"{path}\"" if path else ""
        super().__init__(
            f"{warning_count} error(s) reading data records{where}."
        )


class AllocationError(TimeSeriesError):
    """Raised when data space cannot be allocated for a time series."""
    pass


class TimeSeriesIOError(TimeSeriesError):
    """Raised when a time series file cannot be opened, read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class CrossSeriesConsistencyError(TimeSeriesError):
    """Raised when series written together do not share an interval or precision."""
    pass


class UnitConversionError(TimeSeriesError):
    """Raised when no conversion is known between two units."""
    pass
