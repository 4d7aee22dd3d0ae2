"""
Date and timezone utilities.

Centralizes date/time parsing, formatting and calendar arithmetic at a
declared precision. Time series dates are naive datetimes; timezone-aware
inputs are converted to a series time zone with pytz before use.
"""

import calendar
import logging
import re
from datetime import datetime, timedelta
from typing import Optional, Tuple

import pytz
from pytz.tzinfo import BaseTzInfo

from .interval import IntervalBase

_ISO_PATTERN = re.compile(
    r"^(\d{4})(?:-(\d{1,2})(?:-(\d{1,2})"
    r"(?:[ T](\d{1,2})(?::(\d{2})(?::(\d{2}))?)?)?)?)?$"
)
_SLASH_PATTERN = re.compile(
    r"^(\d{1,2})/(?:(\d{1,2})/)?(\d{4})"
    r"(?:[ T](\d{1,2})(?::(\d{2})(?::(\d{2}))?)?)?$"
)


class DateUtils:
    """Utilities for date handling at a precision and timezone conversion."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize date utilities.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def parse_timezone(timezone_str: str) -> BaseTzInfo:
        """
        Parse timezone string to pytz timezone object.

        Args:
            timezone_str: Timezone string (e.g., 'America/Denver', 'UTC')

        Returns:
            pytz timezone object

        Raises:
            ValueError: If timezone is invalid
        """
        try:
            return pytz.timezone(timezone_str)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(f"Invalid timezone: {timezone_str}")

    @staticmethod
    def to_naive(dt: datetime, timezone_str: str = "UTC") -> datetime:
        """
        Convert a datetime to a naive local time in the given timezone.

        Naive datetimes are returned unchanged.

        Args:
            dt: Datetime, aware or naive
            timezone_str: Target timezone for aware datetimes

        Returns:
            Naive datetime
        """
        if dt.tzinfo is None:
            return dt
        tz = DateUtils.parse_timezone(timezone_str)
        return dt.astimezone(tz).replace(tzinfo=None)

    @staticmethod
    def parse_date(text: str) -> Tuple[datetime, IntervalBase]:
        """
        Parse a date string and report the precision it was written at.

        Supported forms: YYYY, YYYY-MM, YYYY-MM-DD, YYYY-MM-DD HH,
        YYYY-MM-DD HH:MM, YYYY-MM-DD HH:MM:SS (a "T" may separate date and
        time), MM/YYYY, MM/DD/YYYY and MM/DD/YYYY HH:MM.

        Args:
            text: Date string

        Returns:
            Tuple of (datetime, precision)

        Raises:
            ValueError: If the string is not a recognized date
        """
        value = text.strip()
        match = _ISO_PATTERN.match(value)
        if match:
            year, month, day, hour, minute, second = match.groups()
        else:
            match = _SLASH_PATTERN.match(value)
            if not match:
                raise ValueError(f"Unrecognized date \"{text}\"")
            month, day, year, hour, minute, second = match.groups()

        if second is not None:
            precision = IntervalBase.SECOND
        elif minute is not None:
            precision = IntervalBase.MINUTE
        elif hour is not None:
            precision = IntervalBase.HOUR
        elif day is not None:
            precision = IntervalBase.DAY
        elif month is not None:
            precision = IntervalBase.MONTH
        else:
            precision = IntervalBase.YEAR

        dt = datetime(
            int(year),
            int(month or 1),
            int(day or 1),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
        )
        return dt, precision

    @staticmethod
    def format_date(dt: datetime, precision: IntervalBase) -> str:
        """
        Format a date at a precision.

        Args:
            dt: Date to format
            precision: YEAR gives "YYYY", MONTH "YYYY-MM", DAY "YYYY-MM-DD",
                HOUR "YYYY-MM-DD HH", MINUTE "YYYY-MM-DD HH:MM" and SECOND
                "YYYY-MM-DD HH:MM:SS"

        Returns:
            Formatted date string
        """
        if precision == IntervalBase.YEAR:
            return f"{dt.year:04d}"
        if precision == IntervalBase.MONTH:
            return f"{dt.year:04d}-{dt.month:02d}"
        day = f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        if precision in (IntervalBase.DAY, IntervalBase.WEEK):
            return day
        if precision == IntervalBase.HOUR:
            return f"{day} {dt.hour:02d}"
        if precision == IntervalBase.SECOND:
            return f"{day} {dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
        return f"{day} {dt.hour:02d}:{dt.minute:02d}"

    @staticmethod
    def set_precision(dt: datetime, precision: IntervalBase) -> datetime:
        """Truncate the fields of a date finer than the precision."""
        if precision == IntervalBase.YEAR:
            return datetime(dt.year, 1, 1)
        if precision == IntervalBase.MONTH:
            return datetime(dt.year, dt.month, 1)
        if precision in (IntervalBase.DAY, IntervalBase.WEEK):
            return datetime(dt.year, dt.month, dt.day)
        if precision == IntervalBase.HOUR:
            return datetime(dt.year, dt.month, dt.day, dt.hour)
        if precision == IntervalBase.MINUTE:
            return datetime(dt.year, dt.month, dt.day, dt.hour, dt.minute)
        return dt.replace(microsecond=0)

    @staticmethod
    def add_interval(dt: datetime, base: IntervalBase, multiplier: int) -> datetime:
        """
        Add a number of interval units to a date.

        Month and year arithmetic is calendar-aware; the day is clamped to the
        length of the resulting month.

        Raises:
            ValueError: If the interval is irregular or unknown
        """
        if base == IntervalBase.SECOND:
            return dt + timedelta(seconds=multiplier)
        if base == IntervalBase.MINUTE:
            return dt + timedelta(minutes=multiplier)
        if base == IntervalBase.HOUR:
            return dt + timedelta(hours=multiplier)
        if base == IntervalBase.DAY:
            return dt + timedelta(days=multiplier)
        if base == IntervalBase.WEEK:
            return dt + timedelta(weeks=multiplier)
        if base == IntervalBase.MONTH:
            year, month0 = divmod(DateUtils.absolute_month(dt) + multiplier, 12)
            day = min(dt.day, DateUtils.days_in_month(year, month0 + 1))
            return dt.replace(year=year, month=month0 + 1, day=day)
        if base == IntervalBase.YEAR:
            year = dt.year + multiplier
            day = min(dt.day, DateUtils.days_in_month(year, dt.month))
            return dt.replace(year=year, day=day)
        raise ValueError(f"Cannot add an interval with base {base!r}")

    @staticmethod
    def absolute_month(dt: datetime) -> int:
        """Return a month count suitable for differencing (year * 12 + month - 1)."""
        return dt.year * 12 + dt.month - 1

    @staticmethod
    def days_in_month(year: int, month: int) -> int:
        return calendar.monthrange(year, month)[1]
