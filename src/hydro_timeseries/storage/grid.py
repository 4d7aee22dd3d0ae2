"""
Dense grid stores for regular intervals.

Values are held in rows keyed by an outer index (calendar month for daily and
hourly data, year for monthly and yearly data) with an inner offset inside
the row. Row lengths follow the calendar, so February holds 28 or 29 days.
"""

from abc import abstractmethod
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from .base import DataStore, StorePoint
from ..core.date_utils import DateUtils
from ..core.interval import IntervalBase


class GridStore(DataStore):
    """Store with a row per outer index and a fixed offset per date."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._data: List[List[float]] = []
        self._flags: Optional[List[List[str]]] = None

    @abstractmethod
    def position(self, date: datetime) -> Tuple[int, int]:
        """
        Return the (outer, inner) cell position of a date.

        The date must already be at the store precision. Positions outside
        the period are not meaningful.
        """

    @abstractmethod
    def row_count(self) -> int:
        pass

    @abstractmethod
    def row_length(self, row: int) -> int:
        pass

    def inner_size(self, row: int) -> int:
        """Return the number of cells allocated for an outer index."""
        return len(self._data[row])

    def _allocate(self, fill: float) -> None:
        self._data = [[fill] * self.row_length(row) for row in range(self.row_count())]
        if self.has_flags:
            self._allocate_flags("")
        else:
            self._flags = None

    def _allocate_flags(self, initial: str) -> None:
        self._flags = [[initial] * len(row) for row in self._data]

    def _flags_allocated(self) -> bool:
        return self._flags is not None

    def _get(self, date: datetime) -> float:
        outer, inner = self.position(date)
        return self._data[outer][inner]

    def _get_flag(self, date: datetime) -> str:
        outer, inner = self.position(date)
        return self._flags[outer][inner]

    def _set(self, date: datetime, value: float, flag: Optional[str]) -> None:
        outer, inner = self.position(date)
        self._data[outer][inner] = value
        if flag is not None and self._flags is not None:
            self._flags[outer][inner] = flag

    def iterate(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> Iterator[StorePoint]:
        if not self.is_allocated:
            return
        low = self.start if start is None else max(self.start, self.normalize(start))
        high = self.end if end is None else min(self.end, self.normalize(end))

        # Step from the period start so dates stay aligned to the multiplier
        date = self.start
        while date <= high:
            if date >= low:
                outer, inner = self.position(date)
                flag = self._flags[outer][inner] if self._flags is not None else ""
                yield date, self._data[outer][inner], flag
            date = DateUtils.add_interval(date, self.interval_base, self.multiplier)


class MonthRowStore(GridStore):
    """Grid store with one row per calendar month of the period."""

    def row_count(self) -> int:
        return DateUtils.absolute_month(self.end) - DateUtils.absolute_month(self.start) + 1

    def row_month(self, row: int) -> Tuple[int, int]:
        """Return the (year, month) of a row."""
        year, month0 = divmod(DateUtils.absolute_month(self.start) + row, 12)
        return year, month0 + 1

    def days_in_row(self, row: int) -> int:
        return DateUtils.days_in_month(*self.row_month(row))

    def outer_index(self, date: datetime) -> int:
        return DateUtils.absolute_month(date) - DateUtils.absolute_month(self.start)


class DayStore(MonthRowStore):
    """Daily values, one row per month with one cell per day."""

    interval_base = IntervalBase.DAY

    def row_length(self, row: int) -> int:
        return self.days_in_row(row)

    def position(self, date: datetime) -> Tuple[int, int]:
        return self.outer_index(date), date.day - 1

    def calculate_data_size(self, start: datetime, end: datetime) -> int:
        return (self.normalize(end) - self.normalize(start)).days + 1


class HourStore(MonthRowStore):
    """Hourly values for a multiplier that evenly divides 24."""

    interval_base = IntervalBase.HOUR

    @classmethod
    def supports_multiplier(cls, multiplier: int) -> bool:
        return 1 <= multiplier <= 24 and 24 % multiplier == 0

    def row_length(self, row: int) -> int:
        return self.days_in_row(row) * 24 // self.multiplier

    def position(self, date: datetime) -> Tuple[int, int]:
        return self.outer_index(date), ((date.day - 1) * 24 + date.hour) // self.multiplier

    def calculate_data_size(self, start: datetime, end: datetime) -> int:
        hours = int((self.normalize(end) - self.normalize(start)).total_seconds() // 3600)
        return hours // self.multiplier + 1


class MonthStore(GridStore):
    """Monthly values, one row per year with twelve cells."""

    interval_base = IntervalBase.MONTH

    def row_count(self) -> int:
        return self.end.year - self.start.year + 1

    def row_length(self, row: int) -> int:
        return 12

    def position(self, date: datetime) -> Tuple[int, int]:
        return date.year - self.start.year, date.month - 1

    def calculate_data_size(self, start: datetime, end: datetime) -> int:
        return DateUtils.absolute_month(end) - DateUtils.absolute_month(start) + 1


class YearStore(GridStore):
    """Yearly values, one single-cell row per year."""

    interval_base = IntervalBase.YEAR

    def row_count(self) -> int:
        return self.end.year - self.start.year + 1

    def row_length(self, row: int) -> int:
        return 1

    def position(self, date: datetime) -> Tuple[int, int]:
        return date.year - self.start.year, 0

    def calculate_data_size(self, start: datetime, end: datetime) -> int:
        return end.year - start.year + 1
