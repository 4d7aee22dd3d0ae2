"""
Store for irregularly spaced values.

Points are kept sorted by date; lookups use binary search.
"""

from bisect import bisect_left, bisect_right
from datetime import datetime
from typing import Iterator, List, Optional

from .base import DataStore, StorePoint
from ..core.interval import IntervalBase


class IrregularStore(DataStore):
    """Sorted list of (date, value, flag) points within the period."""

    interval_base = IntervalBase.IRREGULAR

    def __init__(self, *args, precision: IntervalBase = IntervalBase.MINUTE, **kwargs):
        """
        Initialize an irregular store.

        Args:
            precision: Precision that dates are truncated to
            *args, **kwargs: Passed to DataStore
        """
        super().__init__(*args, **kwargs)
        self._precision = precision
        self._dates: List[datetime] = []
        self._values: List[float] = []
        self._flags: List[str] = []

    @property
    def precision(self) -> IntervalBase:
        return self._precision

    @precision.setter
    def precision(self, value: IntervalBase) -> None:
        self._precision = IntervalBase(value)

    @classmethod
    def supports_multiplier(cls, multiplier: int) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._dates)

    def _index(self, date: datetime) -> int:
        i = bisect_left(self._dates, date)
        if i < len(self._dates) and self._dates[i] == date:
            return i
        return -1

    def _allocate(self, fill: float) -> None:
        self._dates = []
        self._values = []
        self._flags = []

    def _allocate_flags(self, initial: str) -> None:
        self._flags = [initial] * len(self._dates)

    def _flags_allocated(self) -> bool:
        return len(self._flags) == len(self._dates)

    def _get(self, date: datetime) -> float:
        i = self._index(date)
        return self._values[i] if i >= 0 else self.missing

    def _get_flag(self, date: datetime) -> str:
        i = self._index(date)
        return self._flags[i] if i >= 0 else ""

    def _set(self, date: datetime, value: float, flag: Optional[str]) -> None:
        i = bisect_left(self._dates, date)
        if i < len(self._dates) and self._dates[i] == date:
            self._values[i] = value
            if flag is not None:
                self._flags[i] = flag
            return
        self._dates.insert(i, date)
        self._values.insert(i, value)
        self._flags.insert(i, flag or "")

    def iterate(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> Iterator[StorePoint]:
        if not self.is_allocated:
            return
        low = self.start if start is None else max(self.start, self.normalize(start))
        high = self.end if end is None else min(self.end, self.normalize(end))
        first = bisect_left(self._dates, low)
        last = bisect_right(self._dates, high)
        for i in range(first, last):
            yield self._dates[i], self._values[i], self._flags[i] if self.has_flags else ""

    def calculate_data_size(self, start: datetime, end: datetime) -> int:
        return bisect_right(self._dates, end) - bisect_left(self._dates, start)
