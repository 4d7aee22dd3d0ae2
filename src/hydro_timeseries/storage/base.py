"""
Base class for interval-indexed data stores.

A store holds the values (and optional data flags) of one time series for a
period of record. Dates are truncated to the store precision before lookup.
Reads outside the period return the missing value and writes outside the
period are dropped.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterator, List, Optional, Tuple

from ..core import constants
from ..core.date_utils import DateUtils
from ..core.interval import IntervalBase
from ..exceptions import AllocationError

# (date, value, flag) as yielded by DataStore.iterate
StorePoint = Tuple[datetime, float, str]


class DataStore(ABC):
    """Capability interface shared by all store variants."""

    interval_base: IntervalBase = IntervalBase.UNKNOWN

    def __init__(
        self,
        multiplier: int = 1,
        missing: float = constants.DEFAULT_MISSING_VALUE,
        has_flags: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize an unallocated store.

        Args:
            multiplier: Interval multiplier
            missing: Value returned for cells without data
            has_flags: Allocate a parallel data flag array
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.multiplier = multiplier
        self.missing = missing
        self.has_flags = has_flags
        self.start: Optional[datetime] = None
        self.end: Optional[datetime] = None

    @property
    def precision(self) -> IntervalBase:
        return self.interval_base

    @property
    def is_allocated(self) -> bool:
        return self.start is not None

    @classmethod
    def supports_multiplier(cls, multiplier: int) -> bool:
        return multiplier == 1

    def normalize(self, date: datetime) -> datetime:
        """Truncate a date to the store precision."""
        return DateUtils.set_precision(date, self.precision)

    def in_period(self, date: datetime) -> bool:
        return self.is_allocated and self.start <= date <= self.end

    def allocate(
        self,
        start: Optional[datetime],
        end: Optional[datetime],
        fill: Optional[float] = None
    ) -> None:
        """
        Allocate storage for the period, discarding any existing data.

        Args:
            start: First date of the period
            end: Last date of the period
            fill: Initial cell value; defaults to the missing value

        Raises:
            AllocationError: If an endpoint is missing, start is after end, or
                the multiplier is not supported by this store
        """
        if start is None or end is None:
            raise AllocationError(
                "Both period start and end must be set before allocating data space"
            )
        if not self.supports_multiplier(self.multiplier):
            raise AllocationError(
                f"{type(self).__name__} does not support interval multiplier {self.multiplier}"
            )

        start = self.normalize(start)
        end = self.normalize(end)
        if start > end:
            raise AllocationError(f"Period start {start} is after period end {end}")

        self.start = start
        self.end = end
        self._allocate(self.missing if fill is None else fill)
        self.logger.debug(
            f"Allocated {type(self).__name__} for {start} to {end} "
            f"({self.calculate_data_size(start, end)} values)"
        )

    def get(self, date: datetime) -> float:
        """Return the value at a date, or the missing value outside the period."""
        date = self.normalize(date)
        if not self.in_period(date):
            return self.missing
        return self._get(date)

    def get_flag(self, date: datetime) -> str:
        """Return the data flag at a date, or "" when there is none."""
        date = self.normalize(date)
        if not self.has_flags or not self.in_period(date):
            return constants.DEFAULT_DATA_FLAG
        return self._get_flag(date)

    def set(self, date: datetime, value: float, flag: Optional[str] = None) -> bool:
        """
        Set the value (and optionally the flag) at a date.

        A non-empty flag on a store without flags allocates the flag array.

        Returns:
            True if the value was stored, False if the date is outside the period
        """
        date = self.normalize(date)
        if not self.in_period(date):
            return False
        if flag and not self.has_flags:
            self.enable_flags()
        self._set(date, value, flag if self.has_flags else None)
        return True

    def enable_flags(self, initial: str = constants.DEFAULT_DATA_FLAG) -> None:
        """Allocate the data flag array, keeping the values."""
        if self.has_flags and self._flags_allocated():
            return
        self.has_flags = True
        if self.is_allocated:
            self._allocate_flags(initial)

    def change_period(self, new_start: datetime, new_end: datetime) -> None:
        """
        Reallocate for a new period, keeping values in the overlapping part.

        Raises:
            AllocationError: If the new period is invalid
        """
        old_points: List[StorePoint] = list(self.iterate()) if self.is_allocated else []
        self.allocate(new_start, new_end)
        for date, value, flag in old_points:
            self.set(date, value, flag if self.has_flags else None)

    @abstractmethod
    def iterate(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> Iterator[StorePoint]:
        """Yield (date, value, flag) for every stored point in the window."""

    @abstractmethod
    def calculate_data_size(self, start: datetime, end: datetime) -> int:
        """Return the number of values needed for the period."""

    @property
    def size(self) -> int:
        if not self.is_allocated:
            return 0
        return self.calculate_data_size(self.start, self.end)

    @abstractmethod
    def _allocate(self, fill: float) -> None:
        pass

    @abstractmethod
    def _allocate_flags(self, initial: str) -> None:
        pass

    @abstractmethod
    def _flags_allocated(self) -> bool:
        pass

    @abstractmethod
    def _get(self, date: datetime) -> float:
        pass

    @abstractmethod
    def _get_flag(self, date: datetime) -> str:
        pass

    @abstractmethod
    def _set(self, date: datetime, value: float, flag: Optional[str]) -> None:
        pass
