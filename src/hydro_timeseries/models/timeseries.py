"""
Time series envelope.

A TimeSeries couples an identifier, a period of record, units, a missing
value convention and descriptive metadata with an interval-indexed store
holding the values.
"""

import copy
import logging
import math
import sys
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .data import DataFlagMetadata, TSData, TSLimits
from .identifier import TimeSeriesIdentifier
from ..core import constants
from ..core.date_utils import DateUtils
from ..core.interval import IntervalBase, TimeInterval
from ..exceptions import AllocationError
from ..processing.limits import LimitsCalculator
from ..storage import DataStore, create_store


class TimeSeries:
    """A time series: identifier, period, metadata and values."""

    def __init__(
        self,
        identifier: Union[str, TimeSeriesIdentifier, None] = None,
        interval: Optional[TimeInterval] = None,
        missing: float = constants.DEFAULT_MISSING_VALUE,
        time_zone: str = constants.DEFAULT_TIMEZONE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize an empty time series.

        Args:
            identifier: Identifier or identifier string
            interval: Data interval; defaults to the identifier's interval
            missing: Missing data value
            time_zone: Zone that timezone-aware dates are converted to
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        if isinstance(identifier, str):
            identifier = TimeSeriesIdentifier.parse(identifier)
        self._identifier = identifier or TimeSeriesIdentifier()
        self._interval = interval or self._identifier.interval

        self._date1: Optional[datetime] = None
        self._date2: Optional[datetime] = None
        self.date1_original: Optional[datetime] = None
        self.date2_original: Optional[datetime] = None
        self._date_precision: Optional[IntervalBase] = None

        self.data_units = ""
        self.data_units_original = ""
        self.data_type = ""
        self.alias = ""
        self.description = ""
        self.time_zone = time_zone
        self.comments: List[str] = []
        self.genesis: List[str] = []
        self.properties: Dict[str, Any] = {}
        self.data_flag_metadata: List[DataFlagMetadata] = []

        self._store: Optional[DataStore] = None
        self._has_data_flags = False
        self._missing = missing
        self._missing_range: Tuple[float, float] = (missing, missing)
        self.set_missing(missing)

        self._generation = 0
        self._limits_generation = -1
        self._limits: Optional[TSLimits] = None
        self._limits_calculator = LimitsCalculator(logger=self.logger)

    # Identifier and interval

    @property
    def identifier(self) -> TimeSeriesIdentifier:
        return self._identifier

    @identifier.setter
    def identifier(self, value: Union[str, TimeSeriesIdentifier]) -> None:
        if isinstance(value, str):
            value = TimeSeriesIdentifier.parse(value)
        self._identifier = value
        if not self.is_allocated and value.interval.is_known:
            self._interval = value.interval

    @property
    def interval(self) -> TimeInterval:
        return self._interval

    @interval.setter
    def interval(self, value: TimeInterval) -> None:
        if self.is_allocated:
            raise AllocationError("Cannot change the interval after data space is allocated")
        self._interval = value

    @property
    def sequence_id(self) -> str:
        return self._identifier.sequence_id

    @sequence_id.setter
    def sequence_id(self, value: str) -> None:
        self._identifier = self._identifier.with_changes(sequence_id=value or "")

    @property
    def input_name(self) -> str:
        return self._identifier.input_name

    @input_name.setter
    def input_name(self, value: str) -> None:
        self._identifier = self._identifier.with_changes(input_name=value or "")

    # Period

    @property
    def date1(self) -> Optional[datetime]:
        return self._date1

    @date1.setter
    def date1(self, value: Optional[datetime]) -> None:
        self._check_not_allocated("start date")
        self._date1 = self._to_local(value) if value is not None else None

    @property
    def date2(self) -> Optional[datetime]:
        return self._date2

    @date2.setter
    def date2(self, value: Optional[datetime]) -> None:
        self._check_not_allocated("end date")
        self._date2 = self._to_local(value) if value is not None else None

    @property
    def date_precision(self) -> IntervalBase:
        """Precision of dates; the interval base for regular data."""
        if self._interval.is_regular:
            return self._interval.base
        return self._date_precision or IntervalBase.MINUTE

    @date_precision.setter
    def date_precision(self, value: IntervalBase) -> None:
        self._date_precision = IntervalBase(value)
        if self._store is not None and not self._interval.is_regular:
            self._store.precision = self._date_precision

    def _check_not_allocated(self, what: str) -> None:
        if self.is_allocated:
            raise AllocationError(
                f"Cannot set the {what} after data space is allocated; "
                f"use change_period_of_record()"
            )

    def _to_local(self, date: datetime) -> datetime:
        return DateUtils.to_naive(date, self.time_zone)

    # Missing data

    @property
    def missing(self) -> float:
        return self._missing

    @property
    def missing_range(self) -> Tuple[float, float]:
        return self._missing_range

    def set_missing(self, value: float) -> None:
        """
        Set the missing value; values within +/-0.001 of it count as missing.

        NaN makes only NaN count as missing.
        """
        value = float(value)
        self._missing = value
        if math.isnan(value):
            self._missing_range = (value, value)
        elif value >= sys.float_info.max:
            self._missing_range = (value - constants.MISSING_TOLERANCE, value)
        else:
            self._missing_range = (
                value - constants.MISSING_TOLERANCE,
                value + constants.MISSING_TOLERANCE,
            )
        if self._store is not None:
            self._store.missing = value

    def set_missing_range(self, low: float, high: float) -> None:
        """Treat values in [low, high] as missing; the missing value is their mean."""
        low, high = min(low, high), max(low, high)
        self._missing = (low + high) / 2.0
        self._missing_range = (low, high)
        if self._store is not None:
            self._store.missing = self._missing

    def is_data_missing(self, value: float) -> bool:
        if math.isnan(value):
            return True
        low, high = self._missing_range
        if math.isnan(low):
            return False
        return low <= value <= high

    # Data flags and metadata

    @property
    def has_data_flags(self) -> bool:
        return self._has_data_flags

    @has_data_flags.setter
    def has_data_flags(self, value: bool) -> None:
        self._has_data_flags = bool(value)
        if value and self._store is not None:
            self._store.enable_flags()

    def add_data_flag_metadata(self, flag: str, description: str) -> None:
        self.data_flag_metadata.append(DataFlagMetadata(flag, description))

    def set_property(self, name: str, value: Any) -> None:
        self.properties[name] = value

    def get_property(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)

    def add_comment(self, comment: str) -> None:
        self.comments.append(comment)

    def add_to_genesis(self, entry: str) -> None:
        """Append an entry to the creation history."""
        self.genesis.append(entry)

    # Data space

    @property
    def is_allocated(self) -> bool:
        return self._store is not None and self._store.is_allocated

    @property
    def store(self) -> Optional[DataStore]:
        return self._store

    @property
    def data_size(self) -> int:
        return self._store.size if self._store is not None else 0

    def allocate_data_space(self, fill: Optional[float] = None) -> None:
        """
        Allocate storage for the current period.

        Args:
            fill: Initial value for every cell; defaults to the missing value

        Raises:
            AllocationError: If the period or interval is not usable
        """
        store = create_store(
            self._interval,
            missing=self._missing,
            has_flags=self._has_data_flags,
            logger=self.logger,
        )
        if not self._interval.is_regular:
            store.precision = self.date_precision
        store.allocate(self._date1, self._date2, fill)
        self._store = store
        self._date1 = store.start
        self._date2 = store.end
        self._generation += 1

    def change_period_of_record(self, new_date1: datetime, new_date2: datetime) -> None:
        """
        Change the period, keeping data in the overlap of the old and new periods.

        Raises:
            AllocationError: If the new period is not valid
        """
        new_date1 = self._to_local(new_date1)
        new_date2 = self._to_local(new_date2)
        if not self.is_allocated:
            self._date1 = new_date1
            self._date2 = new_date2
            self.allocate_data_space()
            return

        old_date1, old_date2 = self._date1, self._date2
        self._store.change_period(new_date1, new_date2)
        self._date1 = self._store.start
        self._date2 = self._store.end
        self._generation += 1

        precision = self.date_precision
        self.add_to_genesis(
            f"Changed period of record from {DateUtils.format_date(old_date1, precision)} - "
            f"{DateUtils.format_date(old_date2, precision)} to "
            f"{DateUtils.format_date(self._date1, precision)} - "
            f"{DateUtils.format_date(self._date2, precision)}"
        )

    # Values

    def get_data_value(self, date: datetime) -> float:
        if self._store is None:
            return self._missing
        return self._store.get(self._to_local(date))

    def get_data_flag(self, date: datetime) -> str:
        if self._store is None:
            return constants.DEFAULT_DATA_FLAG
        return self._store.get_flag(self._to_local(date))

    def get_data_point(self, date: datetime) -> TSData:
        date = self._to_local(date)
        return TSData(
            date=date,
            value=self.get_data_value(date),
            units=self.data_units,
            flag=self.get_data_flag(date),
        )

    def set_data_value(self, date: datetime, value: float, flag: Optional[str] = None) -> None:
        """
        Set a value; dates outside the period are ignored.

        Raises:
            AllocationError: If data space has not been allocated
        """
        if self._store is None:
            raise AllocationError(
                f"Data space is not allocated for {self._identifier}"
            )
        if self._store.set(self._to_local(date), value, flag):
            if flag:
                self._has_data_flags = True
            self._generation += 1

    def iterate(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> Iterator[TSData]:
        """Yield data points in the window (default: whole period)."""
        if self._store is None:
            return
        start = self._to_local(start) if start is not None else None
        end = self._to_local(end) if end is not None else None
        for date, value, flag in self._store.iterate(start, end):
            yield TSData(date=date, value=value, units=self.data_units, flag=flag)

    # Derived limits

    @property
    def dirty(self) -> bool:
        """True if data changed since limits were last computed."""
        return self._generation != self._limits_generation

    def refresh(self) -> None:
        """Recompute data limits if data changed since the last computation."""
        if not self.dirty and self._limits is not None:
            return
        self._limits = self._limits_calculator.calculate(self)
        self._limits_generation = self._generation

    def get_data_limits(self) -> TSLimits:
        self.refresh()
        return self._limits

    def has_data(self) -> bool:
        return self.is_allocated and self.get_data_limits().has_data

    def copy(self) -> "TimeSeries":
        """Return a deep copy, including data."""
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return (
            f"TimeSeries(identifier='{self._identifier}', date1={self._date1}, "
            f"date2={self._date2}, units='{self.data_units}')"
        )
