"""
Time series data models.

Contains small data structures returned by or attached to a time series.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class TSData:
    """A single time series data point."""

    date: datetime
    value: float
    units: str = ""
    flag: str = ""
    duration: int = 0


@dataclass
class DataFlagMetadata:
    """Meaning of one data flag value."""

    flag: str
    description: str


@dataclass
class TSLimits:
    """Data limits of a time series over its period."""

    min_value: Optional[float] = None
    max_value: Optional[float] = None
    min_value_date: Optional[datetime] = None
    max_value_date: Optional[datetime] = None
    mean: Optional[float] = None
    total: float = 0.0
    non_missing_count: int = 0
    missing_count: int = 0
    non_missing_data_date1: Optional[datetime] = None
    non_missing_data_date2: Optional[datetime] = None
    date1: Optional[datetime] = None
    date2: Optional[datetime] = None

    @property
    def has_data(self) -> bool:
        return self.non_missing_count > 0
