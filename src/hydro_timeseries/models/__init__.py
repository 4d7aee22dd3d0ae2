"""
Time series data models.
"""

from .data import TSData, TSLimits, DataFlagMetadata
from .identifier import TimeSeriesIdentifier, IdentifierBehavior
from .timeseries import TimeSeries
from .factory import new_time_series

__all__ = [
    "TSData",
    "TSLimits",
    "DataFlagMetadata",
    "TimeSeriesIdentifier",
    "IdentifierBehavior",
    "TimeSeries",
    "new_time_series",
]
