"""
Interval-indexed data stores.

One store variant per interval base, selected with create_store().
"""

from .base import DataStore
from .grid import DayStore, HourStore, MonthStore, YearStore
from .irregular import IrregularStore
from .factory import create_store, register_store, is_supported, STORE_TYPES

__all__ = [
    "DataStore",
    "DayStore",
    "HourStore",
    "MonthStore",
    "YearStore",
    "IrregularStore",
    "create_store",
    "register_store",
    "is_supported",
    "STORE_TYPES",
]
