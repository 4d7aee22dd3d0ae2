"""
Core utilities for the hydro time series package.

Includes configuration, constants, intervals, format versions and date
handling.
"""

from .config import Config
from .date_utils import DateUtils
from .format_version import FormatVersion
from .interval import IntervalBase, TimeInterval
from . import constants

__all__ = [
    "Config",
    "DateUtils",
    "FormatVersion",
    "IntervalBase",
    "TimeInterval",
    "constants",
]
