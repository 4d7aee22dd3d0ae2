"""
Processing services used by time series and the DateValue codec.
"""

from .converter import UnitConverter
from .limits import LimitsCalculator

__all__ = [
    "UnitConverter",
    "LimitsCalculator",
]
