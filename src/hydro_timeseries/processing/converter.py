"""
Unit conversion module.

Provides linear conversions (multiplier and offset) between data units used
for hydrologic time series.
"""

import logging
from typing import Dict, Optional, Tuple

from ..exceptions import UnitConversionError

# Factors to a base unit per dimension
LENGTH_UNITS: Dict[str, float] = {
    "MM": 0.001,
    "CM": 0.01,
    "M": 1.0,
    "KM": 1000.0,
    "IN": 0.0254,
    "FT": 0.3048,
    "MI": 1609.344,
}

VOLUME_UNITS: Dict[str, float] = {
    "M3": 1.0,
    "L": 0.001,
    "GAL": 0.003785411784,
    "ACFT": 1233.48183754752,
    "AF": 1233.48183754752,
    "KAF": 1233481.83754752,
}

FLOW_UNITS: Dict[str, float] = {
    "CMS": 1.0,
    "M3/S": 1.0,
    "L/S": 0.001,
    "CFS": 0.028316846592,
    "GPM": 0.0000630901964,
    "MGD": 0.0438126363888,
}

# (multiplier, offset) converting to degrees Celsius
TEMPERATURE_UNITS: Dict[str, Tuple[float, float]] = {
    "DEGC": (1.0, 0.0),
    "C": (1.0, 0.0),
    "DEGF": (5.0 / 9.0, -32.0 * 5.0 / 9.0),
    "F": (5.0 / 9.0, -32.0 * 5.0 / 9.0),
    "DEGK": (1.0, -273.15),
    "K": (1.0, -273.15),
}


class UnitConverter:
    """Look up linear conversions between data units."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize unit converter.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self._custom: Dict[Tuple[str, str], Tuple[float, float]] = {}

    def register(self, from_units: str, to_units: str, multiplier: float, offset: float = 0.0) -> None:
        """Register a conversion; the reverse conversion is registered too."""
        key = (from_units.upper(), to_units.upper())
        self._custom[key] = (multiplier, offset)
        self._custom[(key[1], key[0])] = (1.0 / multiplier, -offset / multiplier)

    def get_conversion(self, from_units: str, to_units: str) -> Tuple[float, float]:
        """
        Get the conversion from one unit to another.

        A value converts as new = value * multiplier + offset.

        Args:
            from_units: Units of the data
            to_units: Requested units

        Returns:
            Tuple of (multiplier, offset)

        Raises:
            UnitConversionError: If the units cannot be converted
        """
        source = (from_units or "").strip().upper()
        target = (to_units or "").strip().upper()

        if source == target:
            return 1.0, 0.0

        if (source, target) in self._custom:
            return self._custom[(source, target)]

        for table in (LENGTH_UNITS, VOLUME_UNITS, FLOW_UNITS):
            if source in table and target in table:
                return table[source] / table[target], 0.0

        if source in TEMPERATURE_UNITS and target in TEMPERATURE_UNITS:
            a_from, b_from = TEMPERATURE_UNITS[source]
            a_to, b_to = TEMPERATURE_UNITS[target]
            return a_from / a_to, (b_from - b_to) / a_to

        raise UnitConversionError(f"Cannot convert units \"{from_units}\" to \"{to_units}\"")

    def convert(self, value: float, from_units: str, to_units: str) -> float:
        """Convert a single value."""
        multiplier, offset = self.get_conversion(from_units, to_units)
        return value * multiplier + offset
