"""
Store selection keyed on interval base.
"""

import logging
from typing import Dict, Optional, Type

from .base import DataStore
from .grid import DayStore, HourStore, MonthStore, YearStore
from .irregular import IrregularStore
from ..core import constants
from ..core.interval import IntervalBase, TimeInterval
from ..exceptions import AllocationError

STORE_TYPES: Dict[IntervalBase, Type[DataStore]] = {
    IntervalBase.HOUR: HourStore,
    IntervalBase.DAY: DayStore,
    IntervalBase.MONTH: MonthStore,
    IntervalBase.YEAR: YearStore,
    IntervalBase.IRREGULAR: IrregularStore,
}


def register_store(base: IntervalBase, store_class: Type[DataStore]) -> None:
    """Register a store class for an interval base."""
    STORE_TYPES[IntervalBase(base)] = store_class


def is_supported(interval: TimeInterval) -> bool:
    store_class = STORE_TYPES.get(interval.base)
    return store_class is not None and store_class.supports_multiplier(interval.multiplier)


def create_store(
    interval: TimeInterval,
    missing: float = constants.DEFAULT_MISSING_VALUE,
    has_flags: bool = False,
    logger: Optional[logging.Logger] = None
) -> DataStore:
    """
    Create an unallocated store for an interval.

    Args:
        interval: Interval of the series
        missing: Missing value for empty cells
        has_flags: Allocate data flags with the values
        logger: Logger instance

    Returns:
        Store instance

    Raises:
        AllocationError: If no store supports the interval
    """
    store_class = STORE_TYPES.get(interval.base)
    if store_class is None:
        raise AllocationError(f"No data store is available for interval \"{interval}\"")
    if not store_class.supports_multiplier(interval.multiplier):
        raise AllocationError(
            f"Interval multiplier {interval.multiplier} is not supported for "
            f"{interval.base_name} data"
        )
    return store_class(
        multiplier=interval.multiplier,
        missing=missing,
        has_flags=has_flags,
        logger=logger,
    )
