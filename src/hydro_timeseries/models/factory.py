"""
Factory for empty time series of a supported interval.
"""

import logging
from typing import Optional, Union

from .identifier import TimeSeriesIdentifier
from .timeseries import TimeSeries
from ..core import constants
from ..core.interval import TimeInterval
from ..exceptions import AllocationError
from ..storage import is_supported


def new_time_series(
    identifier: Union[str, TimeSeriesIdentifier, TimeInterval],
    missing: float = constants.DEFAULT_MISSING_VALUE,
    time_zone: str = constants.DEFAULT_TIMEZONE,
    logger: Optional[logging.Logger] = None
) -> TimeSeries:
    """
    Create an empty time series for an identifier or interval.

    Args:
        identifier: Identifier, identifier string or bare interval
        missing: Missing data value
        time_zone: Zone that timezone-aware dates are converted to
        logger: Logger instance

    Returns:
        Unallocated TimeSeries

    Raises:
        AllocationError: If no store supports the interval
    """
    if isinstance(identifier, TimeInterval):
        interval = identifier
        identifier = TimeSeriesIdentifier(interval_string=interval.format())
    else:
        if isinstance(identifier, str):
            identifier = TimeSeriesIdentifier.parse(identifier)
        interval = identifier.interval

    if not is_supported(interval):
        raise AllocationError(
            f"Unsupported interval \"{interval}\" for time series \"{identifier}\""
        )

    return TimeSeries(
        identifier,
        interval=interval,
        missing=missing,
        time_zone=time_zone,
        logger=logger,
    )
