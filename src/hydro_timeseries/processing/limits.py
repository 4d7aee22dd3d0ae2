"""
Data limits calculation.

Computes minimum, maximum, mean and counts over the values of a time series.
"""

import logging
import statistics
from datetime import datetime
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.data import TSLimits
    from ..models.timeseries import TimeSeries


class LimitsCalculator:
    """Calculate data limits of a time series."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize limits calculator.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def calculate(
        self,
        ts: "TimeSeries",
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> "TSLimits":
        """
        Calculate data limits for a series, skipping missing values.

        Args:
            ts: Time series with allocated data
            start: First date to consider (default: period start)
            end: Last date to consider (default: period end)

        Returns:
            TSLimits for the window; value fields are None if all data are missing
        """
        from ..models.data import TSLimits

        limits = TSLimits(date1=start or ts.date1, date2=end or ts.date2)
        values = []

        for point in ts.iterate(start, end):
            if ts.is_data_missing(point.value):
                limits.missing_count += 1
                continue

            values.append(point.value)
            if limits.non_missing_data_date1 is None:
                limits.non_missing_data_date1 = point.date
            limits.non_missing_data_date2 = point.date

            if limits.min_value is None or point.value < limits.min_value:
                limits.min_value = point.value
                limits.min_value_date = point.date
            if limits.max_value is None or point.value > limits.max_value:
                limits.max_value = point.value
                limits.max_value_date = point.date

        limits.non_missing_count = len(values)
        if values:
            limits.total = sum(values)
            limits.mean = statistics.mean(values)

        self.logger.debug(
            f"Limits for {ts.identifier}: min={limits.min_value}, max={limits.max_value}, "
            f"count={limits.non_missing_count}, missing={limits.missing_count}"
        )
        return limits
