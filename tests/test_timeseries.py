"""
Tests for the time series envelope and factory.
"""

import math
import sys
from datetime import datetime

import pytest  # type: ignore
import pytz

from hydro_timeseries.core.interval import IntervalBase, TimeInterval
from hydro_timeseries.exceptions import AllocationError
from hydro_timeseries.models import TimeSeries, new_time_series
from hydro_timeseries.storage import DayStore, IrregularStore


class TestMissingValues:
    """Test cases for the missing value convention."""

    def test_default_range(self):
        ts = TimeSeries("A.B.C.Day")

        assert ts.missing == -999.0
        assert ts.is_data_missing(-999.0)
        assert ts.is_data_missing(-999.0005)
        assert not ts.is_data_missing(-998.99)
        assert ts.is_data_missing(math.nan)

    def test_nan_missing(self):
        """With NaN as the missing value only NaN is missing."""
        ts = TimeSeries("A.B.C.Day", missing=math.nan)

        assert ts.is_data_missing(math.nan)
        assert not ts.is_data_missing(-999.0)
        assert not ts.is_data_missing(0.0)

    def test_max_float_missing(self):
        ts = TimeSeries("A.B.C.Day")
        ts.set_missing(sys.float_info.max)

        assert ts.missing_range[1] == sys.float_info.max
        assert ts.is_data_missing(sys.float_info.max)

    def test_missing_range(self):
        ts = TimeSeries("A.B.C.Day")
        ts.set_missing_range(-10.0, -1.0)

        assert ts.missing == -5.5
        assert ts.is_data_missing(-3.0)
        assert not ts.is_data_missing(0.0)

    def test_unset_cells_are_missing(self, daily_series):
        daily_series.change_period_of_record(datetime(2020, 1, 1), datetime(2020, 2, 5))

        assert daily_series.get_data_value(datetime(2020, 2, 3)) == -999.0
        assert daily_series.get_data_value(datetime(2021, 1, 1)) == -999.0


class TestPeriodAndAllocation:
    """Test cases for the period of record and data space."""

    def test_allocate_normalizes_period(self):
        ts = new_time_series("A.B.C.Month")
        ts.date1 = datetime(2020, 3, 15, 12)
        ts.date2 = datetime(2020, 6, 2)
        ts.allocate_data_space()

        assert ts.date1 == datetime(2020, 3, 1)
        assert ts.date2 == datetime(2020, 6, 1)
        assert ts.data_size == 4

    def test_set_before_allocation_raises(self):
        ts = new_time_series("A.B.C.Day")

        with pytest.raises(AllocationError):
            ts.set_data_value(datetime(2020, 1, 1), 1.0)
        assert ts.get_data_value(datetime(2020, 1, 1)) == ts.missing

    def test_allocate_without_period_raises(self):
        ts = new_time_series("A.B.C.Day")
        ts.date1 = datetime(2020, 1, 1)

        with pytest.raises(AllocationError):
            ts.allocate_data_space()

    def test_period_setters_locked_after_allocation(self, daily_series):
        with pytest.raises(AllocationError):
            daily_series.date1 = datetime(2019, 1, 1)
        with pytest.raises(AllocationError):
            daily_series.date2 = datetime(2021, 1, 1)
        with pytest.raises(AllocationError):
            daily_series.interval = TimeInterval.parse("Month")

    def test_change_period_of_record(self, daily_series):
        daily_series.change_period_of_record(datetime(2019, 12, 25), datetime(2020, 1, 10))

        assert daily_series.date1 == datetime(2019, 12, 25)
        assert daily_series.date2 == datetime(2020, 1, 10)
        assert daily_series.get_data_value(datetime(2020, 1, 10)) == 10.0
        assert daily_series.get_data_value(datetime(2019, 12, 31)) == -999.0
        assert daily_series.get_data_value(datetime(2020, 1, 20)) == -999.0
        assert daily_series.genesis[-1] == (
            "Changed period of record from 2020-01-01 - 2020-01-31 to 2019-12-25 - 2020-01-10"
        )

    def test_change_period_allocates_unallocated(self):
        ts = new_time_series("A.B.C.Day")
        ts.change_period_of_record(datetime(2020, 1, 1), datetime(2020, 1, 3))

        assert ts.is_allocated
        assert ts.data_size == 3

    def test_aware_dates_converted(self):
        """Timezone-aware dates are converted to the series time zone."""
        ts = new_time_series("A.B.C.Hour", time_zone="America/Denver")
        ts.date1 = pytz.UTC.localize(datetime(2020, 1, 1, 7))
        ts.date2 = datetime(2020, 1, 1, 23)
        ts.allocate_data_space()

        assert ts.date1 == datetime(2020, 1, 1, 0)

        ts.set_data_value(pytz.UTC.localize(datetime(2020, 1, 1, 12)), 5.0)
        assert ts.get_data_value(datetime(2020, 1, 1, 5)) == 5.0


class TestValuesAndLimits:
    """Test cases for values, flags and derived limits."""

    def test_flags(self, daily_series):
        assert not daily_series.has_data_flags

        daily_series.set_data_value(datetime(2020, 1, 2), 2.5, "E")

        assert daily_series.has_data_flags
        point = daily_series.get_data_point(datetime(2020, 1, 2))
        assert point.value == 2.5
        assert point.flag == "E"
        assert point.units == "CFS"

    def test_iterate(self, daily_series):
        points = list(daily_series.iterate(datetime(2020, 1, 30)))

        assert [p.value for p in points] == [30.0, 31.0]
        assert points[0].date == datetime(2020, 1, 30)

    def test_limits(self, daily_series):
        daily_series.set_data_value(datetime(2020, 1, 31), -999.0)
        limits = daily_series.get_data_limits()

        assert limits.min_value == 1.0
        assert limits.min_value_date == datetime(2020, 1, 1)
        assert limits.max_value == 30.0
        assert limits.max_value_date == datetime(2020, 1, 30)
        assert limits.non_missing_count == 30
        assert limits.missing_count == 1
        assert limits.total == sum(range(1, 31))
        assert limits.mean == pytest.approx(15.5)
        assert limits.non_missing_data_date2 == datetime(2020, 1, 30)

    def test_dirty_tracking(self, daily_series):
        """Limits are recomputed only after the data changes."""
        assert daily_series.dirty
        first = daily_series.get_data_limits()

        assert not daily_series.dirty
        assert daily_series.get_data_limits() is first

        daily_series.set_data_value(datetime(2020, 1, 5), 100.0)
        assert daily_series.dirty
        assert daily_series.get_data_limits().max_value == 100.0

    def test_no_data(self):
        ts = new_time_series("A.B.C.Day")
        ts.date1 = datetime(2020, 1, 1)
        ts.date2 = datetime(2020, 1, 5)
        ts.allocate_data_space()

        assert not ts.has_data()
        assert ts.get_data_limits().min_value is None

    def test_copy_is_independent(self, daily_series):
        daily_series.set_property("Station", "North Fork")
        clone = daily_series.copy()
        clone.set_data_value(datetime(2020, 1, 1), 50.0)
        clone.set_property("Station", "South Fork")

        assert daily_series.get_data_value(datetime(2020, 1, 1)) == 1.0
        assert daily_series.get_property("Station") == "North Fork"
        assert clone.identifier == daily_series.identifier


class TestIrregularSeries:
    """Test cases for irregular series."""

    def test_precision(self):
        ts = new_time_series("A.B.C.Irregular")
        assert ts.date_precision == IntervalBase.MINUTE

        ts.date_precision = IntervalBase.DAY
        ts.date1 = datetime(2020, 1, 1)
        ts.date2 = datetime(2020, 1, 31)
        ts.allocate_data_space()
        ts.set_data_value(datetime(2020, 1, 5, 13, 30), 1.0)

        assert isinstance(ts.store, IrregularStore)
        assert [p.date for p in ts.iterate()] == [datetime(2020, 1, 5)]


class TestFactory:
    """Test cases for new_time_series."""

    def test_from_identifier(self):
        ts = new_time_series("ABC.USGS.Streamflow.Day", missing=math.nan)

        assert ts.interval.base == IntervalBase.DAY
        assert math.isnan(ts.missing)
        assert not ts.is_allocated

        ts.date1 = datetime(2020, 1, 1)
        ts.date2 = datetime(2020, 1, 2)
        ts.allocate_data_space()
        assert isinstance(ts.store, DayStore)

    def test_from_interval(self):
        ts = new_time_series(TimeInterval.parse("6Hour"))

        assert ts.interval.multiplier == 6
        assert ts.identifier.interval_string == "6Hour"

    def test_unsupported_interval(self):
        with pytest.raises(AllocationError):
            new_time_series("A.B.C.Week")
        with pytest.raises(AllocationError):
            new_time_series("A.B.C.7Hour")
