"""
Tests for intervals, format versions and date utilities.
"""

import unittest
from datetime import datetime

import pytest  # type: ignore
import pytz

from hydro_timeseries.core.date_utils import DateUtils
from hydro_timeseries.core.format_version import FormatVersion
from hydro_timeseries.core.interval import IntervalBase, TimeInterval
from hydro_timeseries.exceptions import IntervalParseError, StructuralParseError


class TestTimeInterval:
    """Test cases for TimeInterval."""

    @pytest.mark.parametrize("text,base,multiplier", [
        ("Day", IntervalBase.DAY, 1),
        ("6Hour", IntervalBase.HOUR, 6),
        ("1hr", IntervalBase.HOUR, 1),
        ("15Min", IntervalBase.MINUTE, 15),
        ("Month", IntervalBase.MONTH, 1),
        ("Year", IntervalBase.YEAR, 1),
        ("Irregular", IntervalBase.IRREGULAR, 1),
        ("24", IntervalBase.HOUR, 24),
    ])
    def test_parse(self, text, base, multiplier):
        interval = TimeInterval.parse(text)
        assert interval.base == base
        assert interval.multiplier == multiplier

    def test_parse_unknown_base(self):
        """An unknown base raises unless validation is off."""
        with pytest.raises(IntervalParseError):
            TimeInterval.parse("2Fortnight")

        assert not TimeInterval.parse("2Fortnight", validate=False).is_known

    def test_format(self):
        assert TimeInterval.parse("6hour").format() == "6Hour"
        assert TimeInterval.parse("1Day").format() == "Day"
        assert TimeInterval.parse("irreg").format() == "Irregular"
        assert TimeInterval().format() == ""

    def test_regular(self):
        assert TimeInterval.parse("Day").is_regular
        assert not TimeInterval.parse("Irregular").is_regular
        assert not TimeInterval.parse("").is_regular


class TestFormatVersion(unittest.TestCase):
    """Test cases for FormatVersion."""

    def test_parse_and_compare(self):
        self.assertEqual(FormatVersion.parse("1.4"), FormatVersion(1, 4))
        self.assertLess(FormatVersion.parse("1.3"), FormatVersion.parse("1.6"))
        self.assertEqual(str(FormatVersion.current()), "1.6")

    def test_layout_properties(self):
        self.assertTrue(FormatVersion(1, 3).merges_delimiters)
        self.assertFalse(FormatVersion(1, 4).merges_delimiters)
        self.assertTrue(FormatVersion(1, 4).uses_sequence_number)
        self.assertFalse(FormatVersion(1, 5).uses_sequence_number)
        self.assertFalse(FormatVersion(1, 5).supports_properties)
        self.assertTrue(FormatVersion(1, 6).supports_properties)

    def test_invalid(self):
        with self.assertRaises(StructuralParseError):
            FormatVersion.parse("one.six")


class TestDateUtils:
    """Test cases for DateUtils."""

    @pytest.mark.parametrize("text,expected,precision", [
        ("2020", datetime(2020, 1, 1), IntervalBase.YEAR),
        ("2020-02", datetime(2020, 2, 1), IntervalBase.MONTH),
        ("2020-02-29", datetime(2020, 2, 29), IntervalBase.DAY),
        ("2020-02-29 06", datetime(2020, 2, 29, 6), IntervalBase.HOUR),
        ("2020-02-29T06:15", datetime(2020, 2, 29, 6, 15), IntervalBase.MINUTE),
        ("2020-02-29 06:15:30", datetime(2020, 2, 29, 6, 15, 30), IntervalBase.SECOND),
        ("02/29/2020", datetime(2020, 2, 29), IntervalBase.DAY),
        ("02/2020", datetime(2020, 2, 1), IntervalBase.MONTH),
    ])
    def test_parse_date(self, text, expected, precision):
        assert DateUtils.parse_date(text) == (expected, precision)

    def test_parse_date_invalid(self):
        with pytest.raises(ValueError):
            DateUtils.parse_date("not a date")
        with pytest.raises(ValueError):
            DateUtils.parse_date("2019-02-29")

    def test_format_date(self):
        dt = datetime(2020, 3, 4, 5, 6, 7)
        assert DateUtils.format_date(dt, IntervalBase.YEAR) == "2020"
        assert DateUtils.format_date(dt, IntervalBase.MONTH) == "2020-03"
        assert DateUtils.format_date(dt, IntervalBase.DAY) == "2020-03-04"
        assert DateUtils.format_date(dt, IntervalBase.HOUR) == "2020-03-04 05"
        assert DateUtils.format_date(dt, IntervalBase.MINUTE) == "2020-03-04 05:06"
        assert DateUtils.format_date(dt, IntervalBase.SECOND) == "2020-03-04 05:06:07"

    def test_set_precision(self):
        dt = datetime(2020, 3, 4, 5, 6, 7)
        assert DateUtils.set_precision(dt, IntervalBase.MONTH) == datetime(2020, 3, 1)
        assert DateUtils.set_precision(dt, IntervalBase.HOUR) == datetime(2020, 3, 4, 5)

    def test_add_interval(self):
        """Month and year arithmetic clamps the day to the month length."""
        assert DateUtils.add_interval(datetime(2020, 1, 31), IntervalBase.MONTH, 1) == datetime(2020, 2, 29)
        assert DateUtils.add_interval(datetime(2020, 11, 1), IntervalBase.MONTH, 3) == datetime(2021, 2, 1)
        assert DateUtils.add_interval(datetime(2020, 2, 29), IntervalBase.YEAR, 1) == datetime(2021, 2, 28)
        assert DateUtils.add_interval(datetime(2020, 1, 1, 18), IntervalBase.HOUR, 6) == datetime(2020, 1, 2)
        with pytest.raises(ValueError):
            DateUtils.add_interval(datetime(2020, 1, 1), IntervalBase.IRREGULAR, 1)

    def test_calendar_helpers(self):
        assert DateUtils.days_in_month(2020, 2) == 29
        assert DateUtils.days_in_month(2021, 2) == 28
        assert DateUtils.absolute_month(datetime(2021, 1, 1)) - DateUtils.absolute_month(datetime(2020, 12, 1)) == 1

    def test_to_naive(self):
        """Aware datetimes are converted to local time in the target zone."""
        aware = pytz.UTC.localize(datetime(2020, 1, 1, 7))

        assert DateUtils.to_naive(aware, "America/Denver") == datetime(2020, 1, 1, 0)
        assert DateUtils.to_naive(datetime(2020, 1, 1), "America/Denver") == datetime(2020, 1, 1)

    def test_parse_timezone_invalid(self):
        with pytest.raises(ValueError):
            DateUtils.parse_timezone("Mars/Olympus")
