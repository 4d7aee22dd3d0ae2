"""
Tests for reading DateValue files.
"""

import gzip
import math
import zipfile
from datetime import datetime

import pytest  # type: ignore

from hydro_timeseries.core.config import Config
from hydro_timeseries.core.interval import IntervalBase
from hydro_timeseries.datevalue import DateValueHeaderParser, DateValueReader
from hydro_timeseries.exceptions import (
    DateValueFormatError,
    HeaderConsistencyError,
    RecordParseError,
    TimeSeriesIOError,
)


@pytest.fixture
def reader():
    return DateValueReader()


@pytest.fixture
def daily_file(fixtures_dir):
    return fixtures_dir / "daily_two_series.dv"


MISMATCHED_HEADER = [
    "# DateValueTS 1.6 file",
    "NumTS = 3",
    'TSID = "A.B.Flow.Day" "C.D.Flow.Day" "E.F.Flow.Day"',
    'Units = "CFS" "CFS"',
    "Start = 2020-01-01",
    "End = 2020-01-02",
    "2020-01-01 1 2 3",
    "2020-01-02 4 5 6",
]


class TestReadFiles:
    """Test cases for reading the fixture files."""

    def test_two_series(self, reader, daily_file):
        series = reader.read_time_series_list(daily_file)

        assert len(series) == 2
        gage1, gage2 = series
        assert gage1.identifier.format() == "01234.USGS.Streamflow.Day"
        assert gage1.identifier.input_type == "DateValue"
        assert gage1.identifier.input_name == str(daily_file)
        assert gage1.alias == "gage1"
        assert gage2.description == "Lower gage"
        assert gage1.data_units == "CFS"
        assert gage1.date1 == datetime(2020, 2, 27)
        assert gage1.date2 == datetime(2020, 3, 2)
        assert gage1.data_size == 5

        assert gage1.get_data_value(datetime(2020, 2, 29)) == 12.25
        assert gage1.get_data_flag(datetime(2020, 2, 27)) == "E"
        assert gage1.is_data_missing(gage1.get_data_value(datetime(2020, 3, 1)))
        assert gage1.get_data_flag(datetime(2020, 3, 1)) == "M"
        assert gage1.has_data_flags
        assert not gage2.has_data_flags

        # NaN in the data is stored as the series missing value
        assert gage2.get_data_value(datetime(2020, 2, 28)) == -999.0
        assert gage2.get_data_value(datetime(2020, 3, 2)) == 24.0

    def test_properties_and_flag_descriptions(self, reader, daily_file):
        gage1, gage2 = reader.read_time_series_list(daily_file)

        assert gage1.properties == {
            "Basin": "Upper, West",
            "Area": 125,
            "Ratio": 0.5,
            "Note": None,
            "Active": True,
        }
        assert [(m.flag, m.description) for m in gage1.data_flag_metadata] == [
            ("E", "Estimated"),
            ("M", "Missing"),
        ]
        assert gage2.properties == {}

    def test_genesis(self, reader, daily_file):
        gage1 = reader.read_time_series_list(daily_file)[0]

        assert gage1.genesis == [
            f"Read time series from \"{daily_file}\"",
            "Read DateValue time series from 2020-02-27 to 2020-03-02",
        ]

    def test_hourly_time_column(self, reader, fixtures_dir):
        """A separate time column is accepted for hourly data."""
        ts = reader.read_time_series_list(fixtures_dir / "hourly_6hour.dv")[0]

        assert ts.interval.base == IntervalBase.HOUR
        assert ts.interval.multiplier == 6
        assert ts.data_units == "FT"
        assert math.isnan(ts.missing)
        assert ts.get_data_value(datetime(2021, 1, 1, 6)) == 100.2
        assert math.isnan(ts.get_data_value(datetime(2021, 1, 1, 12)))
        assert ts.get_data_value(datetime(2021, 1, 2)) == 100.5

    def test_legacy_merged_delimiters(self, reader, fixtures_dir):
        """Before version 1.4 repeated spaces act as one delimiter."""
        ts = reader.read_time_series_list(fixtures_dir / "legacy_monthly.dv")[0]

        assert ts.interval.base == IntervalBase.MONTH
        assert ts.data_size == 4
        assert ts.get_data_value(datetime(1999, 12, 1)) == 2.5
        assert ts.get_data_value(datetime(2000, 1, 1)) == 0.0
        assert ts.is_data_missing(ts.get_data_value(datetime(2000, 2, 1)))

    def test_window(self, reader, daily_file):
        """Only data inside the requested window is read."""
        gage1 = reader.read_time_series_list(
            daily_file, start=datetime(2020, 2, 28), end=datetime(2020, 2, 29)
        )[0]

        assert gage1.date1 == datetime(2020, 2, 28)
        assert gage1.date2 == datetime(2020, 2, 29)
        assert [p.value for p in gage1.iterate()] == [11.0, 12.25]
        assert gage1.date1_original == datetime(2020, 2, 27)
        assert gage1.genesis[-1] == "Read DateValue time series from 2020-02-28 to 2020-02-29"

    def test_header_only(self, reader, daily_file):
        series = reader.read_time_series_list(daily_file, read_data=False)

        assert len(series) == 2
        assert not series[0].is_allocated
        assert series[0].date1 == datetime(2020, 2, 27)
        assert series[1].alias == "gage2"

    def test_compressed_input(self, reader, daily_file, tmp_path):
        content = daily_file.read_text()
        gz_path = tmp_path / "daily.dv.gz"
        with gzip.open(gz_path, "wt") as f:
            f.write(content)
        zip_path = tmp_path / "daily.zip"
        with zipfile.ZipFile(zip_path, "w") as archive:
            archive.writestr("daily.dv", content)

        for path in (gz_path, zip_path):
            series = reader.read_time_series_list(path)
            assert series[0].get_data_value(datetime(2020, 3, 2)) == 14.0

    def test_zip_with_several_members(self, reader, daily_file, tmp_path):
        zip_path = tmp_path / "many.zip"
        with zipfile.ZipFile(zip_path, "w") as archive:
            archive.writestr("a.dv", daily_file.read_text())
            archive.writestr("b.dv", daily_file.read_text())

        with pytest.raises(TimeSeriesIOError):
            reader.read_time_series_list(zip_path)

    def test_missing_file(self, reader, tmp_path):
        with pytest.raises(TimeSeriesIOError) as exc_info:
            reader.read_time_series_list(tmp_path / "missing.dv")

        assert exc_info.value.path == str(tmp_path / "missing.dv")


class TestReadSingleSeries:
    """Test cases for read_time_series."""

    def test_by_alias(self, reader, daily_file):
        ts = reader.read_time_series("GAGE2", daily_file)

        assert ts.identifier.main_location == "05678"
        assert ts.get_data_value(datetime(2020, 2, 27)) == 20.0

    def test_by_identifier(self, reader, daily_file):
        ts = reader.read_time_series("01234.usgs.streamflow.day", daily_file)

        assert ts.alias == "gage1"

    def test_not_found(self, reader, daily_file):
        assert reader.read_time_series("99999.USGS.Streamflow.Day", daily_file) is None

    def test_path_in_identifier(self, reader, daily_file):
        ts = reader.read_time_series(f"05678.USGS.Streamflow.Day~DateValue~{daily_file}")

        assert ts.alias == "gage2"

    def test_path_only(self, reader, fixtures_dir):
        ts = reader.read_time_series(str(fixtures_dir / "legacy_monthly.dv"))

        assert ts.identifier.format() == "A.B.Precip.Month"

    def test_no_path(self, reader):
        with pytest.raises(TimeSeriesIOError):
            reader.read_time_series("A.B.C.Day")


class TestHeaderConsistency:
    """Test cases for header warnings in strict and lenient modes."""

    def test_strict_mismatch_raises(self, reader):
        with pytest.raises(HeaderConsistencyError) as exc_info:
            reader.read_from_lines(MISMATCHED_HEADER)

        assert exc_info.value.warning_count == 1

    def test_lenient_mismatch_pads_defaults(self, reader):
        series = reader.read_from_lines(MISMATCHED_HEADER, strict=False)

        assert len(series) == 3
        assert [ts.data_units for ts in series] == ["CFS", "CFS", ""]
        assert series[2].get_data_value(datetime(2020, 1, 2)) == 6.0

    def test_lenient_pads_missing_tsid(self, reader):
        """A padded identifier takes the interval of the first listed series."""
        lines = [
            "NumTS = 3",
            'TSID = "A.B.C.Day" "D.E.F.Day"',
            "Start = 2020-01-01",
            "End = 2020-01-02",
            "2020-01-01 1 2 3",
            "2020-01-02 4 5 6",
        ]
        series = reader.read_from_lines(lines, strict=False)

        assert len(series) == 3
        assert series[2].identifier.format() == "TS3...Day"
        assert series[2].interval.base == IntervalBase.DAY
        assert series[2].get_data_value(datetime(2020, 1, 2)) == 6.0

    def test_lenient_from_config(self, monkeypatch):
        monkeypatch.setenv("DATEVALUE_STRICT", "false")
        reader = DateValueReader(config=Config())

        assert len(reader.read_from_lines(MISMATCHED_HEADER)) == 3

    def test_header_warning_count(self):
        """Each mismatched property counts once, after the header is read."""
        lines = [
            "NumTS = 2",
            'TSID = "A.B.Flow.Day"',
            'Alias = "a" "b" "c"',
            'Units = "CFS" "CFS"',
            "Start = 2020-01-01",
            "End = 2020-01-01",
            "2020-01-01 1 2",
        ]
        header = DateValueHeaderParser().parse(iter(lines))

        assert header.warning_count == 2
        assert [record.tsid for record in header.records] == ["A.B.Flow.Day", "TS2...Day"]
        assert [record.alias for record in header.records] == ["a", "b"]
        assert header.first_data_line == "2020-01-01 1 2"

    def test_delimiter_applies_to_later_lines(self, reader):
        lines = [
            'Alias = "a" "b"',
            'Delimiter = "|"',
            'TSID = "A.B.Flow.Day"|"C.D.Flow.Day"',
            "NumTS = 2",
            "Start = 2020-01-01",
            "End = 2020-01-01",
            "2020-01-01|1.5|2.5",
        ]
        series = reader.read_from_lines(lines)

        assert [ts.alias for ts in series] == ["a", "b"]
        assert series[1].identifier.format() == "C.D.Flow.Day"
        assert series[1].get_data_value(datetime(2020, 1, 1)) == 2.5

    def test_start_after_end_is_a_warning(self, reader):
        lines = [
            'TSID = "A.B.Flow.Day"',
            "Start = 2020-02-01",
            "End = 2020-01-01",
        ]
        with pytest.raises(HeaderConsistencyError):
            reader.read_from_lines(lines, read_data=False)

    def test_bad_start_date(self, reader):
        with pytest.raises(DateValueFormatError):
            reader.read_from_lines(['TSID = "A.B.Flow.Day"', "Start = yesterday"])

    def test_bad_numts(self, reader):
        with pytest.raises(DateValueFormatError):
            reader.read_from_lines(["NumTS = two"])


class TestDataRecords:
    """Test cases for data line handling."""

    HEADER = [
        "# DateValueTS 1.6 file",
        'TSID = "A.B.Flow.Day"',
        "Start = 2020-01-01",
        "End = 2020-01-05",
    ]

    def test_record_warnings_strict(self, reader):
        lines = self.HEADER + [
            "2020-01-01 1.0",
            "2020-01-02 abc",
            "2020-01-03 3.0 extra",
            "Jan 4 4.0",
            "2020-01-05 5.0",
        ]
        with pytest.raises(RecordParseError) as exc_info:
            reader.read_from_lines(lines)

        assert exc_info.value.warning_count == 3

    def test_record_warnings_lenient(self, reader):
        lines = self.HEADER + [
            "2020-01-01 1.0",
            "2020-01-02 abc",
            "2020-01-05 5.0",
        ]
        ts = reader.read_from_lines(lines, strict=False)[0]

        assert ts.get_data_value(datetime(2020, 1, 1)) == 1.0
        assert ts.get_data_value(datetime(2020, 1, 2)) == ts.missing
        assert ts.get_data_value(datetime(2020, 1, 5)) == 5.0

    def test_sequence_numbers(self, reader):
        """A SequenceNum of -1 means no sequence id."""
        lines = [
            "# DateValueTS 1.4 file",
            "NumTS = 2",
            'TSID = "A.B.Flow.Month" "A.B.Flow.Month"',
            "SequenceNum = 1990 -1",
            "Start = 2000-01",
            "End = 2000-02",
            "2000-01 1 2",
            "2000-02 3 4",
        ]
        first, second = reader.read_from_lines(lines)

        assert first.sequence_id == "1990"
        assert first.identifier.format() == "A.B.Flow.Month[1990]"
        assert second.sequence_id == ""
        assert second.get_data_value(datetime(2000, 2, 1)) == 4.0

    def test_include_count_column(self, reader):
        lines = self.HEADER + [
            "IncludeCount = true",
            "2020-01-01 5 1.5",
            "2020-01-02 7 2.5",
        ]
        ts = reader.read_from_lines(lines)[0]

        assert ts.get_data_value(datetime(2020, 1, 2)) == 2.5

    def test_irregular(self, reader):
        lines = [
            'TSID = "A.B.Stage.Irregular" "C.D.Stage.Irregular"',
            "NumTS = 2",
            "Start = 2020-01-05 12:30",
            "End = 2020-01-07 08:00",
            '2020-01-05 12:30 1.0 ""',
            "2020-01-06 00:15 2.0 3.0",
            '2020-01-07 08:00 "" 4.0',
        ]
        first, second = reader.read_from_lines(lines)

        assert first.date_precision == IntervalBase.MINUTE
        assert [p.date for p in first.iterate()] == [
            datetime(2020, 1, 5, 12, 30),
            datetime(2020, 1, 6, 0, 15),
        ]
        assert [p.value for p in second.iterate()] == [3.0, 4.0]


class TestDetectFormat:
    """Test cases for is_datevalue_file."""

    def test_fixtures(self, fixtures_dir):
        for name in ("daily_two_series.dv", "hourly_6hour.dv", "legacy_monthly.dv"):
            assert DateValueReader.is_datevalue_file(fixtures_dir / name)

    def test_tsid_without_marker(self, tmp_path):
        path = tmp_path / "plain.dv"
        path.write_text('\nTSID = "A.B.C.Day"\n')

        assert DateValueReader.is_datevalue_file(path)

    def test_other_files(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("date,value\n2020-01-01,1\n")

        assert not DateValueReader.is_datevalue_file(path)
        assert not DateValueReader.is_datevalue_file(tmp_path / "missing.dv")
