"""
DateValue time series reader.

Reads one or more time series from a DateValue text file: a header of
"Name = Value" properties followed by one data line per date with a value
(and optional data flag) for each series.
"""

import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .header import DateValueHeader, DateValueHeaderParser, SeriesHeaderRecord
from .streams import PathLike, open_text_input
from ..core import constants
from ..core.config import Config
from ..core.date_utils import DateUtils
from ..core.interval import IntervalBase
from ..core.text_utils import break_string_list
from ..exceptions import HeaderConsistencyError, RecordParseError, TimeSeriesIOError
from ..models.factory import new_time_series
from ..models.identifier import TimeSeriesIdentifier
from ..models.timeseries import TimeSeries

# Bases for which a separate time column may follow the date column
TIME_COLUMN_BASES = (IntervalBase.HOUR, IntervalBase.MINUTE, IntervalBase.IRREGULAR)


class DateValueReader:
    """Read time series from DateValue files."""

    def __init__(
        self,
        config: Optional[Config] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize DateValue reader.

        Args:
            config: Configuration (strict mode, time zone, missing value)
            logger: Logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.header_parser = DateValueHeaderParser(logger=self.logger)

    @property
    def strict(self) -> bool:
        return self.config.strict_read if self.config else True

    @staticmethod
    def is_datevalue_file(path: PathLike) -> bool:
        """
        Check whether a file looks like a DateValue file.

        The file must start with a "# DateValue" comment or contain a
        "TSID ... =" property line before the data.
        """
        try:
            with open_text_input(path) as f:
                for raw_line in f:
                    line = raw_line.strip()
                    if not line:
                        continue
                    upper = line.upper()
                    if upper.startswith("#DATEVALUE") or upper.startswith(constants.DATEVALUE_MARKER.upper()):
                        return True
                    if upper.startswith("TSID") and "=" in line:
                        return True
                    if not line.startswith("#") and "=" not in line:
                        return False
        except TimeSeriesIOError:
            return False
        return False

    def read_time_series_list(
        self,
        path: PathLike,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        read_data: bool = True,
        strict: Optional[bool] = None
    ) -> List[TimeSeries]:
        """
        Read all time series from a DateValue file.

        Args:
            path: File path (.gz and .zip are decompressed)
            start: First date to read (default: header Start)
            end: Last date to read (default: header End)
            read_data: If False, read only the header
            strict: Fail on header or record warnings (default from config)

        Returns:
            List of time series in file order

        Raises:
            TimeSeriesIOError: If the file cannot be read
            HeaderConsistencyError: If the header has warnings (strict)
            RecordParseError: If data lines have warnings (strict)
        """
        self.logger.info(f"Reading DateValue file \"{path}\"")
        with open_text_input(path) as f:
            series = self._read(f, str(path), None, start, end, read_data, strict)
        self.logger.info(f"Read {len(series)} time series from \"{path}\"")
        return series

    def read_time_series(
        self,
        tsid: Union[str, PathLike],
        path: Optional[PathLike] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        read_data: bool = True,
        strict: Optional[bool] = None
    ) -> Optional[TimeSeries]:
        """
        Read a single time series.

        The series is matched by alias first, then by identifier, ignoring
        case. A single-series file always matches. If path is omitted, tsid
        may be a file path or "Loc.Src.Type.Interval~DateValue~path".

        Args:
            tsid: Identifier or alias to read, or a file path
            path: File path
            start: First date to read
            end: Last date to read
            read_data: If False, read only the header
            strict: Fail on header or record warnings

        Returns:
            Matching time series, or None if the file does not contain it
        """
        requested: Optional[str] = str(tsid)
        if path is None:
            if Path(str(tsid)).exists():
                path = tsid
                requested = None
            else:
                identifier = TimeSeriesIdentifier.parse(str(tsid))
                if not identifier.input_name:
                    raise TimeSeriesIOError(
                        f"No file given for time series \"{tsid}\"", path=None
                    )
                path = identifier.input_name
                requested = identifier.format()

        with open_text_input(path) as f:
            series = self._read(f, str(path), requested, start, end, read_data, strict)
        return series[0] if series else None

    def read_from_lines(
        self,
        lines: Iterable[str],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        read_data: bool = True,
        strict: Optional[bool] = None,
        source: str = ""
    ) -> List[TimeSeries]:
        """Read time series from in-memory lines."""
        return self._read(iter(lines), source, None, start, end, read_data, strict)

    def _read(
        self,
        lines: Iterable[str],
        source: str,
        requested: Optional[str],
        start: Optional[datetime],
        end: Optional[datetime],
        read_data: bool,
        strict: Optional[bool]
    ) -> List[TimeSeries]:
        strict = self.strict if strict is None else strict
        line_iter = iter(lines)

        header = self.header_parser.parse(line_iter, read_data=read_data, source=source or None)
        if header.warning_count > 0:
            if strict:
                raise HeaderConsistencyError(header.warning_count, source or None)
            self.logger.warning(
                f"{header.warning_count} header warning(s) in \"{source}\"; continuing"
            )

        selected = self._select_series(header, requested)
        if not selected:
            self.logger.warning(f"Time series \"{requested}\" not found in \"{source}\"")
            return []

        read_start = start if start is not None else header.start
        read_end = end if end is not None else header.end

        columns: List[Optional[TimeSeries]] = [None] * header.num_ts
        for index in selected:
            columns[index] = self._create_series(
                header, header.records[index], source, read_start, read_end
            )
        series = [ts for ts in columns if ts is not None]

        if not read_data:
            return series

        for ts in series:
            ts.allocate_data_space()

        self._read_data(header, line_iter, columns, source, read_start, read_end, strict)

        for ts in series:
            precision = ts.date_precision
            ts.add_to_genesis(
                f"Read DateValue time series from {DateUtils.format_date(ts.date1, precision)} "
                f"to {DateUtils.format_date(ts.date2, precision)}"
            )
        return series

    def _select_series(self, header: DateValueHeader, requested: Optional[str]) -> List[int]:
        """Return the indexes of series to read."""
        if requested is None or header.num_ts == 1:
            return list(range(header.num_ts))

        wanted = TimeSeriesIdentifier.parse(requested).format().lower()
        for i, record in enumerate(header.records):
            if record.alias and record.alias.lower() == requested.strip().lower():
                return [i]
        for i, record in enumerate(header.records):
            if TimeSeriesIdentifier.parse(record.tsid).format().lower() == wanted:
                return [i]
        return []

    def _create_series(
        self,
        header: DateValueHeader,
        record: SeriesHeaderRecord,
        source: str,
        start: Optional[datetime],
        end: Optional[datetime]
    ) -> TimeSeries:
        identifier = TimeSeriesIdentifier.parse(record.tsid).with_changes(
            input_type=constants.DATEVALUE_INPUT_TYPE,
            input_name=source,
        )
        if record.sequence_id:
            identifier = identifier.with_changes(sequence_id=record.sequence_id)

        time_zone = self.config.timezone if self.config else constants.DEFAULT_TIMEZONE
        missing = self.config.default_missing_value if self.config else constants.DEFAULT_MISSING_VALUE
        ts = new_time_series(identifier, missing=missing, time_zone=time_zone, logger=self.logger)

        ts.alias = record.alias
        ts.data_type = record.data_type or identifier.data_type
        ts.data_units = record.units
        ts.data_units_original = record.units
        ts.description = record.description
        ts.properties.update(record.properties)
        ts.data_flag_metadata.extend(record.data_flag_descriptions)
        ts.has_data_flags = record.data_flags

        if record.missing:
            if record.missing.lower() == constants.MISSING_LITERAL_NAN.lower():
                ts.set_missing(math.nan)
            else:
                try:
                    ts.set_missing(float(record.missing))
                except ValueError:
                    self.logger.warning(
                        f"Invalid MissingVal \"{record.missing}\" for \"{record.tsid}\"; "
                        f"using {ts.missing}"
                    )

        if not ts.interval.is_regular and header.start_precision is not None:
            ts.date_precision = header.start_precision

        ts.date1 = start
        ts.date2 = end
        ts.date1_original = header.start
        ts.date2_original = header.end
        if source:
            ts.add_to_genesis(f"Read time series from \"{source}\"")
        return ts

    def _read_data(
        self,
        header: DateValueHeader,
        lines: Iterator[str],
        columns: List[Optional[TimeSeries]],
        source: str,
        start: Optional[datetime],
        end: Optional[datetime],
        strict: bool
    ) -> None:
        """Stream data lines into the allocated series."""
        flagged = [record.data_flags for record in header.records]
        extra_columns = int(header.include_count) + int(header.include_total_time)
        expected = header.num_ts + 1 + extra_columns + sum(flagged)

        first_series = next(ts for ts in columns if ts is not None)
        base = first_series.interval.base
        precision = first_series.date_precision
        time_column_allowed = base in TIME_COLUMN_BASES
        if start is not None:
            start = DateUtils.set_precision(start, precision)
        if end is not None:
            end = DateUtils.set_precision(end, precision)

        warning_count = 0
        first_line = True

        def data_lines() -> Iterator[Tuple[int, str]]:
            if header.first_data_line is not None:
                yield header.line_count, header.first_data_line
            for offset, raw in enumerate(lines, 1):
                yield header.line_count + offset, raw

        for line_number, raw_line in data_lines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            if first_line:
                first_line = False
                if line.lower().startswith("date"):
                    continue

            if not line[0].isdigit():
                warning_count += 1
                self.logger.warning(f"Data line {line_number} does not start with a date: \"{line}\"")
                continue

            tokens = break_string_list(
                line,
                header.delimiter,
                skip_blanks=header.merges_delimiters,
                allow_strings=True,
            )

            if len(tokens) == expected:
                date_text = tokens[0]
                value_index = 1
            elif time_column_allowed and len(tokens) == expected + 1:
                date_text = f"{tokens[0]} {tokens[1]}"
                value_index = 2
            else:
                warning_count += 1
                self.logger.warning(
                    f"Data line {line_number} has {len(tokens)} columns, expected {expected}: \"{line}\""
                )
                continue
            value_index += extra_columns

            try:
                date, _ = DateUtils.parse_date(date_text)
                date = DateUtils.set_precision(date, precision)
                if start is not None and date < start:
                    continue
                if end is not None and date > end:
                    break

                for i, ts in enumerate(columns):
                    value_text = tokens[value_index].strip()
                    value_index += 1
                    flag = None
                    if flagged[i]:
                        flag = tokens[value_index].strip()
                        value_index += 1
                    if ts is None:
                        continue
                    if value_text == "" and not ts.interval.is_regular:
                        # Irregular series share rows; a blank means no point at this date
                        continue

                    if value_text == "" or value_text.lower() == constants.MISSING_LITERAL_NAN.lower():
                        value = ts.missing
                    else:
                        value = float(value_text)
                    ts.set_data_value(date, value, flag)
            except (ValueError, IndexError) as e:
                warning_count += 1
                self.logger.warning(f"Error parsing data line {line_number}: \"{line}\" ({e})")

        if warning_count > 0:
            if strict:
                raise RecordParseError(warning_count, source or None)
            self.logger.warning(f"{warning_count} data line warning(s) in \"{source}\"; continuing")
