"""
DateValue time series writer.

Writes a list of time series that share one interval to a DateValue file:
a header with one delimited value per series for each property, then one
data line per date.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, List, Optional, Sequence, TextIO, Tuple, Union

from .streams import PathLike, open_text_output
from .. import __version__
from ..core import constants
from ..core.date_utils import DateUtils
from ..core.format_version import FormatVersion
from ..core.interval import IntervalBase, TimeInterval
from ..exceptions import CrossSeriesConsistencyError, TimeSeriesIOError, UnitConversionError
from ..models.timeseries import TimeSeries
from ..processing.converter import UnitConverter

NO_DATA = "?"

# (multiplier, offset, units label) applied to one series on output
Conversion = Tuple[float, float, str]


@dataclass
class WriteOptions:
    """Options controlling DateValue output."""

    delimiter: str = constants.DEFAULT_DELIMITER
    precision: int = constants.DEFAULT_PRECISION
    missing_value: Optional[str] = None
    include_properties: Optional[List[str]] = None
    write_data_flag_descriptions: bool = False
    version: FormatVersion = field(default_factory=FormatVersion.current)
    output_units: Union[str, Sequence[Optional[str]], None] = None
    output_start: Optional[datetime] = None
    output_end: Optional[datetime] = None
    output_comments: List[str] = field(default_factory=list)
    write_data: bool = True
    irregular_precision: Optional[IntervalBase] = None


class DateValueWriter:
    """Write time series to DateValue files."""

    def __init__(
        self,
        unit_converter: Optional[UnitConverter] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize DateValue writer.

        Args:
            unit_converter: Source of unit conversions for output units
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.unit_converter = unit_converter or UnitConverter(logger=self.logger)

    def write_time_series(
        self,
        ts: TimeSeries,
        output: Union[PathLike, TextIO],
        options: Optional[WriteOptions] = None
    ) -> None:
        """Write a single time series."""
        self.write_time_series_list([ts], output, options)

    def write_time_series_list(
        self,
        series_list: Sequence[Optional[TimeSeries]],
        output: Union[PathLike, TextIO],
        options: Optional[WriteOptions] = None
    ) -> None:
        """
        Write time series to a file or text stream.

        The series are checked before anything is written, so a failed check
        leaves no output.

        Args:
            series_list: Series to write; None entries are written as "?"
            output: File path or writable text stream
            options: Output options

        Raises:
            CrossSeriesConsistencyError: If the series do not share an
                interval, or irregular series do not share a date precision
            TimeSeriesIOError: If the output cannot be opened or written
        """
        options = options or WriteOptions()
        interval = self.check_intervals(series_list)
        precision = self._date_precision(series_list, interval, options)

        lines = self.format_lines(series_list, options, interval, precision)
        if hasattr(output, "write"):
            name = str(getattr(output, "name", output))
            try:
                count = self._write_lines(lines, output)
            except OSError as e:
                raise TimeSeriesIOError(f"Error writing \"{name}\": {e}", path=name) from e
        else:
            with open_text_output(output) as f:
                count = self._write_lines(lines, f)

        self.logger.info(
            f"Wrote {len([ts for ts in series_list if ts is not None])} time series "
            f"({count} lines) to \"{getattr(output, 'name', output)}\""
        )

    @staticmethod
    def _write_lines(lines: Iterator[str], stream: TextIO) -> int:
        count = 0
        for line in lines:
            stream.write(line)
            stream.write("\n")
            count += 1
        return count

    def check_intervals(self, series_list: Sequence[Optional[TimeSeries]]) -> TimeInterval:
        """
        Return the interval shared by all non-null series.

        Raises:
            CrossSeriesConsistencyError: If intervals differ
        """
        interval: Optional[TimeInterval] = None
        for ts in series_list:
            if ts is None:
                continue
            if interval is None:
                interval = ts.interval
            elif (ts.interval.base, ts.interval.multiplier) != (interval.base, interval.multiplier):
                raise CrossSeriesConsistencyError(
                    f"Time series do not have the same interval: \"{interval}\" and "
                    f"\"{ts.interval}\" ({ts.identifier}). Cannot write to one DateValue file."
                )
        return interval or TimeInterval()

    def _date_precision(
        self,
        series_list: Sequence[Optional[TimeSeries]],
        interval: TimeInterval,
        options: WriteOptions
    ) -> IntervalBase:
        if interval.is_regular:
            return interval.base
        if options.irregular_precision is not None:
            return IntervalBase(options.irregular_precision)

        precisions = {ts.date_precision for ts in series_list if ts is not None}
        if len(precisions) > 1:
            raise CrossSeriesConsistencyError(
                "Irregular time series do not have the same date precision: "
                f"{', '.join(sorted(p.name for p in precisions))}"
            )
        return precisions.pop() if precisions else IntervalBase.MINUTE

    def _output_period(
        self,
        series_list: Sequence[Optional[TimeSeries]],
        options: WriteOptions,
        precision: IntervalBase
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        present = [ts for ts in series_list if ts is not None]
        start = options.output_start
        end = options.output_end
        if start is None:
            starts = [ts.date1 for ts in present if ts.date1 is not None]
            start = min(starts) if starts else None
        if end is None:
            ends = [ts.date2 for ts in present if ts.date2 is not None]
            end = max(ends) if ends else None
        if start is not None:
            start = DateUtils.set_precision(start, precision)
        if end is not None:
            end = DateUtils.set_precision(end, precision)
        return start, end

    def _conversions(
        self,
        series_list: Sequence[Optional[TimeSeries]],
        options: WriteOptions
    ) -> List[Conversion]:
        """Return (multiplier, offset, units) per series for the requested output units."""
        conversions: List[Conversion] = []
        for i, ts in enumerate(series_list):
            if ts is None:
                conversions.append((1.0, 0.0, ""))
                continue

            if isinstance(options.output_units, str):
                target = options.output_units
            elif options.output_units is not None and i < len(options.output_units):
                target = options.output_units[i]
            else:
                target = None

            if not target or target == ts.data_units:
                conversions.append((1.0, 0.0, ts.data_units))
                continue

            try:
                multiplier, offset = self.unit_converter.get_conversion(ts.data_units, target)
                conversions.append((multiplier, offset, target))
            except UnitConversionError as e:
                self.logger.warning(f"{e}; writing \"{ts.identifier}\" in {ts.data_units}")
                conversions.append((1.0, 0.0, ts.data_units))
        return conversions

    def _missing_literal(self, options: WriteOptions) -> Optional[str]:
        if options.missing_value is None:
            return None
        try:
            float(options.missing_value)
        except ValueError:
            self.logger.warning(
                f"Missing value \"{options.missing_value}\" is not a number; ignoring"
            )
            return None
        return str(options.missing_value)

    def _format_number(self, value: float, precision: int) -> str:
        if math.isnan(value):
            return constants.MISSING_LITERAL_NAN
        return f"{value:.{precision}f}"

    def _format_value(
        self,
        ts: TimeSeries,
        value: float,
        conversion: Conversion,
        missing_literal: Optional[str],
        precision: int
    ) -> str:
        if ts.is_data_missing(value):
            if missing_literal is not None:
                return missing_literal
            return self._format_number(ts.missing, precision)
        multiplier, offset, _ = conversion
        return self._format_number(value * multiplier + offset, precision)

    def format_lines(
        self,
        series_list: Sequence[Optional[TimeSeries]],
        options: WriteOptions,
        interval: Optional[TimeInterval] = None,
        precision: Optional[IntervalBase] = None
    ) -> Iterator[str]:
        """
        Generate the lines of a DateValue file, without line endings.

        Args:
            series_list: Series to write
            options: Output options
            interval: Shared interval (checked if omitted)
            precision: Date precision (derived if omitted)

        Yields:
            Output lines
        """
        interval = interval or self.check_intervals(series_list)
        precision = precision or self._date_precision(series_list, interval, options)
        delim = options.delimiter
        version = options.version
        missing_literal = self._missing_literal(options)
        conversions = self._conversions(series_list, options)
        start, end = self._output_period(series_list, options, precision)

        yield from self._format_header(
            series_list, options, interval, precision, missing_literal, conversions, start, end
        )

        if not options.write_data or start is None or end is None:
            return

        yield self._column_headings(series_list, delim, precision, conversions)

        if interval.is_regular:
            rows = self._regular_rows(
                series_list, options, interval, precision, missing_literal, conversions, start, end
            )
        else:
            rows = self._irregular_rows(
                series_list, options, precision, missing_literal, conversions, start, end
            )
        yield from rows

        self.logger.debug(f"Wrote DateValue data for {start} to {end} (version {version})")

    def _format_header(
        self,
        series_list: Sequence[Optional[TimeSeries]],
        options: WriteOptions,
        interval: TimeInterval,
        precision: IntervalBase,
        missing_literal: Optional[str],
        conversions: List[Conversion],
        start: Optional[datetime],
        end: Optional[datetime]
    ) -> Iterator[str]:
        delim = options.delimiter
        version = options.version
        present = [ts for ts in series_list if ts is not None]

        yield f"{constants.DATEVALUE_VERSION_MARKER} {version} file"
        yield f"# File generated by hydro_timeseries {__version__}"
        yield f"# Creation time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
        for comment in options.output_comments:
            yield f"# {comment}"
        yield "#"

        def row(values: List[str]) -> str:
            return delim.join(values)

        def quoted(value: str) -> str:
            return f"\"{value}\""

        tsids, aliases, sequences, descriptions = [], [], [], []
        data_types, units, missing, flags = [], [], [], []
        for ts, conversion in zip(series_list, conversions):
            if ts is None:
                for values in (tsids, aliases, sequences, descriptions, flags):
                    values.append(quoted(NO_DATA))
                for values in (data_types, units, missing):
                    values.append(NO_DATA)
                continue

            tsids.append(quoted(ts.identifier.format()))
            aliases.append(quoted(ts.alias))
            sequences.append(self._format_sequence(ts.sequence_id, version))
            descriptions.append(quoted(ts.description))
            data_types.append(quoted(ts.data_type.strip() or ts.identifier.main_type))
            units.append(quoted(conversion[2]))
            if missing_literal is not None:
                missing.append(missing_literal)
            else:
                missing.append(self._format_number(ts.missing, options.precision))
            flags.append("true" if ts.has_data_flags else "false")

        yield f"Delimiter   = \"{delim}\""
        yield f"NumTS       = {len(series_list)}"
        yield f"TSID        = {row(tsids)}"
        yield f"Alias       = {row(aliases)}"
        if any(ts.sequence_id for ts in present):
            if version.uses_sequence_number:
                yield f"SequenceNum = {row(sequences)}"
            else:
                yield f"SequenceID  = {row(sequences)}"
        yield f"Description = {row(descriptions)}"
        yield f"DataType    = {row(data_types)}"
        yield f"Units       = {row(units)}"
        yield f"MissingVal  = {row(missing)}"
        if any(ts.has_data_flags for ts in present):
            yield f"DataFlags   = {row(flags)}"

        if version.supports_properties:
            if options.include_properties is not None:
                for i, ts in enumerate(series_list):
                    if ts is not None:
                        line = self._format_properties(ts, i, options.include_properties)
                        if line:
                            yield line
            if options.write_data_flag_descriptions:
                for i, ts in enumerate(series_list):
                    if ts is not None and ts.data_flag_metadata:
                        yield self._format_flag_descriptions(ts, i)

        if start is None or end is None:
            yield "# Unable to determine data start and end - no time series."
        else:
            yield f"Start       = {DateUtils.format_date(start, precision)}"
            yield f"End         = {DateUtils.format_date(end, precision)}"

        yield "#"
        yield "# Time series comments/histories:"
        yield "#"
        for i, ts in enumerate(series_list):
            number = i + 1
            if ts is None:
                yield f"# Time series {number} is null"
                continue
            label = f"(TSID={ts.identifier} Alias={ts.alias})"
            if not ts.comments and not ts.genesis:
                yield f"# Time series {number} {label} has no comments or history"
                continue
            if ts.comments:
                yield f"# Comments for time series {number} {label}:"
                for comment in ts.comments:
                    yield f"#   {comment}"
            if ts.genesis:
                yield f"# Creation history for time series {number} {label}:"
                for entry in ts.genesis:
                    yield f"#   {entry}"
        yield constants.END_HEADER_MARKER

    @staticmethod
    def _format_sequence(sequence_id: str, version: FormatVersion) -> str:
        if version.uses_sequence_number:
            try:
                return str(int(sequence_id))
            except ValueError:
                return str(constants.NO_SEQUENCE_NUMBER)
        return f"\"{sequence_id}\""

    @staticmethod
    def _format_property_value(value: Any) -> str:
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            return f"{value:.6f}"
        return f"\"{value}\""

    def _format_properties(self, ts: TimeSeries, index: int, patterns: List[str]) -> str:
        regexes = [re.compile(re.escape(p).replace(r"\*", ".*")) for p in patterns]
        items = [
            f"{name}:{self._format_property_value(value)}"
            for name, value in ts.properties.items()
            if any(regex.fullmatch(name) for regex in regexes)
        ]
        if not items:
            return ""
        return f"Properties_{index + 1} = {{{','.join(items)}}}"

    @staticmethod
    def _format_flag_descriptions(ts: TimeSeries, index: int) -> str:
        items = [f"{meta.flag}:\"{meta.description}\"" for meta in ts.data_flag_metadata]
        return f"DataFlagDescriptions_{index + 1} = {{{','.join(items)}}}"

    def _column_headings(
        self,
        series_list: Sequence[Optional[TimeSeries]],
        delim: str,
        precision: IntervalBase,
        conversions: List[Conversion]
    ) -> str:
        columns = ["Date"]
        if precision in (IntervalBase.HOUR, IntervalBase.MINUTE, IntervalBase.SECOND):
            columns.append("Time")
        for ts, conversion in zip(series_list, conversions):
            if ts is None:
                columns.append(NO_DATA)
                continue
            label = ts.alias or ts.identifier.format()
            if conversion[2].strip():
                label = f"{label}, {conversion[2]}"
            columns.append(f"\"{label}\"")
            if ts.has_data_flags:
                columns.append("DataFlag")
        return delim.join(columns)

    def _regular_rows(
        self,
        series_list: Sequence[Optional[TimeSeries]],
        options: WriteOptions,
        interval: TimeInterval,
        precision: IntervalBase,
        missing_literal: Optional[str],
        conversions: List[Conversion],
        start: datetime,
        end: datetime
    ) -> Iterator[str]:
        date = start
        while date <= end:
            fields = [DateUtils.format_date(date, precision)]
            for ts, conversion in zip(series_list, conversions):
                if ts is None:
                    fields.append(constants.MISSING_LITERAL_NAN)
                    continue
                fields.append(self._format_value(
                    ts, ts.get_data_value(date), conversion, missing_literal, options.precision
                ))
                if ts.has_data_flags:
                    fields.append(f"\"{ts.get_data_flag(date)}\"")
            yield options.delimiter.join(fields)
            date = DateUtils.add_interval(date, interval.base, interval.multiplier)

    def _irregular_rows(
        self,
        series_list: Sequence[Optional[TimeSeries]],
        options: WriteOptions,
        precision: IntervalBase,
        missing_literal: Optional[str],
        conversions: List[Conversion],
        start: datetime,
        end: datetime
    ) -> Iterator[str]:
        """Merge the points of all series, one row per distinct date."""
        # A bare blank would be lost when lines are trimmed on read
        blank = '""' if options.delimiter.isspace() else ""

        cursors = [
            iter(ts.iterate(start, end)) if ts is not None else iter(())
            for ts in series_list
        ]
        pending = [next(cursor, None) for cursor in cursors]

        while True:
            dates = [
                DateUtils.set_precision(point.date, precision)
                for point in pending if point is not None
            ]
            if not dates:
                break
            earliest = min(dates)

            fields = [DateUtils.format_date(earliest, precision)]
            for i, ts in enumerate(series_list):
                point = pending[i]
                if (
                    ts is not None
                    and point is not None
                    and DateUtils.set_precision(point.date, precision) == earliest
                ):
                    fields.append(self._format_value(
                        ts, point.value, conversions[i], missing_literal, options.precision
                    ))
                    if ts.has_data_flags:
                        fields.append(f"\"{point.flag}\"")
                    pending[i] = next(cursors[i], None)
                else:
                    fields.append(blank)
                    if ts is not None and ts.has_data_flags:
                        fields.append('""')
            yield options.delimiter.join(fields)
