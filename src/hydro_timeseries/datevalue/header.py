"""
DateValue header parsing.

The header is a sequence of "Name = Value" lines, comments and blank lines.
Properties that describe each series (TSID, Alias, Units, ...) hold one
delimited value per series. They are collected while reading and resolved to
one SeriesHeaderRecord per series once the header is complete; any property
whose value count does not match NumTS is padded with its default and counted
as a warning.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..core import constants
from ..core.date_utils import DateUtils
from ..core.format_version import FormatVersion
from ..core.interval import IntervalBase
from ..core.text_utils import break_string_list, remove_quotes
from ..exceptions import DateValueFormatError, StructuralParseError
from ..models.data import DataFlagMetadata
from ..models.identifier import IdentifierBehavior, TimeSeriesIdentifier

# Per-series properties and the default used to pad them
SERIES_PROPERTY_DEFAULTS: Dict[str, Optional[str]] = {
    "TSID": None,
    "ALIAS": constants.DEFAULT_ALIAS,
    "DATATYPE": constants.DEFAULT_DATA_TYPE,
    "UNITS": constants.DEFAULT_UNITS,
    "DESCRIPTION": constants.DEFAULT_DESCRIPTION,
    "MISSINGVAL": constants.DEFAULT_MISSING_LITERAL,
    "SEQUENCEID": constants.DEFAULT_SEQUENCE_ID,
    "SEQUENCENUM": constants.DEFAULT_SEQUENCE_ID,
    "DATAFLAGS": constants.DEFAULT_DATA_FLAGS,
}


@dataclass
class SeriesHeaderRecord:
    """Header information for one series in a DateValue file."""

    tsid: str
    alias: str = constants.DEFAULT_ALIAS
    data_type: str = constants.DEFAULT_DATA_TYPE
    units: str = constants.DEFAULT_UNITS
    description: str = constants.DEFAULT_DESCRIPTION
    missing: str = constants.DEFAULT_MISSING_LITERAL
    sequence_id: str = constants.DEFAULT_SEQUENCE_ID
    data_flags: bool = False
    data_flag_width: int = constants.DEFAULT_DATA_FLAG_WIDTH
    properties: Dict[str, Any] = field(default_factory=dict)
    data_flag_descriptions: List[DataFlagMetadata] = field(default_factory=list)


@dataclass
class DateValueHeader:
    """Parsed DateValue header."""

    version: Optional[FormatVersion] = None
    delimiter: str = constants.DEFAULT_DELIMITER
    num_ts: int = 1
    records: List[SeriesHeaderRecord] = field(default_factory=list)
    start: Optional[datetime] = None
    start_precision: Optional[IntervalBase] = None
    end: Optional[datetime] = None
    end_precision: Optional[IntervalBase] = None
    include_count: bool = False
    include_total_time: bool = False
    warning_count: int = 0
    line_count: int = 0
    first_data_line: Optional[str] = None
    ended_at_marker: bool = False

    @property
    def merges_delimiters(self) -> bool:
        return self.version is not None and self.version.merges_delimiters

    @property
    def has_data_flags(self) -> bool:
        return any(record.data_flags for record in self.records)


def parse_brace_list(text: str) -> List[Tuple[str, str]]:
    """
    Split "{name:value,name2:"quoted, value"}" into (name, raw value) pairs.

    Quotes are kept in the raw values. Items without ":" are skipped.
    """
    text = text.strip()
    if text.startswith("{"):
        text = text[1:]
    if text.endswith("}"):
        text = text[:-1]

    pairs = []
    for item in break_string_list(text, ",", allow_strings=True, retain_quotes=True):
        parts = break_string_list(item, ":", allow_strings=True, retain_quotes=True)
        if len(parts) < 2:
            continue
        pairs.append((parts[0].strip(), ":".join(parts[1:]).strip()))
    return pairs


def parse_property_value(raw: str) -> Any:
    """Convert a raw property value to str, bool, int, float or None."""
    if raw.startswith('"'):
        return raw.strip('"')
    lowered = raw.lower()
    if lowered == "null":
        return None
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return raw


class DateValueHeaderParser:
    """Parse the header section of a DateValue stream."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize header parser.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def parse(
        self,
        lines: Iterator[str],
        read_data: bool = True,
        source: Optional[str] = None
    ) -> DateValueHeader:
        """
        Read header lines from an iterator.

        Reading stops at the first non-blank, non-comment line without "=".
        That line is kept in first_data_line and the iterator is left
        positioned after it. When read_data is False, the #EndHeader marker
        also ends the header.

        Args:
            lines: Line iterator, consumed up to the end of the header
            read_data: Whether the caller will read data after the header
            source: Name of the input, for messages

        Returns:
            Parsed header

        Raises:
            DateValueFormatError: If NumTS, Start or End cannot be parsed
        """
        header = DateValueHeader()
        series_values: Dict[str, Tuple[List[str], int]] = {}
        properties: Dict[int, Tuple[str, int]] = {}
        flag_descriptions: Dict[int, Tuple[str, int]] = {}
        where = f" in \"{source}\"" if source else ""

        for line_number, raw_line in enumerate(lines, 1):
            header.line_count = line_number
            line = raw_line.strip()

            if not line:
                continue

            if line.startswith("#"):
                upper = line.upper()
                if not read_data and (
                    upper.startswith(constants.END_HEADER_MARKER.upper())
                    or upper.startswith(constants.LEGACY_HISTORY_MARKER.upper())
                ):
                    header.ended_at_marker = True
                    break
                if upper.startswith(constants.DATEVALUE_VERSION_MARKER.upper()):
                    header.version = self._parse_version(line, line_number)
                continue

            equals = line.find("=")
            if equals < 0:
                header.first_data_line = line
                break

            if equals == 0:
                header.warning_count += 1
                self.logger.warning(f"Bad property line {line_number}{where}: \"{line}\"")
                continue

            name = line[:equals].strip()
            value = line[equals + 1:].strip()
            key = name.upper()

            if key in SERIES_PROPERTY_DEFAULTS:
                series_values[key] = (self._split(value, header), line_number)
            elif key == "DELIMITER":
                # Applies to lines after this one only
                header.delimiter = remove_quotes(value) or constants.DEFAULT_DELIMITER
            elif key == "NUMTS":
                header.num_ts = self._parse_count(value, line_number)
            elif key == "START":
                header.start, header.start_precision = self._parse_date(name, value, line_number)
            elif key == "END":
                header.end, header.end_precision = self._parse_date(name, value, line_number)
            elif key == "INCLUDECOUNT":
                header.include_count = value.lower() == "true"
            elif key == "INCLUDETOTALTIME":
                header.include_total_time = value.lower() == "true"
            elif key.startswith("PROPERTIES_"):
                self._store_indexed(properties, key, value, line_number, header)
            elif key.startswith("DATAFLAGDESCRIPTIONS_"):
                self._store_indexed(flag_descriptions, key, value, line_number, header)
            else:
                self.logger.warning(
                    f"Property \"{name}\" is not recognized{where} (line {line_number}); ignoring"
                )

        header.records = self._build_records(header, series_values, where)

        for index, (value, line_number) in properties.items():
            record = self._record_for_index(header, index, "Properties", line_number, where)
            if record is not None:
                for prop_name, raw in parse_brace_list(value):
                    record.properties[prop_name] = parse_property_value(raw)

        for index, (value, line_number) in flag_descriptions.items():
            record = self._record_for_index(header, index, "DataFlagDescriptions", line_number, where)
            if record is not None:
                for flag, raw in parse_brace_list(value):
                    record.data_flag_descriptions.append(
                        DataFlagMetadata(flag, raw.strip('"'))
                    )

        if header.start is not None and header.end is not None and header.start > header.end:
            header.warning_count += 1
            self.logger.warning(f"Start {header.start} is after End {header.end}{where}")

        self.logger.debug(
            f"Read DateValue header{where}: version={header.version}, "
            f"NumTS={header.num_ts}, warnings={header.warning_count}"
        )
        return header

    def _split(self, value: str, header: DateValueHeader) -> List[str]:
        return [
            token.strip()
            for token in break_string_list(
                value,
                header.delimiter,
                skip_blanks=header.merges_delimiters,
                allow_strings=True,
            )
        ]

    def _parse_version(self, line: str, line_number: int) -> Optional[FormatVersion]:
        tokens = line[1:].split()
        if len(tokens) < 2:
            return None
        try:
            return FormatVersion.parse(tokens[1])
        except StructuralParseError:
            self.logger.warning(f"Unrecognized format version at line {line_number}: \"{line}\"")
            return None

    def _parse_count(self, value: str, line_number: int) -> int:
        try:
            count = int(value)
        except ValueError:
            raise DateValueFormatError(f"Invalid NumTS \"{value}\" at line {line_number}")
        if count < 1:
            raise DateValueFormatError(f"NumTS must be at least 1 at line {line_number}")
        return count

    def _parse_date(self, name: str, value: str, line_number: int) -> Tuple[datetime, IntervalBase]:
        try:
            return DateUtils.parse_date(remove_quotes(value))
        except ValueError:
            raise DateValueFormatError(f"Invalid {name} date \"{value}\" at line {line_number}")

    def _store_indexed(
        self,
        target: Dict[int, Tuple[str, int]],
        key: str,
        value: str,
        line_number: int,
        header: DateValueHeader
    ) -> None:
        try:
            index = int(key.split("_", 1)[1])
        except ValueError:
            header.warning_count += 1
            self.logger.warning(f"Bad series number in \"{key}\" at line {line_number}")
            return
        target[index] = (value, line_number)

    def _record_for_index(
        self,
        header: DateValueHeader,
        index: int,
        name: str,
        line_number: int,
        where: str
    ) -> Optional[SeriesHeaderRecord]:
        if 1 <= index <= header.num_ts:
            return header.records[index - 1]
        header.warning_count += 1
        self.logger.warning(
            f"{name}_{index} at line {line_number}{where} is outside 1..{header.num_ts}"
        )
        return None

    def _resolve(
        self,
        header: DateValueHeader,
        series_values: Dict[str, Tuple[List[str], int]],
        key: str,
        default: Optional[str],
        where: str
    ) -> List[Optional[str]]:
        """Return exactly num_ts values for a property, padding with the default."""
        count = header.num_ts
        if key not in series_values:
            return [default] * count

        values, line_number = series_values[key]
        if len(values) != count:
            header.warning_count += 1
            self.logger.warning(
                f"Number of {key} values ({len(values)}) at line {line_number}{where} "
                f"does not match NumTS ({count}); using default \"{default or ''}\""
            )
            values = (list(values) + [default] * count)[:count]
        return list(values)

    def _build_records(
        self,
        header: DateValueHeader,
        series_values: Dict[str, Tuple[List[str], int]],
        where: str
    ) -> List[SeriesHeaderRecord]:
        resolved = {
            key: self._resolve(header, series_values, key, default, where)
            for key, default in SERIES_PROPERTY_DEFAULTS.items()
        }

        if "TSID" not in series_values:
            self.logger.warning(f"TSID not found in header{where}; using default identifiers")

        sequence_key = "SEQUENCEID" if "SEQUENCEID" in series_values else "SEQUENCENUM"
        default_interval = self._default_interval(resolved["TSID"])

        records = []
        for i in range(header.num_ts):
            tsid = resolved["TSID"][i] or f"{constants.DEFAULT_TSID_PREFIX}{i + 1}"
            if not resolved["TSID"][i] and default_interval:
                tsid += f"...{default_interval}"
            sequence_id = resolved[sequence_key][i] or ""
            if sequence_id == str(constants.NO_SEQUENCE_NUMBER):
                sequence_id = ""
            flags, width = self._parse_data_flags(resolved["DATAFLAGS"][i], header)

            records.append(SeriesHeaderRecord(
                tsid=tsid,
                alias=resolved["ALIAS"][i],
                data_type=resolved["DATATYPE"][i],
                units=resolved["UNITS"][i],
                description=resolved["DESCRIPTION"][i],
                missing=resolved["MISSINGVAL"][i],
                sequence_id=sequence_id,
                data_flags=flags,
                data_flag_width=width,
            ))
        return records

    @staticmethod
    def _default_interval(tsids: List[Optional[str]]) -> str:
        """Return the interval of the first given TSID, used for padded identifiers."""
        for tsid in tsids:
            if tsid:
                return TimeSeriesIdentifier.parse(
                    tsid, IdentifierBehavior.NO_VALIDATION
                ).interval_string
        return ""

    def _parse_data_flags(self, token: str, header: DateValueHeader) -> Tuple[bool, int]:
        """Parse a "true[,width]" DataFlags entry."""
        parts = [part.strip() for part in token.split(",")]
        flags = parts[0].lower() == "true"
        width = constants.DEFAULT_DATA_FLAG_WIDTH
        if flags and len(parts) > 1 and parts[1]:
            try:
                width = int(parts[1])
            except ValueError:
                header.warning_count += 1
                self.logger.warning(f"Invalid data flag width \"{parts[1]}\"")
        return flags, width
