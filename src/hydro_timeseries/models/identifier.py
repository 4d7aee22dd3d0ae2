"""
Time series identifier.

An identifier names a time series by location, data source, data type,
interval and scenario, with an optional location type, sequence id and input
type/name:

    [LocType:]Loc[-SubLoc].Src[-SubSrc].Type[-SubType].Interval[.Scenario][[Seq]][~InputType[~InputName]]

Any part may be quoted with ' or " to protect embedded separators. Quotes are
kept in the part text so that formatting and re-parsing give the same value.
"""

import dataclasses
import re
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any, List, Tuple

from ..core import constants
from ..core.interval import TimeInterval


class IdentifierBehavior(IntFlag):
    """Flags that change how identifier parts are split and validated."""

    NONE = 0
    NO_SUB_LOCATION = 0x1
    NO_SUB_SOURCE = 0x2
    NO_SUB_TYPE = 0x4
    NO_VALIDATION = 0x8


def _split_quoted(text: str, separator: str) -> List[str]:
    """Split on a separator character, ignoring separators inside quotes."""
    parts: List[str] = []
    current: List[str] = []
    quote = None
    for ch in text:
        if quote is not None:
            if ch == quote:
                quote = None
            current.append(ch)
        elif ch in constants.QUOTE_CHARACTERS:
            quote = ch
            current.append(ch)
        elif ch == separator:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return parts


def _split_main_sub(text: str, allow_sub: bool) -> Tuple[str, str]:
    """Split "Main-Sub-More" into ("Main", "Sub-More")."""
    if not allow_sub:
        return text, ""
    parts = _split_quoted(text, constants.SUB_SEPARATOR)
    return parts[0], constants.SUB_SEPARATOR.join(parts[1:])


def _split_sequence(text: str) -> Tuple[str, str]:
    """Strip a trailing "[sequence]" and return (text, sequence)."""
    start = text.find(constants.SEQUENCE_START)
    if start < 0:
        return text, ""
    rest = text[start + 1:]
    end = rest.find(constants.SEQUENCE_END)
    sequence = rest[:end].strip() if end >= 0 else ""
    return text[:start], sequence


def _join_main_sub(main: str, sub: str) -> str:
    return f"{main}{constants.SUB_SEPARATOR}{sub}" if sub else main


@dataclass(frozen=True)
class TimeSeriesIdentifier:
    """Immutable structured time series identifier."""

    main_location: str = ""
    sub_location: str = ""
    main_source: str = ""
    sub_source: str = ""
    main_type: str = ""
    sub_type: str = ""
    interval_string: str = ""
    scenario: str = ""
    sequence_id: str = ""
    location_type: str = ""
    input_type: str = ""
    input_name: str = ""
    behavior: IdentifierBehavior = IdentifierBehavior.NONE
    interval: TimeInterval = field(default_factory=TimeInterval, compare=False)

    def __post_init__(self):
        # Keep the parsed interval in step with interval_string
        if self.interval_string and not self.interval.is_known:
            parsed = TimeInterval.parse(
                self.interval_string,
                validate=not (self.behavior & IdentifierBehavior.NO_VALIDATION),
            )
            object.__setattr__(self, "interval", parsed)

    @classmethod
    def parse(
        cls,
        text: str,
        behavior: IdentifierBehavior = IdentifierBehavior.NONE
    ) -> "TimeSeriesIdentifier":
        """
        Parse an identifier string.

        Args:
            text: Identifier string, optionally with ~InputType~InputName
            behavior: IdentifierBehavior flags

        Returns:
            Parsed identifier

        Raises:
            IntervalParseError: If the interval part is not a valid interval
                (unless NO_VALIDATION is set)
        """
        text = (text or "").strip()
        behavior = IdentifierBehavior(behavior)

        input_type = ""
        input_name = ""
        body = text
        tokens = text.split(constants.INPUT_SEPARATOR, 2)
        if len(tokens) > 1:
            body = tokens[0]
            input_type = tokens[1]
        if len(tokens) > 2:
            input_name = tokens[2]

        location_type = ""
        if body and body[0] not in constants.QUOTE_CHARACTERS:
            colon = body.find(constants.LOCATION_TYPE_SEPARATOR)
            period = body.find(constants.SEPARATOR)
            if 0 <= colon < period:
                location_type = body[:colon]
                body = body[colon + 1:]

        parts = _split_quoted(body, constants.SEPARATOR)
        parts += [""] * (4 - len(parts))
        location, source, data_type, interval_string = parts[:4]
        scenario = constants.SEPARATOR.join(parts[4:])

        if scenario:
            scenario, sequence_id = _split_sequence(scenario)
        else:
            interval_string, sequence_id = _split_sequence(interval_string)

        main_location, sub_location = _split_main_sub(
            location, not (behavior & IdentifierBehavior.NO_SUB_LOCATION)
        )
        main_source, sub_source = _split_main_sub(
            source, not (behavior & IdentifierBehavior.NO_SUB_SOURCE)
        )
        main_type, sub_type = _split_main_sub(
            data_type, not (behavior & IdentifierBehavior.NO_SUB_TYPE)
        )

        return cls(
            main_location=main_location,
            sub_location=sub_location,
            main_source=main_source,
            sub_source=sub_source,
            main_type=main_type,
            sub_type=sub_type,
            interval_string=interval_string,
            scenario=scenario,
            sequence_id=sequence_id,
            location_type=location_type,
            input_type=input_type,
            input_name=input_name,
            behavior=behavior,
        )

    @classmethod
    def from_parts(
        cls,
        location: str,
        source: str,
        data_type: str,
        interval: str,
        scenario: str = "",
        sequence_id: str = "",
        input_type: str = "",
        input_name: str = "",
        location_type: str = "",
        behavior: IdentifierBehavior = IdentifierBehavior.NONE,
    ) -> "TimeSeriesIdentifier":
        """Build an identifier from its five main parts plus optional extras."""
        behavior = IdentifierBehavior(behavior)
        main_location, sub_location = _split_main_sub(
            location, not (behavior & IdentifierBehavior.NO_SUB_LOCATION)
        )
        main_source, sub_source = _split_main_sub(
            source, not (behavior & IdentifierBehavior.NO_SUB_SOURCE)
        )
        main_type, sub_type = _split_main_sub(
            data_type, not (behavior & IdentifierBehavior.NO_SUB_TYPE)
        )
        return cls(
            main_location=main_location,
            sub_location=sub_location,
            main_source=main_source,
            sub_source=sub_source,
            main_type=main_type,
            sub_type=sub_type,
            interval_string=interval,
            scenario=scenario,
            sequence_id=sequence_id,
            location_type=location_type,
            input_type=input_type,
            input_name=input_name,
            behavior=behavior,
        )

    def with_changes(self, **changes: Any) -> "TimeSeriesIdentifier":
        """Return a copy with the given fields replaced."""
        if "interval_string" in changes and "interval" not in changes:
            changes["interval"] = TimeInterval()
        return dataclasses.replace(self, **changes)

    @property
    def location(self) -> str:
        return _join_main_sub(self.main_location, self.sub_location)

    @property
    def source(self) -> str:
        return _join_main_sub(self.main_source, self.sub_source)

    @property
    def data_type(self) -> str:
        return _join_main_sub(self.main_type, self.sub_type)

    def format(self, include_input: bool = False) -> str:
        """
        Return the canonical identifier string.

        Args:
            include_input: Append ~InputType and ~InputName when present

        Returns:
            Identifier string
        """
        text = ""
        if self.location_type:
            text = f"{self.location_type}{constants.LOCATION_TYPE_SEPARATOR}"
        text += constants.SEPARATOR.join(
            [self.location, self.source, self.data_type, self.interval_string]
        )
        if self.scenario:
            text += f"{constants.SEPARATOR}{self.scenario}"
        if self.sequence_id:
            text += f"{constants.SEQUENCE_START}{self.sequence_id}{constants.SEQUENCE_END}"
        if include_input and (self.input_type or self.input_name):
            text += f"{constants.INPUT_SEPARATOR}{self.input_type}"
            if self.input_name:
                text += f"{constants.INPUT_SEPARATOR}{self.input_name}"
        return text

    def matches(self, pattern: str, include_input: bool = False) -> bool:
        """
        Match against a pattern where "*" matches any text, ignoring case.

        Args:
            pattern: Identifier pattern, e.g. "ABC*.USGS.Streamflow.Day"
            include_input: Compare against the string with the input parts

        Returns:
            True if the identifier matches
        """
        regex = re.escape(pattern).replace(r"\*", ".*")
        return re.fullmatch(regex, self.format(include_input), re.IGNORECASE) is not None

    def equals(self, text: str, include_input: bool = False) -> bool:
        """Compare with an identifier string, ignoring case."""
        return self.format(include_input).lower() == text.strip().lower()

    def __str__(self) -> str:
        return self.format()
