"""
Time interval values.

An interval is a base unit (second, minute, hour, day, week, month, year or
irregular) with an integer multiplier, e.g. "6Hour" or "Day". The base values
double as date precisions: a date at DAY precision carries no hour.
"""

from dataclasses import dataclass
from enum import IntEnum

from ..exceptions import IntervalParseError


class IntervalBase(IntEnum):
    """Interval base units, ordered from finest to coarsest."""

    UNKNOWN = -1
    IRREGULAR = 0
    SECOND = 10
    MINUTE = 20
    HOUR = 30
    DAY = 40
    WEEK = 50
    MONTH = 60
    YEAR = 70


# Prefixes accepted when parsing, checked in order
_BASE_PREFIXES = (
    ("MIN", IntervalBase.MINUTE),
    ("MON", IntervalBase.MONTH),
    ("SEC", IntervalBase.SECOND),
    ("HOUR", IntervalBase.HOUR),
    ("HR", IntervalBase.HOUR),
    ("DAY", IntervalBase.DAY),
    ("DAI", IntervalBase.DAY),
    ("WEEK", IntervalBase.WEEK),
    ("WK", IntervalBase.WEEK),
    ("YEAR", IntervalBase.YEAR),
    ("YR", IntervalBase.YEAR),
    ("IRR", IntervalBase.IRREGULAR),
)

_BASE_NAMES = {
    IntervalBase.SECOND: "Second",
    IntervalBase.MINUTE: "Minute",
    IntervalBase.HOUR: "Hour",
    IntervalBase.DAY: "Day",
    IntervalBase.WEEK: "Week",
    IntervalBase.MONTH: "Month",
    IntervalBase.YEAR: "Year",
    IntervalBase.IRREGULAR: "Irregular",
}


@dataclass(frozen=True)
class TimeInterval:
    """An interval base with its multiplier."""

    base: IntervalBase = IntervalBase.UNKNOWN
    multiplier: int = 0

    @classmethod
    def parse(cls, text: str, validate: bool = True) -> "TimeInterval":
        """
        Parse an interval string such as "Day", "6Hour" or "Irregular".

        An all-digit string is a legacy form meaning that many hours. An empty
        string or "*" gives an unknown interval.

        Args:
            text: Interval string
            validate: If False, an unrecognized base gives an unknown interval
                instead of raising

        Returns:
            Parsed TimeInterval

        Raises:
            IntervalParseError: If the base is not recognized
        """
        text = (text or "").strip()
        if not text or text == "*":
            return cls()

        digits = 0
        while digits < len(text) and text[digits].isdigit():
            digits += 1

        if digits == len(text):
            return cls(IntervalBase.HOUR, int(text))

        multiplier = int(text[:digits]) if digits else 1
        base_string = text[digits:].upper()

        for prefix, base in _BASE_PREFIXES:
            if base_string.startswith(prefix):
                if base == IntervalBase.IRREGULAR:
                    return cls(IntervalBase.IRREGULAR, 1)
                if multiplier <= 0:
                    if validate:
                        raise IntervalParseError(
                            f"Interval multiplier must be positive: \"{text}\""
                        )
                    return cls()
                return cls(base, multiplier)

        if validate:
            raise IntervalParseError(f"Unrecognized interval \"{text}\"")
        return cls()

    @property
    def is_known(self) -> bool:
        return self.base != IntervalBase.UNKNOWN

    @property
    def is_regular(self) -> bool:
        return self.base not in (IntervalBase.UNKNOWN, IntervalBase.IRREGULAR)

    @property
    def base_name(self) -> str:
        return _BASE_NAMES.get(self.base, "")

    def format(self) -> str:
        """Return the canonical interval string, e.g. "6Hour" or "Day"."""
        if not self.is_known:
            return ""
        if self.base == IntervalBase.IRREGULAR or self.multiplier == 1:
            return self.base_name
        return f"{self.multiplier}{self.base_name}"

    def __str__(self) -> str:
        return self.format()
