"""
DateValue format version.

The version written in the "# DateValueTS x.y" marker controls the file
layout: before 1.4 consecutive delimiters merge, 1.4 writes an integer
SequenceNum, 1.5 writes a quoted SequenceID and 1.6 adds properties and data
flag descriptions.
"""

from dataclasses import dataclass

from . import constants
from ..exceptions import StructuralParseError


@dataclass(frozen=True, order=True)
class FormatVersion:
    """A major.minor DateValue format version."""

    major: int = 1
    minor: int = 6

    @classmethod
    def parse(cls, text: str) -> "FormatVersion":
        """
        Parse a version string such as "1.4".

        Raises:
            StructuralParseError: If the string is not a version
        """
        parts = str(text).strip().split(".")
        try:
            major = int(parts[0])
            minor = int(parts[1]) if len(parts) > 1 and parts[1] else 0
        except ValueError:
            raise StructuralParseError(f"Invalid DateValue format version \"{text}\"")
        return cls(major, minor)

    @classmethod
    def current(cls) -> "FormatVersion":
        return cls.parse(constants.CURRENT_FORMAT_VERSION)

    @property
    def merges_delimiters(self) -> bool:
        """True for layouts before 1.4, where repeated delimiters count as one."""
        return self < FormatVersion(1, 4)

    @property
    def uses_sequence_number(self) -> bool:
        """True when sequence ids are written as the legacy integer SequenceNum."""
        return self <= FormatVersion(1, 4)

    @property
    def supports_properties(self) -> bool:
        return self >= FormatVersion(1, 6)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"
