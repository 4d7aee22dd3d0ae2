"""
DateValue text format support.

Reads and writes multi-series DateValue files.
"""

from .header import DateValueHeader, DateValueHeaderParser, SeriesHeaderRecord
from .reader import DateValueReader
from .writer import DateValueWriter, WriteOptions

__all__ = [
    "DateValueHeader",
    "DateValueHeaderParser",
    "SeriesHeaderRecord",
    "DateValueReader",
    "DateValueWriter",
    "WriteOptions",
]
