"""
Package-wide constants for time series identifiers and the DateValue format.

This module defines separators, default values and format markers used
throughout the package.
"""

# Identifier separators
LOCATION_TYPE_SEPARATOR = ":"
SEPARATOR = "."
SUB_SEPARATOR = "-"
SEQUENCE_START = "["
SEQUENCE_END = "]"
INPUT_SEPARATOR = "~"
QUOTE_CHARACTERS = ("'", '"')

# Missing value handling
DEFAULT_MISSING_VALUE = -999.0
MISSING_TOLERANCE = 0.001  # +/- range around a single missing value

# Data flags
DEFAULT_DATA_FLAG_WIDTH = 2
DEFAULT_DATA_FLAG = ""

# DateValue format
DATEVALUE_INPUT_TYPE = "DateValue"
DATEVALUE_MARKER = "# DateValue"
DATEVALUE_VERSION_MARKER = "# DateValueTS"
END_HEADER_MARKER = "#EndHeader"
LEGACY_HISTORY_MARKER = "# Time series histories"
CURRENT_FORMAT_VERSION = "1.6"
DEFAULT_DELIMITER = " "
DEFAULT_PRECISION = 4
MISSING_LITERAL_NAN = "NaN"

# Defaults used to pad N-wide header properties
DEFAULT_ALIAS = ""
DEFAULT_DATA_TYPE = ""
DEFAULT_UNITS = ""
DEFAULT_DESCRIPTION = ""
DEFAULT_MISSING_LITERAL = ""
DEFAULT_SEQUENCE_ID = ""
DEFAULT_DATA_FLAGS = "false"
DEFAULT_TSID_PREFIX = "TS"

# Legacy integer sequence number meaning "no sequence"
NO_SEQUENCE_NUMBER = -1

# Time zone applied to timezone-aware datetimes
DEFAULT_TIMEZONE = "UTC"
