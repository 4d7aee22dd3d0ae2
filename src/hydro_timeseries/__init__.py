"""
Hydro Time Series

This package provides time series identifiers, interval-indexed storage and
reading/writing of the DateValue text format for hydrologic time series.
"""

__version__ = "0.1.0"
__description__ = "Hydrologic time series storage and DateValue file exchange"


def __getattr__(name):
    """Lazy import to avoid importing submodules when not needed."""
    if name == "DateValueApp":
        from .main import DateValueApp
        return DateValueApp
    if name in ("DateValueReader", "DateValueWriter", "WriteOptions"):
        from . import datevalue
        return getattr(datevalue, name)
    if name in ("TimeSeries", "TimeSeriesIdentifier", "new_time_series"):
        from . import models
        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "DateValueApp",
    "DateValueReader",
    "DateValueWriter",
    "WriteOptions",
    "TimeSeries",
    "TimeSeriesIdentifier",
    "new_time_series",
]
