"""
Command line entry point for the hydro time series package.

Inspects, validates and converts DateValue time series files.
"""

import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from .core import Config, DateUtils, FormatVersion
from .datevalue import DateValueReader, DateValueWriter
from .exceptions import TimeSeriesError
from .logger import setup_logger, LoggerContext
from .processing import UnitConverter


class DateValueApp:
    """Application wrapper for DateValue file operations."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize application.

        Args:
            config_file: Path to configuration file
        """
        self.config = Config(config_file)

        self.logger = setup_logger(log_file=self.config.log_file, log_level=self.config.log_level)
        self.logger.info("=" * 60)
        self.logger.info("Hydro Time Series - DateValue tools")
        self.logger.info("=" * 60)
        self.logger.info(f"Configuration: {self.config}")

        self.reader = DateValueReader(config=self.config, logger=self.logger)
        self.writer = DateValueWriter(
            unit_converter=UnitConverter(logger=self.logger),
            logger=self.logger
        )

    def info(self, path: str) -> List[Dict[str, Any]]:
        """
        Summarize the time series in a file.

        Args:
            path: DateValue file

        Returns:
            One dictionary per series with identifier, alias, units, period and limits
        """
        with LoggerContext(self.logger, f"reading {path}"):
            series_list = self.reader.read_time_series_list(path)

        summaries = []
        for ts in series_list:
            limits = ts.get_data_limits()
            precision = ts.date_precision
            summary = {
                "tsid": ts.identifier.format(),
                "alias": ts.alias,
                "interval": ts.interval.format(),
                "units": ts.data_units,
                "start": DateUtils.format_date(ts.date1, precision),
                "end": DateUtils.format_date(ts.date2, precision),
                "count": limits.non_missing_count,
                "missing": limits.missing_count,
                "min": limits.min_value,
                "max": limits.max_value,
            }
            summaries.append(summary)
            self.logger.info(
                f"{summary['tsid']} ({summary['alias'] or 'no alias'}): "
                f"{summary['start']} to {summary['end']}, {summary['count']} values, "
                f"{summary['missing']} missing, units \"{summary['units']}\""
            )
        return summaries

    def check(self, path: str) -> bool:
        """Return True if the file is a DateValue file that reads without warnings."""
        if not self.reader.is_datevalue_file(path):
            self.logger.error(f"\"{path}\" is not a DateValue file")
            return False
        self.reader.read_time_series_list(path, strict=True)
        self.logger.info(f"\"{path}\" is a valid DateValue file")
        return True

    def convert(
        self,
        input_path: str,
        output_path: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        units: Optional[str] = None,
        delimiter: Optional[str] = None,
        precision: Optional[int] = None,
        version: Optional[str] = None
    ) -> int:
        """
        Read a DateValue file and write it again with new options.

        Returns:
            Number of time series written
        """
        with LoggerContext(self.logger, f"converting {input_path} to {output_path}"):
            series_list = self.reader.read_time_series_list(input_path, start=start, end=end)

            overrides: Dict[str, Any] = {
                "output_start": start,
                "output_end": end,
                "output_units": units,
                "output_comments": [f"Converted from {input_path}"],
            }
            if delimiter is not None:
                overrides["delimiter"] = delimiter
            if precision is not None:
                overrides["precision"] = precision
            if version is not None:
                overrides["version"] = FormatVersion.parse(version)

            options = self.config.write_options(**overrides)
            self.writer.write_time_series_list(series_list, output_path, options)
        return len(series_list)


def _parse_date_arg(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    date, _ = DateUtils.parse_date(value)
    return date


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Inspect, check and convert DateValue time series files"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    info_parser = subparsers.add_parser("info", help="Summarize the series in a file")
    info_parser.add_argument("path", help="DateValue file")

    check_parser = subparsers.add_parser("check", help="Validate a file")
    check_parser.add_argument("path", help="DateValue file")

    convert_parser = subparsers.add_parser("convert", help="Rewrite a file with new options")
    convert_parser.add_argument("input", help="Input DateValue file")
    convert_parser.add_argument("output", help="Output DateValue file")
    convert_parser.add_argument("--start", default=None, help="First date to write")
    convert_parser.add_argument("--end", default=None, help="Last date to write")
    convert_parser.add_argument("--units", default=None, help="Output units for all series")
    convert_parser.add_argument("--delimiter", default=None, help="Output delimiter")
    convert_parser.add_argument("--precision", type=int, default=None, help="Output decimals")
    convert_parser.add_argument("--format-version", default=None, help="Output format version")

    args = parser.parse_args(argv)

    try:
        app = DateValueApp(config_file=args.config)
        if args.command == "info":
            app.info(args.path)
        elif args.command == "check":
            return 0 if app.check(args.path) else 1
        elif args.command == "convert":
            app.convert(
                args.input,
                args.output,
                start=_parse_date_arg(args.start),
                end=_parse_date_arg(args.end),
                units=args.units,
                delimiter=args.delimiter,
                precision=args.precision,
                version=args.format_version,
            )
    except (TimeSeriesError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
