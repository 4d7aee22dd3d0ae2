"""
Configuration module for the hydro time series package.

Loads configuration from an optional JSON file and environment variables.
"""

import copy
import json
import os
from typing import Dict, Any, List, Optional
from pathlib import Path

from . import constants
from .date_utils import DateUtils
from .format_version import FormatVersion
from ..exceptions import StructuralParseError

DEFAULT_CONFIG: Dict[str, Any] = {
    "datevalue": {
        "delimiter": constants.DEFAULT_DELIMITER,
        "precision": constants.DEFAULT_PRECISION,
        "missing_value": None,
        "version": constants.CURRENT_FORMAT_VERSION,
        "strict": True,
        "include_properties": [],
        "write_data_flag_descriptions": False,
    },
    "timeseries": {
        "timezone": constants.DEFAULT_TIMEZONE,
        "missing_value": constants.DEFAULT_MISSING_VALUE,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    """Configuration manager for reading and writing time series."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration JSON file. If None, uses the
                        CONFIG_FILE env var; without either, defaults are used
        """
        self.config_file = config_file or os.getenv("CONFIG_FILE")
        self.config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._load_config()
        self._override_from_env()
        self._validate_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file and merge it over the defaults."""
        if not self.config_file:
            return

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        with open(config_path, "r", encoding="utf-8") as f:
            loaded = json.load(f)

        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(self.config.get(section), dict):
                self.config[section].update(values)
            else:
                self.config[section] = values

    def _override_from_env(self) -> None:
        """Override configuration with environment variables."""
        datevalue = self.config["datevalue"]

        if os.getenv("DATEVALUE_DELIMITER") is not None:
            datevalue["delimiter"] = os.getenv("DATEVALUE_DELIMITER")

        if os.getenv("DATEVALUE_PRECISION"):
            try:
                datevalue["precision"] = int(os.getenv("DATEVALUE_PRECISION"))
            except ValueError:
                raise ValueError(
                    f"DATEVALUE_PRECISION must be an integer: {os.getenv('DATEVALUE_PRECISION')}"
                )

        if os.getenv("DATEVALUE_MISSING_VALUE"):
            datevalue["missing_value"] = os.getenv("DATEVALUE_MISSING_VALUE")

        if os.getenv("DATEVALUE_VERSION"):
            datevalue["version"] = os.getenv("DATEVALUE_VERSION")

        if os.getenv("DATEVALUE_STRICT"):
            datevalue["strict"] = os.getenv("DATEVALUE_STRICT").lower() in ("1", "true", "yes")

        if os.getenv("TIMESERIES_TIMEZONE"):
            self.config["timeseries"]["timezone"] = os.getenv("TIMESERIES_TIMEZONE")

        if os.getenv("LOG_LEVEL"):
            self.config["logging"]["level"] = os.getenv("LOG_LEVEL")

    def _validate_config(self) -> None:
        """Validate configuration values."""
        datevalue = self.config["datevalue"]

        if not isinstance(datevalue.get("delimiter"), str) or datevalue["delimiter"] == "":
            raise ValueError("datevalue.delimiter must be a non-empty string")

        precision = datevalue.get("precision")
        if not isinstance(precision, int) or precision < 0:
            raise ValueError(f"datevalue.precision must be a non-negative integer: {precision}")

        try:
            FormatVersion.parse(datevalue.get("version"))
        except StructuralParseError as e:
            raise ValueError(str(e))

        if not isinstance(datevalue.get("include_properties"), list):
            raise ValueError("datevalue.include_properties must be a list of patterns")

        DateUtils.parse_timezone(self.timezone)

        level = str(self.config["logging"].get("level", "")).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"logging.level must be one of {', '.join(VALID_LOG_LEVELS)}: {level}"
            )

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'datevalue.delimiter')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    @property
    def delimiter(self) -> str:
        return self.get("datevalue.delimiter", constants.DEFAULT_DELIMITER)

    @property
    def precision(self) -> int:
        return self.get("datevalue.precision", constants.DEFAULT_PRECISION)

    @property
    def missing_value_literal(self) -> Optional[str]:
        value = self.get("datevalue.missing_value")
        return None if value is None else str(value)

    @property
    def format_version(self) -> FormatVersion:
        return FormatVersion.parse(self.get("datevalue.version", constants.CURRENT_FORMAT_VERSION))

    @property
    def strict_read(self) -> bool:
        return bool(self.get("datevalue.strict", True))

    @property
    def include_properties(self) -> List[str]:
        return list(self.get("datevalue.include_properties", []))

    @property
    def write_data_flag_descriptions(self) -> bool:
        return bool(self.get("datevalue.write_data_flag_descriptions", False))

    @property
    def timezone(self) -> str:
        return self.get("timeseries.timezone", constants.DEFAULT_TIMEZONE)

    @property
    def default_missing_value(self) -> float:
        return float(self.get("timeseries.missing_value", constants.DEFAULT_MISSING_VALUE))

    @property
    def log_level(self) -> str:
        return str(self.get("logging.level", "INFO")).upper()

    @property
    def log_file(self) -> Optional[str]:
        return self.get("logging.file")

    def write_options(self, **overrides: Any):
        """
        Build DateValue write options from the configuration.

        Args:
            **overrides: WriteOptions fields that replace configured values

        Returns:
            WriteOptions instance
        """
        from ..datevalue.writer import WriteOptions

        values: Dict[str, Any] = {
            "delimiter": self.delimiter,
            "precision": self.precision,
            "missing_value": self.missing_value_literal,
            "version": self.format_version,
            "include_properties": self.include_properties or None,
            "write_data_flag_descriptions": self.write_data_flag_descriptions,
        }
        values.update(overrides)
        return WriteOptions(**values)

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(config_file='{self.config_file}', version={self.format_version})"
