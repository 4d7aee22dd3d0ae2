"""
Pytest configuration and shared fixtures for all tests.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add the src directory to sys.path so the package imports without installation
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from hydro_timeseries.models import TimeSeries, new_time_series  # noqa: E402

CONFIG_ENV_VARS = (
    "CONFIG_FILE",
    "DATEVALUE_DELIMITER",
    "DATEVALUE_PRECISION",
    "DATEVALUE_MISSING_VALUE",
    "DATEVALUE_VERSION",
    "DATEVALUE_STRICT",
    "TIMESERIES_TIMEZONE",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove environment variables that change configuration."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def fixtures_dir():
    """Get the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def daily_series() -> TimeSeries:
    """Allocated daily series for January 2020 with values 1..31."""
    ts = new_time_series("ABC.USGS.Streamflow.Day")
    ts.data_units = "CFS"
    ts.date1 = datetime(2020, 1, 1)
    ts.date2 = datetime(2020, 1, 31)
    ts.allocate_data_space()
    for day in range(1, 32):
        ts.set_data_value(datetime(2020, 1, day), float(day))
    return ts


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (reads and writes files)"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
