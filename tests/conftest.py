"""Pytest configuration and fixtures."""

import os

import pytest

# Set test environment before any app code runs
os.environ["ENV"] = "test"
os.environ["REDIS_URL"] = "redis://localhost:6379/0"

from report_service.config import get_settings  # noqa: E402
from report_worker.reports.contract import ReportData  # noqa: E402
from tests.fixtures.reports import (  # noqa: E402
    make_minimal_inputs,
    make_raw_inputs,
    make_report_data,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test sees settings built from the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def raw_inputs() -> dict:
    """Complete raw inputs payload."""
    return make_raw_inputs()


@pytest.fixture
def minimal_inputs() -> dict:
    """Raw inputs with every optional collaborator missing."""
    return make_minimal_inputs()


@pytest.fixture
def report_data() -> ReportData:
    """ReportData aggregated from the complete payload."""
    return make_report_data()
