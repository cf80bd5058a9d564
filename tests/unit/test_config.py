"""Tests for settings and logging setup."""

import pytest
import structlog

from report_service.config import DEFAULT_CTR_PER_10_POINTS, Settings, get_settings
from report_service.logging import get_logger, setup_logging


class TestSettings:
    """Tests for Settings."""

    def test_test_environment(self) -> None:
        """The test suite runs with ENV=test."""
        settings = get_settings()

        assert settings.env == "test"
        assert settings.is_test is True
        assert settings.is_production is False

    def test_defaults(self) -> None:
        """Brand and ROI defaults."""
        settings = Settings()

        assert settings.default_brand_name == "LLM Boost"
        assert settings.default_brand_color == "#4f46e5"
        assert settings.roi_ctr_per_10_points == DEFAULT_CTR_PER_10_POINTS
        assert settings.report_job_timeout == 600

    def test_environment_override(self, monkeypatch) -> None:
        """Environment variables override defaults."""
        monkeypatch.setenv("ROI_CTR_PER_10_POINTS", "0.05")
        monkeypatch.setenv("DEFAULT_BRAND_NAME", "Agency")

        settings = Settings()

        assert settings.roi_ctr_per_10_points == 0.05
        assert settings.default_brand_name == "Agency"

    def test_cached(self) -> None:
        """get_settings returns the same instance until the cache is cleared."""
        assert get_settings() is get_settings()


class TestLogging:
    """Tests for logging setup."""

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        """Leave structlog unconfigured for other tests."""
        yield
        structlog.reset_defaults()

    def test_setup_logging(self) -> None:
        """Logging can be configured and used."""
        setup_logging()
        logger = get_logger("test")
        logger.info("test_event", key="value")

        assert structlog.is_configured()

    def test_development_renders_console(self) -> None:
        """Non-production logs use the console renderer."""
        setup_logging()
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)

    def test_production_renders_json(self, monkeypatch) -> None:
        """Production logs are JSON lines."""
        monkeypatch.setenv("ENV", "production")
        get_settings.cache_clear()
        setup_logging()

        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)
