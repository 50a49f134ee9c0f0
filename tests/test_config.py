"""Tests for configuration and logging setup."""

import structlog

from py_delaunay.config import Settings, configure_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        """Test default values."""
        config = Settings()

        assert config.log_level == "INFO"
        assert config.joggle_degenerate is True
        assert config.qhull_options is None
        assert config.relax_iterations == 3

    def test_environment_override(self, monkeypatch):
        """Test that prefixed environment variables override defaults."""
        monkeypatch.setenv("PY_DELAUNAY_JOGGLE_DEGENERATE", "false")
        monkeypatch.setenv("PY_DELAUNAY_QHULL_OPTIONS", "Qbb Qc Qz")
        monkeypatch.setenv("PY_DELAUNAY_RELAX_ITERATIONS", "7")

        config = Settings()

        assert config.joggle_degenerate is False
        assert config.qhull_options == "Qbb Qc Qz"
        assert config.relax_iterations == 7


class TestLogging:
    """Test structlog configuration."""

    def test_json_renderer(self):
        """Test that the JSON format configures a JSON renderer."""
        configure_logging(Settings(log_format="json", log_level="DEBUG"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        structlog.reset_defaults()

    def test_console_renderer(self):
        """Test that the console format configures the dev renderer."""
        configure_logging(Settings(log_format="console"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        structlog.reset_defaults()
