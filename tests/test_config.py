"""Tests for logging configuration."""

from __future__ import annotations

import logging

import pytest
from pytest_mock import MockerFixture

from envbind.config import LoggingConfig, configure_logging, load_logging_config
from envbind.errors import ConversionError
from envbind.sources import MappingSource


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_defaults(self) -> None:
        """Test default values."""
        config = load_logging_config(MappingSource())
        assert config.level == "WARNING"
        assert config.format == "%(levelname)s %(name)s: %(message)s"

    def test_from_environment(self) -> None:
        """Test values are read from the ENVBIND_ variables."""
        config = load_logging_config(
            MappingSource({"ENVBIND_LOG_LEVEL": "DEBUG", "ENVBIND_LOG_FORMAT": "%(message)s"})
        )
        assert config.level == "DEBUG"
        assert config.format == "%(message)s"

    def test_invalid_level(self) -> None:
        """Test unknown levels are rejected."""
        with pytest.raises(ConversionError, match="ENVBIND_LOG_LEVEL"):
            load_logging_config(MappingSource({"ENVBIND_LOG_LEVEL": "LOUD"}))

    def test_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the process environment is used by default."""
        monkeypatch.setenv("ENVBIND_LOG_LEVEL", "ERROR")
        assert load_logging_config().level == "ERROR"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_configure(self, mocker: MockerFixture) -> None:
        """Test the root logger is configured from the config."""
        basic_config = mocker.patch.object(logging, "basicConfig")
        configure_logging(LoggingConfig(level="INFO", format="%(message)s"))
        basic_config.assert_called_once_with(level="INFO", format="%(message)s", force=True)
