"""
Unit Tests for Centralized Logging.

Tests the logging configuration, structured fields, and source handling.
"""

import logging
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from modules.backend.core.config_schema import (
    ConsoleHandlerSchema,
    FileHandlerSchema,
    HandlersSchema,
    LoggingSchema,
)


class TestValidSources:
    """Tests for VALID_SOURCES constant."""

    def test_valid_sources_contains_background_contexts(self):
        """Should recognize every non-HTTP context that logs explicitly."""
        from modules.backend.core.logging import VALID_SOURCES

        for source in ("tasks", "events", "realtime", "cli", "web"):
            assert source in VALID_SOURCES

    def test_valid_sources_is_frozenset(self):
        """Should be a frozenset (immutable)."""
        from modules.backend.core.logging import VALID_SOURCES

        assert isinstance(VALID_SOURCES, frozenset)


class TestSetupLogging:
    """Tests for setup_logging function."""

    @pytest.fixture
    def logging_config(self):
        """Real LoggingSchema with file logging on."""
        return LoggingSchema(
            level="INFO",
            format="json",
            handlers=HandlersSchema(
                console=ConsoleHandlerSchema(enabled=True),
                file=FileHandlerSchema(
                    enabled=True,
                    path="logs/system.jsonl",
                    max_bytes=10485760,
                    backup_count=5,
                ),
            ),
        )

    @pytest.fixture
    def _stub_config(self, logging_config):
        app_config = SimpleNamespace(logging=logging_config)
        with patch("modules.backend.core.config.get_app_config", return_value=app_config):
            yield

    @pytest.mark.usefixtures("_stub_config")
    def test_setup_logging_configures_root_logger(self):
        """Should configure the root logger with correct level."""
        from modules.backend.core.logging import setup_logging

        setup_logging(level="DEBUG", format_type="json", enable_file_logging=False)

        assert logging.getLogger().level == logging.DEBUG

    @pytest.mark.usefixtures("_stub_config")
    def test_setup_logging_with_file_logging_disabled(self):
        """Should work without file logging."""
        from modules.backend.core.logging import setup_logging

        setup_logging(level="INFO", format_type="console", enable_file_logging=False)

        handler_types = [type(h).__name__ for h in logging.getLogger().handlers]
        assert "StreamHandler" in handler_types
        assert "RotatingFileHandler" not in handler_types

    @pytest.mark.usefixtures("_stub_config")
    def test_setup_logging_with_file_logging_enabled(self, tmp_path):
        """Should create a single RotatingFileHandler for the JSONL file."""
        from modules.backend.core.logging import setup_logging

        log_file = tmp_path / "logs" / "system.jsonl"

        with patch("modules.backend.core.logging._resolve_log_path", return_value=log_file):
            setup_logging(level="INFO", format_type="json", enable_file_logging=True)

        root_logger = logging.getLogger()
        handler_types = [type(h).__name__ for h in root_logger.handlers]
        assert handler_types.count("RotatingFileHandler") == 1
        assert log_file.parent.exists()

        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)

    @pytest.mark.usefixtures("_stub_config")
    def test_setup_logging_uses_config_defaults(self):
        """Should use values from logging.yaml when not overridden."""
        from modules.backend.core.logging import setup_logging

        setup_logging(enable_file_logging=False)

        assert logging.getLogger().level == logging.INFO

    @pytest.mark.usefixtures("_stub_config")
    def test_setup_logging_replaces_existing_handlers(self):
        """Calling setup twice should not stack console handlers."""
        from modules.backend.core.logging import setup_logging

        setup_logging(enable_file_logging=False)
        setup_logging(enable_file_logging=False)

        stream_handlers = [
            h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler
        ]
        assert len(stream_handlers) == 1


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_returns_structlog_logger(self):
        """Should return a structlog logger."""
        from modules.backend.core.logging import get_logger

        logger = get_logger("test.module")
        assert hasattr(logger, "bind")
        assert hasattr(logger, "info")
        assert hasattr(logger, "error")


class TestLogWithSource:
    """Tests for log_with_source helper function."""

    def test_log_with_source_adds_source_field(self):
        """Should add source field to log call."""
        from modules.backend.core.logging import get_logger, log_with_source

        logger = get_logger("test")
        mock_info = MagicMock()

        with patch.object(logger, "info", mock_info):
            log_with_source(logger, "tasks", "info", "Test message", extra_field="value")

            mock_info.assert_called_once_with(
                "Test message",
                source="tasks",
                extra_field="value",
            )

    def test_log_with_source_supports_different_levels(self):
        """Should support different log levels."""
        from modules.backend.core.logging import get_logger, log_with_source

        logger = get_logger("test")

        for level in ["debug", "info", "warning", "error", "critical"]:
            mock_method = MagicMock()
            with patch.object(logger, level, mock_method):
                log_with_source(logger, "web", level, f"Test {level}")
                mock_method.assert_called_once()

    def test_log_with_source_raises_on_invalid_level(self):
        """Should raise AttributeError for invalid log levels (no fallback)."""
        from modules.backend.core.logging import get_logger, log_with_source

        logger = get_logger("test")

        with pytest.raises(AttributeError):
            log_with_source(logger, "web", "nonexistent_level", "Test")


class TestResolveLogPath:
    """Tests for _resolve_log_path function."""

    def test_resolve_log_path_relative_to_project_root(self, tmp_path):
        """Should resolve path relative to project root."""
        from modules.backend.core.logging import _resolve_log_path

        with patch("modules.backend.core.logging.find_project_root", return_value=tmp_path):
            result = _resolve_log_path("logs/system.jsonl")
            assert result == tmp_path / "logs" / "system.jsonl"
