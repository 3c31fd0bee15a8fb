"""
Unit Tests for Logger Setup
===========================
Unit tests for the centralized logging configuration using loguru.

Test Coverage:
- Handler replacement
- Console sink in debug and deployed modes
- Rotating file sink outside debug mode
"""

import sys
from unittest.mock import patch, MagicMock

from app.core.logger_setup import configure_logger


def run_configure(log_level: str, debug: bool) -> MagicMock:
    with patch("app.core.logger_setup.logger") as mock_logger, patch(
        "app.core.logger_setup.settings"
    ) as mock_settings:
        mock_settings.log_level = log_level
        mock_settings.debug = debug
        mock_settings.log_file_path = "logs/carobar_dealer_backend_{time:YYYY-MM-DD}.log"
        mock_settings.log_rotation = "100 MB"
        mock_settings.log_retention = "14 days"
        configure_logger()
    return mock_logger


class TestLoggerSetup:
    """Test cases for logger configuration."""

    def test_configure_logger_removes_default_handler(self):
        mock_logger = run_configure("INFO", False)

        mock_logger.remove.assert_called_once_with()

    def test_stdout_handler_debug_mode(self):
        """Debug mode logs to stdout only, with diagnostics."""
        mock_logger = run_configure("DEBUG", True)

        mock_logger.add.assert_called_once()
        args, kwargs = mock_logger.add.call_args
        assert args[0] == sys.stdout
        assert kwargs["level"] == "DEBUG"
        assert kwargs["colorize"] is True
        assert kwargs["diagnose"] is True

        format_string = kwargs["format"]
        for field in ("{time:YYYY-MM-DD HH:mm:ss.SSS}", "{level: <8}", "{name}", "{line}", "{message}"):
            assert field in format_string

    def test_file_handler_outside_debug_mode(self):
        mock_logger = run_configure("WARNING", False)

        assert mock_logger.add.call_count == 2
        stdout_call, file_call = mock_logger.add.call_args_list
        assert stdout_call.kwargs["diagnose"] is False

        assert file_call.args[0] == "logs/carobar_dealer_backend_{time:YYYY-MM-DD}.log"
        assert file_call.kwargs["rotation"] == "100 MB"
        assert file_call.kwargs["retention"] == "14 days"
        assert file_call.kwargs["level"] == "WARNING"
        assert file_call.kwargs["diagnose"] is False
        assert file_call.kwargs["enqueue"] is True
        assert "<green>" not in file_call.kwargs["format"]

    def test_configuration_is_announced(self):
        mock_logger = run_configure("ERROR", True)

        mock_logger.info.assert_called_once_with("Logger configured with level: ERROR")
