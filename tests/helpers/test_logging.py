"""Tests for logging configuration."""

import logging

import pytest

from src.helpers.logging import get_logger


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_returns_logger(self) -> None:
        """Test that get_logger returns a logger instance."""
        logger = get_logger("test_module")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "test_module"

    def test_get_logger_same_name_returns_same_instance(self) -> None:
        """Test that getting logger with same name returns same instance."""
        logger1 = get_logger("test_same")
        logger2 = get_logger("test_same")

        assert logger1 is logger2

    @pytest.mark.parametrize(
        ("level_name", "level"),
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
        ],
    )
    def test_get_logger_with_level(self, level_name: str, level: int) -> None:
        """Test get_logger applies each supported level."""
        logger = get_logger(f"test_level_{level_name}", log_level=level_name)

        assert logger.level == level

    def test_get_logger_default_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test get_logger defaults to INFO."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        logger = get_logger("test_default")

        assert logger.level == logging.INFO

    def test_get_logger_level_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test LOG_LEVEL is used when no level is given."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        logger = get_logger("test_env_level")

        assert logger.level == logging.DEBUG

    def test_get_logger_invalid_level_raises(self) -> None:
        """Test that invalid log level raises ValueError."""
        with pytest.raises(ValueError, match="Invalid log level"):
            get_logger("test_invalid", log_level="INVALID")

    def test_get_logger_invalid_handler_raises(self) -> None:
        """Test that invalid handler raises ValueError."""
        with pytest.raises(ValueError, match="Invalid handler"):
            get_logger("test_invalid_handler", log_handler="file")

    def test_get_logger_with_color(self) -> None:
        """Test colored output uses a colorlog formatter."""
        import colorlog

        logger = get_logger("test_color", log_color=True)

        assert any(
            isinstance(handler.formatter, colorlog.ColoredFormatter)
            for handler in logger.handlers
        )

    def test_get_logger_without_color(self) -> None:
        """Test plain output uses a standard formatter."""
        import colorlog

        logger = get_logger("test_plain", log_color=False)

        assert logger.handlers
        assert not any(
            isinstance(handler.formatter, colorlog.ColoredFormatter)
            for handler in logger.handlers
        )
