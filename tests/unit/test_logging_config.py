"""Tests for logging_config module."""

import logging

import pytest
from rich.logging import RichHandler

from ampwatch.logging_config import (
    DEFAULT_LOG_DIR,
    get_logger,
    setup_cli_logging,
    setup_logging,
    setup_tui_logging,
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration after each test."""
    yield
    logger = logging.getLogger("ampwatch")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)


class TestGetLogger:
    """Tests for get_logger function."""

    def test_logger_name_prefixed(self):
        logger = get_logger("discovery")
        assert logger.name == "ampwatch.discovery"

    def test_same_name_returns_same_logger(self):
        assert get_logger("same") is get_logger("same")

    def test_module_loggers_share_namespace(self):
        # Modules using logging.getLogger(__name__) land under the same root
        assert logging.getLogger("ampwatch.instance").parent is logging.getLogger("ampwatch")


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_sets_level(self):
        setup_logging(level=logging.DEBUG, console=False)
        assert logging.getLogger("ampwatch").level == logging.DEBUG

    def test_rich_console_handler(self):
        setup_logging(level=logging.INFO, console=True)
        handlers = logging.getLogger("ampwatch").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)

    def test_plain_console_handler(self):
        setup_logging(level=logging.INFO, console=True, rich_console=False)
        handlers = logging.getLogger("ampwatch").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_no_console_handler_when_disabled(self):
        setup_logging(level=logging.INFO, console=False)
        assert logging.getLogger("ampwatch").handlers == []

    def test_file_handler_creates_directory(self, tmp_path):
        log_file = tmp_path / "nested" / "dir" / "ampwatch.log"
        setup_logging(level=logging.INFO, log_file=log_file, console=False)

        handlers = logging.getLogger("ampwatch").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.FileHandler)
        assert log_file.parent.exists()

    def test_writes_to_file(self, tmp_path):
        log_file = tmp_path / "ampwatch.log"
        setup_logging(level=logging.INFO, log_file=log_file, console=False)

        get_logger("discovery").info("found 2 instances")
        for handler in logging.getLogger("ampwatch").handlers:
            handler.flush()

        content = log_file.read_text()
        assert "ampwatch.discovery" in content
        assert "found 2 instances" in content

    def test_clears_existing_handlers(self):
        setup_logging(level=logging.INFO, console=True)
        setup_logging(level=logging.INFO, console=True)
        assert len(logging.getLogger("ampwatch").handlers) == 1

    def test_does_not_propagate(self):
        setup_logging(console=False)
        assert logging.getLogger("ampwatch").propagate is False


class TestSetupTuiLogging:
    """Tests for setup_tui_logging function."""

    def test_file_only(self, tmp_path):
        log_file = tmp_path / "ampwatch.log"
        logger = setup_tui_logging(log_file=log_file)

        assert logger.name == "ampwatch.tui"
        handlers = logging.getLogger("ampwatch").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.FileHandler)

    def test_default_log_file(self, monkeypatch, tmp_path):
        captured = {}

        def fake_setup(level, log_file, console):
            captured.update(level=level, log_file=log_file, console=console)

        monkeypatch.setattr("ampwatch.logging_config.setup_logging", fake_setup)
        setup_tui_logging()

        assert captured["log_file"] == DEFAULT_LOG_DIR / "ampwatch.log"
        assert captured["console"] is False


class TestSetupCliLogging:
    """Tests for setup_cli_logging function."""

    def test_returns_logger(self):
        assert setup_cli_logging().name == "ampwatch.cli"

    def test_uses_warning_level(self):
        setup_cli_logging()
        assert logging.getLogger("ampwatch").level == logging.WARNING

    def test_verbose_uses_debug(self):
        setup_cli_logging(verbose=True)
        assert logging.getLogger("ampwatch").level == logging.DEBUG
