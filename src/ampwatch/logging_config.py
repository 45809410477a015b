"""
Logging configuration for Ampwatch.

Every logger lives under the ``ampwatch`` namespace so a single call to
``setup_logging`` controls the whole package. The interactive dashboard
owns the terminal, so it logs to a file; CLI commands log to a Rich
console handler on stderr.
"""

import logging
import os
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "ampwatch"

DEFAULT_LOG_DIR = Path(os.environ.get("AMPWATCH_DIR", Path.home() / ".ampwatch"))

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CONSOLE_FORMAT = "%(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ampwatch namespace.

    Args:
        name: Component name, e.g. "discovery"

    Returns:
        Logger named "ampwatch.<name>"
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True,
    rich_console: bool = True,
) -> logging.Logger:
    """Configure the ampwatch logger hierarchy.

    Existing handlers on the root ampwatch logger are removed first, so
    calling this twice does not duplicate output.

    Args:
        level: Logging level for the ampwatch logger
        log_file: Optional path of a log file (parent dirs are created)
        console: Whether to log to stderr
        rich_console: Use Rich's handler for console output

    Returns:
        The root ampwatch logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = False

    if console:
        handler: logging.Handler
        if rich_console:
            from rich.logging import RichHandler
            handler = RichHandler(
                level=level,
                show_path=False,
                rich_tracebacks=True,
                markup=False,
            )
            handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        else:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def setup_tui_logging(
    log_file: Optional[Path] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Configure file-only logging for the interactive dashboard.

    Args:
        log_file: Log file path (defaults to ~/.ampwatch/ampwatch.log)
        level: Logging level

    Returns:
        The "ampwatch.tui" logger
    """
    if log_file is None:
        log_file = DEFAULT_LOG_DIR / "ampwatch.log"
    setup_logging(level=level, log_file=log_file, console=False)
    return get_logger("tui")


def setup_cli_logging(verbose: bool = False) -> logging.Logger:
    """Configure console logging for one-shot CLI commands."""
    setup_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        console=True,
        rich_console=True,
    )
    return get_logger("cli")
