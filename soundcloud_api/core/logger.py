"""
Logging configuration for soundcloud-api.

The library modules only ever call get_logger(__name__) and emit records;
nothing is configured on import, so applications embedding the library
see no output unless they set up logging themselves.

The command-line interface calls setup_logging(), which installs:
    - Console: colored, tqdm-compatible output (INFO, or DEBUG with --verbose)
    - log_full_{timestamp}.log: Complete log of all events (DEBUG and above)
    - log_errors_{timestamp}.log: Only ERROR and CRITICAL level messages

The log files are only written when a log directory is given.

Usage:
    from soundcloud_api.core.logger import setup_logging, get_logger

    setup_logging(log_dir, verbose=True)  # Call once at startup
    logger = get_logger(__name__)         # Get logger for each module

    logger.info("Uploading track")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


# Root of the package logger hierarchy
LOGGER_NAMESPACE = "soundcloud_api"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that adds colors to the level name on console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        return f"{color}{record.levelname}{Colors.RESET}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking tqdm progress bars.

    The upload command draws a progress bar while the multipart body is
    streamed. Writing log records straight to stderr would tear the bar,
    so records go through tqdm.write(), which prints above active bars.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level records.

    Used by the error log file handler to exclude DEBUG, INFO, and WARNING.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path | None = None, verbose: bool = False) -> None:
    """
    Configure logging for the soundcloud_api logger hierarchy.

    Call once at application startup. Calling again replaces the handlers
    installed by the previous call.

    Args:
        log_dir: Directory for log files. Created if missing.
                 If None, only the console handler is installed.
        verbose: Show DEBUG records (request lines, status codes) on the
                 console instead of INFO and above.

    Behavior:
        1. Set the package logger level to DEBUG and stop propagation
        2. Remove handlers installed earlier
        3. Add the console handler (TqdmLoggingHandler, colored)
        4. If log_dir is given, add the full and error-only file handlers
           named with this run's timestamp

    Thread Safety:
        This function is NOT thread-safe. Call it from the main thread
        before issuing requests from worker threads.
    """
    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    package_logger.setLevel(logging.DEBUG)
    package_logger.propagate = False

    _remove_handlers(package_logger)

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    package_logger.addHandler(console_handler)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(
        log_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    package_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    package_logger.addHandler(error_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.
              This creates a hierarchy like 'soundcloud_api.client.client'.

    Returns:
        logging.Logger: A logger in the package hierarchy.

    Example:
        logger = get_logger(__name__)
        logger.debug("GET https://api.soundcloud.com/me")
    """
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """
    Flush, close and remove the handlers installed by setup_logging().

    Typically called in a finally block at application exit.
    """
    _remove_handlers(logging.getLogger(LOGGER_NAMESPACE))


def _remove_handlers(target: logging.Logger) -> None:
    for handler in target.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except (OSError, ValueError):
            pass
        target.removeHandler(handler)
