"""Custom logging utilities for the hglkit command-line tools."""
# src/hglkit/logging_utils.py

import logging
import sys
import time
from logging import FileHandler
from pathlib import Path

DEFAULT_LOG_FILE = Path("hglkit-debug.log")


class _UTCFormatter(logging.Formatter):
    """Formats timestamps in UTC with 6-digit microseconds and a 'Z' suffix."""

    converter = time.gmtime

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the time with 6-digit microseconds and a 'Z' for UTC."""
        ct = self.converter(record.created)
        s = time.strftime(datefmt, ct) if datefmt else time.strftime(self.default_time_format, ct)
        microseconds = int((record.created - int(record.created)) * 1_000_000)
        return f"{s}.{microseconds:06d}Z"


# Console Log Formatter
class ConsoleFormatter(_UTCFormatter):
    """A compact formatter for console output."""

    def __init__(self, version: str) -> None:
        """
        Initialize the formatter with the application version.

        Args:
            version: The hglkit version.

        """
        super().__init__(
            fmt=f"%(asctime)s | hglkit - {version} | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


# File Log Formatter
class FileFormatter(_UTCFormatter):
    """A detailed formatter for debug log files, aimed at spec developers."""

    def __init__(self) -> None:
        """Initialize the detailed file formatter."""
        super().__init__(
            fmt="%(asctime)s | %(name)-20s | %(funcName)-20s:%(lineno)-4d | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


def setup_logging(version: str, *, debug: bool = False, log_file: Path | None = None) -> None:
    """
    Configure the root logger for hglkit.

    Logs go to stderr because stdout carries transcriptions and test reports.

    1.  Console: INFO by default, DEBUG if debug=True.
    2.  File (DEBUG): detailed logs written to `log_file` (or
        'hglkit-debug.log' in the working directory) when debug=True.

    Args:
        version: The application version, included in console logs.
        debug: If True, enables file logging and sets console level to DEBUG.
        log_file: Where to write the debug log.

    """
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    level = logging.DEBUG if debug else logging.INFO
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(ConsoleFormatter(version))
    root_logger.addHandler(console_handler)

    if debug:
        log_file_path = log_file or DEFAULT_LOG_FILE
        try:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = FileHandler(log_file_path, mode="w", encoding="utf-8")
        except OSError:
            # Console logging still works without the file.
            root_logger.exception("Failed to create debug log file. Continuing with console logging only.")
            return
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(FileFormatter())
        root_logger.addHandler(file_handler)
        root_logger.info("Debug mode enabled. Detailed logs will be written to %s", log_file_path)
