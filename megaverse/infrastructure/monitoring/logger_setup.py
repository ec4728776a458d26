"""Logging configuration for the megaverse CLI.

Progress (batch completion, configuration notes) goes to stdout. Warnings and
errors, such as a goal map that could not be fetched or a failed placement,
go to stderr so they can be separated from the progress stream.
"""

import logging
import sys
from typing import Optional

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
ERROR_CHANNEL_LEVEL = logging.WARNING


class _BelowLevelFilter(logging.Filter):
    """Passes only records strictly below `level`."""

    def __init__(self, level: int) -> None:
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None
) -> None:
    """Configures the root logger with a progress stream and an error stream.

    Args:
        log_level: The minimum logging level (e.g., logging.DEBUG, logging.INFO).
        log_format: The format string for log messages.
        log_file: Optional path to a file that receives every record.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    progress_handler = logging.StreamHandler(sys.stdout)
    progress_handler.setLevel(log_level)
    progress_handler.addFilter(_BelowLevelFilter(ERROR_CHANNEL_LEVEL))
    progress_handler.setFormatter(formatter)
    root_logger.addHandler(progress_handler)

    error_handler = logging.StreamHandler(sys.stderr)
    error_handler.setLevel(max(log_level, ERROR_CHANNEL_LEVEL))
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            logger = logging.getLogger(__name__)
            logger.error(f"Failed to set up file logging to {log_file}: {e}")
        else:
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    logging.getLogger(__name__).debug(
        f"Logging configured. Level={logging.getLevelName(log_level)}, file={log_file or '-'}"
    )
