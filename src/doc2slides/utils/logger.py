"""
Logging helpers - configure and hand out application loggers
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_PREFIX = "doc2slides"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS: Dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "openai": logging.WARNING,
    "PyPDF2": logging.ERROR,
}


def _console_handler(rich_logging: bool, format_string: str) -> logging.Handler:
    if rich_logging:
        return RichHandler(
            console=Console(stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string))
    return handler


def _file_handler(log_file: str, format_string: str) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(format_string))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    rich_logging: bool = True,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Route all log records to stderr and, optionally, a file

    Args:
        level: log level name, unknown names fall back to INFO
        log_file: file that receives a plain-text copy of every record
        rich_logging: render console records with rich
        format_string: record format for the plain handlers

    Returns:
        the root logger
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    format_string = format_string or DEFAULT_FORMAT

    handlers: List[logging.Handler] = [_console_handler(rich_logging, format_string)]
    if log_file:
        handlers.append(_file_handler(log_file, format_string))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in handlers:
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(quiet_level, numeric_level))

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LoggerMixin:
    """Per-class logger under the doc2slides namespace"""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(f"{LOGGER_PREFIX}.{type(self).__name__}")
        return self._logger
