"""
Utilities - logging, thread pool offloading, validation and markup helpers
"""

from .logger import setup_logging, get_logger, LoggerMixin
from .thread_pool import run_blocking_io, thread_pool
from .validators import validate_file_path, guess_mime_type, validate_mime_type
from .markup import strip_tags, markup_to_text

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerMixin",
    "run_blocking_io",
    "thread_pool",
    "validate_file_path",
    "guess_mime_type",
    "validate_mime_type",
    "strip_tags",
    "markup_to_text",
]
