"""
Validation helpers for input files and MIME types
"""

import mimetypes
from pathlib import Path
from typing import Optional
import logging

from ..core.models import document_type_for

logger = logging.getLogger(__name__)

_EXTENSION_MIME_TYPES = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
    ".text": "text/plain",
    ".md": "text/plain",
}


def validate_file_path(file_path: str, check_exists: bool = True) -> bool:
    """
    Validate a file path

    Args:
        file_path: path to check
        check_exists: require the file to exist

    Returns:
        whether the path is usable
    """
    if not file_path or not isinstance(file_path, str):
        return False

    try:
        path = Path(file_path)
        if check_exists:
            return path.exists() and path.is_file()
        return path.parent.exists()
    except OSError as e:
        logger.debug(f"File path validation failed: {e}")
        return False


def guess_mime_type(filename: str) -> Optional[str]:
    """Map a file name to one of the recognized MIME types, None if unknown"""
    suffix = Path(filename).suffix.lower()
    if suffix in _EXTENSION_MIME_TYPES:
        return _EXTENSION_MIME_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(filename)
    return guessed


def validate_mime_type(mime_type: Optional[str]) -> bool:
    """Whether the MIME type, parameters aside, is one we can extract"""
    return document_type_for(mime_type) is not None
