"""
Core module - configuration, data models and exceptions
"""

from .config import AppConfig, app_config, validate_config
from .exceptions import (
    Doc2SlidesError,
    ExtractionError,
    UnsupportedFormatError,
    TransformError,
    TransformUnavailableError,
    SlideBuildError,
    DocumentNotFoundError,
    InvalidDocumentStateError,
    UploadRejectedError,
)
from .models import (
    SectionType,
    DocumentType,
    MIME_TYPES,
    Section,
    DocumentContent,
    PdfExtraction,
    DocxExtraction,
    TxtExtraction,
    Extraction,
    ProgressStage,
    ProgressRecord,
    DocumentStatus,
    UploadedDocument,
    ProcessingAck,
)

__all__ = [
    "AppConfig",
    "app_config",
    "validate_config",
    "Doc2SlidesError",
    "ExtractionError",
    "UnsupportedFormatError",
    "TransformError",
    "TransformUnavailableError",
    "SlideBuildError",
    "DocumentNotFoundError",
    "InvalidDocumentStateError",
    "UploadRejectedError",
    "SectionType",
    "DocumentType",
    "MIME_TYPES",
    "Section",
    "DocumentContent",
    "PdfExtraction",
    "DocxExtraction",
    "TxtExtraction",
    "Extraction",
    "ProgressStage",
    "ProgressRecord",
    "DocumentStatus",
    "UploadedDocument",
    "ProcessingAck",
]
