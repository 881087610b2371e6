"""
Exception taxonomy for doc2slides
"""

from typing import Optional


class Doc2SlidesError(Exception):
    """Base class for all doc2slides errors"""


class ExtractionError(Doc2SlidesError):
    """A document could not be parsed (corrupt, empty, undecodable or timed out)"""

    def __init__(self, message: str, format: Optional[str] = None):
        self.format = format
        self.reason = message
        prefix = f"{format.upper()} " if format else ""
        super().__init__(f"Failed to process {prefix}file: {message}")


class UnsupportedFormatError(ExtractionError):
    """The declared MIME type is not one of the recognized document types"""

    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        super().__init__(f"unsupported file type '{mime_type}'")


class TransformError(Doc2SlidesError):
    """The text transform failed, timed out or returned nothing usable"""


class TransformUnavailableError(TransformError):
    """No text transform is configured"""


class SlideBuildError(Doc2SlidesError):
    """The slide-deck sink could not build a presentation"""


class DocumentNotFoundError(Doc2SlidesError):
    """No document is registered under the given identifier"""

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")


class InvalidDocumentStateError(Doc2SlidesError):
    """The requested step is not allowed in the document's current status"""


class UploadRejectedError(Doc2SlidesError):
    """An upload was refused before reaching storage (empty or too large)"""
