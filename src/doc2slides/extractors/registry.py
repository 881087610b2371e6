"""
MIME type registry for extractors
"""

from typing import Dict, Optional, Type

from ..core.config import AppConfig, app_config
from ..core.exceptions import UnsupportedFormatError
from ..core.models import DocumentType, document_type_for
from .base import BaseExtractor
from .docx_extractor import DocxExtractor
from .pdf_extractor import PdfExtractor
from .txt_extractor import TxtExtractor

EXTRACTORS: Dict[DocumentType, Type[BaseExtractor]] = {
    DocumentType.PDF: PdfExtractor,
    DocumentType.DOCX: DocxExtractor,
    DocumentType.TXT: TxtExtractor,
}


def resolve_document_type(mime_type: str) -> DocumentType:
    """Map a declared MIME type to a DocumentType or raise UnsupportedFormatError"""
    document_type = document_type_for(mime_type)
    if document_type is None:
        raise UnsupportedFormatError(mime_type)
    return document_type


def get_extractor(mime_type: str, config: Optional[AppConfig] = None) -> BaseExtractor:
    """Build the extractor for a MIME type, configured from settings"""
    config = config or app_config
    document_type = resolve_document_type(mime_type)

    if document_type == DocumentType.PDF:
        return PdfExtractor(batch_size=config.pdf_batch_size, batch_delay=config.pdf_batch_delay)
    if document_type == DocumentType.DOCX:
        return DocxExtractor(timeout=config.docx_conversion_timeout)
    return EXTRACTORS[document_type]()
