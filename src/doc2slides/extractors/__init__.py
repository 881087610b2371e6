"""
Extractors module - raw file bytes to format-specific extraction results
"""

from .base import BaseExtractor
from .pdf_extractor import PdfExtractor, PdfPageSource, open_pdf_reader
from .docx_extractor import DocxExtractor, convert_docx_to_html
from .txt_extractor import TxtExtractor
from .registry import get_extractor, resolve_document_type

__all__ = [
    "BaseExtractor",
    "PdfExtractor",
    "PdfPageSource",
    "open_pdf_reader",
    "DocxExtractor",
    "convert_docx_to_html",
    "TxtExtractor",
    "get_extractor",
    "resolve_document_type",
]
