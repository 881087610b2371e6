"""
doc2slides

Turns PDF, DOCX and TXT documents into titled slide sections, optionally
refined by a language model, and builds presentations from them.
"""

__version__ = "0.1.0"
__description__ = "Document to slide-section converter with LLM enhancement"

from .core.config import AppConfig, app_config
from .core.models import Section, SectionType, DocumentContent, DocumentType
from .services.document_processor import DocumentProcessor
from .services.enhancement import EnhancementOrchestrator
from .services.document_service import DocumentService

__all__ = [
    "AppConfig",
    "app_config",
    "Section",
    "SectionType",
    "DocumentContent",
    "DocumentType",
    "DocumentProcessor",
    "EnhancementOrchestrator",
    "DocumentService",
    "__version__",
    "__description__",
]
