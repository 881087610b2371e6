"""
Plain-text extractor
"""

from ..core.exceptions import ExtractionError
from ..core.models import DocumentType, TxtExtraction
from .base import BaseExtractor


class TxtExtractor(BaseExtractor):
    """Decodes UTF-8 text; no conversion step"""

    document_type = DocumentType.TXT

    async def _extract(self, data: bytes) -> TxtExtraction:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ExtractionError(f"file is not valid UTF-8 text ({e.reason} at byte {e.start})", "txt") from e
        return TxtExtraction(text=text)
