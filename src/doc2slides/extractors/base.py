"""
Base extractor abstraction
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import ClassVar

from ..core.exceptions import ExtractionError
from ..core.models import DocumentType

logger = logging.getLogger(__name__)


class BaseExtractor(ABC):
    """
    Turns raw file bytes into a format-specific extraction result

    Subclasses implement _extract. Any failure surfaces as ExtractionError.
    """

    document_type: ClassVar[DocumentType]

    async def extract(self, data: bytes):
        """
        Extract the document body

        Args:
            data: raw file contents

        Returns:
            PdfExtraction, DocxExtraction or TxtExtraction
        """
        fmt = self.document_type.value
        if not data:
            raise ExtractionError("empty data stream", fmt)

        start_time = time.time()
        logger.info(f"Extracting {fmt.upper()} document ({len(data)} bytes)")
        result = await self._extract(data)
        logger.info(f"{fmt.upper()} extraction completed in {time.time() - start_time:.2f}s")
        return result

    @abstractmethod
    async def _extract(self, data: bytes):
        pass
