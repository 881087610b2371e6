"""
PDF extractor built on PyPDF2, reading pages in concurrent batches
"""

import asyncio
import io
import logging
import threading
from typing import Any, Callable, List, Optional, Tuple

from PyPDF2 import PdfReader

from ..core.exceptions import ExtractionError
from ..core.models import DocumentType, PdfExtraction
from ..utils.thread_pool import run_blocking_io
from .base import BaseExtractor

logger = logging.getLogger(__name__)

PAGE_ERROR_PLACEHOLDER = "[Error extracting page {page_number}]"


def open_pdf_reader(data: bytes) -> PdfReader:
    """Open a PDF from memory, unlocking it when it only has an empty password"""
    reader = PdfReader(io.BytesIO(data))
    if reader.is_encrypted and not reader.decrypt(""):
        raise ExtractionError("document is password protected", "pdf")
    return reader


class PdfPageSource:
    """Page access for one document; reader calls are serialized"""

    def __init__(self, reader: Any):
        self._reader = reader
        self._lock = threading.Lock()

    @property
    def page_count(self) -> int:
        with self._lock:
            return len(self._reader.pages)

    def page_text(self, page_number: int) -> str:
        """Text of a 1-based page"""
        with self._lock:
            return self._reader.pages[page_number - 1].extract_text() or ""


class PdfExtractor(BaseExtractor):
    """
    Extracts page texts batch by batch

    Pages of one batch are scheduled together and gathered back in page
    order; a short pause separates batches. A page that fails is replaced by
    a placeholder instead of failing the document.
    """

    document_type = DocumentType.PDF

    def __init__(
        self,
        batch_size: int = 10,
        batch_delay: float = 0.1,
        reader_factory: Optional[Callable[[bytes], Any]] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.reader_factory = reader_factory or open_pdf_reader

    async def _extract(self, data: bytes) -> PdfExtraction:
        try:
            reader = await run_blocking_io(self.reader_factory, data)
            source = PdfPageSource(reader)
            page_count = await run_blocking_io(lambda: source.page_count)
        except ExtractionError:
            raise
        except Exception as e:
            logger.error(f"Error opening PDF: {e}")
            raise ExtractionError(str(e) or e.__class__.__name__, "pdf") from e

        logger.info(f"PDF loaded with {page_count} pages")

        pages: List[str] = []
        failed_pages: List[int] = []

        for batch_start in range(1, page_count + 1, self.batch_size):
            batch_end = min(batch_start + self.batch_size - 1, page_count)
            logger.debug(f"Processing PDF pages {batch_start} to {batch_end}")

            results = await asyncio.gather(*[
                self._extract_page(source, page_number)
                for page_number in range(batch_start, batch_end + 1)
            ])
            for page_number, (text, ok) in zip(range(batch_start, batch_end + 1), results):
                pages.append(text)
                if not ok:
                    failed_pages.append(page_number)

            if batch_end < page_count:
                await asyncio.sleep(self.batch_delay)

        if failed_pages:
            logger.warning(f"{len(failed_pages)} of {page_count} PDF pages could not be read: {failed_pages}")

        return PdfExtraction(pages=pages, failed_pages=failed_pages)

    async def _extract_page(self, source: PdfPageSource, page_number: int) -> Tuple[str, bool]:
        try:
            return await run_blocking_io(source.page_text, page_number), True
        except Exception as e:
            logger.error(f"Error extracting text from page {page_number}: {e}")
            return PAGE_ERROR_PLACEHOLDER.format(page_number=page_number), False
