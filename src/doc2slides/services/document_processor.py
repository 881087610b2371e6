"""
Document processor: raw bytes -> extraction -> segmented DocumentContent
"""

import logging
import time
from pathlib import Path
from typing import Optional, Tuple

from ..core.config import AppConfig, app_config
from ..core.exceptions import UnsupportedFormatError
from ..core.models import DocumentContent
from ..extractors.registry import get_extractor
from ..segmentation.classifier import ContentClassifier
from ..segmentation.segmenter import segment_document
from ..utils.thread_pool import run_blocking_io
from ..utils.validators import guess_mime_type, validate_mime_type

logger = logging.getLogger(__name__)


class DocumentProcessor:
    """Runs the extractor and segmenter for a document's declared type"""

    def __init__(self, config: Optional[AppConfig] = None, classifier: Optional[ContentClassifier] = None):
        self.config = config or app_config
        self.classifier = classifier

    async def process(self, data: bytes, mime_type: str) -> DocumentContent:
        """
        Extract and segment a document

        Args:
            data: raw file bytes
            mime_type: declared MIME type

        Returns:
            DocumentContent with at least one section

        Raises:
            ExtractionError: unsupported type, empty or unreadable data
        """
        start_time = time.time()
        extractor = get_extractor(mime_type, self.config)
        extraction = await extractor.extract(data)
        content = segment_document(extraction, self.classifier)
        logger.info(
            f"{content.type.value.upper()} processing completed in {time.time() - start_time:.2f}s, "
            f"found {len(content.sections)} sections"
        )
        return content

    async def process_file(self, file_path: str, mime_type: Optional[str] = None) -> DocumentContent:
        """Process a file from disk, guessing the MIME type from its name when not given"""
        mime_type = mime_type or guess_mime_type(file_path)
        if not validate_mime_type(mime_type):
            raise UnsupportedFormatError(mime_type or Path(file_path).suffix)
        data = await run_blocking_io(Path(file_path).read_bytes)
        return await self.process(data, mime_type)

    def validate_file(self, filename: str, file_size: int, mime_type: Optional[str] = None) -> Tuple[bool, str]:
        """Check type and size before accepting an upload"""
        mime_type = mime_type or guess_mime_type(filename)
        if not validate_mime_type(mime_type):
            return False, f"Unsupported file type: {mime_type or Path(filename).suffix or 'unknown'}"
        if file_size <= 0:
            return False, "File is empty"
        max_size = self.config.max_upload_size_bytes
        if file_size > max_size:
            return False, (
                f"File exceeds the size limit ({self.config.max_upload_size_mb}MB), "
                f"got {file_size / 1024 / 1024:.1f}MB"
            )
        return True, "OK"
