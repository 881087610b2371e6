"""
Document lifecycle service: upload -> process -> (enhance in background) -> convert
"""

from datetime import datetime
from typing import List, Optional

from ..ai.base import TextTransform
from ..ai.providers import create_text_transform
from ..core.config import AppConfig, app_config
from ..core.exceptions import (
    DocumentNotFoundError,
    ExtractionError,
    InvalidDocumentStateError,
    SlideBuildError,
    UploadRejectedError,
)
from ..core.models import (
    DocumentContent,
    DocumentStatus,
    ProcessingAck,
    ProgressRecord,
    UploadedDocument,
)
from ..extractors.registry import resolve_document_type
from ..slides import create_slide_sink
from ..slides.base import SlideSink
from ..utils.logger import LoggerMixin
from .background_tasks import BackgroundTaskManager, TaskStatus, get_task_manager
from .document_processor import DocumentProcessor
from .enhancement import EnhancementOrchestrator
from .progress_tracker import ProgressTracker
from .store import KeyValueStore, MemoryStore
from .upload_storage import LocalUploadStorage, UploadStorage


class DocumentService(LoggerMixin):
    """
    Per-document state machine

    uploaded -> processing -> processed | error, processed -> converted.
    Extraction runs inside process(); enhancement continues as a background
    task and the document becomes processed when it finishes.
    """

    ENHANCE_TASK_TYPE = "enhance"

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        storage: Optional[UploadStorage] = None,
        documents: Optional[KeyValueStore[UploadedDocument]] = None,
        processor: Optional[DocumentProcessor] = None,
        transform: Optional[TextTransform] = None,
        progress: Optional[ProgressTracker] = None,
        sink: Optional[SlideSink] = None,
        task_manager: Optional[BackgroundTaskManager] = None,
    ):
        self.config = config or app_config
        self.storage = storage or LocalUploadStorage(self.config.upload_dir)
        self.documents = documents if documents is not None else MemoryStore()
        self.processor = processor or DocumentProcessor(self.config)
        self.progress = progress or ProgressTracker()
        self.orchestrator = EnhancementOrchestrator(
            transform or create_text_transform(self.config),
            progress=self.progress,
            config=self.config,
        )
        self.sink = sink or create_slide_sink(self.config)
        self.task_manager = task_manager or get_task_manager()

    def _task_id(self, document_id: str) -> str:
        return f"{self.ENHANCE_TASK_TYPE}-{document_id}"

    def get_document(self, document_id: str) -> UploadedDocument:
        document = self.documents.get(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def list_documents(self) -> List[UploadedDocument]:
        return sorted(self.documents.values(), key=lambda d: d.uploaded_at)

    def get_content(self, document_id: str) -> Optional[DocumentContent]:
        return self.get_document(document_id).content

    def get_progress(self, document_id: str) -> Optional[ProgressRecord]:
        self.get_document(document_id)
        return self.progress.get(document_id)

    def _save(self, document: UploadedDocument):
        self.documents.set(document.id, document)

    async def upload(self, data: bytes, filename: str, mime_type: str) -> UploadedDocument:
        """
        Validate and store an upload

        Raises:
            UnsupportedFormatError: MIME type not recognized
            UploadRejectedError: empty or larger than the configured limit
        """
        resolve_document_type(mime_type)
        if not data:
            raise UploadRejectedError("Uploaded file is empty")
        if len(data) > self.config.max_upload_size_bytes:
            raise UploadRejectedError(
                f"File exceeds the size limit ({self.config.max_upload_size_mb}MB)"
            )

        path = await self.storage.save(data, filename)
        document = UploadedDocument(
            original_name=filename,
            path=path,
            mime_type=mime_type,
            size=len(data),
        )
        self._save(document)
        self.logger.info(f"Document {document.id} uploaded: {filename} ({document.document_type.value})")
        return document

    async def process(self, document_id: str, enhance: bool = True) -> ProcessingAck:
        """
        Extract and segment a document, then start enhancement in the background

        Returns immediately after segmentation. With enhance=False the document
        is processed once this returns. Processing an already processed or
        converted document starts over, including its progress record.

        Raises:
            DocumentNotFoundError, InvalidDocumentStateError, ExtractionError
        """
        document = self.get_document(document_id)
        if document.status == DocumentStatus.PROCESSING:
            raise InvalidDocumentStateError(f"Document {document_id} is already being processed")

        document.status = DocumentStatus.PROCESSING
        document.error = None
        self._save(document)

        try:
            data = await self.storage.read(document.path)
            content = await self.processor.process(data, document.mime_type)
        except (ExtractionError, OSError) as e:
            document.status = DocumentStatus.ERROR
            document.error = str(e)
            self._save(document)
            self.logger.error(f"Processing document {document_id} failed: {e}")
            if isinstance(e, ExtractionError):
                raise
            raise ExtractionError(f"could not read stored upload: {e}") from e

        document.content = content

        if not enhance:
            self._mark_processed(document)
            return ProcessingAck(
                document_id=document_id,
                status=document.status,
                message="Document processed successfully",
                section_count=len(content.sections),
            )

        self._save(document)
        task_id = self.task_manager.submit_task(
            self.ENHANCE_TASK_TYPE,
            self._enhance_document,
            document_id,
            content,
            metadata={"document_id": document_id},
            task_id=self._task_id(document_id),
        )
        return ProcessingAck(
            document_id=document_id,
            status=document.status,
            message="Document extracted, enhancement running in background",
            task_id=task_id,
            section_count=len(content.sections),
        )

    def _mark_processed(self, document: UploadedDocument):
        document.status = DocumentStatus.PROCESSED
        document.processed_at = datetime.now()
        self._save(document)
        self.logger.info(f"Document {document.id} processed ({len(document.content.sections)} sections)")

    async def _enhance_document(self, document_id: str, content: DocumentContent) -> DocumentContent:
        try:
            enhanced = await self.orchestrator.enhance(content, document_id)
        except Exception as e:
            self.logger.error(f"Enhancement of document {document_id} failed, keeping extracted content: {e}")
            self.progress.complete(document_id, message="Enhancement failed, using extracted content")
            enhanced = content

        document = self.documents.get(document_id)
        if document is not None:
            document.content = enhanced
            self._mark_processed(document)
        return enhanced

    async def wait_for_processing(self, document_id: str, timeout: Optional[float] = None) -> UploadedDocument:
        """Wait for a background enhancement to finish and return the document"""
        self.get_document(document_id)
        task = await self.task_manager.wait(self._task_id(document_id), timeout=timeout)
        if task is not None and task.status == TaskStatus.FAILED:
            self.logger.warning(f"Enhancement task for {document_id} failed: {task.error}")
        return self.get_document(document_id)

    async def convert(
        self,
        document_id: str,
        access_token: Optional[str] = None,
        template_id: Optional[str] = None,
    ) -> UploadedDocument:
        """
        Build slides for a processed document

        Raises:
            InvalidDocumentStateError: document is not processed yet
            SlideBuildError: the sink failed; the document stays processed
        """
        document = self.get_document(document_id)
        if document.status != DocumentStatus.PROCESSED or document.content is None:
            raise InvalidDocumentStateError("Document has not been processed yet")

        subtitle = await self.orchestrator.describe_title(document.content.title)
        try:
            presentation_id = await self.sink.build(
                document.content,
                access_token=access_token,
                template_id=template_id,
                subtitle=subtitle,
            )
        except SlideBuildError as e:
            self.logger.error(f"Conversion of document {document_id} failed: {e}")
            raise
        except Exception as e:
            self.logger.error(f"Conversion of document {document_id} failed: {e}")
            raise SlideBuildError(f"Failed to convert to slides: {e}") from e

        document.status = DocumentStatus.CONVERTED
        document.slide_presentation_id = presentation_id
        document.converted_at = datetime.now()
        self._save(document)
        self.logger.info(f"Document {document_id} converted: {presentation_id}")
        return document

    async def delete(self, document_id: str) -> bool:
        """Remove a document, its stored upload and its progress record"""
        document = self.get_document(document_id)
        self.task_manager.cancel_task(self._task_id(document_id))
        await self.storage.delete(document.path)
        self.progress.remove(document_id)
        return self.documents.delete(document_id)
