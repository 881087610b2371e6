"""
Data models for documents, sections, extraction results and progress
"""

import time
import uuid
from datetime import datetime
from enum import Enum
from typing import List, Dict, Any, Optional, Union, Literal, Annotated

from pydantic import BaseModel, Field


class SectionType(str, Enum):
    """Classification of a section's content"""
    TEXT = "text"
    BULLET_POINTS = "bullet_points"
    TABLE = "table"
    IMAGE = "image"
    GENERIC = "generic"


class DocumentType(str, Enum):
    """Supported source formats"""
    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"


MIME_TYPES: Dict[str, DocumentType] = {
    "application/pdf": DocumentType.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentType.DOCX,
    "text/plain": DocumentType.TXT,
}


def document_type_for(mime_type: Optional[str]) -> Optional[DocumentType]:
    """DocumentType for a MIME type, ignoring parameters such as charset"""
    return MIME_TYPES.get((mime_type or "").split(";")[0].strip().lower())


class Section(BaseModel):
    """One slide's worth of source material"""
    title: str
    level: int = Field(default=1, ge=1)
    content: str = ""
    type: SectionType = SectionType.TEXT

    model_config = {"use_enum_values": False}


class DocumentContent(BaseModel):
    """Whole-document segmentation result"""
    type: DocumentType
    title: str = "Untitled Document"
    sections: List[Section] = Field(default_factory=list)
    raw_content: str = Field(default="", alias="rawContent")

    model_config = {"populate_by_name": True}

    def with_sections(self, sections: List[Section]) -> "DocumentContent":
        """Copy of this document with its sections replaced wholesale"""
        return self.model_copy(update={"sections": list(sections)})


# Extraction results: one variant per format, each carrying only what its
# extractor produces. The segmenter converts them to DocumentContent.

class PdfExtraction(BaseModel):
    kind: Literal["pdf"] = "pdf"
    pages: List[str] = Field(default_factory=list)
    failed_pages: List[int] = Field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def raw_text(self) -> str:
        return "\n".join(self.pages)


class DocxExtraction(BaseModel):
    kind: Literal["docx"] = "docx"
    html: str = ""
    messages: List[str] = Field(default_factory=list)

    @property
    def raw_text(self) -> str:
        return self.html


class TxtExtraction(BaseModel):
    kind: Literal["txt"] = "txt"
    text: str = ""

    @property
    def lines(self) -> List[str]:
        return self.text.replace("\r\n", "\n").split("\n")

    @property
    def raw_text(self) -> str:
        return self.text


Extraction = Annotated[
    Union[PdfExtraction, DocxExtraction, TxtExtraction],
    Field(discriminator="kind"),
]


class ProgressStage(str, Enum):
    """Enhancement progress stages, in order"""
    EXTRACTING = "extracting"
    ENHANCING = "enhancing"
    SUMMARIZING = "summarizing"
    CONCLUSION = "conclusion"
    COMPLETE = "complete"

    @property
    def order(self) -> int:
        return list(ProgressStage).index(self)


class ProgressRecord(BaseModel):
    """Per-document enhancement progress"""
    document_id: str
    total_chunks: int = Field(default=0, alias="totalChunks")
    processed_chunks: int = Field(default=0, alias="processedChunks")
    stage: ProgressStage = ProgressStage.EXTRACTING
    progress: int = 0
    message: str = ""
    start_time: float = Field(default_factory=time.time)
    last_update: float = Field(default_factory=time.time)

    model_config = {"populate_by_name": True}

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        """Polling payload"""
        return {
            "documentId": self.document_id,
            "totalChunks": self.total_chunks,
            "processedChunks": self.processed_chunks,
            "stage": self.stage.value,
            "progress": self.progress,
            "message": self.message,
            "elapsedTime": round(self.elapsed_time, 3),
        }


class DocumentStatus(str, Enum):
    """Lifecycle of an uploaded document"""
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    PROCESSED = "processed"
    CONVERTED = "converted"
    ERROR = "error"


class UploadedDocument(BaseModel):
    """Registry entry for one uploaded document"""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    original_name: str
    path: str
    mime_type: str
    size: int = 0
    status: DocumentStatus = DocumentStatus.UPLOADED
    uploaded_at: datetime = Field(default_factory=datetime.now)
    processed_at: Optional[datetime] = None
    converted_at: Optional[datetime] = None
    content: Optional[DocumentContent] = None
    slide_presentation_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def document_type(self) -> Optional[DocumentType]:
        return document_type_for(self.mime_type)


class ProcessingAck(BaseModel):
    """Immediate answer to a process request"""
    document_id: str
    status: DocumentStatus
    message: str
    task_id: Optional[str] = None
    section_count: int = 0
