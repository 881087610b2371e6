"""
Section segmenters: turn an extraction result into ordered, typed sections
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Type

from ..core.models import (
    DocumentContent,
    DocumentType,
    DocxExtraction,
    Extraction,
    PdfExtraction,
    Section,
    SectionType,
    TxtExtraction,
)
from ..utils.markup import strip_tags
from .classifier import ContentClassifier, default_classifier

logger = logging.getLogger(__name__)

UNTITLED = "Untitled Document"
FIRST_SECTION_TITLE = "Introduction"
FALLBACK_SECTION_TITLE = "Main Content"

SEPARATOR_LINE = re.compile(r"^[\s\-_=*]{3,}$")
TITLE_CASE_LINE = re.compile(r"^(?:[A-Z][a-z]*\s*){1,7}$")
DOCX_HEADING = re.compile(r"<h([1-3])[^>]*>(.*?)</h\1>", re.IGNORECASE | re.DOTALL)
DOCX_H1 = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)
DOCX_P = re.compile(r"<p[^>]*>(.*?)</p>", re.IGNORECASE | re.DOTALL)

SHORT_LINE = 50


def fallback_section(content: str) -> Section:
    """Single section used when no structure could be detected"""
    return Section(title=FALLBACK_SECTION_TITLE, level=1, content=content, type=SectionType.GENERIC)


def first_title_line(lines: List[str]) -> str:
    for line in lines:
        trimmed = line.strip()
        if len(trimmed) > 3:
            return trimmed
    return UNTITLED


class BaseSegmenter(ABC):
    """Common shape of the per-format segmenters"""

    document_type: DocumentType

    def __init__(self, classifier: Optional[ContentClassifier] = None):
        self.classifier = classifier or default_classifier

    @abstractmethod
    def segment_sections(self, extraction) -> List[Section]:
        pass

    @abstractmethod
    def extract_title(self, extraction) -> str:
        pass

    def classify(self, content: str) -> SectionType:
        return self.classifier.classify(content, self.document_type)

    def segment(self, extraction) -> DocumentContent:
        """Build the DocumentContent for one extraction result"""
        sections = self.segment_sections(extraction)
        title = self.extract_title(extraction)
        logger.debug(f"{self.document_type.value}: '{title}', {len(sections)} sections")
        return DocumentContent(
            type=self.document_type,
            title=title,
            sections=sections,
            raw_content=extraction.raw_text,
        )


class LineSegmenter(BaseSegmenter):
    """
    Line-oriented heading heuristic shared by PDF and TXT

    Lines are trimmed and blank lines skipped. Separator lines are dropped.
    A heading closes the section being accumulated (if it has any content)
    and becomes the title of the next one; content before the first heading
    belongs to an "Introduction" section.
    """

    @abstractmethod
    def is_heading(self, line: str, lines: List[str], index: int) -> bool:
        """
        Args:
            line: trimmed line
            lines: all raw lines, for neighbour checks
            index: position of the line in lines
        """
        pass

    def heading_level(self, raw_line: str, line: str) -> int:
        if raw_line.startswith("    "):
            return 3
        if raw_line.startswith("  "):
            return 2
        return 1

    def segment_lines(self, lines: List[str]) -> List[Section]:
        sections: List[Section] = []
        title, level = FIRST_SECTION_TITLE, 1
        buffer: List[str] = []

        for index, raw_line in enumerate(lines):
            line = raw_line.strip()
            if not line or SEPARATOR_LINE.match(line):
                continue

            if self.is_heading(line, lines, index):
                if buffer:
                    sections.append(self._build_section(title, level, buffer))
                    buffer = []
                title = line
                level = self.heading_level(raw_line, line)
                continue

            buffer.append(line)

        if buffer:
            sections.append(self._build_section(title, level, buffer))

        return sections

    def _build_section(self, title: str, level: int, buffer: List[str]) -> Section:
        content = "\n".join(buffer)
        return Section(title=title, level=level, content=content, type=self.classify(content))


class PdfSegmenter(LineSegmenter):
    document_type = DocumentType.PDF

    def is_heading(self, line: str, lines: List[str], index: int) -> bool:
        if TITLE_CASE_LINE.match(line):
            return True
        return len(line) < SHORT_LINE and line.isupper()

    def segment_sections(self, extraction: PdfExtraction) -> List[Section]:
        lines = [line for page in extraction.pages for line in page.split("\n")]
        sections = self.segment_lines(lines)
        if not sections:
            sections = [fallback_section(extraction.raw_text)]
        return sections

    def extract_title(self, extraction: PdfExtraction) -> str:
        if not extraction.pages:
            return UNTITLED
        return first_title_line(extraction.pages[0].split("\n"))


class TxtSegmenter(LineSegmenter):
    document_type = DocumentType.TXT

    def is_heading(self, line: str, lines: List[str], index: int) -> bool:
        if len(line) >= SHORT_LINE:
            return False
        if line.isupper() or line.endswith(":"):
            return True
        return (
            0 < index < len(lines) - 1
            and not lines[index - 1].strip()
            and not lines[index + 1].strip()
        )

    def heading_level(self, raw_line: str, line: str) -> int:
        indent_level = super().heading_level(raw_line, line)
        if indent_level > 1:
            return indent_level
        return 1 if line.isupper() else 2

    def segment_sections(self, extraction: TxtExtraction) -> List[Section]:
        sections = self.segment_lines(extraction.lines)
        if not sections:
            sections = [fallback_section(extraction.text)]
        return sections

    def extract_title(self, extraction: TxtExtraction) -> str:
        return first_title_line(extraction.lines)


class DocxSegmenter(BaseSegmenter):
    """
    Markup segmenter: h1-h3 elements start sections, their rank is the level

    Markup before the first heading is not part of any section but stays in
    the raw content.
    """

    document_type = DocumentType.DOCX

    def segment_sections(self, extraction: DocxExtraction) -> List[Section]:
        parts = DOCX_HEADING.split(extraction.html)
        if len(parts) <= 1:
            return [fallback_section(extraction.html)]

        sections = []
        for i in range(1, len(parts), 3):
            content = parts[i + 2] or ""
            sections.append(Section(
                title=strip_tags(parts[i + 1]).strip(),
                level=int(parts[i]),
                content=content,
                type=self.classify(content),
            ))
        return sections

    def extract_title(self, extraction: DocxExtraction) -> str:
        match = DOCX_H1.search(extraction.html) or DOCX_P.search(extraction.html)
        if match:
            title = strip_tags(match.group(1)).strip()
            if title:
                return title
        return UNTITLED


SEGMENTERS: Dict[str, Type[BaseSegmenter]] = {
    "pdf": PdfSegmenter,
    "docx": DocxSegmenter,
    "txt": TxtSegmenter,
}


def get_segmenter(extraction: Extraction, classifier: Optional[ContentClassifier] = None) -> BaseSegmenter:
    return SEGMENTERS[extraction.kind](classifier)


def segment_document(extraction: Extraction, classifier: Optional[ContentClassifier] = None) -> DocumentContent:
    """Segment any extraction result into a DocumentContent"""
    return get_segmenter(extraction, classifier).segment(extraction)
