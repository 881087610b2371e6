"""
Slide body formatting shared by all sinks
"""

import re
from typing import List

from ..core.models import DocumentType, Section, SectionType
from ..utils.markup import markup_to_text

BULLET_GLYPH = "• "
BULLET_MARKER = re.compile(r"^[-•*]\s+")
SENTENCE_END = re.compile(r"([.!?])\s+")

MAX_TEXT_SENTENCES = 5
MIN_SENTENCE_LENGTH = 15
MAX_SENTENCE_LENGTH = 100

DEFAULT_DECK_TITLE = "Generated Presentation"


def section_plain_text(section: Section, document_type: DocumentType) -> str:
    """Section content with DOCX markup rendered as plain lines"""
    if document_type == DocumentType.DOCX:
        return markup_to_text(section.content)
    return section.content


def format_bullets(content: str) -> str:
    """One "• " line per non-empty line, replacing any existing bullet marker"""
    lines = [line.strip() for line in content.strip().split("\n")]
    return "\n".join(BULLET_GLYPH + BULLET_MARKER.sub("", line) for line in lines if line)


def format_text(content: str) -> str:
    """First five sentences of a readable length, blank-line separated"""
    sentences: List[str] = []
    for line in SENTENCE_END.sub(r"\1\n", content).split("\n"):
        line = line.strip()
        if MIN_SENTENCE_LENGTH < len(line) < MAX_SENTENCE_LENGTH:
            sentences.append(line)
        if len(sentences) == MAX_TEXT_SENTENCES:
            break
    return "\n\n".join(sentences)


def format_slide_body(section: Section, document_type: DocumentType = DocumentType.TXT) -> str:
    """
    Body text for a section's slide

    Bullet sections get normalized bullets, tables pass through, anything
    else is reduced to a few key sentences.
    """
    content = section_plain_text(section, document_type)
    if section.type == SectionType.BULLET_POINTS:
        return format_bullets(content)
    if section.type == SectionType.TABLE:
        return content
    return format_text(content)


def closing_slide_text(title: str) -> str:
    return (
        f'Thank you for viewing "{title or "this presentation"}".\n\n'
        "Key takeaways:\n"
        "• Generated from document content\n"
        "• Preserved structure and formatting\n"
        "• Ready for customization"
    )
