"""
Content-type classifier shared by all segmenters
"""

import re
from typing import List

from ..core.models import DocumentType, SectionType

BULLET_LINE = re.compile(r"^(?:[-*•]\s|\d+[.)]\s)")
TXT_BULLET_RATIO = 0.3

_MARKUP_TABLE = re.compile(r"<table\b", re.IGNORECASE)
_MARKUP_LIST = re.compile(r"<(?:ul|ol)\b", re.IGNORECASE)
_MARKUP_IMAGE = re.compile(r"<img\b", re.IGNORECASE)


class ContentClassifier:
    """
    Decides the SectionType of a content blob

    Checks run in a fixed order and the first match wins: table, bullet
    points, image (markup only), then text. The result depends only on the
    content and the document type.
    """

    def classify(self, content: str, document_type: DocumentType) -> SectionType:
        if document_type == DocumentType.DOCX:
            return self.classify_markup(content)
        return self.classify_lines(content, strict_bullets=document_type == DocumentType.TXT)

    def classify_markup(self, content: str) -> SectionType:
        if _MARKUP_TABLE.search(content):
            return SectionType.TABLE
        if _MARKUP_LIST.search(content):
            return SectionType.BULLET_POINTS
        if _MARKUP_IMAGE.search(content):
            return SectionType.IMAGE
        return SectionType.TEXT

    def classify_lines(self, content: str, strict_bullets: bool = False) -> SectionType:
        """
        Classify line-oriented text

        Args:
            content: newline-joined section body
            strict_bullets: require bullet lines to be more than 30% of all
                lines, otherwise a single bullet line is enough
        """
        lines = content.split("\n")

        if "|" in content and sum(1 for line in lines if "|" in line) > 2:
            return SectionType.TABLE

        bullet_lines = self._count_bullet_lines(lines)
        if bullet_lines:
            if not strict_bullets or bullet_lines / len(lines) > TXT_BULLET_RATIO:
                return SectionType.BULLET_POINTS

        return SectionType.TEXT

    @staticmethod
    def _count_bullet_lines(lines: List[str]) -> int:
        return sum(1 for line in lines if BULLET_LINE.match(line.strip()))


# Module-level default; the classifier holds no state
default_classifier = ContentClassifier()


def classify_content(content: str, document_type: DocumentType) -> SectionType:
    return default_classifier.classify(content, document_type)
