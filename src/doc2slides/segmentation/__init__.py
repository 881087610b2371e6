"""
Segmentation module - heading detection, section building and content typing
"""

from .classifier import ContentClassifier, classify_content
from .segmenter import (
    BaseSegmenter,
    LineSegmenter,
    PdfSegmenter,
    TxtSegmenter,
    DocxSegmenter,
    get_segmenter,
    segment_document,
)

__all__ = [
    "ContentClassifier",
    "classify_content",
    "BaseSegmenter",
    "LineSegmenter",
    "PdfSegmenter",
    "TxtSegmenter",
    "DocxSegmenter",
    "get_segmenter",
    "segment_document",
]
