"""
Slides module - deck sinks and slide body formatting
"""

from typing import Optional

from ..core.config import AppConfig, app_config
from .base import SlideSink
from .formatting import format_slide_body, closing_slide_text
from .mock_sink import MockSlideSink
from .pptx_sink import PptxSlideSink


def create_slide_sink(config: Optional[AppConfig] = None) -> SlideSink:
    """Sink for the configured backend"""
    config = config or app_config
    if config.slides_backend == "mock":
        return MockSlideSink()
    if config.slides_backend == "pptx":
        return PptxSlideSink(output_dir=config.output_dir)
    raise ValueError(f"Unknown slides backend: {config.slides_backend}")


__all__ = [
    "SlideSink",
    "format_slide_body",
    "closing_slide_text",
    "MockSlideSink",
    "PptxSlideSink",
    "create_slide_sink",
]
