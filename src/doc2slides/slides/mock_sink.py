"""
Mock slide sink for development and tests
"""

import asyncio
import logging
import time
from typing import List, Optional

from ..core.models import DocumentContent
from .base import SlideSink

logger = logging.getLogger(__name__)


class MockSlideSink(SlideSink):
    """Logs the deck it would build and returns a fake identifier"""

    name = "mock"

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.built: List[DocumentContent] = []

    async def build(
        self,
        content: DocumentContent,
        access_token: Optional[str] = None,
        template_id: Optional[str] = None,
        subtitle: Optional[str] = None,
    ) -> str:
        logger.info(f"Would create presentation titled: {content.title}")
        logger.info(f"Would add {len(content.sections)} content slides")
        logger.info(f"Template ID: {template_id or 'default'}")

        if self.delay:
            await asyncio.sleep(self.delay)

        self.built.append(content)
        return f"mock-presentation-{int(time.time() * 1000)}"
