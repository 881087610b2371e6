"""
Slide-deck sink interface
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..core.models import DocumentContent


class SlideSink(ABC):
    """Builds a presentation from processed content and returns its identifier"""

    name = "base"

    @abstractmethod
    async def build(
        self,
        content: DocumentContent,
        access_token: Optional[str] = None,
        template_id: Optional[str] = None,
        subtitle: Optional[str] = None,
    ) -> str:
        """
        Build a deck

        Args:
            content: processed document
            access_token: credential for the target service, if it needs one
            template_id: template to start from
            subtitle: text for the title slide

        Returns:
            opaque presentation identifier

        Raises:
            SlideBuildError: on any failure
        """
        pass
