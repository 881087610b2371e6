"""
python-pptx slide sink: writes .pptx decks to the output directory
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

from pptx import Presentation

from ..core.exceptions import SlideBuildError
from ..core.models import DocumentContent
from ..utils.thread_pool import run_blocking_io
from .base import SlideSink
from .formatting import DEFAULT_DECK_TITLE, closing_slide_text, format_slide_body

logger = logging.getLogger(__name__)

TITLE_LAYOUT = 0
TITLE_AND_BODY_LAYOUT = 1
DEFAULT_SUBTITLE = "Presentation generated with Doc2Slides"


class PptxSlideSink(SlideSink):
    """
    Builds a title slide, one title-and-body slide per section and a
    closing slide. The presentation identifier is the file stem.
    """

    name = "pptx"

    def __init__(self, output_dir: str = "output", template_dir: Optional[str] = None):
        self.output_dir = Path(output_dir)
        self.template_dir = Path(template_dir) if template_dir else None

    def resolve_path(self, presentation_id: str) -> Path:
        return self.output_dir / f"{presentation_id}.pptx"

    def _resolve_template(self, template_id: str) -> Path:
        candidates = [Path(template_id)]
        if self.template_dir is not None:
            candidates.insert(0, self.template_dir / template_id)
            candidates.insert(1, self.template_dir / f"{template_id}.pptx")
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise SlideBuildError(f"Template not found: {template_id}")

    async def build(
        self,
        content: DocumentContent,
        access_token: Optional[str] = None,
        template_id: Optional[str] = None,
        subtitle: Optional[str] = None,
    ) -> str:
        template = self._resolve_template(template_id) if template_id else None
        presentation_id = uuid.uuid4().hex
        path = self.resolve_path(presentation_id)

        try:
            await run_blocking_io(self._build_sync, content, path, template, subtitle or DEFAULT_SUBTITLE)
        except SlideBuildError:
            raise
        except Exception as e:
            logger.error(f"Error creating presentation: {e}")
            raise SlideBuildError(f"Failed to create presentation: {e}") from e

        logger.info(f"Presentation {presentation_id} saved to {path} ({len(content.sections) + 2} slides)")
        return presentation_id

    def _build_sync(self, content: DocumentContent, path: Path, template: Optional[Path], subtitle: str):
        prs = Presentation(str(template)) if template else Presentation()
        deck_title = content.title or DEFAULT_DECK_TITLE

        self._add_slide(prs, TITLE_LAYOUT, deck_title, subtitle)

        for section in content.sections:
            self._add_slide(prs, TITLE_AND_BODY_LAYOUT, section.title, format_slide_body(section, content.type))

        self._add_slide(prs, TITLE_AND_BODY_LAYOUT, "Conclusion", closing_slide_text(content.title))

        path.parent.mkdir(parents=True, exist_ok=True)
        prs.save(str(path))

    @staticmethod
    def _add_slide(prs, layout_index: int, title: str, body: str):
        # Placeholders are keyed by idx; title is idx 0, the first other one takes the body
        slide = prs.slides.add_slide(prs.slide_layouts[layout_index])
        if slide.shapes.title is not None:
            slide.shapes.title.text = title
        for placeholder in slide.placeholders:
            if placeholder.placeholder_format.idx != 0:
                placeholder.text_frame.text = body
                break
