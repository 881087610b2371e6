"""
Enhancement orchestrator: runs sections through the text transform with
progress tracking and per-section fallbacks
"""

import asyncio
import logging
import re
import uuid
from typing import List, Optional

from ..ai.base import TextTransform
from ..ai.prompts import ContentPrompts, SystemPrompts
from ..chunking.base_chunker import estimate_tokens
from ..chunking.token_chunker import TokenBudgetChunker
from ..core.config import AppConfig, app_config
from ..core.exceptions import TransformError, TransformUnavailableError
from ..core.models import DocumentContent, ProgressStage, Section, SectionType
from .progress_tracker import ProgressTracker, progress_tracker

logger = logging.getLogger(__name__)

CONCLUSION_TITLE = "Key Takeaways"
FALLBACK_CONCLUSION_TITLE = "Conclusion"
FALLBACK_CONCLUSION_CONTENT = "Thank you for your attention!"
FALLBACK_SUBTITLE = "Presentation created with Doc2Slides"

FALLBACK_LINE_MIN = 30
FALLBACK_LINE_MAX = 100
FALLBACK_MAX_BULLETS = 3
CHUNK_JOINER = "\n\n"


def fallback_bullets(chunk: str) -> str:
    """
    Best-effort bullets taken straight from a chunk's text

    Up to three lines longer than 30 characters, each cut to 100 characters
    and prefixed with a bullet glyph.
    """
    lines = [line for line in re.split(r"\n+", chunk) if len(line) > FALLBACK_LINE_MIN]
    bullets = []
    for line in lines[:FALLBACK_MAX_BULLETS]:
        if len(line) > FALLBACK_LINE_MAX:
            bullets.append(f"• {line[:FALLBACK_LINE_MAX]}...")
        else:
            bullets.append(f"• {line}")
    return "\n".join(bullets)


def sample_section_titles(sections: List[Section]) -> List[str]:
    titles = [section.title for section in sections]
    if len(titles) <= 10:
        return titles
    return titles[:5] + titles[-5:]


def sample_section_content(sections: List[Section]) -> str:
    return "".join(f"{section.title}:\n{section.content[:200]}...\n\n" for section in sections[:3])


class _UnitReporter:
    """Reports one section's work units; never reports more than expected"""

    def __init__(self, tracker: ProgressTracker, document_id: Optional[str], expected: int):
        self.tracker = tracker
        self.document_id = document_id
        self.expected = expected
        self.reported = 0

    def advance(self):
        if self.document_id and self.reported < self.expected:
            self.reported += 1
            self.tracker.advance(self.document_id)

    def finish(self):
        remaining = self.expected - self.reported
        if self.document_id and remaining > 0:
            self.reported = self.expected
            self.tracker.advance(self.document_id, remaining)


class EnhancementOrchestrator:
    """
    Drives a document's sections through a TextTransform

    Sections are enhanced concurrently and reassembled in source order. Any
    failure leaves the affected section (or chunk) in a usable state; the
    document as a whole never fails here.
    """

    def __init__(
        self,
        transform: TextTransform,
        progress: Optional[ProgressTracker] = None,
        config: Optional[AppConfig] = None,
        chunker: Optional[TokenBudgetChunker] = None,
    ):
        self.transform = transform
        self.progress = progress or progress_tracker
        self.config = config or app_config
        self.chunker = chunker or TokenBudgetChunker(self.config.max_chunk_tokens)

    def plan_chunks(self, section: Section) -> Optional[List[str]]:
        """Chunks for an over-budget section, None when it takes a single call or none"""
        if len(section.content) < self.config.min_section_length:
            return None
        if estimate_tokens(section.content) <= self.chunker.max_tokens:
            return None
        return [content for content, _ in self.chunker.split(section.content)]

    async def enhance(self, content: DocumentContent, document_id: Optional[str] = None) -> DocumentContent:
        """
        Enhance every section and append a conclusion section

        Args:
            content: segmented document
            document_id: key for progress records; a random one when omitted

        Returns:
            a new DocumentContent; the input is not modified
        """
        document_id = document_id or uuid.uuid4().hex
        sections = list(content.sections)
        self.progress.start(document_id)

        plans = [self.plan_chunks(section) for section in sections]
        total_units = sum(len(chunks) if chunks else 1 for chunks in plans)
        self.progress.update(
            document_id,
            stage=ProgressStage.ENHANCING,
            total_chunks=total_units,
            message=f"Enhancing {len(sections)} sections",
        )
        logger.info(f"Enhancing document {document_id}: {len(sections)} sections, {total_units} units")

        limit = self.config.max_concurrent_sections
        semaphore = asyncio.Semaphore(limit) if limit > 0 else None

        async def run(index: int, section: Section, chunks: Optional[List[str]]) -> Section:
            if semaphore is None:
                return await self.process_section(section, index, document_id, chunks)
            async with semaphore:
                return await self.process_section(section, index, document_id, chunks)

        results = await asyncio.gather(
            *[run(i, section, chunks) for i, (section, chunks) in enumerate(zip(sections, plans))],
            return_exceptions=True,
        )

        enhanced: List[Section] = []
        for index, (section, result) in enumerate(zip(sections, results)):
            if isinstance(result, BaseException):
                logger.error(f"Error enhancing section {index + 1} ({section.title}): {result}")
                enhanced.append(section)
            else:
                enhanced.append(result)

        self.progress.update(document_id, stage=ProgressStage.CONCLUSION, message="Generating conclusion")
        enhanced_content = content.with_sections(enhanced)
        conclusion = await self.generate_conclusion(enhanced_content)

        self.progress.complete(document_id)
        logger.info(f"Enhancement of document {document_id} complete")
        return content.with_sections(enhanced + [conclusion])

    async def process_section(
        self,
        section: Section,
        index: int = 0,
        document_id: Optional[str] = None,
        chunks: Optional[List[str]] = None,
    ) -> Section:
        """
        Enhance one section

        Short sections pass through. A section within the token budget takes
        one call; a longer one is chunked, each chunk takes one call in order,
        and the results are merged (and summarized when there are more than
        two).
        """
        if chunks is None:
            chunks = self.plan_chunks(section)
        reporter = _UnitReporter(self.progress, document_id, len(chunks) if chunks else 1)

        try:
            if len(section.content) < self.config.min_section_length:
                logger.debug(f"Section {index + 1} too short, skipping enhancement")
                return section

            if not chunks:
                return await self._enhance_whole(section, index)
            return await self._enhance_chunks(section, index, chunks, reporter, document_id)

        except TransformUnavailableError as e:
            logger.debug(f"Section {index + 1} left unchanged: {e}")
            return section
        finally:
            reporter.finish()

    async def _enhance_whole(self, section: Section, index: int) -> Section:
        logger.info(f"Processing section {index + 1}: {section.title}")
        prompt = ContentPrompts.get_section_prompt(
            section.title, section.content, is_list=section.type == SectionType.BULLET_POINTS
        )
        try:
            enhanced = await self.transform.transform(
                prompt, SystemPrompts.get_section_system_prompt(), self.config.section_max_tokens
            )
        except TransformUnavailableError:
            raise
        except TransformError as e:
            logger.warning(f"Section {index + 1} ({section.title}) kept as-is: {e}")
            return section

        logger.info(f"Section {index + 1} enhanced")
        return section.model_copy(update={"content": enhanced, "type": SectionType.BULLET_POINTS})

    async def _enhance_chunks(
        self,
        section: Section,
        index: int,
        chunks: List[str],
        reporter: _UnitReporter,
        document_id: Optional[str],
    ) -> Section:
        logger.info(f"Section {index + 1} is too large ({estimate_tokens(section.content)} tokens), split into {len(chunks)} chunks")

        enhanced_chunks: List[str] = []
        for i, chunk in enumerate(chunks):
            logger.info(f"Processing chunk {i + 1}/{len(chunks)} of section {index + 1}")
            try:
                result = await self.transform.transform(
                    ContentPrompts.get_chunk_prompt(section.title, chunk, i, len(chunks)),
                    SystemPrompts.get_chunk_system_prompt(),
                    self.config.chunk_max_tokens,
                )
                enhanced_chunks.append(result)
            except TransformUnavailableError:
                raise
            except TransformError as e:
                logger.warning(f"Chunk {i + 1} of section {index + 1} failed, using fallback bullets: {e}")
                bullets = fallback_bullets(chunk)
                if bullets:
                    enhanced_chunks.append(bullets)
            reporter.advance()

        combined = CHUNK_JOINER.join(enhanced_chunks)

        if len(enhanced_chunks) > 2:
            if document_id:
                self.progress.update(document_id, stage=ProgressStage.SUMMARIZING, message=f"Summarizing {section.title}")
            try:
                summary = await self.transform.transform(
                    ContentPrompts.get_summary_prompt(section.title, combined),
                    SystemPrompts.get_summary_system_prompt(),
                    self.config.summary_max_tokens,
                )
                logger.info(f"Section {index + 1} enhanced (summarized from {len(chunks)} chunks)")
                return section.model_copy(update={"content": summary, "type": SectionType.BULLET_POINTS})
            except TransformError as e:
                logger.warning(f"Summarizing section {index + 1} failed, keeping merged chunks: {e}")

        logger.info(f"Section {index + 1} enhanced (from {len(chunks)} chunks)")
        return section.model_copy(update={
            "content": combined or section.content,
            "type": SectionType.BULLET_POINTS,
        })

    async def generate_conclusion(self, content: DocumentContent) -> Section:
        """Closing section built from the document title and a sample of its sections"""
        titles = sample_section_titles(content.sections)
        logger.info(f"Generating conclusion from {len(titles)} section titles")
        try:
            text = await self.transform.transform(
                ContentPrompts.get_conclusion_prompt(content.title, titles, sample_section_content(content.sections)),
                SystemPrompts.get_conclusion_system_prompt(),
                self.config.conclusion_max_tokens,
            )
        except TransformError as e:
            logger.warning(f"Using fallback conclusion: {e}")
            return Section(
                title=FALLBACK_CONCLUSION_TITLE,
                level=1,
                content=FALLBACK_CONCLUSION_CONTENT,
                type=SectionType.BULLET_POINTS,
            )
        return Section(title=CONCLUSION_TITLE, level=1, content=text, type=SectionType.BULLET_POINTS)

    async def describe_title(self, title: str) -> str:
        """Short subtitle for the title slide"""
        try:
            return await self.transform.transform(
                ContentPrompts.get_subtitle_prompt(title),
                SystemPrompts.get_subtitle_system_prompt(),
                self.config.title_max_tokens,
            )
        except TransformError as e:
            logger.warning(f"Using fallback subtitle: {e}")
            return FALLBACK_SUBTITLE
