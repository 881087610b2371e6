"""
Tests for the enhancement orchestrator
"""

import asyncio

import pytest

from doc2slides.ai.providers import DisabledTransform
from doc2slides.core.models import DocumentContent, DocumentType, ProgressStage, Section, SectionType
from doc2slides.services.enhancement import (
    CONCLUSION_TITLE,
    FALLBACK_CONCLUSION_CONTENT,
    FALLBACK_CONCLUSION_TITLE,
    FALLBACK_SUBTITLE,
    EnhancementOrchestrator,
    fallback_bullets,
)

from conftest import CHUNK, CONCLUSION, SECTION, SUMMARY, SUBTITLE, FakeTransform, failing


def long_text(length: int = 9000) -> str:
    sentence = "Customer retention improved after the support team doubled its staff. "
    return (sentence * (length // len(sentence) + 1))[:length]


def document(*sections: Section) -> DocumentContent:
    return DocumentContent(type=DocumentType.TXT, title="Support Review", sections=list(sections))


@pytest.fixture
def small_budget(config):
    return config.model_copy(update={"max_chunk_tokens": 500})


class TestFallbackBullets:

    def test_long_lines_only(self):
        chunk = "short\n" + "a" * 40 + "\n" + "b" * 120 + "\n" + "c" * 50 + "\n" + "d" * 60
        bullets = fallback_bullets(chunk).split("\n")

        assert bullets == ["• " + "a" * 40, "• " + "b" * 100 + "...", "• " + "c" * 50]

    def test_nothing_long_enough(self):
        assert fallback_bullets("tiny\nlines") == ""


class TestEnhancementOrchestrator:

    @pytest.mark.asyncio
    async def test_sections_enhanced_and_conclusion_appended(self, config, tracker):
        transform = FakeTransform(lambda kind, prompt: f"• {kind} point")
        orchestrator = EnhancementOrchestrator(transform, progress=tracker, config=config)
        content = document(
            Section(title="Overview", content="The team handled more tickets than ever before."),
            Section(title="Staffing", content="Two new hires joined the night shift this quarter."),
        )

        result = await orchestrator.enhance(content, "doc-1")

        assert [s.title for s in result.sections] == ["Overview", "Staffing", CONCLUSION_TITLE]
        assert result.sections[0].content == f"• {SECTION} point"
        assert result.sections[0].type == SectionType.BULLET_POINTS
        assert result.sections[-1].content == f"• {CONCLUSION} point"
        assert transform.kinds().count(SECTION) == 2
        assert transform.kinds()[-1] == CONCLUSION
        assert content.sections[0].content == "The team handled more tickets than ever before."

    @pytest.mark.asyncio
    async def test_short_sections_pass_through(self, config, tracker):
        """Content under the minimum length is not sent to the model"""
        transform = FakeTransform()
        orchestrator = EnhancementOrchestrator(transform, progress=tracker, config=config)
        short = Section(title="Note", content="Too short")

        result = await orchestrator.enhance(document(short), "doc-short")

        assert result.sections[0] == short
        assert SECTION not in transform.kinds()
        assert tracker.get("doc-short").processed_chunks == 1

    @pytest.mark.asyncio
    async def test_section_failure_keeps_original(self, config, tracker):
        orchestrator = EnhancementOrchestrator(FakeTransform(failing), progress=tracker, config=config)
        section = Section(title="Overview", content="The team handled more tickets than ever before.")

        result = await orchestrator.enhance(document(section), "doc-fail")

        assert result.sections[0] == section
        assert result.sections[-1].title == FALLBACK_CONCLUSION_TITLE
        assert result.sections[-1].content == FALLBACK_CONCLUSION_CONTENT

    @pytest.mark.asyncio
    async def test_disabled_transform_leaves_content_unchanged(self, config, tracker, small_budget):
        """Without a model every section, even an oversized one, stays as extracted"""
        transform = DisabledTransform({"model": "none", "timeout": 1})
        orchestrator = EnhancementOrchestrator(transform, progress=tracker, config=small_budget)
        sections = [
            Section(title="Overview", content="The team handled more tickets than ever before."),
            Section(title="Details", content=long_text()),
        ]

        result = await orchestrator.enhance(document(*sections), "doc-off")

        assert result.sections[:2] == sections
        assert result.sections[-1].title == FALLBACK_CONCLUSION_TITLE
        record = tracker.get("doc-off")
        assert record.stage == ProgressStage.COMPLETE
        assert record.processed_chunks == record.total_chunks

    @pytest.mark.asyncio
    async def test_all_chunks_failing_gives_fallback_bullets(self, small_budget, tracker):
        """Failed chunks fall back to bullets cut from their own text"""
        transform = FakeTransform(lambda kind, prompt: "• closing" if kind == CONCLUSION else failing(kind, prompt))
        orchestrator = EnhancementOrchestrator(transform, progress=tracker, config=small_budget)
        section = Section(title="Details", content=long_text())
        chunks = orchestrator.plan_chunks(section)

        result = await orchestrator.enhance(document(section), "doc-chunks")

        enhanced = result.sections[0]
        assert len(chunks) >= 5
        assert enhanced.type == SectionType.BULLET_POINTS
        bullets = enhanced.content.split("\n\n")
        assert len(bullets) == len(chunks)
        assert all(bullet.startswith("• ") and bullet.endswith("...") for bullet in bullets)
        assert transform.kinds().count(CHUNK) == len(chunks)
        assert SUMMARY in transform.kinds()
        assert result.sections[-1].title == CONCLUSION_TITLE

    @pytest.mark.asyncio
    async def test_many_chunks_are_summarized(self, small_budget, tracker):
        transform = FakeTransform(lambda kind, prompt: f"• {kind}")
        orchestrator = EnhancementOrchestrator(transform, progress=tracker, config=small_budget)

        result = await orchestrator.enhance(document(Section(title="Details", content=long_text())), "doc-sum")

        assert result.sections[0].content == f"• {SUMMARY}"
        record = tracker.get("doc-sum")
        assert record.progress == 100
        assert record.processed_chunks == record.total_chunks == len(orchestrator.plan_chunks(
            Section(title="Details", content=long_text())
        ))

    @pytest.mark.asyncio
    async def test_two_chunks_are_merged_without_summary(self, config, tracker):
        transform = FakeTransform(lambda kind, prompt: f"• {kind}")
        budget = config.model_copy(update={"max_chunk_tokens": 1200})
        orchestrator = EnhancementOrchestrator(transform, progress=tracker, config=budget)
        section = Section(title="Details", content=long_text(4000) + "\n\n" + long_text(4000))

        result = await orchestrator.enhance(document(section), "doc-two")

        assert len(orchestrator.plan_chunks(section)) == 2
        assert result.sections[0].content == f"• {CHUNK}\n\n• {CHUNK}"
        assert SUMMARY not in transform.kinds()

    @pytest.mark.asyncio
    async def test_failed_summary_keeps_merged_chunks(self, small_budget, tracker):
        transform = FakeTransform(lambda kind, prompt: failing(kind, prompt) if kind == SUMMARY else f"• {kind}")
        orchestrator = EnhancementOrchestrator(transform, progress=tracker, config=small_budget)
        section = Section(title="Details", content=long_text())

        result = await orchestrator.enhance(document(section), "doc-merge")

        parts = result.sections[0].content.split("\n\n")
        assert parts == [f"• {CHUNK}"] * len(orchestrator.plan_chunks(section))

    @pytest.mark.asyncio
    async def test_order_preserved_when_completion_order_differs(self, config, tracker):
        """Sections come back in source order regardless of which finishes first"""

        class SlowFirst(FakeTransform):
            async def chat_completion(self, messages, **kwargs):
                if "Alpha" in messages[1].content:
                    await asyncio.sleep(0.05)
                return await super().chat_completion(messages, **kwargs)

        transform = SlowFirst(lambda kind, prompt: prompt.split('"')[1] if kind == SECTION else "• done")
        orchestrator = EnhancementOrchestrator(transform, progress=tracker, config=config)
        titles = ["Alpha", "Beta", "Gamma"]
        content = document(*[
            Section(title=title, content=f"{title} section body text that is long enough.") for title in titles
        ])

        result = await orchestrator.enhance(content)

        assert [s.title for s in result.sections[:3]] == titles
        assert [s.content for s in result.sections[:3]] == titles

    @pytest.mark.asyncio
    async def test_unexpected_error_falls_back_to_original(self, config, tracker, monkeypatch):
        orchestrator = EnhancementOrchestrator(FakeTransform(), progress=tracker, config=config)
        original = orchestrator._enhance_whole

        async def broken(section, index):
            if section.title == "Broken":
                raise RuntimeError("boom")
            return await original(section, index)

        monkeypatch.setattr(orchestrator, "_enhance_whole", broken)
        sections = [
            Section(title="Broken", content="This section will blow up during enhancement."),
            Section(title="Fine", content="This section will be enhanced as usual."),
        ]

        result = await orchestrator.enhance(document(*sections), "doc-err")

        assert result.sections[0] == sections[0]
        assert result.sections[1].content == f"• {SECTION} reply"

    @pytest.mark.asyncio
    async def test_concurrency_limit(self, config, tracker):
        limited = config.model_copy(update={"max_concurrent_sections": 1})
        active = []
        peak = []

        class Counting(FakeTransform):
            async def chat_completion(self, messages, **kwargs):
                active.append(1)
                peak.append(len(active))
                await asyncio.sleep(0.01)
                active.pop()
                return await super().chat_completion(messages, **kwargs)

        orchestrator = EnhancementOrchestrator(Counting(), progress=tracker, config=limited)
        content = document(*[
            Section(title=f"Part {i}", content="A section body that is long enough to enhance.") for i in range(4)
        ])

        await orchestrator.enhance(content, "doc-limit")

        assert max(peak) == 1

    @pytest.mark.asyncio
    async def test_describe_title(self, config):
        transform = FakeTransform(lambda kind, prompt: "A look back at the year")
        assert await EnhancementOrchestrator(transform, config=config).describe_title("Review") == "A look back at the year"
        assert transform.kinds() == [SUBTITLE]

        disabled = EnhancementOrchestrator(DisabledTransform({"model": "none"}), config=config)
        assert await disabled.describe_title("Review") == FALLBACK_SUBTITLE
