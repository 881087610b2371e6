"""
Tests for slide body formatting and the slide sinks
"""

import pytest
from pptx import Presentation

from doc2slides.core.exceptions import SlideBuildError
from doc2slides.core.models import DocumentContent, DocumentType, Section, SectionType
from doc2slides.slides import MockSlideSink, PptxSlideSink, create_slide_sink
from doc2slides.slides.formatting import format_bullets, format_slide_body, format_text
from doc2slides.utils.markup import markup_to_text, strip_tags


def deck() -> DocumentContent:
    return DocumentContent(
        type=DocumentType.TXT,
        title="Team Update",
        sections=[
            Section(title="Highlights", content="- Shipped onboarding\n* Faster support", type=SectionType.BULLET_POINTS),
            Section(title="Numbers", content="| Q1 | 10 |\n| Q2 | 12 |\n| Q3 | 15 |", type=SectionType.TABLE),
        ],
    )


class TestFormatting:

    def test_bullets_normalized(self):
        assert format_bullets("- one\n\n• two\n* three\nfour") == "• one\n• two\n• three\n• four"

    def test_text_keeps_readable_sentences(self):
        text = (
            "Short. This sentence is long enough to keep. "
            + "This one is far too long to fit on a slide because it keeps going and going and going and going without any end. "
            + "Another sentence worth keeping here."
        )
        assert format_text(text) == "This sentence is long enough to keep.\n\nAnother sentence worth keeping here."

    def test_text_limited_to_five_sentences(self):
        text = " ".join(f"Sentence number {i} is here." for i in range(8))
        assert len(format_text(text).split("\n\n")) == 5

    def test_table_passes_through(self):
        section = deck().sections[1]
        assert format_slide_body(section) == section.content

    def test_docx_markup_rendered(self):
        section = Section(
            title="Tasks",
            content="<ul><li>Design the flow</li><li>Build it</li></ul>",
            type=SectionType.BULLET_POINTS,
        )
        assert format_slide_body(section, DocumentType.DOCX) == "• Design the flow\n• Build it"


class TestMarkup:

    def test_strip_tags(self):
        assert strip_tags("<p>Fish &amp; <em>chips</em></p>") == "Fish & chips"

    def test_markup_to_text(self):
        markup = (
            "<p>Intro</p><ol><li>First</li><li>Second</li></ol>"
            "<table><tr><td><p>a</p></td><td><p>b</p></td></tr></table>"
        )
        assert markup_to_text(markup) == "Intro\n1. First\n2. Second\n| a | b |"


class TestPptxSlideSink:

    @pytest.mark.asyncio
    async def test_builds_deck(self, tmp_path):
        sink = PptxSlideSink(output_dir=str(tmp_path))

        presentation_id = await sink.build(deck(), subtitle="Where we are")

        path = sink.resolve_path(presentation_id)
        assert path.exists()
        prs = Presentation(str(path))
        titles = [slide.shapes.title.text for slide in prs.slides]
        assert titles == ["Team Update", "Highlights", "Numbers", "Conclusion"]
        body = [shape for shape in prs.slides[1].placeholders if shape.placeholder_format.idx != 0][0]
        assert body.text_frame.text == "• Shipped onboarding\n• Faster support"

    @pytest.mark.asyncio
    async def test_missing_template(self, tmp_path):
        sink = PptxSlideSink(output_dir=str(tmp_path), template_dir=str(tmp_path))
        with pytest.raises(SlideBuildError):
            await sink.build(deck(), template_id="corporate")

    @pytest.mark.asyncio
    async def test_template_by_name(self, tmp_path):
        Presentation().save(str(tmp_path / "corporate.pptx"))
        sink = PptxSlideSink(output_dir=str(tmp_path / "out"), template_dir=str(tmp_path))

        presentation_id = await sink.build(deck(), template_id="corporate")

        assert sink.resolve_path(presentation_id).exists()


class TestSinkFactory:

    @pytest.mark.asyncio
    async def test_mock_sink(self, config):
        sink = create_slide_sink(config)
        assert isinstance(sink, MockSlideSink)
        presentation_id = await sink.build(deck())
        assert presentation_id.startswith("mock-presentation-")
        assert sink.built == [deck()]

    def test_pptx_sink(self, config):
        sink = create_slide_sink(config.model_copy(update={"slides_backend": "pptx"}))
        assert isinstance(sink, PptxSlideSink)

    def test_unknown_backend(self, config):
        with pytest.raises(ValueError):
            create_slide_sink(config.model_copy(update={"slides_backend": "keynote"}))
