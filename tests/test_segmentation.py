"""
Tests for content classification and per-format segmentation
"""

from doc2slides.core.models import (
    DocumentType,
    DocxExtraction,
    PdfExtraction,
    SectionType,
    TxtExtraction,
)
from doc2slides.segmentation import classify_content, segment_document


class TestContentClassifier:

    def test_table_wins_over_bullets(self):
        """Table detection runs before bullet detection"""
        content = "- a | b\n- c | d\n- e | f"
        assert classify_content(content, DocumentType.PDF) == SectionType.TABLE

    def test_two_pipe_lines_are_not_a_table(self):
        content = "a | b\nc | d\nplain"
        assert classify_content(content, DocumentType.PDF) == SectionType.TEXT

    def test_single_bullet_enough_for_pdf(self):
        content = "intro line\nmore prose\n- one bullet\nclosing prose"
        assert classify_content(content, DocumentType.PDF) == SectionType.BULLET_POINTS

    def test_txt_needs_bullet_ratio(self):
        """TXT bullets must be more than 30% of the lines"""
        sparse = "intro line\nmore prose\n- one bullet\nclosing prose"
        dense = "intro\n- one\n- two\n3. three"
        assert classify_content(sparse, DocumentType.TXT) == SectionType.TEXT
        assert classify_content(dense, DocumentType.TXT) == SectionType.BULLET_POINTS

    def test_numbered_markers(self):
        assert classify_content("1) first\n2) second", DocumentType.TXT) == SectionType.BULLET_POINTS

    def test_markup_order(self):
        assert classify_content("<ul><li>a</li></ul><table></table>", DocumentType.DOCX) == SectionType.TABLE
        assert classify_content("<p>x</p><ol><li>a</li></ol>", DocumentType.DOCX) == SectionType.BULLET_POINTS
        assert classify_content('<p><img src="x.png" /></p>', DocumentType.DOCX) == SectionType.IMAGE
        assert classify_content("<p>just text</p>", DocumentType.DOCX) == SectionType.TEXT


class TestTxtSegmenter:

    def test_headings_and_introduction(self):
        """Content before the first heading becomes the Introduction section"""
        text = "Title\n\nINTRO:\nline one\nline two\n\nCONCLUSION:\nline three"
        content = segment_document(TxtExtraction(text=text))

        assert content.type == DocumentType.TXT
        assert content.title == "Title"
        assert [(s.title, s.content) for s in content.sections] == [
            ("Introduction", "Title"),
            ("INTRO:", "line one\nline two"),
            ("CONCLUSION:", "line three"),
        ]
        assert content.sections[1].level == 1
        assert content.raw_content == text

    def test_blank_surrounded_line_is_heading(self):
        text = "Overview text goes here\n\nBackground\n\nSome details follow."
        content = segment_document(TxtExtraction(text=text))

        assert [s.title for s in content.sections] == ["Introduction", "Background"]
        assert content.sections[1].level == 2

    def test_indented_heading_level(self):
        text = "intro text here\n\n    DETAILS\n\nmore text"
        content = segment_document(TxtExtraction(text=text))
        assert content.sections[-1].title == "DETAILS"
        assert content.sections[-1].level == 3

    def test_separator_lines_dropped(self):
        text = "First line of text\n-----\nSecond line of text"
        content = segment_document(TxtExtraction(text=text))
        assert content.sections[0].content == "First line of text\nSecond line of text"

    def test_heading_without_content_merges_into_next(self):
        text = "EMPTY:\nFILLED:\nbody text"
        content = segment_document(TxtExtraction(text=text))
        assert [(s.title, s.content) for s in content.sections] == [("FILLED:", "body text")]

    def test_only_headings_falls_back(self):
        """No section content at all gives a single generic section"""
        content = segment_document(TxtExtraction(text="ONE:\nTWO:"))

        assert len(content.sections) == 1
        section = content.sections[0]
        assert section.title == "Main Content"
        assert section.type == SectionType.GENERIC
        assert section.content == "ONE:\nTWO:"

    def test_short_lines_give_untitled(self):
        content = segment_document(TxtExtraction(text="ab\nc"))
        assert content.title == "Untitled Document"

    def test_crlf_lines(self):
        content = segment_document(TxtExtraction(text="NOTES:\r\nfirst\r\nsecond"))
        assert content.sections[0].content == "first\nsecond"


class TestPdfSegmenter:

    def test_title_case_and_upper_headings(self):
        pages = [
            "Annual Report\nrevenue grew by ten percent this year.",
            "KEY RISKS\nsupply chain delays remain a concern.",
        ]
        content = segment_document(PdfExtraction(pages=pages))

        assert content.type == DocumentType.PDF
        assert content.title == "Annual Report"
        assert [s.title for s in content.sections] == ["Annual Report", "KEY RISKS"]
        assert content.raw_content == "\n".join(pages)

    def test_indent_sets_level(self):
        pages = ["intro words in lower case.\n  Market Overview\nsteady demand in most markets."]
        content = segment_document(PdfExtraction(pages=pages))
        assert content.sections[-1].title == "Market Overview"
        assert content.sections[-1].level == 2

    def test_no_pages(self):
        content = segment_document(PdfExtraction(pages=[]))
        assert content.title == "Untitled Document"
        assert content.sections[0].type == SectionType.GENERIC


class TestDocxSegmenter:

    def test_split_on_headings(self):
        markup = (
            "<p>Preamble</p>"
            "<h1>Project Plan</h1><p>Overview of the plan.</p>"
            "<h2>Tasks</h2><ul><li>Design</li><li>Build</li></ul>"
            "<h3>Budget</h3><table><tr><td><p>1</p></td></tr></table>"
        )
        content = segment_document(DocxExtraction(html=markup))

        assert content.type == DocumentType.DOCX
        assert content.title == "Project Plan"
        assert [(s.title, s.level, s.type) for s in content.sections] == [
            ("Project Plan", 1, SectionType.TEXT),
            ("Tasks", 2, SectionType.BULLET_POINTS),
            ("Budget", 3, SectionType.TABLE),
        ]
        assert "Preamble" not in "".join(s.content for s in content.sections)
        assert content.raw_content == markup

    def test_heading_markup_stripped_from_title(self):
        content = segment_document(DocxExtraction(html="<h2><strong>Bold &amp; Big</strong></h2><p>x</p>"))
        assert content.sections[0].title == "Bold & Big"

    def test_no_headings_falls_back(self):
        markup = "<p>First paragraph</p><p>Second</p>"
        content = segment_document(DocxExtraction(html=markup))

        assert content.title == "First paragraph"
        assert len(content.sections) == 1
        assert content.sections[0].type == SectionType.GENERIC
        assert content.sections[0].content == markup
