"""
DOCX extractor: renders a Word document body as simple HTML with python-docx
"""

import asyncio
import base64
import html
import io
import logging
import re
from typing import List, Optional, Tuple

from docx import Document
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from ..core.exceptions import ExtractionError
from ..core.models import DocumentType, DocxExtraction
from ..utils.thread_pool import run_blocking_io
from .base import BaseExtractor

logger = logging.getLogger(__name__)

HEADING_STYLE = re.compile(r"^Heading\s+(\d)$", re.IGNORECASE)


class DocxHtmlRenderer:
    """
    Converts one python-docx Document into HTML

    Paragraphs and tables are visited in body order. Heading styles map to
    h1-h6, list paragraphs are grouped into ul/ol, and inline pictures are
    embedded as data URIs.
    """

    def __init__(self, document):
        self.document = document
        self.messages: List[str] = []
        self._parts: List[str] = []
        self._open_list: Optional[str] = None

    def render(self) -> str:
        body = self.document.element.body
        for child in body.iterchildren():
            if child.tag == qn("w:p"):
                self._render_paragraph(Paragraph(child, self.document))
            elif child.tag == qn("w:tbl"):
                self._close_list()
                self._parts.append(self._render_table(Table(child, self.document)))
        self._close_list()
        return "".join(self._parts)

    def _close_list(self):
        if self._open_list:
            self._parts.append(f"</{self._open_list}>")
            self._open_list = None

    def _render_paragraph(self, paragraph: Paragraph):
        inner = self._render_runs(paragraph)
        if not inner.strip():
            return

        tag, list_tag = self._classify_paragraph(paragraph)
        if list_tag:
            if self._open_list != list_tag:
                self._close_list()
                self._parts.append(f"<{list_tag}>")
                self._open_list = list_tag
            self._parts.append(f"<li>{inner}</li>")
            return

        self._close_list()
        self._parts.append(f"<{tag}>{inner}</{tag}>")

    def _classify_paragraph(self, paragraph: Paragraph) -> Tuple[str, Optional[str]]:
        """Returns (block tag, list tag or None)"""
        style_name = paragraph.style.name if paragraph.style is not None else ""

        if style_name == "Title":
            return "h1", None
        match = HEADING_STYLE.match(style_name)
        if match:
            level = min(max(int(match.group(1)), 1), 6)
            return f"h{level}", None

        if style_name.startswith("List Number"):
            return "li", "ol"
        if style_name.startswith("List Bullet") or style_name.startswith("List Paragraph"):
            return "li", "ul"
        p_pr = paragraph._p.pPr
        if p_pr is not None and p_pr.numPr is not None:
            return "li", "ul"

        return "p", None

    def _render_runs(self, paragraph: Paragraph) -> str:
        pieces = []
        for run in paragraph.runs:
            for r_id in run._r.xpath(".//a:blip/@r:embed"):
                image = self._render_image(r_id)
                if image:
                    pieces.append(image)

            text = run.text
            if not text:
                continue
            text = html.escape(text).replace("\n", "<br />")
            if run.bold:
                text = f"<strong>{text}</strong>"
            if run.italic:
                text = f"<em>{text}</em>"
            pieces.append(text)
        return "".join(pieces)

    def _render_image(self, r_id: str) -> str:
        part = self.document.part.related_parts.get(r_id)
        if part is None:
            self.messages.append(f"Image relationship {r_id} not found")
            return ""
        content_type = getattr(part, "content_type", "image/png")
        encoded = base64.b64encode(part.blob).decode("ascii")
        return f'<img src="data:{content_type};base64,{encoded}" />'

    def _render_table(self, table: Table) -> str:
        rows = []
        for row in table.rows:
            cells = []
            for cell in row.cells:
                paragraphs = "".join(
                    f"<p>{self._render_runs(p)}</p>" for p in cell.paragraphs if p.text.strip()
                )
                cells.append(f"<td>{paragraphs}</td>")
            rows.append(f"<tr>{''.join(cells)}</tr>")
        return f"<table>{''.join(rows)}</table>"


def convert_docx_to_html(data: bytes) -> Tuple[str, List[str]]:
    """Blocking conversion; returns (html, conversion messages)"""
    document = Document(io.BytesIO(data))
    renderer = DocxHtmlRenderer(document)
    markup = renderer.render()
    return markup, renderer.messages


class DocxExtractor(BaseExtractor):
    """Runs the conversion in the thread pool under a timeout"""

    document_type = DocumentType.DOCX

    def __init__(self, timeout: float = 60.0):
        self.timeout = timeout

    async def _extract(self, data: bytes) -> DocxExtraction:
        try:
            markup, messages = await asyncio.wait_for(
                run_blocking_io(convert_docx_to_html, data),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"DOCX conversion timed out after {self.timeout}s")
            raise ExtractionError("DOCX conversion timeout", "docx") from e
        except Exception as e:
            logger.error(f"DOCX processing error: {e}")
            raise ExtractionError(str(e) or e.__class__.__name__, "docx") from e

        for message in messages:
            logger.warning(f"DOCX conversion: {message}")
        return DocxExtraction(html=markup, messages=messages)
