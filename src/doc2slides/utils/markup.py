"""
HTML markup helpers built on BeautifulSoup
"""

import re
import warnings
from typing import List

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning, NavigableString, Tag

_WHITESPACE = re.compile(r"[ \t\r\f\v]+")
_BLOCK_TAGS = {"p", "h1", "h2", "h3", "h4", "h5", "h6", "div"}


def _soup(markup: str) -> BeautifulSoup:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        return BeautifulSoup(markup, "html.parser")


def strip_tags(markup: str) -> str:
    """Remove all tags and decode entities, keeping the text as-is"""
    if not markup:
        return ""
    return _soup(markup).get_text()


def _inline_text(node) -> str:
    return _WHITESPACE.sub(" ", node.get_text()).strip()


def _render(node, lines: List[str]):
    if isinstance(node, NavigableString):
        text = _WHITESPACE.sub(" ", str(node)).strip()
        if text:
            lines.append(text)
        return
    if not isinstance(node, Tag):
        return

    if node.name in ("ul", "ol"):
        for number, item in enumerate(node.find_all("li", recursive=False), start=1):
            marker = f"{number}." if node.name == "ol" else "-"
            text = _inline_text(item)
            if text:
                lines.append(f"{marker} {text}")
    elif node.name == "table":
        for row in node.find_all("tr"):
            cells = [_inline_text(cell) for cell in row.find_all(["td", "th"])]
            lines.append("| " + " | ".join(cells) + " |")
    elif node.name == "img":
        alt = node.get("alt")
        if alt:
            lines.append(f"[Image: {alt}]")
    elif node.name in _BLOCK_TAGS or node.name == "li":
        text = _inline_text(node)
        if text:
            lines.append(text)
    else:
        for child in node.children:
            _render(child, lines)


def markup_to_text(markup: str) -> str:
    """
    Render a markup fragment as line-oriented plain text

    Lists become "- item" / "1. item" lines and tables become "| a | b |"
    rows, so the result can go through the plain-text classifier and slide
    formatting unchanged.
    """
    if not markup:
        return ""
    lines: List[str] = []
    for child in _soup(markup).children:
        _render(child, lines)
    return "\n".join(lines)
