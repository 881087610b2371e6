"""
Token-budget chunker: paragraph -> sentence -> word cascade
"""

import re
from typing import List, Dict, Any, Optional, Tuple, Pattern

from .base_chunker import BaseChunker, DocumentChunk, estimate_tokens

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
WORD_BREAK = re.compile(r"\s+")

PARAGRAPH_JOINER = "\n\n"


def _split_keep(text: str, pattern: Pattern) -> List[str]:
    """Split after each match so the separator stays on the preceding piece"""
    pieces = []
    start = 0
    for match in pattern.finditer(text):
        if match.end() > start:
            pieces.append(text[start:match.end()])
            start = match.end()
    if start < len(text):
        pieces.append(text[start:])
    return [piece for piece in pieces if piece]


class TokenBudgetChunker(BaseChunker):
    """
    Keeps every chunk within an estimated-token budget

    Paragraphs are packed together while they fit. A paragraph that is too
    big on its own is packed sentence by sentence, and a sentence that is
    too big is packed word by word. A single word over budget is emitted
    whole.
    """

    def split(self, text: str) -> List[Tuple[str, str]]:
        """
        Split text into (chunk, joiner) pairs

        The joiner is the separator that follows the chunk in the source:
        "\\n\\n" at a paragraph boundary, "" inside a paragraph or after the
        last chunk.
        """
        if self.fits(text):
            return [(text, "")]

        paragraphs = [p for p in PARAGRAPH_BREAK.split(text) if p.strip()]
        pieces: List[Tuple[str, str]] = []
        current = ""

        for paragraph in paragraphs:
            if current:
                candidate = current + PARAGRAPH_JOINER + paragraph
                if self.fits(candidate):
                    current = candidate
                    continue
                pieces.append((current, PARAGRAPH_JOINER))
                current = ""

            if self.fits(paragraph):
                current = paragraph
                continue

            sentences = self._accumulate(_split_keep(paragraph, SENTENCE_BREAK), atomic=False)
            pieces.extend((sentence_chunk, "") for sentence_chunk in sentences[:-1])
            current = sentences[-1] if sentences else ""

        if current:
            pieces.append((current, ""))

        self.logger.debug(
            f"Split {len(text)} chars ({estimate_tokens(text)} tokens) into {len(pieces)} chunks"
        )
        return pieces

    def _accumulate(self, units: List[str], atomic: bool) -> List[str]:
        """Pack units greedily; units that cannot fit fall back to word splitting"""
        chunks: List[str] = []
        current = ""

        for unit in units:
            candidate = current + unit
            if self.fits(candidate):
                current = candidate
                continue
            if current:
                chunks.append(current)
                current = ""
            if self.fits(unit):
                current = unit
            elif atomic:
                chunks.append(unit)
            else:
                words = self._accumulate(_split_keep(unit, WORD_BREAK), atomic=True)
                chunks.extend(words[:-1])
                current = words[-1] if words else ""

        if current:
            chunks.append(current)
        return chunks

    def chunk_text(self, text: str, metadata: Optional[Dict[str, Any]] = None) -> List[DocumentChunk]:
        pieces = self.split(text)
        chunks = []
        for index, (content, joiner) in enumerate(pieces):
            chunk_metadata = dict(metadata or {})
            chunk_metadata.update({
                "chunk_index": index,
                "total_chunks": len(pieces),
                "chunking_strategy": "token_budget",
                "joiner": joiner,
            })
            chunks.append(self._create_chunk(content, chunk_metadata))
        return chunks


def split_into_chunks(text: str, max_tokens: int = 4000) -> List[str]:
    """Split text into ordered chunks of at most max_tokens estimated tokens each"""
    return [content for content, _ in TokenBudgetChunker(max_tokens).split(text)]


def join_chunks(chunks: List[DocumentChunk]) -> str:
    """Reassemble chunks produced by TokenBudgetChunker.chunk_text"""
    return "".join(chunk.content + chunk.joiner for chunk in chunks)
