"""
Tests for token-budget chunking
"""

import pytest

from doc2slides.chunking import TokenBudgetChunker
from doc2slides.chunking.base_chunker import estimate_tokens
from doc2slides.chunking.token_chunker import join_chunks, split_into_chunks


def long_paragraph(length: int = 9000) -> str:
    sentence = "The quarterly figures show steady growth across all regions. "
    text = sentence * (length // len(sentence) + 1)
    return text[:length]


class TestEstimateTokens:

    def test_rounds_up(self):
        """Four characters per token, rounded up"""
        assert estimate_tokens("") == 0
        assert estimate_tokens("abcd") == 1
        assert estimate_tokens("abcde") == 2

    def test_nine_thousand_chars(self):
        assert estimate_tokens("x" * 9000) == 2250


class TestTokenBudgetChunker:

    def test_rejects_non_positive_budget(self):
        """A budget below one token is a usage error"""
        with pytest.raises(ValueError):
            TokenBudgetChunker(0)

    def test_text_within_budget_is_one_chunk(self):
        text = long_paragraph()
        assert split_into_chunks(text, max_tokens=4000) == [text]

    def test_long_paragraph_split_by_sentences(self):
        """9000 characters under a 500-token budget rejoin to the original"""
        text = long_paragraph()
        chunks = split_into_chunks(text, max_tokens=500)

        assert len(chunks) >= 5
        assert "".join(chunks) == text
        assert all(estimate_tokens(chunk) <= 500 for chunk in chunks)

    def test_paragraphs_packed_and_rejoined(self):
        """Chunks break at paragraph boundaries and joiners restore them"""
        paragraphs = [f"Paragraph {i} " + "word " * 30 for i in range(10)]
        text = "\n\n".join(paragraphs)
        chunker = TokenBudgetChunker(max_tokens=100)

        chunks = chunker.chunk_text(text)

        assert len(chunks) > 1
        assert all(chunker.validate_chunk_size(chunk) for chunk in chunks)
        assert join_chunks(chunks) == text
        assert chunks[-1].joiner == ""
        assert all(chunk.joiner == "\n\n" for chunk in chunks[:-1])

    def test_blank_paragraphs_dropped(self):
        chunker = TokenBudgetChunker(max_tokens=20)
        text = "first " * 10 + "\n\n   \n\n" + "second " * 10

        pieces = [content for content, _ in chunker.split(text)]

        assert all(piece.strip() for piece in pieces)
        assert pieces[0].startswith("first")
        assert pieces[-1].rstrip().endswith("second")

    def test_oversized_word_emitted_whole(self):
        """A single word larger than the budget is not cut"""
        word = "x" * 100
        text = f"short words here {word} and more words"
        chunks = split_into_chunks(text, max_tokens=10)

        assert any(word in chunk for chunk in chunks)
        assert "".join(chunks) == text

    def test_chunk_metadata(self):
        chunker = TokenBudgetChunker(max_tokens=500)
        chunks = chunker.chunk_text(long_paragraph(), metadata={"section": "Intro"})

        for index, chunk in enumerate(chunks):
            assert chunk.metadata["chunk_index"] == index
            assert chunk.metadata["total_chunks"] == len(chunks)
            assert chunk.metadata["chunking_strategy"] == "token_budget"
            assert chunk.metadata["section"] == "Intro"

    def test_chunk_statistics(self):
        chunker = TokenBudgetChunker(max_tokens=500)
        chunks = chunker.chunk_text(long_paragraph())

        stats = chunker.get_chunk_statistics(chunks)

        assert stats["total_chunks"] == len(chunks)
        assert stats["total_size"] == 9000
        assert stats["max_tokens"] <= 500
        assert stats["over_budget"] == 0

    def test_statistics_of_nothing(self):
        stats = TokenBudgetChunker().get_chunk_statistics([])
        assert stats["total_chunks"] == 0
        assert stats["avg_tokens"] == 0
