"""
Chunking module - keeps long section text within a token budget
"""

from .base_chunker import BaseChunker, DocumentChunk, estimate_tokens
from .token_chunker import TokenBudgetChunker, split_into_chunks, join_chunks

__all__ = [
    "BaseChunker",
    "DocumentChunk",
    "estimate_tokens",
    "TokenBudgetChunker",
    "split_into_chunks",
    "join_chunks",
]
