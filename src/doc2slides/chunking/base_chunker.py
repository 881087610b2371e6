"""
Base chunker abstraction
"""

import math
import uuid
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Rough token estimate: one token per four characters, rounded up"""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


@dataclass
class DocumentChunk:
    """One contiguous piece of a section's content"""
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    chunk_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not self.chunk_id:
            self.chunk_id = str(uuid.uuid4())

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def tokens(self) -> int:
        return estimate_tokens(self.content)

    @property
    def joiner(self) -> str:
        """Separator that follows this chunk when the chunks are rejoined"""
        return self.metadata.get("joiner", "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "metadata": self.metadata,
            "chunk_id": self.chunk_id,
            "size": self.size,
            "tokens": self.tokens,
        }


class BaseChunker(ABC):
    """
    Base class for chunkers

    Subclasses implement chunk_text; the budget is expressed in estimated
    tokens rather than characters.
    """

    def __init__(self, max_tokens: int = 4000) -> None:
        """
        Args:
            max_tokens: per-chunk token budget, at least 1
        """
        if max_tokens < 1:
            raise ValueError(f"max_tokens must be at least 1, got {max_tokens}")
        self.max_tokens = max_tokens
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def chunk_text(self, text: str, metadata: Optional[Dict[str, Any]] = None) -> List[DocumentChunk]:
        """
        Split text into chunks

        Args:
            text: text to split
            metadata: extra metadata copied onto every chunk

        Returns:
            ordered list of DocumentChunk objects
        """
        pass

    def fits(self, text: str) -> bool:
        return estimate_tokens(text) <= self.max_tokens

    def validate_chunk_size(self, chunk: DocumentChunk) -> bool:
        return chunk.tokens <= self.max_tokens

    def _create_chunk(self, content: str, metadata: Optional[Dict[str, Any]] = None) -> DocumentChunk:
        # Content is kept verbatim so chunks rejoin to the source text
        return DocumentChunk(content=content, metadata=dict(metadata or {}))

    def get_chunk_statistics(self, chunks: List[DocumentChunk]) -> Dict[str, Any]:
        """
        Summary statistics for a chunk list

        Args:
            chunks: chunks to describe

        Returns:
            counts plus total/avg/min/max estimated tokens and total characters
        """
        if not chunks:
            return {
                "total_chunks": 0,
                "total_size": 0,
                "total_tokens": 0,
                "avg_tokens": 0,
                "min_tokens": 0,
                "max_tokens": 0,
                "over_budget": 0,
            }

        tokens = [chunk.tokens for chunk in chunks]

        return {
            "total_chunks": len(chunks),
            "total_size": sum(chunk.size for chunk in chunks),
            "total_tokens": sum(tokens),
            "avg_tokens": sum(tokens) / len(tokens),
            "min_tokens": min(tokens),
            "max_tokens": max(tokens),
            "over_budget": sum(1 for chunk in chunks if not self.validate_chunk_size(chunk)),
        }
