"""Base chunker interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..core.chunk import Chunk


class BaseChunker(ABC):
    """Abstract base class for text chunking.

    Chunkers split one raw document into ordered chunks that start in the
    ``pending`` state.
    """

    @abstractmethod
    def chunk(self, content: str, source_name: str, **overrides: Any) -> list[Chunk]:
        """Split a document into chunks.

        Args:
            content: Raw document text
            source_name: Display name used in chunk provenance
            **overrides: Implementation-specific per-call parameters

        Returns:
            Ordered chunks, empty for empty content
        """
        pass
