"""Base relevance scorer interface."""

from abc import ABC, abstractmethod

from ..core.chunk import Chunk


class BaseScorer(ABC):
    """Ranks a chunk set against a query and keeps the top K."""

    @abstractmethod
    def retrieve(self, query: str, chunks: list[Chunk], k: int) -> list[Chunk]:
        """Select the chunks most relevant to ``query``.

        Args:
            query: Free-text query
            chunks: Candidate chunks (not mutated)
            k: Maximum number of results

        Returns:
            Scored copies of the selected chunks, best first
        """
        pass
