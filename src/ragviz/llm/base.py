"""Base generation collaborator interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..core.chunk import Chunk
from ..core.sql import SqlTranslation

# Returned by translate_to_sql when the backend answer cannot be parsed
PLACEHOLDER_SQL = "SELECT * FROM table;"
PLACEHOLDER_EXPLANATION = "Failed to parse SQL response."


class BaseGenerator(ABC):
    """Abstract base class for the external generation service.

    The pipelines talk to the backend only through these three calls.
    Implementations convert transport failures into ``GenerationError``
    subclasses and handle unparsable payloads themselves:
    ``translate_to_sql`` falls back to ``PLACEHOLDER_SQL`` and
    ``synthesize_mock_rows`` to an empty list.
    """

    @abstractmethod
    async def answer_with_context(self, query: str, context: list[Chunk]) -> str:
        """Answer ``query`` grounded in the given chunks.

        Args:
            query: User query
            context: Retrieved chunks (only ``id`` and ``text`` are used)

        Returns:
            Free-text answer
        """
        pass

    @abstractmethod
    async def translate_to_sql(self, query: str, schema_description: str) -> SqlTranslation:
        """Translate a natural-language question into SQL for the given schema."""
        pass

    @abstractmethod
    async def synthesize_mock_rows(self, sql: str) -> list[dict[str, Any]]:
        """Invent plausible result rows for ``sql``."""
        pass

    async def aclose(self) -> None:
        """Release transport resources, if any."""
        return None
