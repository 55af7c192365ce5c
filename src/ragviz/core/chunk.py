"""Chunk entity representing a segment of a document."""

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class ChunkState(str, Enum):
    """Lifecycle of a chunk inside one ingestion."""
    PENDING = "pending"        # Freshly chunked
    PROCESSED = "processed"    # "Embedded"
    RETRIEVED = "retrieved"    # Selected by the last retrieval


class Chunk(BaseModel):
    """Represents a chunk of text from a document.

    Attributes:
        id: Unique identifier, stable for the lifetime of one ingestion
        text: Trimmed substring of the source document
        metadata: Human-readable provenance ("{source} • Segment {n}")
        state: Lifecycle state
        score: Relevance score, set only by retrieval
        ordinal: 1-based position within the ingestion
        start_char: Window start offset in the source document
        end_char: Window end offset (exclusive)
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    text: str = Field(..., min_length=1)
    metadata: str = ""
    state: ChunkState = ChunkState.PENDING
    score: float | None = None
    ordinal: int = Field(default=1, ge=1)
    start_char: int = Field(default=0, ge=0)
    end_char: int = Field(default=0, ge=0)

    model_config = {
        "str_strip_whitespace": True,
        "frozen": False,
    }
