"""Fixed-size chunker implementation."""

from uuid import uuid4

from loguru import logger

from ...core.chunk import Chunk, ChunkState
from ..base import BaseChunker


def _validate(chunk_size: int, overlap: int, max_chunks: int) -> None:
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if overlap < 0:
        raise ValueError("overlap must be non-negative")
    if max_chunks < 0:
        raise ValueError("max_chunks must be non-negative")


class FixedSizeChunker(BaseChunker):
    """Chunks text into fixed-size, overlapping character windows.

    The window advances by ``max(min_stride, chunk_size - overlap)``
    characters, so a configuration with ``overlap >= chunk_size`` still makes
    progress. Windows whose trimmed text is not longer than
    ``min_chunk_length`` are dropped.

    Attributes:
        chunk_size: Characters per window
        overlap: Characters shared by consecutive windows
        min_stride: Floor on the stride
        min_chunk_length: Trimmed text must be strictly longer than this
        max_chunks: Upper bound on emitted chunks
    """

    def __init__(
        self,
        chunk_size: int = 200,
        overlap: int = 40,
        min_stride: int = 20,
        min_chunk_length: int = 5,
        max_chunks: int = 50,
    ):
        """Initialize the chunker.

        Raises:
            ValueError: If chunk_size or min_stride <= 0, or overlap, min_chunk_length
                or max_chunks is negative
        """
        _validate(chunk_size, overlap, max_chunks)
        if min_stride <= 0:
            raise ValueError("min_stride must be positive")
        if min_chunk_length < 0:
            raise ValueError("min_chunk_length must be non-negative")

        self.chunk_size = chunk_size
        self.overlap = overlap
        self.min_stride = min_stride
        self.min_chunk_length = min_chunk_length
        self.max_chunks = max_chunks

    @property
    def stride(self) -> int:
        return self.stride_for(self.chunk_size, self.overlap)

    def stride_for(self, chunk_size: int, overlap: int) -> int:
        return max(self.min_stride, chunk_size - overlap)

    def chunk(
        self,
        content: str,
        source_name: str,
        chunk_size: int | None = None,
        overlap: int | None = None,
        max_chunks: int | None = None,
    ) -> list[Chunk]:
        """Split a document into fixed-size chunks.

        Chunk ids are ``"{batch}-{ordinal}"`` with a fresh batch prefix per
        call, so re-chunking never reuses an id from a previous chunk set.

        Args:
            content: Raw document text
            source_name: Display name used in chunk metadata
            chunk_size: Overrides the configured window size for this call
            overlap: Overrides the configured overlap for this call
            max_chunks: Overrides the configured chunk limit for this call

        Returns:
            Ordered list of pending chunks
        """
        size = self.chunk_size if chunk_size is None else chunk_size
        overlap = self.overlap if overlap is None else overlap
        limit = self.max_chunks if max_chunks is None else max_chunks
        _validate(size, overlap, limit)

        chunks: list[Chunk] = []
        if not content:
            return chunks

        stride = self.stride_for(size, overlap)
        batch = uuid4().hex[:8]
        length = len(content)
        start = 0

        while start < length and len(chunks) < limit:
            end = start + size
            text = content[start:end].strip()

            if len(text) > self.min_chunk_length:
                ordinal = len(chunks) + 1
                chunks.append(Chunk(
                    id=f"{batch}-{ordinal}",
                    text=text,
                    metadata=f"{source_name} • Segment {ordinal}",
                    state=ChunkState.PENDING,
                    ordinal=ordinal,
                    start_char=start,
                    end_char=min(end, length),
                ))

            # The window already reached the end; anything further is covered.
            if end >= length:
                break
            start += stride

        logger.debug(f"Split '{source_name}' ({length} chars) into {len(chunks)} chunks")
        return chunks
