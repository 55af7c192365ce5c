"""Chunker factory."""

from typing import Any

from loguru import logger

from ..config.models import ChunkingConfig
from ..utils.registry import ComponentRegistry
from .base import BaseChunker
from .providers.fixed_size import FixedSizeChunker


class ChunkerFactory(ComponentRegistry):
    """Creates chunkers by type name; ``fixed_size`` is the only built-in."""

    _base = BaseChunker
    _kind = "chunker"
    _registry: dict[str, type[BaseChunker]] = {
        "fixed_size": FixedSizeChunker,
    }

    @classmethod
    def create(cls, chunker_type: str, **params: Any) -> BaseChunker:
        """
        Raises:
            ValueError: If chunker type is not registered
        """
        chunker_class = cls.lookup(chunker_type)
        logger.debug(f"Creating {chunker_class.__name__} with params: {params}")
        return chunker_class(**params)

    @classmethod
    def from_config(cls, config: ChunkingConfig) -> BaseChunker:
        return cls.create("fixed_size", **config.model_dump())
