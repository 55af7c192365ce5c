"""Pytest configuration and global fixtures for ragviz tests."""

import random
from pathlib import Path

import pytest

from ragviz.chunker import FixedSizeChunker
from ragviz.config.models import ChunkingConfig, PipelineConfig, RetrievalConfig
from ragviz.core.chunk import Chunk
from ragviz.llm.providers.mock import MockGenerator
from ragviz.pipeline.driver import PipelineDriver
from ragviz.retrieval import KeywordRelevanceScorer
from tests.utils.doubles import RecordingHandler

SHORT_DOC = (
    "Rule 1: Keep chunks small. "
    "Rule 2: Embed every chunk. "
    "Rule 3: Store vectors in an index. "
    "Rule 4: Cite the source chunk in every answer."
)


# ==================== Config Fixtures ====================

@pytest.fixture
def fast_config() -> PipelineConfig:
    """No pacing delays and a pinned jitter seed."""
    return PipelineConfig(
        step_delay=0,
        stage_delay=0,
        retrieval=RetrievalConfig(seed=7),
    )


@pytest.fixture
def small_chunk_config() -> PipelineConfig:
    return PipelineConfig(
        step_delay=0,
        stage_delay=0,
        chunking=ChunkingConfig(chunk_size=40, overlap=10, min_stride=5),
        retrieval=RetrievalConfig(top_k=2, seed=7),
    )


# ==================== Component Fixtures ====================

@pytest.fixture
def short_doc() -> str:
    return SHORT_DOC


@pytest.fixture
def chunker() -> FixedSizeChunker:
    return FixedSizeChunker(chunk_size=40, overlap=10, min_stride=5)


@pytest.fixture
def seeded_scorer() -> KeywordRelevanceScorer:
    return KeywordRelevanceScorer(rng=random.Random(1234))


@pytest.fixture
def sample_chunks(chunker, short_doc) -> list[Chunk]:
    return chunker.chunk(short_doc, "rules.txt")


@pytest.fixture
def recorder() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def driver(fast_config, recorder) -> PipelineDriver:
    return PipelineDriver(config=fast_config, generator=MockGenerator(), callbacks=[recorder])


# ==================== Pytest Configuration ====================

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")


def pytest_collection_modifyitems(config, items):
    for item in items:
        rel_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "unit" in rel_path.parts:
            item.add_marker(pytest.mark.unit)
        elif "e2e" in rel_path.parts:
            item.add_marker(pytest.mark.e2e)
