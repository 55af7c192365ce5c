"""Configuration models for pipeline components.

Components are configured from these pydantic models rather than from the
raw environment, so tests can build a fast, deterministic configuration
without touching ``os.environ``.
"""

from typing import Any

from pydantic import BaseModel, Field

from .settings import Settings


class ChunkingConfig(BaseModel):
    """Fixed-size chunking parameters.

    Attributes:
        chunk_size: Characters per window
        overlap: Characters shared by consecutive windows
        min_stride: Floor on the stride, guards chunk_size <= overlap
        min_chunk_length: Trimmed chunks must be strictly longer than this
        max_chunks: Upper bound on emitted chunks
    """

    chunk_size: int = Field(default=200, gt=0)
    overlap: int = Field(default=40, ge=0)
    min_stride: int = Field(default=20, gt=0)
    min_chunk_length: int = Field(default=5, ge=0)
    max_chunks: int = Field(default=50, ge=0)


class RetrievalConfig(BaseModel):
    """Heuristic relevance scoring parameters.

    Attributes:
        top_k: Number of chunks returned
        keyword_weight: Score added per matching query token
        bias_keyword: Marker keyword for the topical affinity bonus
        bias_weight: Bonus when query and chunk both contain the marker
        jitter: Upper bound of the uniform noise added to every score
        min_token_length: Shortest query token that counts (shorter ones are dropped)
        seed: Seed for the jitter source (None = real entropy)
    """

    top_k: int = Field(default=4, ge=1)
    keyword_weight: float = 1.0
    bias_keyword: str = "rule"
    bias_weight: float = 0.3
    jitter: float = Field(default=0.1, ge=0)
    min_token_length: int = Field(default=3, ge=1)
    seed: int | None = None


class GeneratorConfig(BaseModel):
    """Generation collaborator selection.

    Attributes:
        type: Provider type identifier ("mock", "openai")
        params: Provider-specific parameters
    """

    type: str = "mock"
    params: dict[str, Any] = Field(default_factory=dict)


class PipelineConfig(BaseModel):
    """Everything the pipeline driver needs.

    Attributes:
        chunking: Chunker parameters
        retrieval: Scorer parameters
        generator: Generation collaborator selection
        step_delay: Pause between auto-mode iterations (seconds, 0 still yields)
        stage_delay: Pacing delay inside stages that only animate
        pause_on_missing_query: Stop auto runs at STORING when no query is set
    """

    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    step_delay: float = Field(default=0.3, ge=0)
    stage_delay: float = Field(default=0.4, ge=0)
    pause_on_missing_query: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        """Build the pipeline configuration from global settings."""
        generator_params: dict[str, Any] = {}
        if settings.GENERATOR_TYPE != "mock":
            generator_params = {
                "base_url": settings.LLM_BASE_URL,
                "api_key": settings.LLM_API_KEY,
                "model": settings.LLM_MODEL,
                "sql_model": settings.LLM_SQL_MODEL,
                "timeout": settings.LLM_TIMEOUT,
            }

        return cls(
            chunking=ChunkingConfig(
                chunk_size=settings.CHUNK_SIZE,
                overlap=settings.CHUNK_OVERLAP,
                min_stride=settings.MIN_STRIDE,
                min_chunk_length=settings.MIN_CHUNK_LENGTH,
                max_chunks=settings.MAX_CHUNKS,
            ),
            retrieval=RetrievalConfig(
                top_k=settings.RETRIEVAL_TOP_K,
                seed=settings.RETRIEVAL_SEED,
            ),
            generator=GeneratorConfig(type=settings.GENERATOR_TYPE, params=generator_params),
            step_delay=settings.STEP_DELAY,
            stage_delay=settings.STAGE_DELAY,
            pause_on_missing_query=settings.PAUSE_ON_MISSING_QUERY,
        )
