"""
ragviz - orchestration core for a RAG pipeline visualizer.

Drives three teaching pipelines (document RAG, agentic RAG and text-to-SQL)
as step-by-step state machines whose intermediate state can be observed
after every transition.
"""

__version__ = "0.1.0"

# Core entities
from .core import (
    AgentPipelineState,
    AgentStep,
    Chunk,
    ChunkState,
    DocumentPipelineState,
    DocumentStep,
    PipelineMode,
    PipelineState,
    SqlPipelineState,
    SqlResult,
    SqlStep,
)
from .core.callbacks import BaseCallbackHandler, CallbackManager, StdOutCallbackHandler

# Configuration
from .config import PipelineConfig, Settings, settings

# Components
from .chunker import BaseChunker, ChunkerFactory, FixedSizeChunker
from .llm import BaseGenerator, GeneratorFactory, MockGenerator, OpenAICompatibleGenerator
from .retrieval import BaseScorer, KeywordRelevanceScorer

# Pipelines
from .pipeline import AgentPipeline, DocumentPipeline, FlightGuard, PipelineDriver, SqlPipeline

# Errors
from .errors import GenerationError, PipelineError, RagVizError, StaleRunError, UnknownModeError

__all__ = [
    # Version
    "__version__",
    # Core
    "Chunk",
    "ChunkState",
    "PipelineMode",
    "DocumentStep",
    "AgentStep",
    "SqlStep",
    "PipelineState",
    "DocumentPipelineState",
    "AgentPipelineState",
    "SqlPipelineState",
    "SqlResult",
    # Callbacks
    "BaseCallbackHandler",
    "CallbackManager",
    "StdOutCallbackHandler",
    # Config
    "PipelineConfig",
    "Settings",
    "settings",
    # Components
    "BaseChunker",
    "FixedSizeChunker",
    "ChunkerFactory",
    "BaseScorer",
    "KeywordRelevanceScorer",
    "BaseGenerator",
    "MockGenerator",
    "OpenAICompatibleGenerator",
    "GeneratorFactory",
    # Pipelines
    "PipelineDriver",
    "FlightGuard",
    "DocumentPipeline",
    "AgentPipeline",
    "SqlPipeline",
    # Errors
    "RagVizError",
    "GenerationError",
    "PipelineError",
    "UnknownModeError",
    "StaleRunError",
]
