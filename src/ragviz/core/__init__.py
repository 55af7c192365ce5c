"""Core data entities for ragviz."""

from .chunk import Chunk, ChunkState
from .sql import ColumnSchema, SqlResult, SqlTranslation, TableSchema, describe_schema
from .state import (
    AgentPipelineState,
    DocumentPipelineState,
    PipelineState,
    SessionInputs,
    SqlPipelineState,
    ToolCallRecord,
)
from .steps import AgentStep, DocumentStep, PipelineMode, SqlStep

__all__ = [
    "Chunk",
    "ChunkState",
    "ColumnSchema",
    "TableSchema",
    "SqlTranslation",
    "SqlResult",
    "describe_schema",
    "PipelineState",
    "DocumentPipelineState",
    "AgentPipelineState",
    "SqlPipelineState",
    "SessionInputs",
    "ToolCallRecord",
    "PipelineMode",
    "DocumentStep",
    "AgentStep",
    "SqlStep",
]
