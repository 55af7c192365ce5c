"""Pipeline state machines and the driver that steps them."""

from .agentic import RUN_SEPARATOR, AgentPipeline
from .base import BasePipeline, StageContext
from .document import NEEDS_QUERY, DocumentPipeline
from .driver import PipelineDriver
from .guard import FlightGuard
from .sql import SqlPipeline
from .stages import FALLBACK_ANSWER

__all__ = [
    "BasePipeline",
    "StageContext",
    "DocumentPipeline",
    "AgentPipeline",
    "SqlPipeline",
    "PipelineDriver",
    "FlightGuard",
    "FALLBACK_ANSWER",
    "NEEDS_QUERY",
    "RUN_SEPARATOR",
]
