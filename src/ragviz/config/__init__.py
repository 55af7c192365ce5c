"""Configuration system for ragviz."""

from .models import ChunkingConfig, GeneratorConfig, PipelineConfig, RetrievalConfig
from .settings import Settings, load_settings, settings

__all__ = [
    "ChunkingConfig",
    "GeneratorConfig",
    "PipelineConfig",
    "RetrievalConfig",
    "Settings",
    "load_settings",
    "settings",
]
