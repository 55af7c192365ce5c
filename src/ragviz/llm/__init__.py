"""Generation collaborator: the external service boundary.

This module provides the generator interface, an offline mock, an
OpenAI-compatible HTTP implementation and a factory.
"""

from .base import PLACEHOLDER_EXPLANATION, PLACEHOLDER_SQL, BaseGenerator
from .factory import GeneratorFactory
from .prompts import build_grounded_prompt
from .providers.mock import MockGenerator
from .providers.openai_compat import OpenAICompatibleGenerator

__all__ = [
    "BaseGenerator",
    "GeneratorFactory",
    "MockGenerator",
    "OpenAICompatibleGenerator",
    "PLACEHOLDER_SQL",
    "PLACEHOLDER_EXPLANATION",
    "build_grounded_prompt",
]
