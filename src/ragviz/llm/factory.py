"""Generator factory for creating generation collaborators."""

from typing import Any

from loguru import logger

from ..config.models import GeneratorConfig
from ..errors import ConfigurationError
from ..utils.registry import ComponentRegistry, mask_secrets
from .base import BaseGenerator
from .providers.mock import MockGenerator
from .providers.openai_compat import OpenAICompatibleGenerator


class GeneratorFactory(ComponentRegistry):
    """
    Creates generators by type name.

    ``mock`` needs no network and is the default; ``openai`` talks to any
    OpenAI-compatible chat completions endpoint.
    """

    _base = BaseGenerator
    _kind = "generator"
    _registry: dict[str, type[BaseGenerator]] = {
        "mock": MockGenerator,
        "openai": OpenAICompatibleGenerator,
    }

    @classmethod
    def unknown_type(cls, component_type: str, available: str) -> Exception:
        return ConfigurationError(
            f"Unknown generator type: '{component_type}'. Available types: {available}",
            details={"type": component_type},
        )

    @classmethod
    def create(cls, generator_type: str, **params: Any) -> BaseGenerator:
        """
        Raises:
            ConfigurationError: If generator type is not registered
        """
        generator_class = cls.lookup(generator_type)
        logger.debug(f"Creating {generator_class.__name__} with params: {mask_secrets(params)}")
        return generator_class(**params)

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> BaseGenerator:
        return cls.create(config.type, **config.params)
