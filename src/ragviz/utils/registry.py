"""Name-to-class registry shared by the component factories."""

from typing import Any, ClassVar

from loguru import logger


class ComponentRegistry:
    """
    Class-level registry of component implementations.

    Subclasses set ``_base`` (the ABC every entry must extend), ``_kind``
    (used in messages) and ``_registry``. ``create`` stays on the subclass
    so each factory logs construction in its own terms.
    """

    _base: ClassVar[type] = object
    _kind: ClassVar[str] = "component"
    _registry: ClassVar[dict[str, type]] = {}

    @classmethod
    def unknown_type(cls, component_type: str, available: str) -> Exception:
        return ValueError(f"Unknown {cls._kind} type: '{component_type}'. Available types: {available}")

    @classmethod
    def lookup(cls, component_type: str) -> type:
        try:
            return cls._registry[component_type]
        except KeyError:
            available = ", ".join(cls._registry) or "none"
            raise cls.unknown_type(component_type, available) from None

    @classmethod
    def register(cls, component_type: str, component_class: type) -> None:
        """
        Register ``component_class`` under ``component_type``.

        Raises:
            TypeError: If the class does not extend the registry's base
        """
        if not (isinstance(component_class, type) and issubclass(component_class, cls._base)):
            name = getattr(component_class, "__name__", repr(component_class))
            raise TypeError(f"{name} must be a subclass of {cls._base.__name__}")

        cls._registry[component_type] = component_class
        logger.info(f"Registered {cls._kind} type '{component_type}': {component_class.__name__}")

    @classmethod
    def list_types(cls) -> list[str]:
        return list(cls._registry)


def mask_secrets(params: dict[str, Any], keys: tuple[str, ...] = ("api_key",)) -> dict[str, Any]:
    """Copy of ``params`` safe to log."""
    return {k: ("***" if k in keys and v else v) for k, v in params.items()}
