"""
ragviz error types.

``GenerationError`` covers every failure of the generation backend (HTTP
status, transport, unusable response). Stage transitions catch it and fall
back to a placeholder payload whose text carries ``message``, so messages
are written for the person watching the pipeline. Nothing is retried.

Pipeline errors signal misuse of the driver (unknown mode) or a run that a
reset invalidated while it was in flight.

    from ragviz.errors import RagVizError

    try:
        answer = await generator.answer_with_context(query, chunks)
    except RagVizError as e:
        logger.warning(f"Generation failed, using fallback: {e}")
"""

from typing import Any


class RagVizError(Exception):
    """
    Base exception for all ragviz errors.

    Attributes:
        message: Human-readable error description
        details: Extra context (status code, model, epochs...)
        original_error: The exception this one wraps, if any
    """

    default_message = "ragviz error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message or self.default_message
        self.details = dict(details or {})
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.original_error is not None:
            parts.append(f"Caused by: {type(self.original_error).__name__}: {self.original_error}")
        return " | ".join(parts)


class GenerationError(RagVizError):
    """Raised when the generation backend fails or returns unusable data."""

    default_message = "Generation backend failed"


class ConfigurationError(RagVizError):
    default_message = "Configuration error"


class PipelineError(RagVizError):
    default_message = "Pipeline misuse"


class UnknownModeError(PipelineError):
    def __init__(self, mode: Any):
        super().__init__(f"Unknown pipeline mode: {mode!r}", details={"mode": str(mode)})
        self.mode = mode


class StaleRunError(PipelineError):
    """
    Raised inside a transition whose run was invalidated by a reset.

    The driver treats it as a quiet stop: nothing the stale run computed is
    written to the fresh state.
    """

    def __init__(self, run_epoch: int, current_epoch: int):
        super().__init__(
            "Pipeline run was reset while in flight",
            details={"run_epoch": run_epoch, "current_epoch": current_epoch},
        )
        self.run_epoch = run_epoch
        self.current_epoch = current_epoch


# ==================== Helpers ====================

_STATUS_MESSAGES: dict[int, str] = {
    400: "Invalid request parameters",
    401: "Authentication failed - check LLM_API_KEY",
    403: "Authentication failed - check LLM_API_KEY",
    404: "Resource not found - check LLM_BASE_URL and model",
    429: "API rate limit exceeded",
    503: "Service temporarily unavailable",
}

# Checked in order against the lowercased error text and type name.
_TRANSPORT_HINTS: list[tuple[str, tuple[str, ...]]] = [
    ("Request timed out", ("timeout", "timed out")),
    ("Failed to connect to service", ("connect", "network", "dns")),
]


def classify_http_error(status_code: int, body: str = "") -> GenerationError:
    """Describe an HTTP error status as a ``GenerationError``; ``body`` is appended when present."""
    if status_code in _STATUS_MESSAGES:
        reason = _STATUS_MESSAGES[status_code]
    elif status_code >= 500:
        reason = f"Server error (HTTP {status_code})"
    else:
        reason = f"HTTP error {status_code}"

    message = f"{reason}: {body}" if body else reason
    return GenerationError(message, details={"status_code": status_code})


def wrap_exception(error: Exception, context: str = "") -> GenerationError:
    """
    Wrap a transport-level exception in a ``GenerationError``.

    Already-wrapped errors pass through unchanged.
    """
    if isinstance(error, GenerationError):
        return error

    text = str(error).lower()
    type_name = type(error).__name__.lower()
    label = "Backend request failed"
    for candidate, hints in _TRANSPORT_HINTS:
        if any(hint in text or hint in type_name for hint in hints):
            label = candidate
            break

    where = f" during {context}" if context else ""
    return GenerationError(f"{label}{where}: {error}", original_error=error)
