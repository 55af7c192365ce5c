from typing import Any
from uuid import UUID

from loguru import logger

from .base import BaseCallbackHandler


def _name(step: Any) -> str:
    return getattr(step, "value", str(step))


class StdOutCallbackHandler(BaseCallbackHandler):
    """Callback Handler that logs pipeline progress using loguru."""

    def on_run_start(self, mode: str, step: Any, auto: bool, run_id: UUID, **kwargs: Any) -> Any:
        kind = "auto" if auto else "manual"
        logger.info(f"[Callback] Run Start: {mode} from {_name(step)} ({kind}, run_id={run_id})")

    def on_step_end(self, mode: str, step: Any, run_id: UUID, elapsed_ms: float = 0.0, **kwargs: Any) -> Any:
        logger.info(f"[Callback] {mode} -> {_name(step)} ({elapsed_ms:.1f}ms)")

    def on_pause(self, mode: str, step: Any, reason: str, run_id: UUID, **kwargs: Any) -> Any:
        logger.warning(f"[Callback] {mode} paused at {_name(step)}: {reason}")

    def on_run_end(self, mode: str, step: Any, run_id: UUID, **kwargs: Any) -> Any:
        logger.info(f"[Callback] Run End: {mode} at {_name(step)} (run_id={run_id})")

    def on_error(self, error: Exception, run_id: UUID, **kwargs: Any) -> Any:
        logger.error(f"[Callback] Error: {error} (run_id={run_id})")
