from typing import Any, List, Optional
from uuid import UUID, uuid4

from loguru import logger

from .base import BaseCallbackHandler


class CallbackManager(BaseCallbackHandler):
    """Fans pipeline events out to a list of handlers.

    A failing handler is logged and skipped; observers never break a run.
    """

    def __init__(self, handlers: Optional[List[BaseCallbackHandler]] = None):
        self.handlers = handlers or []

    def add_handler(self, handler: BaseCallbackHandler):
        self.handlers.append(handler)

    def _dispatch(self, hook: str, *args: Any, **kwargs: Any) -> None:
        for handler in self.handlers:
            try:
                getattr(handler, hook)(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in callback handler {handler} ({hook}): {e}")

    def on_run_start(
        self, mode: str, step: Any, auto: bool, run_id: Optional[UUID] = None, **kwargs: Any
    ) -> Any:
        run_id = run_id or uuid4()
        self._dispatch("on_run_start", mode, step, auto, run_id, **kwargs)
        return run_id

    def on_step_start(self, mode: str, step: Any, run_id: UUID, **kwargs: Any) -> Any:
        self._dispatch("on_step_start", mode, step, run_id, **kwargs)

    def on_step_end(
        self, mode: str, step: Any, run_id: UUID, elapsed_ms: float = 0.0, **kwargs: Any
    ) -> Any:
        self._dispatch("on_step_end", mode, step, run_id, elapsed_ms=elapsed_ms, **kwargs)

    def on_pause(self, mode: str, step: Any, reason: str, run_id: UUID, **kwargs: Any) -> Any:
        self._dispatch("on_pause", mode, step, reason, run_id, **kwargs)

    def on_run_end(self, mode: str, step: Any, run_id: UUID, **kwargs: Any) -> Any:
        self._dispatch("on_run_end", mode, step, run_id, **kwargs)

    def on_error(self, error: Exception, run_id: UUID, **kwargs: Any) -> Any:
        self._dispatch("on_error", error, run_id, **kwargs)
