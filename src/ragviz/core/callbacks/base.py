from abc import ABC
from typing import Any
from uuid import UUID


class BaseCallbackHandler(ABC):
    """Base callback handler for observing pipeline runs.

    Every hook is optional; handlers override only what they render.
    ``run_id`` identifies one call to ``PipelineDriver.advance``.
    """

    def on_run_start(self, mode: str, step: Any, auto: bool, run_id: UUID, **kwargs: Any) -> Any:
        """Run when the driver acquires the flight guard."""
        pass

    def on_step_start(self, mode: str, step: Any, run_id: UUID, **kwargs: Any) -> Any:
        """Run before a stage transition executes."""
        pass

    def on_step_end(self, mode: str, step: Any, run_id: UUID, elapsed_ms: float = 0.0, **kwargs: Any) -> Any:
        """Run after a stage transition completed and current_step was updated."""
        pass

    def on_pause(self, mode: str, step: Any, reason: str, run_id: UUID, **kwargs: Any) -> Any:
        """Run when an auto run stops early and waits for input."""
        pass

    def on_run_end(self, mode: str, step: Any, run_id: UUID, **kwargs: Any) -> Any:
        """Run when the driver releases the flight guard."""
        pass

    def on_error(self, error: Exception, run_id: UUID, **kwargs: Any) -> Any:
        """Run when a transition raised an unexpected exception."""
        pass
