"""
Pipeline base classes.

A pipeline is one mode's state machine: a step enum, its transition table,
the async transition function run when each step is entered, and the
observable state those functions write. Pipelines never loop on their own;
the driver decides how many transitions to run.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..chunker.base import BaseChunker
from ..config.models import PipelineConfig
from ..core.state import PipelineState, SessionInputs
from ..core.steps import PipelineMode
from ..errors import PipelineError, StaleRunError
from ..llm.base import BaseGenerator
from ..retrieval.base import BaseScorer
from .guard import FlightGuard


@dataclass
class StageContext:
    """
    Everything a transition function may use, plus the epoch its run was
    started under.

    Transition functions call ``ensure_current()`` after every await and
    before writing state, so a run invalidated by a reset stops without
    touching the fresh state.
    """
    inputs: SessionInputs
    config: PipelineConfig
    chunker: BaseChunker
    scorer: BaseScorer
    generator: BaseGenerator
    epoch: int
    guard: FlightGuard

    @property
    def is_current(self) -> bool:
        return self.guard.epoch == self.epoch

    def ensure_current(self) -> None:
        if not self.is_current:
            raise StaleRunError(self.epoch, self.guard.epoch)

    async def pace(self) -> None:
        """Visualization delay for stages that have nothing to compute."""
        await asyncio.sleep(self.config.stage_delay)
        self.ensure_current()


StageHandler = Callable[[StageContext], Awaitable[None]]


class BasePipeline(ABC):
    """
    Abstract base class for the three pipeline modes.

    Subclasses declare ``mode``, ``steps`` (an Enum whose first member is
    IDLE and last member is terminal), ``transitions``, ``default_query``
    and map every non-IDLE step to a transition function in ``handlers()``.
    """

    mode: PipelineMode
    steps: type[Enum]
    transitions: dict[Any, Any]
    default_query: str = ""

    def __init__(self):
        members = list(self.steps)
        self.idle = members[0]
        self.terminal = members[-1]

        missing = [s for s in members[1:] if s not in self.handlers()]
        if missing:
            raise PipelineError(
                f"{type(self).__name__} has no transition function for {missing}"
            )
        unmapped = [s for s in members if s not in self.transitions]
        if unmapped:
            raise PipelineError(
                f"{type(self).__name__} transition table misses {unmapped}"
            )

        self.state = self.new_state()

    @abstractmethod
    def new_state(self) -> PipelineState:
        """Fresh state with every field at its initial value."""
        pass

    @abstractmethod
    def handlers(self) -> dict[Any, StageHandler]:
        """Transition function per step (every step except IDLE)."""
        pass

    def next_step(self, current: Any) -> Any:
        return self.transitions[current]

    def is_terminal(self, step: Any) -> bool:
        return step == self.terminal

    def pause_reason(self, ctx: StageContext, auto: bool) -> str | None:
        """Why an auto run should stop before leaving the current step."""
        return None

    def resolve_query(self, ctx: StageContext) -> str:
        return ctx.inputs.query.strip() or self.default_query

    def begin_rerun(self) -> None:
        """Leave the terminal step: clear the last run and return to IDLE."""
        self.state.clear_run()
        self.state.current_step = self.idle

    def reset(self) -> None:
        self.state = self.new_state()

    async def run_stage(self, step: Any, ctx: StageContext) -> None:
        await self.handlers()[step](ctx)
