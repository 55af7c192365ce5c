"""
Pipeline Driver.

Generic stepping engine shared by all modes:
- resolves current → next step from the mode's transition table
- runs that step's transition function and then publishes the new step
- enforces single-flight execution (extra triggers are dropped, not queued)
- supports one-step (manual) and run-to-terminal (auto) advancement,
  yielding to the event loop between steps so observers see every state
- invalidates in-flight work on reset via the guard epoch
"""

import asyncio
from uuid import UUID

from loguru import logger

from ..chunker.base import BaseChunker
from ..chunker.factory import ChunkerFactory
from ..config.models import PipelineConfig
from ..config.settings import settings
from ..core.callbacks.base import BaseCallbackHandler
from ..core.callbacks.manager import CallbackManager
from ..core.samples import SAMPLE_DOC, SAMPLE_DOCUMENT_NAME, SAMPLE_QUERY
from ..core.state import PipelineState, SessionInputs
from ..core.steps import PipelineMode
from ..errors import StaleRunError, UnknownModeError
from ..llm.base import BaseGenerator
from ..llm.factory import GeneratorFactory
from ..retrieval.base import BaseScorer
from ..retrieval.keyword import KeywordRelevanceScorer
from ..utils.performance import timer
from .agentic import AgentPipeline
from .base import BasePipeline, StageContext
from .document import DocumentPipeline
from .guard import FlightGuard
from .sql import SqlPipeline


class PipelineDriver:
    """
    Owns the pipelines, their state and the single-flight guard.

    External callers read ``state(mode)`` and use the command surface:
    ``advance``, ``reset``, ``set_query``, ``select_mode``,
    ``load_document`` and ``load_sample``.

    Example:
        driver = PipelineDriver(config=PipelineConfig(step_delay=0, stage_delay=0))
        driver.set_query("What is rule 4?")
        await driver.advance(PipelineMode.DOCUMENT, auto=True)
        print(driver.state(PipelineMode.DOCUMENT).answer)
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        generator: BaseGenerator | None = None,
        chunker: BaseChunker | None = None,
        scorer: BaseScorer | None = None,
        callbacks: list[BaseCallbackHandler] | None = None,
        mode: PipelineMode = PipelineMode.DOCUMENT,
    ):
        self.config = config if config is not None else PipelineConfig.from_settings(settings)
        self.generator = generator if generator is not None else GeneratorFactory.from_config(self.config.generator)
        self.chunker = chunker if chunker is not None else ChunkerFactory.from_config(self.config.chunking)
        self.scorer = scorer if scorer is not None else KeywordRelevanceScorer.from_config(self.config.retrieval)
        self.callbacks = CallbackManager(list(callbacks or []))

        self.guard = FlightGuard()
        self.inputs = SessionInputs()
        self.mode = PipelineMode(mode)
        self._pipelines: dict[PipelineMode, BasePipeline] = {
            PipelineMode.DOCUMENT: DocumentPipeline(),
            PipelineMode.AGENTIC: AgentPipeline(),
            PipelineMode.SQL: SqlPipeline(),
        }

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def pipeline(self, mode: PipelineMode | str | None = None) -> BasePipeline:
        key = self.mode if mode is None else mode
        try:
            return self._pipelines[PipelineMode(key)]
        except (ValueError, KeyError):
            raise UnknownModeError(key) from None

    def state(self, mode: PipelineMode | str | None = None) -> PipelineState:
        return self.pipeline(mode).state

    @property
    def busy(self) -> bool:
        return self.guard.busy

    async def aclose(self) -> None:
        """Release the generator's HTTP resources."""
        await self.generator.aclose()

    # ------------------------------------------------------------------
    # Command surface
    # ------------------------------------------------------------------

    def set_query(self, query: str) -> None:
        self.inputs.query = query or ""

    def select_mode(self, mode: PipelineMode | str) -> None:
        """Switch the active mode; switching resets everything."""
        new_mode = PipelineMode(mode)
        if new_mode != self.mode:
            logger.info(f"Switching mode {self.mode.value} -> {new_mode.value}")
            self.mode = new_mode
            self.reset()

    def reset(self) -> None:
        """
        Return every pipeline to IDLE with empty payloads and clear inputs.

        Work still in flight is not cancelled; it notices the new epoch at
        its next suspension point and discards its result.
        """
        epoch = self.guard.invalidate()
        for pipeline in self._pipelines.values():
            pipeline.reset()
        self.inputs = SessionInputs()
        logger.info(f"Pipelines reset (epoch={epoch})")

    def load_document(self, content: str, name: str) -> None:
        """Reset and make ``content`` the active document (the upload command)."""
        self.reset()
        self.inputs.document_content = content or ""
        self.inputs.document_name = name or ""
        logger.info(f"Loaded document '{name}' ({len(self.inputs.document_content)} chars)")

    def load_sample(self) -> None:
        """Reset and load the built-in guidelines with a ready-made query."""
        self.load_document(SAMPLE_DOC, SAMPLE_DOCUMENT_NAME)
        self.set_query(SAMPLE_QUERY)

    async def advance(self, mode: PipelineMode | str | None = None, auto: bool = False) -> None:
        """
        Advance ``mode`` by one step, or until its terminal step when ``auto``.

        A no-op while another advance is in flight. Never raises for
        failures inside a transition: those are logged, reported to the
        callbacks and surfaced on ``state.error``.
        """
        pipeline = self.pipeline(mode)
        mode_name = pipeline.mode.value

        token = self.guard.try_acquire()
        if token is None:
            logger.debug(f"Ignoring advance({mode_name}): a transition is already in flight")
            return

        state = pipeline.state
        ctx = StageContext(
            inputs=self.inputs,
            config=self.config,
            chunker=self.chunker,
            scorer=self.scorer,
            generator=self.generator,
            epoch=token,
            guard=self.guard,
        )

        state.is_processing = True
        state.is_auto_mode = auto
        state.needs_input = False
        state.error = None
        run_id = self.callbacks.on_run_start(mode_name, state.current_step, auto)

        try:
            await self._drive(pipeline, state, ctx, auto, run_id)
        except StaleRunError:
            logger.info(f"Discarding stale {mode_name} run (epoch {token}, now {self.guard.epoch})")
        except Exception as e:
            state.error = f"{type(e).__name__}: {e}"
            logger.opt(exception=e).error(
                f"{mode_name} pipeline failed during {getattr(state.active_step, 'value', state.active_step)}"
            )
            self.callbacks.on_error(e, run_id, mode=mode_name, step=state.active_step)
        finally:
            state.is_processing = False
            state.is_auto_mode = False
            state.active_step = None
            self.guard.release(token)
            self.callbacks.on_run_end(mode_name, state.current_step, run_id)

    async def _drive(
        self,
        pipeline: BasePipeline,
        state: PipelineState,
        ctx: StageContext,
        auto: bool,
        run_id: UUID,
    ) -> None:
        mode_name = pipeline.mode.value
        first = True

        while True:
            if not first:
                # Let observers render the step we just entered.
                await asyncio.sleep(self.config.step_delay)
                ctx.ensure_current()
            first = False

            reason = pipeline.pause_reason(ctx, auto)
            if reason:
                state.is_auto_mode = False
                state.needs_input = True
                logger.info(f"{mode_name} paused at {state.current_step.value}: {reason}")
                self.callbacks.on_pause(mode_name, state.current_step, reason, run_id)
                return

            if pipeline.is_terminal(state.current_step):
                pipeline.begin_rerun()

            step = pipeline.next_step(state.current_step)
            state.active_step = step
            self.callbacks.on_step_start(mode_name, step, run_id)

            with timer(f"[{mode_name}] {step.value}") as timing:
                await pipeline.run_stage(step, ctx)
            ctx.ensure_current()

            state.current_step = step
            state.history.append(step)
            state.active_step = None
            self.callbacks.on_step_end(mode_name, step, run_id, elapsed_ms=timing.elapsed_ms)

            if not auto or pipeline.is_terminal(step):
                return
