"""Agentic pipeline: a scripted reason-act-observe loop over the same chunk set.

Every transition appends to the thought trace. The trace only grows; a
re-run adds a separator instead of clearing it.
"""

import time

from loguru import logger

from ..agent.search_tool import create_search_tool
from ..core.samples import DEFAULT_QUERIES
from ..core.state import AgentPipelineState, ToolCallRecord
from ..core.steps import AGENT_TRANSITIONS, AgentStep, PipelineMode
from .base import BasePipeline, StageContext, StageHandler
from .stages import active_document, apply_retrieval, generate_answer, ingest, mark_processed

RUN_SEPARATOR = "--- New run ---"


class AgentPipeline(BasePipeline):
    """
    IDLE → ANALYZING_TASK → PLANNING → TOOL_EXECUTION → REASONING → SYNTHESIZING
    """

    mode = PipelineMode.AGENTIC
    steps = AgentStep
    transitions = AGENT_TRANSITIONS
    default_query = DEFAULT_QUERIES[PipelineMode.AGENTIC]

    state: AgentPipelineState

    def new_state(self) -> AgentPipelineState:
        return AgentPipelineState()

    def handlers(self) -> dict[AgentStep, StageHandler]:
        return {
            AgentStep.ANALYZING_TASK: self._analyzing_task,
            AgentStep.PLANNING: self._planning,
            AgentStep.TOOL_EXECUTION: self._tool_execution,
            AgentStep.REASONING: self._reasoning,
            AgentStep.SYNTHESIZING: self._synthesizing,
        }

    def begin_rerun(self) -> None:
        super().begin_rerun()
        if self.state.thoughts:
            self.state.thoughts.append(RUN_SEPARATOR)

    async def _analyzing_task(self, ctx: StageContext) -> None:
        state = self.state
        await ctx.pace()
        query = self.resolve_query(ctx)
        state.thoughts.append(f'Thought: the task is "{query}".')
        if ctx.inputs.has_document:
            _, name = active_document(ctx)
            state.thoughts.append(f"Thought: the answer should come from {name}.")
        else:
            state.thoughts.append("Thought: no document was supplied, I will search the built-in guidelines.")

    async def _planning(self, ctx: StageContext) -> None:
        state = self.state
        await ctx.pace()
        state.thoughts.append(
            "Plan: 1) call search_knowledge_base for evidence, "
            "2) check which passages actually answer the task, "
            "3) write an answer that cites them."
        )

    async def _tool_execution(self, ctx: StageContext) -> None:
        state = self.state
        query = self.resolve_query(ctx)

        def chunk_source():
            # Built lazily the first time the agent needs evidence.
            if not state.chunks:
                state.chunks = ingest(ctx)
                mark_processed(state.chunks)
                state.thoughts.append(f"Observation: indexed {len(state.chunks)} chunks for searching.")
            return state.chunks

        tool = create_search_tool(ctx.scorer, chunk_source, top_k=ctx.config.retrieval.top_k)
        state.thoughts.append(f'Action: {tool.name}(query="{query}")')

        started = time.perf_counter()
        retrieved = await tool(query=query)
        ctx.ensure_current()
        elapsed_ms = (time.perf_counter() - started) * 1000

        state.retrieved_chunks = retrieved
        apply_retrieval(state.chunks, retrieved)
        state.tool_calls.append(ToolCallRecord(
            name=tool.name,
            arguments={"query": query},
            result=f"{len(retrieved)} chunk(s): " + ", ".join(c.id for c in retrieved),
            elapsed_ms=elapsed_ms,
        ))
        state.thoughts.append(f"Observation: {len(retrieved)} relevant chunk(s) returned.")
        logger.info(f"[Agent] Tool call {tool.name} returned {len(retrieved)} chunks")

    async def _reasoning(self, ctx: StageContext) -> None:
        state = self.state
        await ctx.pace()
        if not state.retrieved_chunks:
            state.thoughts.append("Thought: the search found nothing, I can only say I don't know.")
            return

        best = state.retrieved_chunks[0]
        score = f"{best.score:.2f}" if best.score is not None else "n/a"
        state.thoughts.append(
            f"Thought: the strongest evidence is {best.metadata or best.id} (score {score})."
        )
        if len(state.retrieved_chunks) > 1:
            state.thoughts.append(
                f"Thought: {len(state.retrieved_chunks) - 1} more chunk(s) add supporting context."
            )

    async def _synthesizing(self, ctx: StageContext) -> None:
        state = self.state
        state.answer = ""
        query = self.resolve_query(ctx)
        answer, prompt = await generate_answer(ctx, query, state.retrieved_chunks)
        state.prompt = prompt
        state.answer = answer
        state.thoughts.append(f"Final Answer: synthesized from {len(state.retrieved_chunks)} chunk(s).")
