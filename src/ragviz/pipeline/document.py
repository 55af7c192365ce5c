"""Document RAG pipeline: upload, chunk, embed, store, retrieve, generate."""

from loguru import logger

from ..core.samples import DEFAULT_QUERIES
from ..core.state import DocumentPipelineState
from ..core.steps import DOCUMENT_TRANSITIONS, DocumentStep, PipelineMode
from .base import BasePipeline, StageContext, StageHandler
from .stages import apply_retrieval, generate_answer, ingest, mark_processed

NEEDS_QUERY = "Enter a query to continue from STORING to retrieval"


class DocumentPipeline(BasePipeline):
    """
    IDLE → UPLOADING → CHUNKING → EMBEDDING → STORING → RETRIEVING → GENERATING

    Embedding and storing are simulated; the visible work is chunking,
    keyword retrieval and the grounded answer.
    """

    mode = PipelineMode.DOCUMENT
    steps = DocumentStep
    transitions = DOCUMENT_TRANSITIONS
    default_query = DEFAULT_QUERIES[PipelineMode.DOCUMENT]

    state: DocumentPipelineState

    def new_state(self) -> DocumentPipelineState:
        return DocumentPipelineState()

    def handlers(self) -> dict[DocumentStep, StageHandler]:
        return {
            DocumentStep.UPLOADING: self._uploading,
            DocumentStep.CHUNKING: self._chunking,
            DocumentStep.EMBEDDING: self._embedding,
            DocumentStep.STORING: self._storing,
            DocumentStep.RETRIEVING: self._retrieving,
            DocumentStep.GENERATING: self._generating,
        }

    def pause_reason(self, ctx: StageContext, auto: bool) -> str | None:
        if (
            auto
            and ctx.config.pause_on_missing_query
            and self.state.current_step == DocumentStep.STORING
            and not ctx.inputs.query.strip()
        ):
            return NEEDS_QUERY
        return None

    async def _uploading(self, ctx: StageContext) -> None:
        await ctx.pace()

    async def _chunking(self, ctx: StageContext) -> None:
        state = self.state
        chunks = ingest(ctx)
        state.chunks = chunks
        state.retrieved_chunks = []

    async def _embedding(self, ctx: StageContext) -> None:
        state = self.state
        await ctx.pace()
        mark_processed(state.chunks)

    async def _storing(self, ctx: StageContext) -> None:
        await ctx.pace()

    async def _retrieving(self, ctx: StageContext) -> None:
        state = self.state
        query = self.resolve_query(ctx)
        retrieved = ctx.scorer.retrieve(query, state.chunks, ctx.config.retrieval.top_k)
        state.retrieved_chunks = retrieved
        apply_retrieval(state.chunks, retrieved)
        logger.info(f"Retrieved {len(retrieved)}/{len(state.chunks)} chunks for '{query}'")

    async def _generating(self, ctx: StageContext) -> None:
        state = self.state
        state.answer = ""
        query = self.resolve_query(ctx)
        answer, prompt = await generate_answer(ctx, query, state.retrieved_chunks)
        state.prompt = prompt
        state.answer = answer
