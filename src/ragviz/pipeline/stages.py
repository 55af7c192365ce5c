"""Stage work shared by the document and agentic pipelines."""

from loguru import logger

from ..core.chunk import Chunk, ChunkState
from ..core.samples import FALLBACK_DOCUMENT_NAME, SAMPLE_DOC
from ..errors import RagVizError
from ..llm.prompts import build_grounded_prompt
from .base import StageContext

FALLBACK_ANSWER = "[Generation unavailable] The answer could not be generated: {reason}"


def active_document(ctx: StageContext) -> tuple[str, str]:
    """Content and display name of the active document, or the built-in sample."""
    if ctx.inputs.has_document:
        return ctx.inputs.document_content, ctx.inputs.document_name or FALLBACK_DOCUMENT_NAME
    return SAMPLE_DOC, FALLBACK_DOCUMENT_NAME


def ingest(ctx: StageContext) -> list[Chunk]:
    content, name = active_document(ctx)
    chunks = ctx.chunker.chunk(content, name)
    logger.info(f"Chunked '{name}' into {len(chunks)} chunks")
    return chunks


def mark_processed(chunks: list[Chunk]) -> None:
    for chunk in chunks:
        chunk.state = ChunkState.PROCESSED
        chunk.score = None


def apply_retrieval(chunks: list[Chunk], retrieved: list[Chunk]) -> None:
    """
    Flag the selected chunks ``retrieved`` and every other chunk ``processed``.

    ``retrieved`` holds scored copies, so they are flagged too and both
    lists agree on the state of every id.
    """
    for chunk in retrieved:
        chunk.state = ChunkState.RETRIEVED
    scores = {chunk.id: chunk.score for chunk in retrieved}
    for chunk in chunks:
        if chunk.id in scores:
            chunk.state = ChunkState.RETRIEVED
            chunk.score = scores[chunk.id]
        else:
            chunk.state = ChunkState.PROCESSED
            chunk.score = None


async def generate_answer(ctx: StageContext, query: str, context: list[Chunk]) -> tuple[str, str]:
    """
    Ask the generator for a grounded answer.

    Collaborator failures degrade to a clearly marked fallback answer;
    anything else propagates to the driver.

    Returns:
        (answer, prompt) where prompt is the grounded prompt for inspection
    """
    prompt = build_grounded_prompt(query, context)
    try:
        answer = await ctx.generator.answer_with_context(query, context)
    except RagVizError as e:
        logger.warning(f"Generation failed, using fallback answer: {e}")
        answer = FALLBACK_ANSWER.format(reason=e.message)
    ctx.ensure_current()
    return answer, prompt
