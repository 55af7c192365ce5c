from collections.abc import Callable

from ragviz.agent.tool import Tool
from ragviz.core.chunk import Chunk
from ragviz.retrieval.base import BaseScorer


def create_search_tool(
    scorer: BaseScorer,
    chunk_source: Callable[[], list[Chunk]],
    top_k: int = 4,
    tool_name: str = "search_knowledge_base",
    tool_description: str | None = None,
) -> Tool:
    """
    Create a knowledge-base search tool over the in-memory chunk set.

    Args:
        scorer: Relevance scorer used for ranking.
        chunk_source: Returns the chunk set to search at call time (it may be
            built lazily by the caller).
        top_k: Number of chunks to return.
        tool_name: Name of the tool.
        tool_description: Custom tool description.

    Returns:
        Tool whose ``func(query=...)`` resolves to the scored chunks.
    """

    async def search_func(query: str) -> list[Chunk]:
        return scorer.retrieve(query, chunk_source(), top_k)

    return Tool(
        name=tool_name,
        description=tool_description or (
            "Search the ingested document for passages relevant to the query. "
            "Returns the best matching chunks with relevance scores."
        ),
        func=search_func,
        parameters={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "What to look for"},
            },
            "required": ["query"],
        },
    )
