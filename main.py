#!/usr/bin/env python3
"""
ragviz Demo Application

Walks the document pipeline one step at a time, printing what a visualizer
would render after each transition, then runs the agentic and text-to-SQL
pipelines to completion.
"""

import asyncio
import logging
import sys

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("main")

try:
    from ragviz import PipelineConfig, PipelineDriver, PipelineMode
    from ragviz.core.samples import snippet_for
except ImportError as e:
    import traceback
    traceback.print_exc()
    logger.error(f"Failed to import ragviz components: {e}")
    sys.exit(1)


async def walk_document_pipeline(driver: PipelineDriver) -> None:
    logger.info("--- Document RAG: manual stepping ---")
    driver.load_sample()
    state = driver.state(PipelineMode.DOCUMENT)

    for _ in range(6):
        await driver.advance(PipelineMode.DOCUMENT)
        logger.info(
            f"{state.current_step.value}: {len(state.chunks)} chunks, "
            f"{len(state.retrieved_chunks)} retrieved"
        )
        snippet = snippet_for(state.current_step)
        if snippet:
            logger.info(f"Snippet:\n{snippet}")

    for i, chunk in enumerate(state.retrieved_chunks, 1):
        preview = chunk.text.replace("\n", " ")[:80]
        logger.info(f"[{i}] Score: {chunk.score:.2f}: {preview}...")
    logger.info(f"Answer: {state.answer}")


async def run_agentic_pipeline(driver: PipelineDriver) -> None:
    logger.info("--- Agentic RAG: auto mode ---")
    driver.set_query("Which rule covers monitoring of retrieval quality?")
    await driver.advance(PipelineMode.AGENTIC, auto=True)

    for thought in driver.state(PipelineMode.AGENTIC).thoughts:
        logger.info(thought)


async def run_sql_pipeline(driver: PipelineDriver) -> None:
    logger.info("--- Text-to-SQL: auto mode ---")
    driver.set_query("Total revenue by region")
    await driver.advance(PipelineMode.SQL, auto=True)

    result = driver.state(PipelineMode.SQL).result
    logger.info(f"SQL: {result.sql}")
    for row in result.rows:
        logger.info(f"  {row}")


async def main():
    logger.info("Starting ragviz Demo")

    driver = PipelineDriver(config=PipelineConfig(step_delay=0.1, stage_delay=0.1))
    try:
        await walk_document_pipeline(driver)
        await run_agentic_pipeline(driver)
        await run_sql_pipeline(driver)
    finally:
        await driver.aclose()

    logger.info("Demo complete!")


if __name__ == "__main__":
    asyncio.run(main())
