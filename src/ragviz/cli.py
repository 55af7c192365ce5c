"""
Command line entry point.

Runs one pipeline with the configured generator and prints what an
observer would have seen: every step entered, then the final payload.

    ragviz run document --query "What does Rule 4 say?"
    ragviz run document --file notes.txt --manual --steps 2
    ragviz run sql --query "Total revenue by region"
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from .config.settings import settings
from .core.callbacks import StdOutCallbackHandler
from .core.samples import snippet_for
from .core.state import AgentPipelineState, DocumentPipelineState, PipelineState, SqlPipelineState
from .core.steps import PipelineMode
from .pipeline.driver import PipelineDriver
from .utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ragviz", description="Step through a RAG teaching pipeline.")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="loguru level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="run a pipeline and print its state")
    run.add_argument("mode", choices=[m.value for m in PipelineMode])
    run.add_argument("--query", "-q", default=None, help="query (mode default when omitted)")
    run.add_argument("--file", "-f", type=Path, default=None, help="text document to load instead of the sample")
    run.add_argument("--manual", action="store_true", help="advance one step per trigger instead of auto mode")
    run.add_argument("--steps", type=int, default=1, help="manual triggers to send (default: %(default)s)")
    run.add_argument("--snippets", action="store_true", help="print the code snippet for each step")
    return parser


def _print_state(mode: PipelineMode, state: PipelineState, snippets: bool = False) -> None:
    print(f"\n== {mode.value} pipeline: {state.current_step.value} ==")
    print("Steps: " + " -> ".join(step.value for step in state.history))

    if snippets:
        for step in state.history:
            snippet = snippet_for(step)
            if snippet:
                print(f"\n[{step.value}]\n{snippet}")

    if state.needs_input:
        print("Paused: waiting for a query.")
    if state.error:
        print(f"Error: {state.error}")

    if isinstance(state, (DocumentPipelineState, AgentPipelineState)):
        print(f"Chunks: {len(state.chunks)}")
        for chunk in state.retrieved_chunks:
            preview = chunk.text.replace("\n", " ")[:80]
            print(f"  [{chunk.score:.2f}] {chunk.metadata}: {preview}")
        if isinstance(state, AgentPipelineState) and state.thoughts:
            print("Trace:")
            for thought in state.thoughts:
                print(f"  {thought}")
        if state.answer:
            print(f"\nAnswer:\n{state.answer}")

    if isinstance(state, SqlPipelineState) and state.result is not None:
        print(f"SQL: {state.result.sql}")
        print(f"Explanation: {state.result.explanation}")
        print(json.dumps(state.result.rows, indent=2, default=str))


async def run_pipeline(args: argparse.Namespace) -> PipelineState:
    mode = PipelineMode(args.mode)
    driver = PipelineDriver(callbacks=[StdOutCallbackHandler()], mode=mode)
    try:
        if args.file is not None:
            driver.load_document(args.file.read_text(encoding="utf-8"), args.file.name)
        elif mode != PipelineMode.SQL:
            driver.load_sample()
        if args.query is not None:
            driver.set_query(args.query)

        if args.manual:
            for _ in range(max(args.steps, 0)):
                await driver.advance(mode)
        else:
            await driver.advance(mode, auto=True)

        return driver.state(mode)
    finally:
        await driver.aclose()


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        state: Any = asyncio.run(run_pipeline(args))
    except OSError as e:
        logger.error(f"Could not read document: {e}")
        return 1

    _print_state(PipelineMode(args.mode), state, snippets=args.snippets)
    return 1 if state.error else 0


if __name__ == "__main__":
    sys.exit(main())
