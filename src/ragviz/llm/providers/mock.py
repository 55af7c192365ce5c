"""Offline generator for demos and tests."""

import asyncio
import re
from typing import Any

from ...core.chunk import Chunk
from ...core.sql import SqlTranslation
from ..base import BaseGenerator

_REGIONS = ["North America", "Europe", "Asia Pacific", "Latin America", "Middle East"]
_AUTHORS = ["A. Rivera", "J. Chen", "M. Okafor", "S. Lindqvist", "P. Sharma"]


def _first_sentence(text: str) -> str:
    match = re.search(r"(.+?[.!?])(\s|$)", text, re.DOTALL)
    return (match.group(1) if match else text).strip()


class MockGenerator(BaseGenerator):
    """Deterministic generator that needs no network.

    Answers quote the best retrieved chunk and cite its provenance; SQL is
    chosen from a few keyword templates over the mock schema; rows are
    synthesized from the shape of the query.

    Args:
        latency: Simulated round-trip time in seconds (awaited on every call)
    """

    def __init__(self, latency: float = 0.0):
        self.latency = latency

    async def _round_trip(self) -> None:
        await asyncio.sleep(self.latency)

    async def answer_with_context(self, query: str, context: list[Chunk]) -> str:
        await self._round_trip()
        if not context:
            return "I don't know: no context was retrieved for this query."

        best = context[0]
        cited = ", ".join(chunk.metadata or chunk.id for chunk in context)
        return (
            f"Based on {len(context)} retrieved chunk(s): {_first_sentence(best.text)}\n"
            f"Sources: {cited}"
        )

    async def translate_to_sql(self, query: str, schema_description: str) -> SqlTranslation:
        await self._round_trip()
        q = query.lower()

        if "author" in q or "document" in q:
            return SqlTranslation(
                sql="SELECT author, COUNT(*) AS documents FROM document_metadata GROUP BY author;",
                explanation="Counts documents per author from document_metadata.",
            )
        if "income" in q or "profit" in q:
            return SqlTranslation(
                sql="SELECT year, SUM(net_income) AS net_income FROM corporate_reports GROUP BY year ORDER BY year;",
                explanation="Sums net income per fiscal year from corporate_reports.",
            )
        if "revenue" in q:
            return SqlTranslation(
                sql="SELECT region, SUM(revenue) AS total_revenue FROM corporate_reports GROUP BY region;",
                explanation="Sums revenue per region from corporate_reports.",
            )
        return SqlTranslation(
            sql="SELECT * FROM corporate_reports LIMIT 5;",
            explanation="Returns a sample of corporate_reports rows.",
        )

    async def synthesize_mock_rows(self, sql: str) -> list[dict[str, Any]]:
        await self._round_trip()
        s = sql.lower()

        if "document_metadata" in s:
            return [{"author": a, "documents": 3 + i} for i, a in enumerate(_AUTHORS)]
        if "net_income" in s:
            return [{"year": 2020 + i, "net_income": 1_200_000 + 150_000 * i} for i in range(5)]
        if "revenue" in s and "region" in s:
            return [{"region": r, "total_revenue": 4_500_000 - 600_000 * i} for i, r in enumerate(_REGIONS)]
        return [
            {
                "report_id": f"00000000-0000-0000-0000-00000000000{i + 1}",
                "year": 2024,
                "revenue": 2_000_000 + 250_000 * i,
                "net_income": 300_000 + 40_000 * i,
                "region": _REGIONS[i],
            }
            for i in range(5)
        ]
