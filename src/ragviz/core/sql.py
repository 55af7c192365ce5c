"""Entities for the text-to-SQL pipeline."""

import json
from typing import Any

from pydantic import BaseModel, Field


class ColumnSchema(BaseModel):
    name: str
    type: str
    description: str = ""


class TableSchema(BaseModel):
    name: str
    columns: list[ColumnSchema] = Field(default_factory=list)


class SqlTranslation(BaseModel):
    """What the generation collaborator returns for a natural-language question."""
    sql: str
    explanation: str = ""


class SqlResult(BaseModel):
    """Generated query, its explanation and the synthesized result rows."""
    sql: str
    explanation: str = ""
    rows: list[dict[str, Any]] = Field(default_factory=list)


def describe_schema(tables: list[TableSchema]) -> str:
    """Render tables as the JSON schema description sent to the generator."""
    return json.dumps([table.model_dump() for table in tables])
