"""Prompt templates sent to the generation backend.

``build_grounded_prompt`` is also stored on the pipeline state so the
visualizer can show exactly what the model saw.
"""

from ..core.chunk import Chunk

GROUNDED_ANSWER_PROMPT = """Use the following context to answer the query. If the answer isn't in the context, say you don't know.

Context:
{context}

Query: {query}"""

TEXT_TO_SQL_PROMPT = """Translate the user's natural language question into a standard SQL query based on the provided database schema.
Return the response in JSON format with 'sql' and 'explanation' fields.

Schema:
{schema}

User Question: {query}"""

MOCK_ROWS_PROMPT = """Act as a database engine. Given the SQL query: "{sql}", generate 5 rows of realistic mock data in JSON array format. Use the column names implied by the query."""


def build_grounded_prompt(query: str, chunks: list[Chunk]) -> str:
    context = "\n\n".join(chunk.text for chunk in chunks)
    return GROUNDED_ANSWER_PROMPT.format(context=context, query=query)


def build_sql_prompt(query: str, schema_description: str) -> str:
    return TEXT_TO_SQL_PROMPT.format(schema=schema_description, query=query)


def build_mock_rows_prompt(sql: str) -> str:
    return MOCK_ROWS_PROMPT.format(sql=sql)
