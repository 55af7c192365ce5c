"""Text-to-SQL pipeline: parse, generate SQL, "execute", answer."""

from loguru import logger

from ..core.samples import DEFAULT_QUERIES, MOCK_DB_SCHEMA
from ..core.sql import SqlResult, SqlTranslation, describe_schema
from ..core.state import SqlPipelineState
from ..core.steps import SQL_TRANSITIONS, PipelineMode, SqlStep
from ..errors import RagVizError
from ..llm.base import PLACEHOLDER_SQL
from .base import BasePipeline, StageContext, StageHandler


class SqlPipeline(BasePipeline):
    """
    IDLE → PARSING → GENERATING_SQL → EXECUTING → ANSWERING

    Nothing is executed against a database: result rows are synthesized by
    the generator from the shape of the SQL.
    """

    mode = PipelineMode.SQL
    steps = SqlStep
    transitions = SQL_TRANSITIONS
    default_query = DEFAULT_QUERIES[PipelineMode.SQL]

    state: SqlPipelineState

    def __init__(self, schema_description: str | None = None):
        self.schema_description = schema_description or describe_schema(MOCK_DB_SCHEMA)
        super().__init__()

    def new_state(self) -> SqlPipelineState:
        return SqlPipelineState()

    def handlers(self) -> dict[SqlStep, StageHandler]:
        return {
            SqlStep.PARSING: self._parsing,
            SqlStep.GENERATING_SQL: self._generating_sql,
            SqlStep.EXECUTING: self._executing,
            SqlStep.ANSWERING: self._answering,
        }

    async def _parsing(self, ctx: StageContext) -> None:
        state = self.state
        state.result = None
        await ctx.pace()

    async def _generating_sql(self, ctx: StageContext) -> None:
        state = self.state
        query = self.resolve_query(ctx)
        try:
            translation = await ctx.generator.translate_to_sql(query, self.schema_description)
        except RagVizError as e:
            logger.warning(f"SQL generation failed, using placeholder query: {e}")
            translation = SqlTranslation(
                sql=PLACEHOLDER_SQL,
                explanation=f"SQL generation failed: {e.message}",
            )
        ctx.ensure_current()
        state.result = SqlResult(sql=translation.sql, explanation=translation.explanation)

    async def _executing(self, ctx: StageContext) -> None:
        state = self.state
        if state.result is None:
            state.result = SqlResult(sql=PLACEHOLDER_SQL)
        try:
            rows = await ctx.generator.synthesize_mock_rows(state.result.sql)
        except RagVizError as e:
            logger.warning(f"Mock execution failed, returning no rows: {e}")
            rows = []
        ctx.ensure_current()
        state.result = state.result.model_copy(update={"rows": rows})
        logger.info(f"Synthesized {len(rows)} rows for: {state.result.sql}")

    async def _answering(self, ctx: StageContext) -> None:
        await ctx.pace()
