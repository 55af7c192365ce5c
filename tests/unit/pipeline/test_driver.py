"""Tests for PipelineDriver: stepping, single-flight, pausing, failures and resets."""

import asyncio

import pytest

from ragviz.config.models import PipelineConfig, RetrievalConfig
from ragviz.core.chunk import ChunkState
from ragviz.core.samples import SAMPLE_DOCUMENT_NAME, SAMPLE_QUERY
from ragviz.core.steps import AgentStep, DocumentStep, PipelineMode, SqlStep
from ragviz.errors import GenerationError, UnknownModeError
from ragviz.llm.base import PLACEHOLDER_SQL
from ragviz.pipeline import FALLBACK_ANSWER, RUN_SEPARATOR, PipelineDriver
from tests.utils.doubles import BlockingGenerator, FailingGenerator, RecordingHandler

DOCUMENT_STEPS = [
    DocumentStep.UPLOADING,
    DocumentStep.CHUNKING,
    DocumentStep.EMBEDDING,
    DocumentStep.STORING,
    DocumentStep.RETRIEVING,
    DocumentStep.GENERATING,
]


@pytest.fixture
def loaded_driver(driver, short_doc):
    driver.load_document(short_doc, "rules.txt")
    driver.set_query("Which rule says to cite the source?")
    return driver


class TestCommandSurface:

    def test_initial_state(self, driver):
        for mode in PipelineMode:
            state = driver.state(mode)
            assert state.current_step.value == "IDLE"
            assert not state.is_processing
        assert driver.mode == PipelineMode.DOCUMENT
        assert driver.state() is driver.state(PipelineMode.DOCUMENT)

    def test_unknown_mode(self, driver):
        with pytest.raises(UnknownModeError):
            driver.state("graph")

    @pytest.mark.asyncio
    async def test_advance_unknown_mode(self, driver):
        with pytest.raises(UnknownModeError):
            await driver.advance("graph")
        assert not driver.busy

    def test_load_sample(self, driver):
        driver.load_sample()
        assert driver.inputs.document_name == SAMPLE_DOCUMENT_NAME
        assert driver.inputs.query == SAMPLE_QUERY
        assert driver.inputs.has_document

    @pytest.mark.asyncio
    async def test_load_document_resets_pipelines(self, loaded_driver, short_doc):
        await loaded_driver.advance(PipelineMode.DOCUMENT, auto=True)
        loaded_driver.load_document("Another document entirely.", "other.txt")

        state = loaded_driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.IDLE
        assert state.chunks == []
        assert loaded_driver.inputs.document_name == "other.txt"
        assert loaded_driver.inputs.query == ""

    @pytest.mark.asyncio
    async def test_reset_clears_everything(self, loaded_driver):
        await loaded_driver.advance(PipelineMode.DOCUMENT, auto=True)
        await loaded_driver.advance(PipelineMode.AGENTIC, auto=True)

        loaded_driver.reset()

        assert loaded_driver.state(PipelineMode.DOCUMENT).current_step == DocumentStep.IDLE
        assert loaded_driver.state(PipelineMode.DOCUMENT).answer == ""
        assert loaded_driver.state(PipelineMode.AGENTIC).thoughts == []
        assert loaded_driver.inputs.query == ""
        assert not loaded_driver.inputs.has_document
        assert loaded_driver.guard.epoch == 2  # load_document reset + explicit reset

    @pytest.mark.asyncio
    async def test_select_mode_resets_on_change(self, loaded_driver):
        await loaded_driver.advance(PipelineMode.DOCUMENT)
        loaded_driver.select_mode(PipelineMode.DOCUMENT)
        assert loaded_driver.state(PipelineMode.DOCUMENT).current_step == DocumentStep.UPLOADING

        loaded_driver.select_mode("sql")
        assert loaded_driver.mode == PipelineMode.SQL
        assert loaded_driver.state(PipelineMode.DOCUMENT).current_step == DocumentStep.IDLE

    @pytest.mark.asyncio
    async def test_aclose_closes_generator(self, driver, mocker):
        close = mocker.patch.object(driver.generator, "aclose", new_callable=mocker.AsyncMock)
        await driver.aclose()
        close.assert_awaited_once()


class TestManualMode:

    @pytest.mark.asyncio
    async def test_one_step_per_advance(self, loaded_driver, recorder):
        await loaded_driver.advance(PipelineMode.DOCUMENT)

        state = loaded_driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.UPLOADING
        assert state.history == [DocumentStep.UPLOADING]
        assert not state.is_processing
        assert state.active_step is None
        assert recorder.hooks() == ["run_start", "step_start", "step_end", "run_end"]

    @pytest.mark.asyncio
    async def test_manual_advance_past_storing_without_query(self, driver, short_doc):
        driver.load_document(short_doc, "rules.txt")
        for _ in range(5):
            await driver.advance(PipelineMode.DOCUMENT)

        state = driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.RETRIEVING
        assert not state.needs_input
        assert state.retrieved_chunks


class TestAutoMode:

    @pytest.mark.asyncio
    async def test_full_document_run(self, loaded_driver, recorder):
        await loaded_driver.advance(PipelineMode.DOCUMENT, auto=True)

        state = loaded_driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.GENERATING
        assert state.history == DOCUMENT_STEPS
        assert recorder.steps_ended() == DOCUMENT_STEPS
        assert not state.is_auto_mode
        assert not state.is_processing
        assert state.error is None
        assert state.answer.startswith("Based on")

        retrieved_ids = {c.id for c in state.retrieved_chunks}
        assert 1 <= len(retrieved_ids) <= 4
        for chunk in state.chunks:
            if chunk.id in retrieved_ids:
                assert chunk.state == ChunkState.RETRIEVED
            else:
                assert chunk.state == ChunkState.PROCESSED

    @pytest.mark.asyncio
    async def test_auto_flags_while_running(self, loaded_driver):
        seen = []

        async def observe():
            state = loaded_driver.state(PipelineMode.DOCUMENT)
            while not seen or state.is_processing:
                seen.append((state.is_processing, state.is_auto_mode, loaded_driver.busy))
                await asyncio.sleep(0)

        run = asyncio.create_task(loaded_driver.advance(PipelineMode.DOCUMENT, auto=True))
        await asyncio.gather(run, observe())

        assert (True, True, True) in seen
        assert not loaded_driver.busy

    @pytest.mark.asyncio
    async def test_observer_sees_every_step(self, short_doc):
        config = PipelineConfig(step_delay=0.01, stage_delay=0, retrieval=RetrievalConfig(seed=3))
        driver = PipelineDriver(config=config)
        driver.load_document(short_doc, "rules.txt")
        driver.set_query("cite")
        state = driver.state(PipelineMode.DOCUMENT)

        task = asyncio.create_task(driver.advance(PipelineMode.DOCUMENT, auto=True))
        seen = []
        while not task.done():
            if not seen or seen[-1] != state.current_step:
                seen.append(state.current_step)
            await asyncio.sleep(0)
        await task
        if seen[-1] != state.current_step:
            seen.append(state.current_step)

        assert seen == [DocumentStep.IDLE] + DOCUMENT_STEPS

    @pytest.mark.asyncio
    async def test_auto_from_terminal_reruns(self, loaded_driver):
        await loaded_driver.advance(PipelineMode.DOCUMENT, auto=True)
        state = loaded_driver.state(PipelineMode.DOCUMENT)
        first_ids = {c.id for c in state.chunks}

        await loaded_driver.advance(PipelineMode.DOCUMENT, auto=True)

        assert state.current_step == DocumentStep.GENERATING
        assert state.history == DOCUMENT_STEPS
        assert first_ids.isdisjoint({c.id for c in state.chunks})

    @pytest.mark.asyncio
    async def test_manual_from_terminal_starts_over(self, loaded_driver):
        await loaded_driver.advance(PipelineMode.DOCUMENT, auto=True)
        await loaded_driver.advance(PipelineMode.DOCUMENT)

        state = loaded_driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.UPLOADING
        assert state.chunks == []
        assert state.answer == ""
        assert state.prompt == ""
        assert state.history == [DocumentStep.UPLOADING]


class TestMissingQueryPause:

    @pytest.mark.asyncio
    async def test_pauses_at_storing(self, driver, short_doc, recorder):
        driver.load_document(short_doc, "rules.txt")
        await driver.advance(PipelineMode.DOCUMENT, auto=True)

        state = driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.STORING
        assert state.history == DOCUMENT_STEPS[:4]
        assert state.needs_input
        assert not state.is_auto_mode
        assert not state.is_processing
        assert ("pause", "document", DocumentStep.STORING) in recorder.events

    @pytest.mark.asyncio
    async def test_stays_paused_until_query(self, driver, short_doc):
        driver.load_document(short_doc, "rules.txt")
        await driver.advance(PipelineMode.DOCUMENT, auto=True)
        await driver.advance(PipelineMode.DOCUMENT, auto=True)

        state = driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.STORING
        assert len(state.history) == 4

        driver.set_query("cite the source")
        await driver.advance(PipelineMode.DOCUMENT, auto=True)
        assert state.current_step == DocumentStep.GENERATING
        assert not state.needs_input
        assert state.history == DOCUMENT_STEPS

    @pytest.mark.asyncio
    async def test_pause_disabled_uses_default_query(self, fast_config, short_doc):
        config = fast_config.model_copy(update={"pause_on_missing_query": False})
        driver = PipelineDriver(config=config)
        driver.load_document(short_doc, "rules.txt")

        await driver.advance(PipelineMode.DOCUMENT, auto=True)

        state = driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.GENERATING
        assert "grounding" in state.prompt

    @pytest.mark.asyncio
    async def test_other_modes_never_pause(self, driver):
        await driver.advance(PipelineMode.AGENTIC, auto=True)
        await driver.advance(PipelineMode.SQL, auto=True)

        assert driver.state(PipelineMode.AGENTIC).current_step == AgentStep.SYNTHESIZING
        assert driver.state(PipelineMode.SQL).current_step == SqlStep.ANSWERING


class TestSingleFlight:

    @pytest.mark.asyncio
    async def test_concurrent_advance_is_dropped(self, loaded_driver):
        await asyncio.gather(
            loaded_driver.advance(PipelineMode.DOCUMENT),
            loaded_driver.advance(PipelineMode.DOCUMENT),
        )

        state = loaded_driver.state(PipelineMode.DOCUMENT)
        assert state.history == [DocumentStep.UPLOADING]
        assert not loaded_driver.busy

    @pytest.mark.asyncio
    async def test_guard_spans_modes(self, loaded_driver):
        await asyncio.gather(
            loaded_driver.advance(PipelineMode.DOCUMENT, auto=True),
            loaded_driver.advance(PipelineMode.SQL, auto=True),
        )

        assert loaded_driver.state(PipelineMode.DOCUMENT).current_step == DocumentStep.GENERATING
        assert loaded_driver.state(PipelineMode.SQL).current_step == SqlStep.IDLE


class TestFailures:

    @pytest.mark.asyncio
    async def test_generation_failure_degrades_to_fallback(self, fast_config, short_doc):
        driver = PipelineDriver(config=fast_config, generator=FailingGenerator(answer_error=GenerationError("API rate limit exceeded")))
        driver.load_document(short_doc, "rules.txt")
        driver.set_query("cite")

        await driver.advance(PipelineMode.DOCUMENT, auto=True)

        state = driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.GENERATING
        assert state.error is None
        assert state.answer == FALLBACK_ANSWER.format(reason="API rate limit exceeded")

    @pytest.mark.asyncio
    async def test_unexpected_failure_keeps_step_and_reports(self, fast_config, short_doc):
        recorder = RecordingHandler()
        driver = PipelineDriver(
            config=fast_config,
            generator=FailingGenerator(answer_error=RuntimeError("bug in generator")),
            callbacks=[recorder],
        )
        driver.load_document(short_doc, "rules.txt")
        driver.set_query("cite")

        await driver.advance(PipelineMode.DOCUMENT, auto=True)

        state = driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.RETRIEVING
        assert state.error == "RuntimeError: bug in generator"
        assert not state.is_processing
        assert not state.is_auto_mode
        assert state.active_step is None
        assert not driver.busy
        assert ("error", "document", DocumentStep.GENERATING) in recorder.events
        assert recorder.hooks()[-1] == "run_end"

    @pytest.mark.asyncio
    async def test_error_cleared_on_next_advance(self, fast_config, short_doc):
        generator = FailingGenerator(answer_error=RuntimeError("flaky"))
        driver = PipelineDriver(config=fast_config, generator=generator)
        driver.load_document(short_doc, "rules.txt")
        driver.set_query("cite")
        await driver.advance(PipelineMode.DOCUMENT, auto=True)

        generator.answer_error = None
        await driver.advance(PipelineMode.DOCUMENT)

        state = driver.state(PipelineMode.DOCUMENT)
        assert state.error is None
        assert state.current_step == DocumentStep.GENERATING
        assert state.answer

    @pytest.mark.asyncio
    async def test_sql_generation_failure_uses_placeholder(self, fast_config):
        driver = PipelineDriver(
            config=fast_config,
            generator=FailingGenerator(sql_error=GenerationError("backend down")),
        )
        await driver.advance(PipelineMode.SQL, auto=True)

        state = driver.state(PipelineMode.SQL)
        assert state.current_step == SqlStep.ANSWERING
        assert state.result.sql == PLACEHOLDER_SQL
        assert state.result.explanation == "SQL generation failed: backend down"

    @pytest.mark.asyncio
    async def test_sql_rows_failure_returns_no_rows(self, fast_config):
        driver = PipelineDriver(
            config=fast_config,
            generator=FailingGenerator(rows_error=GenerationError("bad rows")),
        )
        await driver.advance(PipelineMode.SQL, auto=True)

        state = driver.state(PipelineMode.SQL)
        assert state.current_step == SqlStep.ANSWERING
        assert state.result.rows == []
        assert state.error is None


class TestStaleRuns:

    @pytest.mark.asyncio
    async def test_reset_discards_in_flight_result(self, fast_config, short_doc):
        generator = BlockingGenerator()
        driver = PipelineDriver(config=fast_config, generator=generator)
        driver.load_document(short_doc, "rules.txt")
        driver.set_query("cite")
        old_state = driver.state(PipelineMode.DOCUMENT)

        task = asyncio.create_task(driver.advance(PipelineMode.DOCUMENT, auto=True))
        await generator.entered.wait()
        assert old_state.active_step == DocumentStep.GENERATING

        driver.reset()
        new_state = driver.state(PipelineMode.DOCUMENT)
        assert new_state is not old_state
        assert new_state.current_step == DocumentStep.IDLE
        assert not driver.busy

        # Fresh work is accepted while the stale run is still parked.
        await driver.advance(PipelineMode.DOCUMENT)
        assert new_state.current_step == DocumentStep.UPLOADING

        generator.release.set()
        await task

        assert new_state.current_step == DocumentStep.UPLOADING
        assert new_state.answer == ""
        assert old_state.answer == ""
        assert old_state.current_step == DocumentStep.RETRIEVING
        assert not driver.busy

    @pytest.mark.asyncio
    async def test_reset_during_pacing(self, short_doc):
        config = PipelineConfig(step_delay=0, stage_delay=0.05)
        driver = PipelineDriver(config=config)
        driver.load_document(short_doc, "rules.txt")

        task = asyncio.create_task(driver.advance(PipelineMode.DOCUMENT, auto=True))
        await asyncio.sleep(0.01)
        driver.reset()
        await task

        state = driver.state(PipelineMode.DOCUMENT)
        assert state.current_step == DocumentStep.IDLE
        assert state.history == []


class TestAgenticRuns:

    @pytest.mark.asyncio
    async def test_full_agentic_run(self, loaded_driver):
        await loaded_driver.advance(PipelineMode.AGENTIC, auto=True)

        state = loaded_driver.state(PipelineMode.AGENTIC)
        assert state.history == list(AgentStep)[1:]
        assert state.answer.startswith("Based on")
        assert len(state.tool_calls) == 1
        assert state.thoughts[0].startswith("Thought: the task is")
        assert state.thoughts[-1].startswith("Final Answer")
        assert any("rules.txt" in t for t in state.thoughts)

    @pytest.mark.asyncio
    async def test_trace_survives_rerun(self, loaded_driver):
        await loaded_driver.advance(PipelineMode.AGENTIC, auto=True)
        state = loaded_driver.state(PipelineMode.AGENTIC)
        first_trace = list(state.thoughts)
        chunk_ids = [c.id for c in state.chunks]

        await loaded_driver.advance(PipelineMode.AGENTIC, auto=True)

        assert state.thoughts[: len(first_trace)] == first_trace
        assert state.thoughts[len(first_trace)] == RUN_SEPARATOR
        assert sum(t.startswith("Final Answer") for t in state.thoughts) == 2
        assert [c.id for c in state.chunks] == chunk_ids

    @pytest.mark.asyncio
    async def test_no_document_uses_sample(self, driver):
        await driver.advance(PipelineMode.AGENTIC, auto=True)

        state = driver.state(PipelineMode.AGENTIC)
        assert any("no document was supplied" in t for t in state.thoughts)
        assert state.chunks
        assert state.chunks[0].metadata.startswith("Simulation.pdf")


class TestSqlRuns:

    @pytest.mark.asyncio
    async def test_full_sql_run(self, driver):
        driver.set_query("Total revenue per region")
        await driver.advance(PipelineMode.SQL, auto=True)

        state = driver.state(PipelineMode.SQL)
        assert state.history == list(SqlStep)[1:]
        assert "corporate_reports" in state.result.sql
        assert len(state.result.rows) == 5
        assert "region" in state.result.rows[0]
