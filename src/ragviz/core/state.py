"""Observable pipeline state.

One state object exists per mode. The driver and the stage transition
functions are the only writers; everything else (UI, CLI, tests) reads.
"""

from typing import Any

from pydantic import BaseModel, Field

from .chunk import Chunk
from .sql import SqlResult
from .steps import AgentStep, DocumentStep, SqlStep


class SessionInputs(BaseModel):
    """Inputs supplied by the command surface.

    Attributes:
        query: Active query (empty means "use the mode default")
        document_content: Raw text of the active document
        document_name: Display name of the active document
    """

    query: str = ""
    document_content: str = ""
    document_name: str = ""

    @property
    def has_document(self) -> bool:
        return bool(self.document_content)


class PipelineState(BaseModel):
    """Fields shared by every mode.

    Attributes:
        is_auto_mode: True while a run-to-completion loop is in progress
        is_processing: True while a transition is executing
        needs_input: Set when an auto run paused for a missing query
        error: Last unexpected failure surfaced by the driver
    """

    is_auto_mode: bool = False
    is_processing: bool = False
    needs_input: bool = False
    error: str | None = None
    history: list[Any] = Field(default_factory=list)

    def clear_run(self) -> None:
        """Clear the payload of the previous run before a re-run."""
        self.history.clear()


class DocumentPipelineState(PipelineState):
    current_step: DocumentStep = DocumentStep.IDLE
    active_step: DocumentStep | None = None
    history: list[DocumentStep] = Field(default_factory=list)
    chunks: list[Chunk] = Field(default_factory=list)
    retrieved_chunks: list[Chunk] = Field(default_factory=list)
    answer: str = ""
    prompt: str = ""

    def clear_run(self) -> None:
        super().clear_run()
        self.chunks = []
        self.retrieved_chunks = []
        self.answer = ""
        self.prompt = ""


class ToolCallRecord(BaseModel):
    """Record of a single tool call made by the agentic pipeline."""
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    result: str = ""
    elapsed_ms: float = 0.0


class AgentPipelineState(PipelineState):
    current_step: AgentStep = AgentStep.IDLE
    active_step: AgentStep | None = None
    history: list[AgentStep] = Field(default_factory=list)
    chunks: list[Chunk] = Field(default_factory=list)
    retrieved_chunks: list[Chunk] = Field(default_factory=list)
    answer: str = ""
    prompt: str = ""
    thoughts: list[str] = Field(default_factory=list)
    tool_calls: list[ToolCallRecord] = Field(default_factory=list)

    def clear_run(self) -> None:
        # The thought trace survives re-runs; only a full reset clears it.
        super().clear_run()
        self.retrieved_chunks = []
        self.answer = ""
        self.prompt = ""


class SqlPipelineState(PipelineState):
    current_step: SqlStep = SqlStep.IDLE
    active_step: SqlStep | None = None
    history: list[SqlStep] = Field(default_factory=list)
    result: SqlResult | None = None

    def clear_run(self) -> None:
        super().clear_run()
        self.result = None
