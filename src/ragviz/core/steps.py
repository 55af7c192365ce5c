"""Pipeline modes, their step enums and transition tables.

Each mode is a linear state machine. The transition table maps every step
to its successor; the terminal step maps back to ``IDLE`` so a re-run always
passes through ``IDLE`` once. Adding or removing a stage is a single edit to
the enum plus its table.
"""

from enum import Enum
from typing import Union


class PipelineMode(str, Enum):
    DOCUMENT = "document"
    AGENTIC = "agentic"
    SQL = "sql"


class DocumentStep(str, Enum):
    IDLE = "IDLE"
    UPLOADING = "UPLOADING"
    CHUNKING = "CHUNKING"
    EMBEDDING = "EMBEDDING"
    STORING = "STORING"
    RETRIEVING = "RETRIEVING"
    GENERATING = "GENERATING"


class AgentStep(str, Enum):
    IDLE = "IDLE"
    ANALYZING_TASK = "ANALYZING_TASK"
    PLANNING = "PLANNING"
    TOOL_EXECUTION = "TOOL_EXECUTION"
    REASONING = "REASONING"
    SYNTHESIZING = "SYNTHESIZING"


class SqlStep(str, Enum):
    IDLE = "IDLE"
    PARSING = "PARSING"
    GENERATING_SQL = "GENERATING_SQL"
    EXECUTING = "EXECUTING"
    ANSWERING = "ANSWERING"


Step = Union[DocumentStep, AgentStep, SqlStep]


def linear_table(steps: type[Enum]) -> dict:
    """Build the successor table for a linear step enum.

    Members are taken in declaration order; the first member is IDLE and
    the last one (terminal) loops back to it.
    """
    members = list(steps)
    table = {}
    for current, following in zip(members, members[1:]):
        table[current] = following
    table[members[-1]] = members[0]
    return table


DOCUMENT_TRANSITIONS: dict[DocumentStep, DocumentStep] = linear_table(DocumentStep)
AGENT_TRANSITIONS: dict[AgentStep, AgentStep] = linear_table(AgentStep)
SQL_TRANSITIONS: dict[SqlStep, SqlStep] = linear_table(SqlStep)
