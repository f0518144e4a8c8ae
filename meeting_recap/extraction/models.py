"""Data models for structured extraction results."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum


class DecisionStatus(StrEnum):
    DECIDED = "decided"
    PENDING = "pending"


class QuestionType(StrEnum):
    EXPLICIT = "explicit"  # directly asked in the transcript
    IMPLICIT = "implicit"  # inferred from missing information


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskType(StrEnum):
    EXPLICIT = "explicit"
    IMPLICIT = "implicit"


def _new_id() -> str:
    return str(uuid.uuid4())


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Decision:
    """A decision that was made, or one that still has to be made.

    ``suggested_action`` is only meaningful for pending decisions, but a
    pending decision may lack one.
    """

    text: str
    status: DecisionStatus = DecisionStatus.DECIDED
    context: str | None = None
    participants: frozenset[str] = frozenset()
    suggested_action: str | None = None
    assignee_name: str | None = None
    id: str = field(default_factory=_new_id)
    timestamp: int = field(default_factory=_now_ms)


@dataclass
class Question:
    """An open question. ``answered`` is always False at extraction time."""

    text: str
    type: QuestionType = QuestionType.EXPLICIT
    asked_by: str | None = None
    answered: bool = False
    context: str | None = None
    assignee_name: str | None = None
    id: str = field(default_factory=_new_id)
    timestamp: int = field(default_factory=_now_ms)


@dataclass
class ActionItem:
    """A free-text action item line from the summary response."""

    text: str
    assignee_name: str | None = None


@dataclass
class ExtractedTask:
    """A candidate task. Not persisted: no id is assigned here."""

    title: str
    assignee_name: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    source_text: str = ""
    confidence: float = 0.5  # 0-1
    type: TaskType = TaskType.EXPLICIT
    due_date: str | None = None
    linked_file: str | None = None


@dataclass
class MeetingSummary:
    """Structured summary of a meeting, or of one chunk before merging."""

    overview: str = ""
    key_points: list[str] = field(default_factory=list)
    decisions: list[Decision] = field(default_factory=list)
    questions: list[Question] = field(default_factory=list)
    action_items: list[ActionItem] = field(default_factory=list)
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def empty(cls) -> MeetingSummary:
        return cls()

    def is_empty(self) -> bool:
        return not (
            self.overview
            or self.key_points
            or self.decisions
            or self.questions
            or self.action_items
        )


@dataclass
class PipelineResult:
    """Final output of :func:`meeting_recap.pipeline.process_transcript`."""

    summary: MeetingSummary
    tasks: list[ExtractedTask]
    processing_time_ms: float
