"""Task stage: combine candidate tasks from every source, highest priority first."""

from __future__ import annotations

from collections.abc import Sequence

from meeting_recap.extraction.models import (
    ActionItem,
    Decision,
    DecisionStatus,
    ExtractedTask,
    MeetingSummary,
    Question,
    QuestionType,
    TaskPriority,
    TaskType,
)
from meeting_recap.tasks.dedup import dedupe_by_prefix

PENDING_DECISION_CONFIDENCE = 0.85
IMPLICIT_QUESTION_CONFIDENCE = 0.75
ACTION_ITEM_CONFIDENCE = 0.9
RESOLVE_PREFIX = "Resolve: "


def tasks_from_decisions(decisions: Sequence[Decision]) -> list[ExtractedTask]:
    """Pending decisions with a suggested action become implicit tasks."""
    return [
        ExtractedTask(
            title=d.suggested_action,
            assignee_name=d.assignee_name,
            priority=TaskPriority.MEDIUM,
            source_text=d.text,
            confidence=PENDING_DECISION_CONFIDENCE,
            type=TaskType.IMPLICIT,
        )
        for d in decisions
        if d.status is DecisionStatus.PENDING and d.suggested_action
    ]


def tasks_from_questions(questions: Sequence[Question]) -> list[ExtractedTask]:
    """Open implicit questions that have an assignee become "Resolve: ..." tasks."""
    return [
        ExtractedTask(
            title=f"{RESOLVE_PREFIX}{q.text}",
            assignee_name=q.assignee_name,
            priority=TaskPriority.MEDIUM,
            source_text=q.text,
            confidence=IMPLICIT_QUESTION_CONFIDENCE,
            type=TaskType.IMPLICIT,
        )
        for q in questions
        if not q.answered and q.type is QuestionType.IMPLICIT and q.assignee_name
    ]


def tasks_from_action_items(items: Sequence[ActionItem]) -> list[ExtractedTask]:
    return [
        ExtractedTask(
            title=item.text,
            assignee_name=item.assignee_name,
            priority=TaskPriority.MEDIUM,
            source_text=item.text,
            confidence=ACTION_ITEM_CONFIDENCE,
            type=TaskType.EXPLICIT,
        )
        for item in items
    ]


def collect_tasks(
    extracted: Sequence[ExtractedTask],
    summary: MeetingSummary,
    prefix_length: int = 25,
) -> list[ExtractedTask]:
    """Combine all task sources with one shared prefix-dedup pass.

    Source order (and therefore conflict priority): transcript-wide
    extraction, pending decisions, implicit questions, summary action items.
    """
    seen: set[str] = set()
    combined: list[ExtractedTask] = []
    for source in (
        extracted,
        tasks_from_decisions(summary.decisions),
        tasks_from_questions(summary.questions),
        tasks_from_action_items(summary.action_items),
    ):
        combined.extend(dedupe_by_prefix(source, lambda t: t.title, prefix_length, seen))
    return combined
