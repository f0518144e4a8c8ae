"""Tolerant parsing of semi-structured model output.

The model is asked for JSON but routinely wraps it in prose or markdown
fences, truncates it, or invents enum values. Everything here degrades to an
empty/neutral record instead of raising, and every enum-typed field is
coerced into its allowed set.
"""

from __future__ import annotations

import json
import logging
import re
from enum import StrEnum
from typing import Any, TypeVar

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

logger = logging.getLogger(__name__)

_E = TypeVar("_E", bound=StrEnum)

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


# ---------------------------------------------------------------------------
# JSON location
# ---------------------------------------------------------------------------


def extract_json_object(text: str) -> str | None:
    """Return the substring from the first ``{`` to the last ``}``, if any."""
    first = text.find("{")
    last = text.rfind("}")
    if first == -1 or last == -1 or last <= first:
        return None
    return text[first : last + 1]


def extract_json_array(text: str) -> str | None:
    """Return the first bracketed span (greedy) in *text*, if any."""
    match = _JSON_ARRAY_RE.search(text)
    return match.group(0) if match else None


def _load_object(text: str, what: str) -> dict[str, Any] | None:
    json_str = extract_json_object(text)
    if json_str is None:
        logger.warning("No JSON object found in %s response", what)
        return None
    try:
        parsed = json.loads(json_str)
    except ValueError as exc:
        logger.warning("Failed to parse %s response: %s", what, exc)
        return None
    return parsed if isinstance(parsed, dict) else None


def _load_array(text: str, what: str) -> list[dict[str, Any]]:
    json_str = extract_json_array(text)
    if json_str is None:
        logger.warning("No JSON array found in %s response", what)
        return []
    try:
        parsed = json.loads(json_str)
    except ValueError as exc:
        logger.warning("Failed to parse %s response: %s", what, exc)
        return []
    if not isinstance(parsed, list):
        return []
    return [item for item in parsed if isinstance(item, dict)]


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def coerce_enum(enum_cls: type[_E], value: Any, default: _E) -> _E:
    """Map *value* onto *enum_cls*, falling back to *default*."""
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            pass
    return default


def _text(value: Any) -> str:
    return str(value) if value else ""


def _optional_text(value: Any) -> str | None:
    return str(value) if value else None


def _confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0.5
    return min(1.0, max(0.0, float(value)))


def _names(value: Any) -> frozenset[str]:
    if not isinstance(value, list):
        return frozenset()
    return frozenset(str(v) for v in value if v)


def decision_from_dict(item: dict[str, Any]) -> Decision:
    return Decision(
        text=_text(item.get("text")),
        status=coerce_enum(DecisionStatus, item.get("status"), DecisionStatus.DECIDED),
        context=_optional_text(item.get("context")),
        participants=_names(item.get("participants")),
        suggested_action=_optional_text(item.get("suggestedAction")),
        assignee_name=_optional_text(item.get("assigneeName")),
    )


def question_from_dict(item: dict[str, Any]) -> Question:
    return Question(
        text=_text(item.get("text")),
        type=coerce_enum(QuestionType, item.get("type"), QuestionType.EXPLICIT),
        asked_by=_optional_text(item.get("askedBy")),
        answered=False,
        context=_optional_text(item.get("context")),
        assignee_name=_optional_text(item.get("assigneeName")),
    )


def task_from_dict(item: dict[str, Any]) -> ExtractedTask:
    source = item.get("sourceText")
    if isinstance(source, str):
        source_text = source
    else:
        # Models occasionally return the evidence span as an object
        source_text = json.dumps(source, ensure_ascii=False) if source else ""
    return ExtractedTask(
        title=str(item.get("title") or "Untitled task"),
        assignee_name=_optional_text(item.get("assigneeName")),
        priority=coerce_enum(TaskPriority, item.get("priority"), TaskPriority.MEDIUM),
        source_text=source_text,
        confidence=_confidence(item.get("confidence")),
        type=coerce_enum(TaskType, item.get("type"), TaskType.EXPLICIT),
        due_date=_optional_text(item.get("dueDate")),
        linked_file=_optional_text(item.get("linkedFile")),
    )


# ---------------------------------------------------------------------------
# Response parsers
# ---------------------------------------------------------------------------


def parse_summary(text: str) -> MeetingSummary:
    """Parse a summary-shaped (JSON object) response.

    Free-text action items are read from the same raw text, so they survive
    even when the JSON part is unparseable.
    """
    action_items = parse_action_items(text)
    payload = _load_object(text, "summary")
    if payload is None:
        return MeetingSummary(action_items=action_items)

    key_points = payload.get("keyPoints")
    decisions = payload.get("decisions")
    questions = payload.get("openQuestions")
    return MeetingSummary(
        overview=_text(payload.get("overview")),
        key_points=[str(p) for p in key_points] if isinstance(key_points, list) else [],
        decisions=[
            decision_from_dict(d) for d in decisions if isinstance(d, dict)
        ]
        if isinstance(decisions, list)
        else [],
        questions=[
            question_from_dict(q) for q in questions if isinstance(q, dict)
        ]
        if isinstance(questions, list)
        else [],
        action_items=action_items,
    )


def parse_decisions(text: str) -> list[Decision]:
    """Parse a list-shaped decision response."""
    return [decision_from_dict(item) for item in _load_array(text, "decision")]


def parse_questions(text: str) -> list[Question]:
    """Parse a list-shaped question response."""
    return [question_from_dict(item) for item in _load_array(text, "question")]


def parse_tasks(text: str) -> list[ExtractedTask]:
    """Parse a list-shaped task response."""
    return [task_from_dict(item) for item in _load_array(text, "task")]


# ---------------------------------------------------------------------------
# Free-text action items
# ---------------------------------------------------------------------------

_ACTION_HEADINGS = (
    "action item",
    "next step",
    "tasks",
    "to-do",
    "todo",
    "aufgaben",
    "nächste schritte",
)

_HEADING_RE = re.compile(r"^(?:#{1,6}\s*(?P<hash>.+)|\*\*(?P<bold>[^*]+)\*\*:?|(?P<colon>[^-*•\[\d].*):)$")

_ITEM_RE = re.compile(
    r"^(?:(?:[-*•+]|\d+[.)])\s*(?:\[[ xX]?\]\s*)?|\[[ xX]?\]\s*)(?P<body>\S.*)$"
)

_ASSIGNEE_RE = re.compile(
    r"^(?P<text>.+?)"
    r"(?:\s*\((?:assignee|owner|responsible|verantwortlich|zuständig)\s*:\s*(?P<named>[^)]+)\)"
    r"|\s*\(@(?P<paren>[^)]+)\)"
    r"|\s*\[@?(?P<bracket>[^\]]+)\]"
    r"|\s+@(?P<bare>[\w.-]+))?"
    r"\s*$",
    re.IGNORECASE,
)


def _heading_title(line: str) -> str | None:
    match = _HEADING_RE.match(line)
    if not match:
        return None
    return (match.group("hash") or match.group("bold") or match.group("colon") or "").strip()


def split_assignee(body: str) -> ActionItem:
    """Split a trailing assignee annotation off an action item line.

    Recognised forms: ``(Assignee: Name)``, ``(Owner: Name)``,
    ``(Verantwortlich: Name)``, ``(Zuständig: Name)``, ``(@Name)``,
    ``[@Name]``, ``[Name]`` and a trailing `` @Name``.
    """
    match = _ASSIGNEE_RE.match(body.strip())
    if not match:
        return ActionItem(text=body.strip())
    assignee = (
        match.group("named")
        or match.group("paren")
        or match.group("bracket")
        or match.group("bare")
    )
    return ActionItem(
        text=match.group("text").strip(),
        assignee_name=assignee.strip() if assignee else None,
    )


def parse_action_items(text: str) -> list[ActionItem]:
    """Collect bullet/checkbox lines listed under an action-item heading."""
    items: list[ActionItem] = []
    in_section = False
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        title = _heading_title(line)
        if title is not None:
            lowered = title.lower()
            in_section = any(h in lowered for h in _ACTION_HEADINGS)
            continue
        if not in_section:
            continue
        match = _ITEM_RE.match(line)
        if not match:
            continue
        item = split_assignee(match.group("body"))
        if len(item.text) >= 3:
            items.append(item)
    return items
