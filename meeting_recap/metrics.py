"""Heuristic meeting metrics computed from a processed meeting."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from meeting_recap.extraction.models import ExtractedTask, MeetingSummary
from meeting_recap.ingestion.models import Meeting

BASE_SCORE = 50.0


@dataclass
class MeetingMetrics:
    """Counts and an engagement score (0-100) for one meeting."""

    total_duration_ms: float = 0.0
    speaking_time_ms: dict[str, float] = field(default_factory=dict)
    topics_covered: int = 0
    decisions_count: int = 0
    tasks_created: int = 0
    questions_raised: int = 0
    questions_answered: int = 0
    engagement_score: int = 0


def speaking_time_by_speaker(meeting: Meeting) -> dict[str, float]:
    """Sum segment durations per speaker id; unattributed segments are skipped."""
    totals: dict[str, float] = {}
    if meeting.transcript is None:
        return totals
    for segment in meeting.transcript.segments:
        if segment.speaker_id:
            totals[segment.speaker_id] = totals.get(segment.speaker_id, 0.0) + (
                segment.end_time - segment.start_time
            )
    return totals


def engagement_score(
    decisions: int, tasks: int, agenda_total: int, agenda_completed: int, speakers: int
) -> int:
    score = BASE_SCORE
    score += min(decisions * 5, 20)
    score += min(tasks * 3, 15)
    if agenda_total > 0:
        score += agenda_completed / agenda_total * 15
    if speakers > 1:
        score += min(speakers * 3, 10)
    return min(100, round(score))


def calculate_meeting_metrics(
    meeting: Meeting,
    summary: MeetingSummary,
    tasks: Sequence[ExtractedTask],
) -> MeetingMetrics:
    speaking = speaking_time_by_speaker(meeting)
    topics_covered = sum(1 for item in meeting.agenda if item.completed)
    return MeetingMetrics(
        total_duration_ms=meeting.transcript.duration_ms if meeting.transcript else 0.0,
        speaking_time_ms=speaking,
        topics_covered=topics_covered,
        decisions_count=len(summary.decisions),
        tasks_created=len(tasks),
        questions_raised=len(summary.questions),
        questions_answered=sum(1 for q in summary.questions if q.answered),
        engagement_score=engagement_score(
            len(summary.decisions),
            len(tasks),
            len(meeting.agenda),
            topics_covered,
            len(speaking),
        ),
    )
