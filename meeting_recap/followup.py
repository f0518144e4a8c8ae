"""Follow-up email drafting from a processed meeting."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from meeting_recap.extraction.models import ExtractedTask, MeetingSummary
from meeting_recap.extraction.prompts import FOLLOW_UP_EMAIL_PROMPT, render
from meeting_recap.generation.providers import TextGenerator
from meeting_recap.generation.streaming import DEFAULT_TIMEOUT_SECONDS, collect_stream
from meeting_recap.ingestion.models import Meeting, SpeakerProfile

logger = logging.getLogger(__name__)


def _bullets(lines: Sequence[str], fallback: str) -> str:
    return "\n".join(f"- {line}" for line in lines) or fallback


def build_follow_up_prompt(
    meeting: Meeting,
    summary: MeetingSummary,
    tasks: Sequence[ExtractedTask],
    speakers: Sequence[SpeakerProfile],
) -> str:
    participants = ", ".join(s.name for s in speakers if s.id in meeting.participant_ids)
    task_lines = [
        f"{t.title} (@{t.assignee_name})" if t.assignee_name else t.title for t in tasks
    ]
    return render(
        FOLLOW_UP_EMAIL_PROMPT,
        title=meeting.title,
        date=meeting.created_at.strftime("%Y-%m-%d"),
        participants=participants or "Not specified",
        overview=summary.overview or "No overview available",
        key_points=_bullets(summary.key_points, "None"),
        decisions=_bullets([d.text for d in summary.decisions], "No explicit decisions"),
        tasks=_bullets(task_lines, "No tasks"),
        questions=_bullets([q.text for q in summary.questions], "No open questions"),
    )


async def generate_follow_up_email(
    meeting: Meeting,
    summary: MeetingSummary,
    tasks: Sequence[ExtractedTask],
    speakers: Sequence[SpeakerProfile],
    generator: TextGenerator,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    """Draft a follow-up email (subject, summary, owners, next steps).

    Provider errors propagate to the caller.
    """
    prompt = build_follow_up_prompt(meeting, summary, tasks, speakers)
    logger.info("Drafting follow-up email for meeting %s", meeting.id)
    text = await collect_stream(generator.generate(prompt), timeout_seconds)
    return text.strip()
