"""Extraction stages: one prompt per chunk, one streamed call, one parse.

The summary stage is the primary pass. The decision and question stages are
supplementary and only run when the summary came back thin.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from meeting_recap.extraction.merge import merge_item_lists, merge_summaries
from meeting_recap.extraction.models import Decision, MeetingSummary, Question
from meeting_recap.extraction.parsing import parse_decisions, parse_questions, parse_summary
from meeting_recap.extraction.prompts import (
    DECISION_PROMPT,
    PROJECT_CONTEXT_SECTION,
    QUESTION_PROMPT,
    SUMMARY_PROMPT,
    render,
)
from meeting_recap.generation.providers import TextGenerator
from meeting_recap.generation.streaming import DEFAULT_TIMEOUT_SECONDS, generate_text
from meeting_recap.ingestion.models import Meeting, SpeakerProfile
from meeting_recap.pipeline_config import PipelineConfig
from meeting_recap.project.matcher import (
    code_file_listing,
    find_matching_files,
    format_matches_for_prompt,
)
from meeting_recap.project.models import ProjectContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageContext:
    """Meeting-level parameters shared by every prompt of a run."""

    title: str
    participants: str
    duration: str
    project_section: str = ""


@dataclass(frozen=True)
class SummaryPartial:
    """One chunk's parsed summary together with the raw response text."""

    summary: MeetingSummary
    raw_text: str


def build_project_section(transcript: str, project_context: ProjectContext | None) -> str:
    """Prompt section describing the project, or ``""`` without a context."""
    if project_context is None or not project_context.files:
        return ""
    matches = find_matching_files(transcript, project_context, min_relevance=0.5, max_results=10)
    return render(
        PROJECT_CONTEXT_SECTION,
        project_files=code_file_listing(project_context, 30) or "No files indexed",
        file_matches=format_matches_for_prompt(matches) or "No direct file references detected",
    )


def build_stage_context(
    meeting: Meeting,
    speakers: Sequence[SpeakerProfile],
    project_context: ProjectContext | None = None,
) -> StageContext:
    participant_names = ", ".join(
        s.name for s in speakers if s.id in meeting.participant_ids
    )
    transcript = meeting.transcript
    duration_min = round(transcript.duration_ms / 60000) if transcript else 0
    return StageContext(
        title=meeting.title,
        participants=participant_names or "Not specified",
        duration=f"{duration_min} minutes",
        project_section=build_project_section(
            transcript.full_text if transcript else "", project_context
        ),
    )


# ---------------------------------------------------------------------------
# Single-chunk stages
# ---------------------------------------------------------------------------


async def run_summary_stage(
    generator: TextGenerator,
    chunk: str,
    context: StageContext,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    part: tuple[int, int] | None = None,
) -> SummaryPartial:
    """Summarize one chunk. *part* is ``(index, total)`` when chunked."""
    title = context.title if part is None else f"{context.title} (part {part[0]}/{part[1]})"
    prompt = (
        render(
            SUMMARY_PROMPT,
            transcript=chunk,
            title=title,
            participants=context.participants,
            duration=context.duration,
        )
        + context.project_section
    )
    text = await generate_text(generator, prompt, timeout_seconds, label="Summary")
    return SummaryPartial(summary=parse_summary(text), raw_text=text)


async def run_decision_stage(
    generator: TextGenerator,
    chunk: str,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> list[Decision]:
    text = await generate_text(
        generator, render(DECISION_PROMPT, transcript=chunk), timeout_seconds, label="Decision"
    )
    return parse_decisions(text)


async def run_question_stage(
    generator: TextGenerator,
    chunk: str,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> list[Question]:
    text = await generate_text(
        generator, render(QUESTION_PROMPT, transcript=chunk), timeout_seconds, label="Question"
    )
    return parse_questions(text)


# ---------------------------------------------------------------------------
# Folds over all chunks
# ---------------------------------------------------------------------------


async def extract_summary(
    generator: TextGenerator,
    chunks: Sequence[str],
    context: StageContext,
    config: PipelineConfig,
) -> MeetingSummary:
    """Summarize every chunk in order and merge the partial summaries."""
    total = len(chunks)
    partials: list[MeetingSummary] = []
    for index, chunk in enumerate(chunks, start=1):
        if total > 1:
            logger.info("Summary: processing chunk %d/%d", index, total)
        partial = await run_summary_stage(
            generator,
            chunk,
            context,
            config.stream_timeout_seconds,
            part=(index, total) if total > 1 else None,
        )
        partials.append(partial.summary)
    return merge_summaries(partials, config.chunk_merge_prefix)


async def extract_decisions(
    generator: TextGenerator, chunks: Sequence[str], config: PipelineConfig
) -> list[Decision]:
    per_chunk: list[list[Decision]] = []
    for chunk in chunks:
        per_chunk.append(await run_decision_stage(generator, chunk, config.stream_timeout_seconds))
    return merge_item_lists(per_chunk, config.chunk_merge_prefix) if per_chunk else []


async def extract_questions(
    generator: TextGenerator, chunks: Sequence[str], config: PipelineConfig
) -> list[Question]:
    per_chunk: list[list[Question]] = []
    for chunk in chunks:
        per_chunk.append(await run_question_stage(generator, chunk, config.stream_timeout_seconds))
    return merge_item_lists(per_chunk, config.chunk_merge_prefix) if per_chunk else []
