"""Post-meeting pipeline: summary -> decisions -> questions -> tasks -> dedup."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import replace

from meeting_recap.config import Settings, get_settings
from meeting_recap.errors import ConfigurationError
from meeting_recap.extraction.merge import merge_supplementary
from meeting_recap.extraction.models import ExtractedTask, PipelineResult
from meeting_recap.extraction.stages import (
    build_stage_context,
    extract_decisions,
    extract_questions,
    extract_summary,
)
from meeting_recap.generation.providers import TextGenerator, get_generator
from meeting_recap.ingestion.chunking import split_transcript
from meeting_recap.ingestion.models import Meeting, SpeakerProfile
from meeting_recap.pipeline_config import PipelineConfig
from meeting_recap.project.models import ProjectContext
from meeting_recap.tasks.dedup import dedupe_by_keyword_cluster
from meeting_recap.tasks.extractor import LLMTaskExtractor, TaskExtractor
from meeting_recap.tasks.stage import collect_tasks

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]

STAGE_SUMMARY = "Generating summary"
STAGE_DECISIONS = "Extracting decisions"
STAGE_QUESTIONS = "Collecting open questions"
STAGE_TASKS = "Extracting tasks"
STAGE_DEDUP = "Deduplicating tasks"
STAGE_DONE = "Done"


def _notify(on_progress: ProgressCallback | None, stage: str, fraction: float) -> None:
    if on_progress is None:
        return
    # Callback failures never abort the run.
    try:
        on_progress(stage, fraction)
    except Exception:
        logger.exception("Progress callback failed at stage %r", stage)


async def process_transcript(
    meeting: Meeting,
    speakers: Sequence[SpeakerProfile],
    settings: Settings | None = None,
    on_progress: ProgressCallback | None = None,
    project_context: ProjectContext | None = None,
    *,
    generator: TextGenerator | None = None,
    task_extractor: TaskExtractor | None = None,
    config: PipelineConfig | None = None,
) -> PipelineResult:
    """Run the full post-meeting extraction pipeline.

    Args:
        meeting: The meeting to process; must carry a transcript.
        speakers: Known speaker profiles, used for participant names.
        settings: Provider settings. Defaults to :func:`get_settings`.
        on_progress: Called synchronously as ``(stage_label, fraction)`` at
            every transition; fractions strictly increase up to 1.0.
        project_context: Optional project files used as extra prompt context.
        generator: Text generator override. Built from *settings* otherwise.
        task_extractor: Transcript-wide task extractor override.
        config: Pipeline tuning. Derived from *settings* otherwise.

    Returns:
        The summary, the deduplicated candidate tasks and the elapsed time.

    Raises:
        ConfigurationError: No transcript, unknown provider or missing
            credentials. Raised before any provider call. Provider and parse
            failures never raise; they yield empty partial results.
    """
    start = time.perf_counter()

    if meeting.transcript is None:
        raise ConfigurationError("No transcript available for post-processing")

    settings = settings or get_settings()
    config = config or PipelineConfig.from_settings(settings)
    if generator is None:
        generator = get_generator(settings)
    if task_extractor is None:
        task_extractor = LLMTaskExtractor(generator, config)

    text = meeting.transcript.full_text
    chunks = list(split_transcript(text, config.chunk_size_bytes))
    logger.info(
        "Post-meeting: transcript for meeting %s is %d KB (%d chunk(s))",
        meeting.id,
        len(text.encode("utf-8")) // 1024,
        len(chunks),
    )
    context = build_stage_context(meeting, speakers, project_context)

    # Stage 1: summary (primary extraction)
    _notify(on_progress, STAGE_SUMMARY, 0.2)
    summary = await extract_summary(generator, chunks, context, config)

    # Stage 2: decisions, only if the summary found too few
    _notify(on_progress, STAGE_DECISIONS, 0.5)
    if len(summary.decisions) < config.min_supplementary_items:
        additional_decisions = await extract_decisions(generator, chunks, config)
        summary = replace(
            summary,
            decisions=merge_supplementary(
                summary.decisions, additional_decisions, config.supplementary_merge_prefix
            ),
        )

    # Stage 3: questions, same gating
    _notify(on_progress, STAGE_QUESTIONS, 0.7)
    if len(summary.questions) < config.min_supplementary_items:
        additional_questions = await extract_questions(generator, chunks, config)
        summary = replace(
            summary,
            questions=merge_supplementary(
                summary.questions, additional_questions, config.supplementary_merge_prefix
            ),
        )

    # Stage 4: tasks from every source
    _notify(on_progress, STAGE_TASKS, 0.9)
    extracted: list[ExtractedTask]
    try:
        extracted = await task_extractor.extract(text, project_context)
    except ConfigurationError:
        raise
    except Exception:
        logger.exception("Task extraction failed for meeting %s", meeting.id)
        extracted = []
    tasks = collect_tasks(extracted, summary, config.task_merge_prefix)

    # Stage 5: keyword-cluster dedup
    _notify(on_progress, STAGE_DEDUP, 0.95)
    tasks = dedupe_by_keyword_cluster(tasks, config.keyword_clusters)

    _notify(on_progress, STAGE_DONE, 1.0)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "Post-meeting: %d decisions, %d questions, %d tasks in %.0f ms",
        len(summary.decisions),
        len(summary.questions),
        len(tasks),
        elapsed_ms,
    )
    return PipelineResult(summary=summary, tasks=tasks, processing_time_ms=elapsed_ms)
