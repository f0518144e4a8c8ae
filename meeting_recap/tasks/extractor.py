"""Transcript-wide task extraction via the text-generation provider."""

from __future__ import annotations

import logging
from typing import Protocol

from meeting_recap.extraction.models import ExtractedTask
from meeting_recap.extraction.parsing import parse_tasks
from meeting_recap.extraction.prompts import TASK_PROJECT_CONTEXT_SECTION, TASK_PROMPT, render
from meeting_recap.generation.providers import TextGenerator
from meeting_recap.generation.streaming import generate_text
from meeting_recap.ingestion.chunking import split_transcript
from meeting_recap.pipeline_config import PipelineConfig
from meeting_recap.project.matcher import (
    code_file_listing,
    find_matching_files,
    format_matches_for_prompt,
)
from meeting_recap.project.models import ProjectContext
from meeting_recap.tasks.dedup import dedupe_by_prefix

logger = logging.getLogger(__name__)


class TaskExtractor(Protocol):
    """Returns candidate tasks for a transcript, optionally using project context."""

    async def extract(
        self, text: str, project_context: ProjectContext | None = None
    ) -> list[ExtractedTask]: ...


def build_task_prompt(transcript: str, project_context: ProjectContext | None = None) -> str:
    """Build the task-extraction prompt, with a project section when available."""
    project_section = ""
    if project_context is not None and project_context.files:
        matches = find_matching_files(transcript, project_context, min_relevance=0.5, max_results=10)
        project_section = render(
            TASK_PROJECT_CONTEXT_SECTION,
            files=code_file_listing(project_context, 50) or "No files indexed",
            matches=format_matches_for_prompt(matches) or "No direct file references detected",
        )
    return render(TASK_PROMPT, transcript=transcript, project_context=project_section)


class LLMTaskExtractor:
    """Default :class:`TaskExtractor`: one prompt per transcript chunk."""

    def __init__(self, generator: TextGenerator, config: PipelineConfig | None = None) -> None:
        self._generator = generator
        self._config = config or PipelineConfig()

    async def extract(
        self, text: str, project_context: ProjectContext | None = None
    ) -> list[ExtractedTask]:
        if not text.strip():
            return []

        chunks = list(split_transcript(text, self._config.chunk_size_bytes))
        per_chunk: list[list[ExtractedTask]] = []
        for index, chunk in enumerate(chunks, start=1):
            if len(chunks) > 1:
                logger.info("Tasks: processing chunk %d/%d", index, len(chunks))
            raw = await generate_text(
                self._generator,
                build_task_prompt(chunk, project_context),
                self._config.stream_timeout_seconds,
                label="Task extraction",
            )
            per_chunk.append(parse_tasks(raw))

        if len(per_chunk) == 1:
            return per_chunk[0]
        return dedupe_by_prefix(
            (task for tasks in per_chunk for task in tasks),
            lambda task: task.title,
            self._config.task_extractor_chunk_prefix,
        )
