"""Tests for task collection and two-level task deduplication."""

from __future__ import annotations

import pytest

from meeting_recap.extraction.models import (
    ActionItem,
    Decision,
    DecisionStatus,
    ExtractedTask,
    MeetingSummary,
    Question,
    QuestionType,
    TaskType,
)
from meeting_recap.pipeline_config import PipelineConfig
from meeting_recap.project.models import ProjectContext, ProjectFile
from meeting_recap.tasks.dedup import (
    DEFAULT_KEYWORD_CLUSTERS,
    KeywordCluster,
    dedupe_by_keyword_cluster,
    dedupe_by_prefix,
    matching_cluster,
    prefix_key,
)
from meeting_recap.tasks.extractor import LLMTaskExtractor, build_task_prompt
from meeting_recap.tasks.stage import (
    RESOLVE_PREFIX,
    collect_tasks,
    tasks_from_decisions,
    tasks_from_questions,
)


def _titles(tasks) -> list[str]:
    return [t.title for t in tasks]


# ---------------------------------------------------------------------------
# Prefix dedup
# ---------------------------------------------------------------------------


class TestPrefixDedup:
    def test_prefix_key_is_lowercase_and_truncated(self) -> None:
        """Keys compare lowercase text up to the prefix length."""
        assert prefix_key("Send The REPORT today", 8) == "send the"

    def test_first_wins(self) -> None:
        """The first item per key is kept, in input order."""
        kept = dedupe_by_prefix(["Alpha one", "ALPHA ONE two", "Beta"], str, 9)
        assert kept == ["Alpha one", "Beta"]

    def test_shared_seen_set(self) -> None:
        """A shared seen set dedups across separate calls."""
        seen: set[str] = set()
        dedupe_by_prefix(["Call the vendor"], str, 10, seen)
        assert dedupe_by_prefix(["call the vendor again", "Other"], str, 10, seen) == ["Other"]

    def test_collision_depends_on_prefix_length(self) -> None:
        """These two titles agree on their first 24 lowercase characters only."""
        a = "Migrate the database to Postgres"
        b = "Migrate the database to a hosted service"
        assert len(dedupe_by_prefix([a, b], str, 24)) == 1
        assert len(dedupe_by_prefix([a, b], str, 30)) == 2


# ---------------------------------------------------------------------------
# Keyword clusters
# ---------------------------------------------------------------------------


class TestKeywordClusters:
    def test_working_group_synonyms_collapse(self) -> None:
        """Synonyms in one cluster collapse to the first task."""
        tasks = [
            ExtractedTask("Form a working group for onboarding"),
            ExtractedTask("Establish a taskforce for onboarding"),
        ]
        assert _titles(dedupe_by_keyword_cluster(tasks)) == ["Form a working group for onboarding"]

    def test_unmatched_tasks_always_kept(self) -> None:
        """Tasks outside every cluster are never dropped here."""
        tasks = [ExtractedTask("Email the client"), ExtractedTask("Email the client")]
        assert len(dedupe_by_keyword_cluster(tasks)) == 2

    def test_each_cluster_keeps_one(self) -> None:
        """Every cluster keeps exactly its first task."""
        tasks = [
            ExtractedTask("Start a pilot project in Berlin"),
            ExtractedTask("Introduce time tracking"),
            ExtractedTask("Run a pilot with two teams"),
            ExtractedTask("Roll out a timesheet tool"),
            ExtractedTask("Write a code of conduct"),
        ]
        assert _titles(dedupe_by_keyword_cluster(tasks)) == [
            "Start a pilot project in Berlin",
            "Introduce time tracking",
            "Write a code of conduct",
        ]

    def test_guideline_mentions_alone_do_not_collapse(self) -> None:
        """Different tasks that merely mention a guideline stay separate."""
        tasks = [
            ExtractedTask("Update the brand guideline PDF"),
            ExtractedTask("Draft the security guideline for contractors"),
            ExtractedTask("Write guidelines for remote work"),
            ExtractedTask("Create guidelines for code review"),
        ]
        assert _titles(dedupe_by_keyword_cluster(tasks)) == [
            "Update the brand guideline PDF",
            "Draft the security guideline for contractors",
            "Write guidelines for remote work",
        ]

    def test_first_matching_cluster_wins(self) -> None:
        """A title matching several clusters belongs to the first."""
        title = "Pilot project for the working group"
        assert matching_cluster(title, DEFAULT_KEYWORD_CLUSTERS).name == "working_group"

    def test_custom_clusters(self) -> None:
        """Caller-supplied clusters replace the defaults."""
        clusters = (KeywordCluster.of("offsite", "Offsite", "team retreat"),)
        tasks = [ExtractedTask("Plan the OFFSITE"), ExtractedTask("Book a team retreat venue")]
        assert _titles(dedupe_by_keyword_cluster(tasks, clusters)) == ["Plan the OFFSITE"]


# ---------------------------------------------------------------------------
# Task stage
# ---------------------------------------------------------------------------


class TestTaskSources:
    def test_pending_decisions_with_action_only(self) -> None:
        """Only pending decisions with a suggested action become tasks."""
        tasks = tasks_from_decisions(
            [
                Decision("Pick a vendor", DecisionStatus.PENDING, suggested_action="Compare vendor quotes"),
                Decision("Pick a logo", DecisionStatus.PENDING),
                Decision("Use Python", DecisionStatus.DECIDED, suggested_action="Ignored"),
            ]
        )
        assert _titles(tasks) == ["Compare vendor quotes"]
        assert tasks[0].type is TaskType.IMPLICIT
        assert tasks[0].confidence == 0.85
        assert tasks[0].source_text == "Pick a vendor"

    def test_implicit_questions_with_assignee_only(self) -> None:
        """Only implicit questions with an assignee become tasks."""
        tasks = tasks_from_questions(
            [
                Question("How many seats?", QuestionType.IMPLICIT, assignee_name="Dana"),
                Question("Which supplier?", QuestionType.IMPLICIT),
                Question("Is the room free?", QuestionType.EXPLICIT, assignee_name="Eve"),
            ]
        )
        assert _titles(tasks) == [f"{RESOLVE_PREFIX}How many seats?"]
        assert tasks[0].assignee_name == "Dana"
        assert tasks[0].confidence == 0.75


class TestCollectTasks:
    """All sources combined with one shared prefix-dedup pass."""

    def test_source_priority_and_shared_dedup(self) -> None:
        """Extractor tasks beat decisions, questions and action items on a shared key."""
        extracted = [ExtractedTask("Compare vendor quotes for Q3", confidence=0.9)]
        summary = MeetingSummary(
            decisions=[
                Decision(
                    "Pick a vendor",
                    DecisionStatus.PENDING,
                    suggested_action="Compare vendor quotes for the new office",
                )
            ],
            questions=[
                Question("Budget cap for the offsite?", QuestionType.IMPLICIT, assignee_name="Dana")
            ],
            action_items=[
                ActionItem("Resolve: budget cap for the team event", "Eve"),
                ActionItem("Book the meeting room", "Frank"),
            ],
        )

        tasks = collect_tasks(extracted, summary, prefix_length=25)

        assert _titles(tasks) == [
            "Compare vendor quotes for Q3",
            "Resolve: Budget cap for the offsite?",
            "Book the meeting room",
        ]
        assert tasks[2].type is TaskType.EXPLICIT
        assert tasks[2].confidence == 0.9
        assert tasks[2].assignee_name == "Frank"

    def test_empty_sources(self) -> None:
        """No sources produce no tasks."""
        assert collect_tasks([], MeetingSummary()) == []


# ---------------------------------------------------------------------------
# Transcript-wide extractor
# ---------------------------------------------------------------------------


class TestLLMTaskExtractor:
    @pytest.mark.asyncio
    async def test_empty_text_makes_no_call(self, scripted) -> None:
        """Whitespace-only transcripts never reach the provider."""
        generator = scripted()
        assert await LLMTaskExtractor(generator).extract("   ") == []
        assert generator.calls["task"] == 0

    @pytest.mark.asyncio
    async def test_parses_tasks(self, scripted) -> None:
        """Task objects in the response become ExtractedTask values."""
        generator = scripted(tasks='[{"title": "Send the invoice", "assigneeName": "Ann"}]')
        tasks = await LLMTaskExtractor(generator).extract("Ann: I'll send the invoice.")
        assert _titles(tasks) == ["Send the invoice"]
        assert tasks[0].assignee_name == "Ann"

    @pytest.mark.asyncio
    async def test_chunked_transcript_deduped_across_chunks(self, scripted) -> None:
        """The same task found in several chunks is kept once."""
        generator = scripted(tasks='[{"title": "Send the invoice to the customer"}]')
        config = PipelineConfig(chunk_size_bytes=40)
        text = "Ann will send the invoice today. " * 4

        tasks = await LLMTaskExtractor(generator, config).extract(text)

        assert generator.calls["task"] > 1
        assert _titles(tasks) == ["Send the invoice to the customer"]

    def test_prompt_includes_project_context(self) -> None:
        """Project files and detected matches appear before the transcript."""
        context = ProjectContext("shop", files=[ProjectFile("src/cart/CartService.ts")])
        prompt = build_task_prompt("Fix the CartService before release.", context)
        assert "- src/cart/CartService.ts" in prompt
        assert 'mentioned as "CartService"' in prompt
        assert prompt.rstrip().endswith("Fix the CartService before release.")

    def test_prompt_without_project_context(self) -> None:
        """Without a project the placeholder renders empty."""
        prompt = build_task_prompt("Hello.")
        assert "Project context" not in prompt
        assert "{project_context}" not in prompt
