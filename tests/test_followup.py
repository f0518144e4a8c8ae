"""Tests for follow-up email drafting."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from meeting_recap.errors import ProviderError
from meeting_recap.extraction.models import Decision, ExtractedTask, MeetingSummary
from meeting_recap.followup import build_follow_up_prompt, generate_follow_up_email
from meeting_recap.ingestion.models import Meeting, SpeakerProfile

MEETING = Meeting(
    id="m1",
    title="Launch sync",
    participant_ids=["s1"],
    created_at=datetime(2026, 3, 4, 10, 0, tzinfo=UTC),
)
SPEAKERS = [SpeakerProfile("s1", "Alice"), SpeakerProfile("s9", "Mallory")]
SUMMARY = MeetingSummary(
    overview="We agreed on the launch.",
    key_points=["Launch in May"],
    decisions=[Decision("Launch on May 5")],
)
TASKS = [ExtractedTask("Ship v2", assignee_name="Alice"), ExtractedTask("Update docs")]


class TestBuildFollowUpPrompt:
    def test_includes_meeting_details(self) -> None:
        """Date, known participants, decisions and owned tasks are listed."""
        prompt = build_follow_up_prompt(MEETING, SUMMARY, TASKS, SPEAKERS)
        assert "Meeting: Launch sync" in prompt
        assert "Date: 2026-03-04" in prompt
        assert "Participants: Alice\n" in prompt
        assert "- Launch on May 5" in prompt
        assert "- Ship v2 (@Alice)\n- Update docs" in prompt
        assert "No open questions" in prompt


class TestGenerateFollowUpEmail:
    @pytest.mark.asyncio
    async def test_returns_streamed_text(self, scripted) -> None:
        """The streamed email comes back stripped, from one call."""
        generator = scripted(email="  Subject: Launch recap\n\nHi team,\n...  ")
        email = await generate_follow_up_email(MEETING, SUMMARY, TASKS, SPEAKERS, generator)
        assert email.startswith("Subject: Launch recap")
        assert generator.calls["email"] == 1

    @pytest.mark.asyncio
    async def test_provider_errors_propagate(self, scripted) -> None:
        """Unlike the extraction stages, drafting does not swallow errors."""
        generator = scripted(error=ProviderError("down"))
        with pytest.raises(ProviderError):
            await generate_follow_up_email(MEETING, SUMMARY, TASKS, SPEAKERS, generator)
