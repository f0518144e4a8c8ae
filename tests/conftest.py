"""Shared fakes for pipeline tests (no provider SDK or network access)."""

from __future__ import annotations

from collections import Counter
from collections.abc import AsyncIterator

import pytest


def stage_of(prompt: str) -> str:
    """Identify which stage built *prompt*."""
    if "expert at summarizing meetings" in prompt:
        return "summary"
    if "extract decisions" in prompt:
        return "decision"
    if "extract open questions" in prompt:
        return "question"
    if "extracting tasks" in prompt:
        return "task"
    if "follow-up email" in prompt:
        return "email"
    return "unknown"


class ScriptedGenerator:
    """Text generator that answers each stage with a canned response.

    Responses are streamed in small fragments to exercise stream
    accumulation. ``calls`` counts invocations per stage.
    """

    def __init__(
        self,
        summary: str = "",
        decisions: str = "[]",
        questions: str = "[]",
        tasks: str = "[]",
        email: str = "",
        error: Exception | None = None,
    ) -> None:
        self.responses = {
            "summary": summary,
            "decision": decisions,
            "question": questions,
            "task": tasks,
            "email": email,
        }
        self.error = error
        self.calls: Counter[str] = Counter()
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> AsyncIterator[str]:
        stage = stage_of(prompt)
        self.calls[stage] += 1
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        text = self.responses.get(stage, "")
        for i in range(0, len(text), 7):
            yield text[i : i + 7]


@pytest.fixture
def scripted():
    """Factory for :class:`ScriptedGenerator` instances."""
    return ScriptedGenerator
