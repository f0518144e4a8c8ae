"""Merging of per-chunk partial results into one summary."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from meeting_recap.extraction.models import Decision, MeetingSummary, Question
from meeting_recap.tasks.dedup import dedupe_by_prefix, prefix_key

_Item = TypeVar("_Item", Decision, Question)


def merge_summaries(
    partials: Sequence[MeetingSummary], prefix_length: int = 30
) -> MeetingSummary:
    """Combine partial summaries, in chunk order, into one.

    A single partial is returned as-is (the very same object), so an
    unchunked transcript behaves exactly like the one-chunk case.

    Args:
        partials: Per-chunk summaries in original chunk order.
        prefix_length: Characters compared for decision/question/action-item
            dedup.

    Returns:
        The merged summary.
    """
    if not partials:
        return MeetingSummary.empty()
    if len(partials) == 1:
        return partials[0]

    overview = " ".join(p.overview for p in partials if p.overview)
    # dict preserves first-occurrence order
    key_points = list(dict.fromkeys(kp for p in partials for kp in p.key_points))
    decisions = dedupe_by_prefix(
        (d for p in partials for d in p.decisions), lambda d: d.text, prefix_length
    )
    questions = dedupe_by_prefix(
        (q for p in partials for q in p.questions), lambda q: q.text, prefix_length
    )
    action_items = dedupe_by_prefix(
        (a for p in partials for a in p.action_items), lambda a: a.text, prefix_length
    )
    return MeetingSummary(
        overview=overview,
        key_points=key_points,
        decisions=decisions,
        questions=questions,
        action_items=action_items,
    )


def merge_item_lists(
    chunk_lists: Sequence[list[_Item]], prefix_length: int = 30
) -> list[_Item]:
    """Merge per-chunk decision or question lists (first occurrence wins)."""
    if len(chunk_lists) == 1:
        return chunk_lists[0]
    return dedupe_by_prefix(
        (item for items in chunk_lists for item in items),
        lambda item: item.text,
        prefix_length,
    )


def merge_supplementary(
    existing: list[_Item], additional: Sequence[_Item], prefix_length: int = 20
) -> list[_Item]:
    """Return *existing* followed by the *additional* items not already present."""
    seen = {prefix_key(item.text, prefix_length) for item in existing}
    return existing + dedupe_by_prefix(additional, lambda item: item.text, prefix_length, seen)
