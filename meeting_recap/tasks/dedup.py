"""Task deduplication: normalized-prefix matching and keyword clusters."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from meeting_recap.extraction.models import ExtractedTask

logger = logging.getLogger(__name__)

T = TypeVar("T")


def prefix_key(text: str, prefix_length: int) -> str:
    """Normalization key: lowercase text truncated to *prefix_length* chars."""
    return text.lower()[:prefix_length]


def dedupe_by_prefix(
    items: Iterable[T],
    text_of: Callable[[T], str],
    prefix_length: int,
    seen: set[str] | None = None,
) -> list[T]:
    """Keep the first item per prefix key, in input order.

    Args:
        items: Candidates, highest priority first.
        text_of: Returns the text the key is computed from.
        prefix_length: Number of lowercase characters compared.
        seen: Keys already claimed. Updated in place when given, so several
            sources can share one dedup pass.

    Returns:
        The kept items.
    """
    claimed = seen if seen is not None else set()
    kept: list[T] = []
    for item in items:
        key = prefix_key(text_of(item), prefix_length)
        if key in claimed:
            continue
        claimed.add(key)
        kept.append(item)
    return kept


@dataclass(frozen=True)
class KeywordCluster:
    """A curated set of phrases that all describe the same kind of task."""

    name: str
    keywords: frozenset[str]

    @classmethod
    def of(cls, name: str, *keywords: str) -> KeywordCluster:
        return cls(name=name, keywords=frozenset(k.lower() for k in keywords))

    def matches(self, title: str) -> bool:
        lowered = title.lower()
        return any(keyword in lowered for keyword in self.keywords)


# Ordered: the first matching cluster wins. English and German phrasings,
# since transcripts come in both.
DEFAULT_KEYWORD_CLUSTERS: tuple[KeywordCluster, ...] = (
    KeywordCluster.of(
        "working_group",
        "working group",
        "workgroup",
        "taskforce",
        "task force",
        "steering committee",
        "arbeitsgruppe",
    ),
    KeywordCluster.of(
        "pilot",
        "pilot project",
        "pilot program",
        "pilot phase",
        "run a pilot",
        "pilotprojekt",
    ),
    KeywordCluster.of(
        "training",
        "training program",
        "training session",
        "train managers",
        "workshop for managers",
        "schulung",
    ),
    KeywordCluster.of(
        "time_tracking",
        "time tracking",
        "time-tracking",
        "track working hours",
        "timesheet",
        "zeiterfassung",
    ),
    KeywordCluster.of(
        "guidelines",
        "write guidelines",
        "draft guidelines",
        "create guidelines",
        "guidelines document",
        "policy document",
        "code of conduct",
        "richtlinien erstellen",
        "richtlinien ausarbeiten",
        "regelwerk erstellen",
    ),
)


def matching_cluster(
    title: str, clusters: Sequence[KeywordCluster]
) -> KeywordCluster | None:
    """Return the first cluster with a keyword contained in *title*."""
    for cluster in clusters:
        if cluster.matches(title):
            return cluster
    return None


def dedupe_by_keyword_cluster(
    tasks: Sequence[ExtractedTask],
    clusters: Sequence[KeywordCluster] = DEFAULT_KEYWORD_CLUSTERS,
) -> list[ExtractedTask]:
    """Collapse tasks whose titles fall into the same keyword cluster.

    Each task is assigned the first cluster it matches. The first task to
    claim a cluster is kept and later tasks in that cluster are dropped.
    Tasks that match no cluster are always kept.
    """
    claimed: set[str] = set()
    kept: list[ExtractedTask] = []
    for task in tasks:
        cluster = matching_cluster(task.title, clusters)
        if cluster is None:
            kept.append(task)
            continue
        if cluster.name in claimed:
            logger.debug("Dropping task %r: cluster %s already claimed", task.title, cluster.name)
            continue
        claimed.add(cluster.name)
        kept.append(task)
    return kept
