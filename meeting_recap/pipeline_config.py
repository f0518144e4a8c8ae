"""Pipeline configuration: provider enum and PipelineConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from meeting_recap.tasks.dedup import DEFAULT_KEYWORD_CLUSTERS, KeywordCluster

if TYPE_CHECKING:
    from meeting_recap.config import Settings


class LLMProvider(str, Enum):
    """Supported text-generation providers."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    OLLAMA = "ollama"


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable tuning for one pipeline run.

    Each prefix length applies to one call site only.
    """

    chunk_size_bytes: int = 1024 * 1024
    stream_timeout_seconds: float = 300.0
    min_supplementary_items: int = 2

    # Prefix dedup lengths
    chunk_merge_prefix: int = 30
    supplementary_merge_prefix: int = 20
    task_merge_prefix: int = 25
    task_extractor_chunk_prefix: int = 30

    keyword_clusters: tuple[KeywordCluster, ...] = DEFAULT_KEYWORD_CLUSTERS

    @classmethod
    def from_settings(cls, settings: Settings) -> PipelineConfig:
        return cls(
            chunk_size_bytes=settings.chunk_size_bytes,
            stream_timeout_seconds=settings.stream_timeout_seconds,
            min_supplementary_items=settings.min_supplementary_items,
        )
