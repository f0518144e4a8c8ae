"""Data models for meeting transcripts and participants."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(frozen=True)
class TranscriptSegment:
    """One transcribed utterance. Times are milliseconds from meeting start."""

    start_time: float
    end_time: float
    text: str
    speaker_id: str | None = None


@dataclass(frozen=True)
class Transcript:
    """Ordered segments plus the derived full text and total duration."""

    segments: tuple[TranscriptSegment, ...]
    full_text: str
    duration_ms: float
    language: str = "en"

    @classmethod
    def from_segments(
        cls, segments: Sequence[TranscriptSegment], language: str = "en"
    ) -> Transcript:
        """Build a transcript, deriving ``full_text`` and ``duration_ms``."""
        ordered = tuple(segments)
        return cls(
            segments=ordered,
            full_text=" ".join(s.text for s in ordered),
            duration_ms=ordered[-1].end_time if ordered else 0.0,
            language=language,
        )


@dataclass(frozen=True)
class SpeakerProfile:
    """A known participant."""

    id: str
    name: str


@dataclass
class AgendaItem:
    title: str
    completed: bool = False


@dataclass
class Meeting:
    """The calling meeting entity. Owns its transcript."""

    id: str
    title: str
    transcript: Transcript | None = None
    participant_ids: list[str] = field(default_factory=list)
    agenda: list[AgendaItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
