"""Data models for optional project (code repository) context."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class ProjectFileType(StrEnum):
    CODE = "code"
    DOC = "doc"
    CONFIG = "config"
    OTHER = "other"


class MatchType(StrEnum):
    EXACT = "exact"
    PARTIAL = "partial"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class ProjectFile:
    """A file in the indexed project. ``path`` is relative to the project root."""

    path: str
    type: ProjectFileType = ProjectFileType.CODE

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass
class ProjectContext:
    """Indexed project files supplied by the caller as extra prompt context."""

    name: str
    files: list[ProjectFile] = field(default_factory=list)
    root_path: str = ""


@dataclass(frozen=True)
class ProjectMatch:
    """A project file referenced (exactly or approximately) in the transcript."""

    file: ProjectFile
    match_type: MatchType
    relevance: float  # 0-1
    matched_text: str
