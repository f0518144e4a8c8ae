"""Match file and component mentions in a transcript against project files."""

from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

from meeting_recap.project.models import (
    MatchType,
    ProjectContext,
    ProjectFile,
    ProjectFileType,
    ProjectMatch,
)

# Patterns for spoken references to files, components and identifiers
_MENTION_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\b(?:file|in|the)\s+[\"']?([a-zA-Z0-9_\-./]+\.[a-zA-Z]+)[\"']?", re.IGNORECASE),
    re.compile(
        r"\b(?:component|class|module|service|controller|store|hook)\s+[\"']?([a-zA-Z][a-zA-Z0-9_]+)[\"']?",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:function|method)\s+[\"']?([a-zA-Z][a-zA-Z0-9_]+)[\"']?", re.IGNORECASE),
    re.compile(r"\b(?:src|lib|app|components|pages|api)[/\\][\w\-./\\]+", re.IGNORECASE),
    re.compile(r"\b([A-Z][a-z]+(?:[A-Z][a-z]+)+)\b"),  # CamelCase
    re.compile(r"\b([a-z]+(?:_[a-z]+)+)\b"),  # snake_case
]

_IGNORE_WORDS = frozenset(
    {
        "the", "and", "or", "but", "then", "we", "you", "it", "they",
        "this", "that", "these", "those", "should", "must", "can", "will", "would",
    }
)

_MAX_MATCHES_PER_PATTERN = 1000


def similarity(a: str, b: str) -> float:
    """Case-insensitive similarity in [0, 1] based on edit distance."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return Levenshtein.normalized_similarity(a.lower(), b.lower())


def _camel_words(text: str) -> list[str]:
    spaced = re.sub(r"([a-z])([A-Z])", r"\1 \2", text).lower()
    return [w for w in re.split(r"[\s_\-]+", spaced) if len(w) > 1]


def _stem(name: str) -> str:
    return re.sub(r"\.[^.]+$", "", name)


def extract_references(text: str) -> list[str]:
    """Candidate file/component references mentioned in *text*, in order."""
    references: dict[str, None] = {}
    for pattern in _MENTION_PATTERNS:
        for count, match in enumerate(pattern.finditer(text)):
            if count >= _MAX_MATCHES_PER_PATTERN:
                break
            ref = match.group(1) if match.groups() else match.group(0)
            if ref and len(ref) > 2 and ref.lower() not in _IGNORE_WORDS:
                references[ref] = None
    return list(references)


def _match_file(file: ProjectFile, reference: str) -> tuple[MatchType, float] | None:
    ref = reference.lower()
    name = file.name.lower()
    stem = _stem(name)

    if ref in (stem, name):
        return MatchType.EXACT, 1.0

    if ref in stem or stem in ref:
        containment = min(len(ref), len(stem)) / max(len(ref), len(stem))
        return MatchType.PARTIAL, 0.7 + containment * 0.2

    if ref in file.path.lower():
        return MatchType.PARTIAL, 0.6

    score = similarity(stem, ref)
    if score > 0.7:
        return MatchType.FUZZY, score * 0.8

    file_words = _camel_words(_stem(file.name))
    ref_words = _camel_words(reference)
    if file_words and ref_words:
        matching = [
            rw for rw in ref_words if any(fw == rw or similarity(fw, rw) > 0.8 for fw in file_words)
        ]
        if matching:
            return MatchType.FUZZY, 0.5 + len(matching) / len(ref_words) * 0.3

    return None


def find_matching_files(
    text: str,
    context: ProjectContext,
    min_relevance: float = 0.5,
    max_results: int = 10,
) -> list[ProjectMatch]:
    """Find project files referenced in *text*, most relevant first.

    Each file is matched at most once (by the first reference that reaches
    *min_relevance*).
    """
    matches: list[ProjectMatch] = []
    seen_paths: set[str] = set()
    for reference in extract_references(text):
        for file in context.files:
            if file.path in seen_paths:
                continue
            result = _match_file(file, reference)
            if result is None or result[1] < min_relevance:
                continue
            seen_paths.add(file.path)
            matches.append(
                ProjectMatch(
                    file=file,
                    match_type=result[0],
                    relevance=result[1],
                    matched_text=reference,
                )
            )
    matches.sort(key=lambda m: m.relevance, reverse=True)
    return matches[:max_results]


def format_matches_for_prompt(matches: list[ProjectMatch]) -> str:
    """Render matches as a bullet list for prompt context."""
    return "\n".join(
        f'- {m.file.path} ({m.match_type.value}) [mentioned as "{m.matched_text}"]'
        for m in matches
    )


def code_file_listing(context: ProjectContext, limit: int) -> str:
    """Bullet list of up to *limit* code file paths."""
    code_files = [f for f in context.files if f.type is ProjectFileType.CODE]
    return "\n".join(f"- {f.path}" for f in code_files[:limit])
