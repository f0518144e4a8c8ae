"""Size-bounded splitting of transcript text for multi-pass extraction."""

from __future__ import annotations

import re
from collections.abc import Iterator

# A unit is a sentence (ending in . ! or ?) or a paragraph tail, together
# with the whitespace that follows it, so units concatenate back losslessly.
_UNIT_RE = re.compile(r".+?(?:\n[ \t]*\n\s*|(?<=[.!?])\s+|\Z)", re.DOTALL)

# Fallbacks for units over the threshold: single lines, then words.
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")
_WORD_RE = re.compile(r"\S*\s+|\S+")


def _byte_size(text: str) -> int:
    return len(text.encode("utf-8"))


def split_units(text: str) -> list[str]:
    """Split *text* into sentence/paragraph units, separators kept attached."""
    return _UNIT_RE.findall(text)


def _fit_units(text: str, max_bytes: int) -> Iterator[str]:
    """Units of *text*, with oversized ones broken at line and word breaks."""
    for unit in split_units(text):
        if _byte_size(unit) <= max_bytes:
            yield unit
            continue
        for line in _LINE_RE.findall(unit):
            if _byte_size(line) <= max_bytes:
                yield line
            else:
                yield from _WORD_RE.findall(line)


def split_transcript(text: str, max_bytes: int) -> Iterator[str]:
    """Lazily split transcript text into chunks of at most *max_bytes*.

    Units are packed greedily in order. ``"".join(chunks) == text`` always
    holds. Breaks prefer sentence and paragraph ends; a unit over the
    threshold is broken at line ends, then at whitespace. Only a single
    word larger than *max_bytes* produces an oversized chunk.

    Args:
        text: The transcript's full text.
        max_bytes: Chunk threshold in UTF-8 bytes.

    Yields:
        Chunks in original order. Input at or under the threshold yields
        exactly one chunk: the text itself.
    """
    if _byte_size(text) <= max_bytes:
        yield text
        return

    current: list[str] = []
    current_size = 0
    for unit in _fit_units(text, max_bytes):
        unit_size = _byte_size(unit)
        if current and current_size + unit_size > max_bytes:
            yield "".join(current)
            current = []
            current_size = 0
        current.append(unit)
        current_size += unit_size

    if current:
        yield "".join(current)
