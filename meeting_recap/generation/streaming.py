"""Stream consumption with a hard deadline."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from typing import TYPE_CHECKING

from meeting_recap.errors import ConfigurationError

if TYPE_CHECKING:
    from meeting_recap.generation.providers import TextGenerator

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 300.0


async def collect_stream(
    stream: AsyncIterator[str],
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    on_fragment: Callable[[str], None] | None = None,
) -> str:
    """Concatenate text fragments until the stream ends or the deadline passes.

    On timeout the text received so far is returned instead of raising.
    Errors raised by the stream itself propagate to the caller.

    Args:
        stream: Async iterator of text fragments.
        timeout_seconds: Budget for the whole stream, not per fragment.
        on_fragment: Optional callback invoked with each fragment.

    Returns:
        The accumulated text.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_seconds
    parts: list[str] = []
    iterator = aiter(stream)
    try:
        while True:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise TimeoutError
            try:
                fragment = await asyncio.wait_for(anext(iterator), remaining)
            except StopAsyncIteration:
                break
            parts.append(fragment)
            if on_fragment is not None:
                on_fragment(fragment)
    except TimeoutError:
        logger.warning(
            "Stream timed out after %.0fs; keeping %d characters received so far",
            timeout_seconds,
            sum(len(p) for p in parts),
        )
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()
    return "".join(parts)


async def generate_text(
    generator: TextGenerator,
    prompt: str,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    label: str = "generation",
) -> str:
    """Run one streamed provider call and return its text.

    Provider failures are logged and turn into ``""`` so the caller's parser
    produces an empty result. Only :class:`ConfigurationError` propagates.
    """
    try:
        return await collect_stream(generator.generate(prompt), timeout_seconds)
    except ConfigurationError:
        raise
    except Exception:
        logger.exception("%s call failed; continuing with an empty result", label)
        return ""
