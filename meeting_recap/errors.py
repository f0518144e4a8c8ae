"""Typed errors raised by the post-meeting pipeline."""

from __future__ import annotations


class MeetingRecapError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(MeetingRecapError):
    """Fatal setup problem detected before any provider call is made.

    Examples: no API key for the selected provider, unknown provider name,
    a meeting without a transcript. This is the only error class that
    crosses the pipeline boundary.
    """


class ProviderError(MeetingRecapError):
    """A text-generation call failed (network, non-2xx, malformed stream).

    Raised inside a stage and converted to an empty partial result there.
    """
