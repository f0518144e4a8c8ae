"""Command-line entry point: process one transcript file and print JSON.

Run as a module::

    python -m meeting_recap.cli transcript.txt --title "Weekly sync" \\
        --speakers s1=Alice s2=Bob --output recap.json

A ``.json`` input is read as a list of segments (``start_time``,
``end_time``, ``text``, ``speaker_id``); anything else as plain text.
Use ``--help`` for full argument documentation.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import uuid
from pathlib import Path

from meeting_recap.api.models import MetricsOut, SummaryOut, TaskOut
from meeting_recap.config import get_settings
from meeting_recap.errors import ConfigurationError, ProviderError
from meeting_recap.followup import generate_follow_up_email
from meeting_recap.generation.providers import get_generator
from meeting_recap.ingestion.models import Meeting, SpeakerProfile, Transcript, TranscriptSegment
from meeting_recap.logging_config import setup_logging
from meeting_recap.metrics import calculate_meeting_metrics
from meeting_recap.pipeline import process_transcript

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m meeting_recap.cli",
        description=(
            "Meeting Recap\n\n"
            "Summarizes a meeting transcript and extracts decisions, open questions\n"
            "and candidate tasks using the configured text-generation provider."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("transcript", metavar="PATH", help="Transcript file (.txt or .json segments).")
    parser.add_argument("--title", default=None, help="Meeting title (default: file name).")
    parser.add_argument(
        "--speakers",
        nargs="+",
        metavar="ID=NAME",
        default=[],
        help="Known speakers as ID=NAME pairs; all of them count as participants.",
    )
    parser.add_argument(
        "--output",
        metavar="FILE",
        default=None,
        help="Write the JSON result here instead of stdout.",
    )
    parser.add_argument(
        "--follow-up",
        action="store_true",
        default=False,
        help="Also draft a follow-up email and include it in the result.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL from settings.")
    return parser


def _parse_speaker(value: str) -> SpeakerProfile:
    """Parse an ``ID=NAME`` pair.

    Raises ValueError if the format is invalid.
    """
    speaker_id, sep, name = value.partition("=")
    if not sep or not speaker_id.strip() or not name.strip():
        msg = f"Invalid speaker {value!r}. Expected ID=NAME, e.g. s1=Alice."
        raise ValueError(msg)
    return SpeakerProfile(speaker_id.strip(), name.strip())


def load_transcript(path: Path) -> Transcript:
    """Read a plain-text or JSON-segment transcript file."""
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() != ".json":
        return Transcript(segments=(), full_text=raw, duration_ms=0.0)

    data = json.loads(raw)
    if not isinstance(data, list):
        msg = f"{path}: expected a JSON list of segments"
        raise ValueError(msg)
    if not all(isinstance(item, dict) for item in data):
        msg = f"{path}: every segment must be a JSON object"
        raise ValueError(msg)
    return Transcript.from_segments(
        [
            TranscriptSegment(
                start_time=float(item.get("start_time", 0)),
                end_time=float(item.get("end_time", 0)),
                text=str(item.get("text", "")),
                speaker_id=item.get("speaker_id"),
            )
            for item in data
        ]
    )


async def _run(meeting: Meeting, speakers: list[SpeakerProfile], follow_up: bool) -> dict:
    settings = get_settings()
    generator = get_generator(settings)
    result = await process_transcript(meeting, speakers, settings, generator=generator)
    metrics = calculate_meeting_metrics(meeting, result.summary, result.tasks)
    output: dict = {
        "meeting_id": meeting.id,
        "summary": SummaryOut.from_domain(result.summary).model_dump(mode="json"),
        "tasks": [TaskOut.from_domain(t).model_dump(mode="json") for t in result.tasks],
        "metrics": MetricsOut.from_domain(metrics).model_dump(mode="json"),
        "processing_time_ms": result.processing_time_ms,
    }
    if follow_up:
        output["follow_up_email"] = await generate_follow_up_email(
            meeting, result.summary, result.tasks, speakers, generator, settings.stream_timeout_seconds
        )
    return output


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level or get_settings().log_level)

    try:
        speakers = [_parse_speaker(s) for s in args.speakers]
    except ValueError as exc:
        parser.error(str(exc))

    path = Path(args.transcript)
    try:
        transcript = load_transcript(path)
    except (OSError, ValueError) as exc:
        parser.error(f"Cannot read transcript: {exc}")

    meeting = Meeting(
        id=str(uuid.uuid4()),
        title=args.title or path.stem,
        transcript=transcript,
        participant_ids=[s.id for s in speakers],
    )

    try:
        output = asyncio.run(_run(meeting, speakers, args.follow_up))
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except ProviderError as exc:
        logger.error("Follow-up email failed: %s", exc)
        return 1

    text = json.dumps(output, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        logger.info("Result written to %s", args.output)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
