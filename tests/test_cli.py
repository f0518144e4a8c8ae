"""Tests for the command-line entry point (provider mocked)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from meeting_recap.cli import _parse_speaker, load_transcript, main
from meeting_recap.errors import ConfigurationError
from meeting_recap.extraction.models import ExtractedTask, MeetingSummary, PipelineResult


class TestParseSpeaker:
    def test_valid(self) -> None:
        """ID=NAME pairs are split and stripped."""
        speaker = _parse_speaker("s1= Alice ")
        assert (speaker.id, speaker.name) == ("s1", "Alice")

    @pytest.mark.parametrize("value", ["Alice", "=Alice", "s1="])
    def test_invalid(self, value: str) -> None:
        """Missing IDs, names or separators are rejected."""
        with pytest.raises(ValueError):
            _parse_speaker(value)


class TestLoadTranscript:
    def test_plain_text(self, tmp_path: Path) -> None:
        """Text files are used verbatim."""
        path = tmp_path / "notes.txt"
        path.write_text("Hello team.\nLet's start.", encoding="utf-8")
        assert load_transcript(path).full_text == "Hello team.\nLet's start."

    def test_json_segments(self, tmp_path: Path) -> None:
        """JSON segment lists become a transcript with derived text and duration."""
        path = tmp_path / "meeting.json"
        path.write_text(
            json.dumps(
                [
                    {"start_time": 0, "end_time": 1000, "text": "Hi.", "speaker_id": "s1"},
                    {"start_time": 1000, "end_time": 2500, "text": "Hello.", "speaker_id": "s2"},
                ]
            ),
            encoding="utf-8",
        )
        transcript = load_transcript(path)
        assert transcript.full_text == "Hi. Hello."
        assert transcript.duration_ms == 2500.0

    def test_json_must_be_list(self, tmp_path: Path) -> None:
        """A JSON object at the top level is rejected."""
        path = tmp_path / "bad.json"
        path.write_text('{"text": "nope"}', encoding="utf-8")
        with pytest.raises(ValueError):
            load_transcript(path)


    def test_json_segments_must_be_objects(self, tmp_path: Path) -> None:
        """A list holding anything but objects is rejected with ValueError."""
        path = tmp_path / "bad.json"
        path.write_text('[{"text": "Hi."}, "stray", 3]', encoding="utf-8")
        with pytest.raises(ValueError, match="JSON object"):
            load_transcript(path)


class TestMain:
    @patch("meeting_recap.cli.get_generator")
    @patch("meeting_recap.cli.process_transcript", new_callable=AsyncMock)
    def test_writes_json_result(self, mock_process: AsyncMock, mock_get_generator, tmp_path: Path) -> None:
        """The result is written as JSON and speakers become participants."""
        mock_process.return_value = PipelineResult(
            summary=MeetingSummary(overview="Short sync."),
            tasks=[ExtractedTask("Send notes")],
            processing_time_ms=3.0,
        )
        transcript = tmp_path / "sync.txt"
        transcript.write_text("Alice: send the notes.", encoding="utf-8")
        output = tmp_path / "out.json"

        code = main([str(transcript), "--speakers", "s1=Alice", "--output", str(output)])

        assert code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["summary"]["overview"] == "Short sync."
        assert data["tasks"][0]["title"] == "Send notes"
        meeting = mock_process.call_args.args[0]
        assert meeting.title == "sync"
        assert meeting.participant_ids == ["s1"]

    @patch("meeting_recap.cli.get_generator", side_effect=ConfigurationError("no key"))
    def test_configuration_error_exit_code(self, mock_get_generator, tmp_path: Path) -> None:
        """Configuration errors exit with code 2."""
        transcript = tmp_path / "sync.txt"
        transcript.write_text("Hello.", encoding="utf-8")
        assert main([str(transcript)]) == 2

    def test_missing_file_is_usage_error(self, tmp_path: Path) -> None:
        """An unreadable path is reported through the argument parser."""
        with pytest.raises(SystemExit):
            main([str(tmp_path / "missing.txt")])

    def test_malformed_segments_are_usage_error(self, tmp_path: Path) -> None:
        """Bad segment files end in a usage error, not a traceback."""
        path = tmp_path / "bad.json"
        path.write_text('["just a string"]', encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main([str(path)])
        assert exc_info.value.code == 2
