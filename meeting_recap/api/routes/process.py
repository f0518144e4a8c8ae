"""Processing endpoints: run the post-meeting pipeline and draft follow-ups."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from meeting_recap.api.models import (
    FollowUpRequest,
    FollowUpResponse,
    MetricsOut,
    ProcessRequest,
    ProcessResponse,
    SummaryOut,
    TaskOut,
)
from meeting_recap.config import get_settings
from meeting_recap.errors import ConfigurationError, ProviderError
from meeting_recap.followup import generate_follow_up_email
from meeting_recap.generation.providers import get_generator
from meeting_recap.metrics import calculate_meeting_metrics
from meeting_recap.pipeline import process_transcript

router = APIRouter()


@router.post("/api/process", response_model=ProcessResponse)
async def process_meeting(request: ProcessRequest) -> ProcessResponse:
    """Run summary, decision, question and task extraction for a meeting.

    Provider failures inside the pipeline degrade to empty sections; only
    configuration problems (no transcript, unknown provider, missing key)
    are reported as errors.
    """
    meeting = request.meeting.to_domain()
    if meeting.transcript is None or not meeting.transcript.full_text.strip():
        raise HTTPException(status_code=400, detail="Meeting has no transcript to process")

    project_context = request.project_context.to_domain() if request.project_context else None
    try:
        result = await process_transcript(
            meeting,
            request.speaker_profiles(),
            get_settings(),
            project_context=project_context,
        )
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    metrics = calculate_meeting_metrics(meeting, result.summary, result.tasks)
    return ProcessResponse(
        meeting_id=meeting.id,
        summary=SummaryOut.from_domain(result.summary),
        tasks=[TaskOut.from_domain(t) for t in result.tasks],
        metrics=MetricsOut.from_domain(metrics),
        processing_time_ms=result.processing_time_ms,
    )


@router.post("/api/follow-up-email", response_model=FollowUpResponse)
async def follow_up_email(request: FollowUpRequest) -> FollowUpResponse:
    """Draft a follow-up email from an already processed meeting."""
    settings = get_settings()
    try:
        generator = get_generator(settings)
        email = await generate_follow_up_email(
            request.meeting.to_domain(),
            request.summary.to_domain(),
            [t.to_domain() for t in request.tasks],
            request.speaker_profiles(),
            generator,
            settings.stream_timeout_seconds,
        )
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ProviderError as exc:
        # Return 503 so the browser receives a proper JSON response with CORS headers intact.
        raise HTTPException(status_code=503, detail=f"LLM unavailable: {exc}") from exc

    return FollowUpResponse(meeting_id=request.meeting.id, email=email)
