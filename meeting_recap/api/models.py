"""Pydantic request/response schemas for the Meeting Recap API."""

from __future__ import annotations

from pydantic import BaseModel

from meeting_recap.extraction.models import (
    Decision,
    DecisionStatus,
    ExtractedTask,
    MeetingSummary,
    Question,
    QuestionType,
    TaskPriority,
    TaskType,
)
from meeting_recap.ingestion.models import (
    AgendaItem,
    Meeting,
    SpeakerProfile,
    Transcript,
    TranscriptSegment,
)
from meeting_recap.metrics import MeetingMetrics
from meeting_recap.project.models import ProjectContext, ProjectFile, ProjectFileType


class SegmentIn(BaseModel):
    """One transcript segment. Times are milliseconds from meeting start."""

    start_time: float
    end_time: float
    text: str
    speaker_id: str | None = None


class SpeakerIn(BaseModel):
    id: str
    name: str


class AgendaItemIn(BaseModel):
    title: str
    completed: bool = False


class ProjectFileIn(BaseModel):
    path: str
    type: ProjectFileType = ProjectFileType.CODE


class ProjectContextIn(BaseModel):
    name: str
    files: list[ProjectFileIn] = []
    root_path: str = ""

    def to_domain(self) -> ProjectContext:
        return ProjectContext(
            name=self.name,
            files=[ProjectFile(path=f.path, type=f.type) for f in self.files],
            root_path=self.root_path,
        )


class MeetingIn(BaseModel):
    """A meeting as submitted by the caller.

    Either ``segments`` or a plain ``transcript`` string may be given;
    segments win when both are present.
    """

    id: str
    title: str
    transcript: str | None = None
    segments: list[SegmentIn] = []
    language: str = "en"
    participant_ids: list[str] = []
    agenda: list[AgendaItemIn] = []

    def to_domain(self) -> Meeting:
        transcript: Transcript | None = None
        if self.segments:
            transcript = Transcript.from_segments(
                [
                    TranscriptSegment(s.start_time, s.end_time, s.text, s.speaker_id)
                    for s in self.segments
                ],
                language=self.language,
            )
        elif self.transcript:
            transcript = Transcript(
                segments=(), full_text=self.transcript, duration_ms=0.0, language=self.language
            )
        return Meeting(
            id=self.id,
            title=self.title,
            transcript=transcript,
            participant_ids=list(self.participant_ids),
            agenda=[AgendaItem(a.title, a.completed) for a in self.agenda],
        )


class ProcessRequest(BaseModel):
    """Request body for the /api/process endpoint."""

    meeting: MeetingIn
    speakers: list[SpeakerIn] = []
    project_context: ProjectContextIn | None = None

    def speaker_profiles(self) -> list[SpeakerProfile]:
        return [SpeakerProfile(s.id, s.name) for s in self.speakers]


class DecisionOut(BaseModel):
    id: str
    text: str
    status: DecisionStatus
    context: str | None = None
    participants: list[str] = []
    suggested_action: str | None = None
    assignee_name: str | None = None
    timestamp: int

    @classmethod
    def from_domain(cls, d: Decision) -> DecisionOut:
        return cls(
            id=d.id,
            text=d.text,
            status=d.status,
            context=d.context,
            participants=sorted(d.participants),
            suggested_action=d.suggested_action,
            assignee_name=d.assignee_name,
            timestamp=d.timestamp,
        )


class QuestionOut(BaseModel):
    id: str
    text: str
    type: QuestionType
    asked_by: str | None = None
    answered: bool = False
    context: str | None = None
    assignee_name: str | None = None
    timestamp: int

    @classmethod
    def from_domain(cls, q: Question) -> QuestionOut:
        return cls(
            id=q.id,
            text=q.text,
            type=q.type,
            asked_by=q.asked_by,
            answered=q.answered,
            context=q.context,
            assignee_name=q.assignee_name,
            timestamp=q.timestamp,
        )


class ActionItemOut(BaseModel):
    text: str
    assignee_name: str | None = None


class SummaryOut(BaseModel):
    """Structured meeting summary."""

    overview: str
    key_points: list[str]
    decisions: list[DecisionOut]
    open_questions: list[QuestionOut]
    action_items: list[ActionItemOut]
    generated_at: str

    @classmethod
    def from_domain(cls, s: MeetingSummary) -> SummaryOut:
        return cls(
            overview=s.overview,
            key_points=list(s.key_points),
            decisions=[DecisionOut.from_domain(d) for d in s.decisions],
            open_questions=[QuestionOut.from_domain(q) for q in s.questions],
            action_items=[
                ActionItemOut(text=a.text, assignee_name=a.assignee_name) for a in s.action_items
            ],
            generated_at=s.generated_at.isoformat(),
        )


class TaskOut(BaseModel):
    """A candidate task. Also accepted as input by /api/follow-up-email."""

    title: str
    assignee_name: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    source_text: str = ""
    confidence: float = 0.5
    type: TaskType = TaskType.EXPLICIT
    due_date: str | None = None
    linked_file: str | None = None

    @classmethod
    def from_domain(cls, t: ExtractedTask) -> TaskOut:
        return cls(
            title=t.title,
            assignee_name=t.assignee_name,
            priority=t.priority,
            source_text=t.source_text,
            confidence=t.confidence,
            type=t.type,
            due_date=t.due_date,
            linked_file=t.linked_file,
        )

    def to_domain(self) -> ExtractedTask:
        return ExtractedTask(
            title=self.title,
            assignee_name=self.assignee_name,
            priority=self.priority,
            source_text=self.source_text,
            confidence=self.confidence,
            type=self.type,
            due_date=self.due_date,
            linked_file=self.linked_file,
        )


class MetricsOut(BaseModel):
    total_duration_ms: float
    speaking_time_ms: dict[str, float]
    topics_covered: int
    decisions_count: int
    tasks_created: int
    questions_raised: int
    questions_answered: int
    engagement_score: int

    @classmethod
    def from_domain(cls, m: MeetingMetrics) -> MetricsOut:
        return cls(
            total_duration_ms=m.total_duration_ms,
            speaking_time_ms=dict(m.speaking_time_ms),
            topics_covered=m.topics_covered,
            decisions_count=m.decisions_count,
            tasks_created=m.tasks_created,
            questions_raised=m.questions_raised,
            questions_answered=m.questions_answered,
            engagement_score=m.engagement_score,
        )


class ProcessResponse(BaseModel):
    """Response body for the /api/process endpoint."""

    meeting_id: str
    summary: SummaryOut
    tasks: list[TaskOut]
    metrics: MetricsOut
    processing_time_ms: float


class SummaryIn(BaseModel):
    """The parts of a summary the follow-up email needs."""

    overview: str = ""
    key_points: list[str] = []
    decisions: list[str] = []
    open_questions: list[str] = []

    def to_domain(self) -> MeetingSummary:
        return MeetingSummary(
            overview=self.overview,
            key_points=list(self.key_points),
            decisions=[Decision(text=t) for t in self.decisions],
            questions=[Question(text=t) for t in self.open_questions],
        )


class FollowUpRequest(BaseModel):
    """Request body for the /api/follow-up-email endpoint."""

    meeting: MeetingIn
    summary: SummaryIn
    tasks: list[TaskOut] = []
    speakers: list[SpeakerIn] = []

    def speaker_profiles(self) -> list[SpeakerProfile]:
        return [SpeakerProfile(s.id, s.name) for s in self.speakers]


class FollowUpResponse(BaseModel):
    meeting_id: str
    email: str
