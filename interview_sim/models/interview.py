"""
Interview session and state models for interview-sim

Python attributes are snake_case. ``model_dump(by_alias=True)`` produces the
local (camelCase) format that the boundary codec maps to the wire.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# Derivation rule for max_questions when a config leaves it unset
MINUTES_PER_QUESTION = 5

AnalyticsData = dict[str, Any]


class InterviewStyle(str, Enum):
    """Interview style options."""

    TECHNICAL = "technical"
    HR = "hr"
    BEHAVIORAL = "behavioral"
    SALARY_NEGOTIATION = "salary-negotiation"
    CASE_STUDY = "case-study"


class ExperienceLevel(str, Enum):
    """Candidate experience levels."""

    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    EXECUTIVE = "executive"


class SessionMode(str, Enum):
    """Where questions are coming from."""

    ONLINE = "online"  # Remote question service
    FALLBACK = "fallback"  # Local question bank, kept for the rest of the session


class SessionPhase(str, Enum):
    """Interview session state machine phases."""

    NOT_STARTED = "not_started"
    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"  # Terminal state


class QuestionSource(str, Enum):
    """Provenance of an issued question."""

    REMOTE = "remote"
    FALLBACK = "fallback"


class LocalModel(BaseModel):
    """Base for models serialised in the local (camelCase) format."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class QuestionCategory(LocalModel):
    """Key into the fallback question bank."""

    model_config = ConfigDict(frozen=True)

    topic: str
    style: InterviewStyle
    company_name: str | None = None


class InterviewConfig(LocalModel):
    """User's interview configuration. Immutable once the session exists."""

    model_config = ConfigDict(frozen=True)

    topic: str = Field(..., min_length=1, description="Subject of the interview")
    style: InterviewStyle = Field(default=InterviewStyle.TECHNICAL)
    experience_level: ExperienceLevel = Field(default=ExperienceLevel.MID)
    company_name: str | None = Field(
        default=None,
        description="Company the candidate is interviewing with"
    )
    duration: int = Field(default=30, gt=0, description="Planned length in minutes")
    max_questions: int = Field(
        default=0, gt=0, validate_default=True,
        description="Question limit; derived from duration when omitted"
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_max_questions(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if data.get("max_questions") is not None or data.get("maxQuestions") is not None:
            return data

        try:
            minutes = int(data.get("duration", 30))
        except (TypeError, ValueError):
            return data
        if minutes > 0:
            data = {**data, "max_questions": max(1, minutes // MINUTES_PER_QUESTION)}
        return data

    @property
    def category(self) -> QuestionCategory:
        """Fallback bank category for this interview."""
        return QuestionCategory(
            topic=self.topic,
            style=self.style,
            company_name=self.company_name,
        )


class Question(LocalModel):
    """A question issued during the session."""

    index: int = Field(..., ge=0, description="Position within the session")
    text: str
    source: QuestionSource = QuestionSource.REMOTE
    issued_at: datetime = Field(default_factory=datetime.utcnow)


class InterviewResponse(LocalModel):
    """A candidate's answer to one issued question."""

    question_index: int
    question_text: str
    answer_text: str
    timestamp_issued: datetime
    timestamp_answered: datetime = Field(default_factory=datetime.utcnow)

    # Attached asynchronously once the remote analysis resolves
    analysis: Any | None = None


class SessionState(LocalModel):
    """Complete interview session state."""

    mode: SessionMode = SessionMode.ONLINE
    phase: SessionPhase = SessionPhase.NOT_STARTED

    asked_questions: list[Question] = Field(default_factory=list)
    responses: list[InterviewResponse] = Field(default_factory=list)
    current_question: Question | None = None

    # Timing
    started_at: datetime | None = None
    ended_at: datetime | None = None
    end_reason: str | None = None

    def get_response(self, question_index: int) -> InterviewResponse | None:
        """Get the response recorded for a question index."""
        for response in self.responses:
            if response.question_index == question_index:
                return response
        return None

    def get_duration_seconds(self) -> float:
        """Get session duration in seconds."""
        if not self.started_at:
            return 0.0
        end = self.ended_at or datetime.utcnow()
        return (end - self.started_at).total_seconds()


class Progress(BaseModel):
    """Progress through the session."""

    current: int
    total: int
    percentage: float
