"""
Mock interview session models.

Sessions are embedded in their plan document; each session embeds its own
ordered transcript and, once concluded, the feedback report.
"""

import uuid
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from MongoDB) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Speaker(str, Enum):
    AI = "ai"
    USER = "user"


class SessionStatus(str, Enum):
    """Sessions only ever move from ACTIVE to CONCLUDED."""
    ACTIVE = "active"
    CONCLUDED = "concluded"


class InterviewType(str, Enum):
    BEHAVIORAL = "behavioral"
    TECHNICAL_QUIZ = "technical-quiz"
    CODING_CHALLENGE = "coding-challenge"
    SYSTEM_DESIGN = "system-design"
    ROLE_BASED = "role-based"
    RESUME_BASED = "resume-based"


class Pacing(str, Enum):
    TOO_SLOW = "too-slow"
    GOOD = "good"
    TOO_FAST = "too-fast"


class ConfidenceLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TranscriptEntry(BaseModel):
    """One speaker-tagged utterance."""
    speaker: Speaker
    content: str = Field(..., min_length=1)
    timestamp: datetime

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class DimensionScore(BaseModel):
    score: float = Field(..., ge=0, le=10)
    feedback: str


class ContentAnalysis(BaseModel):
    clarity: DimensionScore
    conciseness: DimensionScore
    technical_accuracy: DimensionScore
    use_of_keywords: List[str] = Field(default_factory=list)


class FillerWords(BaseModel):
    count: int = Field(default=0, ge=0)
    words: List[str] = Field(default_factory=list)


class CommunicationAnalysis(BaseModel):
    pacing: Pacing
    filler_words: FillerWords = Field(default_factory=FillerWords)
    confidence_level: ConfidenceLevel

    model_config = ConfigDict(use_enum_values=True)


class SuggestedAnswer(BaseModel):
    question: str
    suggested_answer: str


class FeedbackReport(BaseModel):
    """Structured end-of-interview report produced by the model."""
    overall_score: float = Field(..., ge=0, le=100)
    performance_summary: str
    content_analysis: ContentAnalysis
    communication_analysis: CommunicationAnalysis
    suggested_answers: List[SuggestedAnswer] = Field(..., min_length=1, max_length=2)

    model_config = ConfigDict(
        use_enum_values=True,
        validate_default=True,
        json_schema_extra={
            "example": {
                "overall_score": 72,
                "performance_summary": "Clear structure, answers could use more measurable results.",
                "content_analysis": {
                    "clarity": {"score": 8, "feedback": "Easy to follow."},
                    "conciseness": {"score": 6, "feedback": "Some answers ran long."},
                    "technical_accuracy": {"score": 7, "feedback": "Mostly accurate."},
                    "use_of_keywords": ["ownership", "stakeholders"]
                },
                "communication_analysis": {
                    "pacing": "good",
                    "filler_words": {"count": 4, "words": ["um", "like"]},
                    "confidence_level": "medium"
                },
                "suggested_answers": [
                    {"question": "Tell me about a conflict.", "suggested_answer": "Situation..."}
                ]
            }
        },
    )


class MockInterviewSession(BaseModel):
    """One mock interview attempt inside a plan."""
    id: str = Field(default_factory=lambda: f"is_{uuid.uuid4().hex[:12]}")
    interview_type: InterviewType
    difficulty: str = "medium"
    resume_ref: Optional[str] = Field(None, description="URL of the uploaded resume")
    focus_area: Optional[str] = None
    start_timestamp: datetime = Field(default_factory=utc_now)
    transcript: List[TranscriptEntry] = Field(default_factory=list)
    feedback: Optional[FeedbackReport] = None
    overall_score: Optional[float] = None
    duration_seconds: Optional[int] = None
    status: SessionStatus = SessionStatus.ACTIVE
    revision: int = Field(default=0, description="Incremented on every persisted write")
    ended_at: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    @field_validator("start_timestamp", "ended_at")
    @classmethod
    def normalize_times(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else value

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE.value
