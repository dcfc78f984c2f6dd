"""
Request and response models for the HTTP API.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from interview_prep.models.plan import (
    BankQuestion,
    Difficulty,
    PlanStatus,
    PreparationPlan,
    ProblemSource,
    Recommendation,
    ResourceType,
)
from interview_prep.models.session import FeedbackReport, InterviewType, TranscriptEntry


class TargetInput(BaseModel):
    role: str = ""
    company: str = ""
    level: str = "Entry-level"
    location: Optional[str] = None


class CreatePlanRequest(BaseModel):
    """Input for plan creation. Required fields are checked by the generator."""
    title: str = ""
    description: Optional[str] = None
    target: TargetInput = Field(default_factory=TargetInput)
    experience_level: str = "Entry-level"

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Stripe backend loop",
                "target": {"role": "Backend Engineer", "company": "Stripe", "level": "Mid-level"},
                "experience_level": "3 years"
            }
        }
    )


class PlanResponse(BaseModel):
    plan: PreparationPlan


class PlanListResponse(BaseModel):
    plans: List[PreparationPlan]


class UpdatePlanStatusRequest(BaseModel):
    status: PlanStatus


class PinQuestionRequest(BaseModel):
    pinned: Optional[bool] = Field(None, description="Explicit pin state; toggles when omitted")


class BulkDeleteRequest(BaseModel):
    ids: List[str] = Field(..., description="Identifiers of the items to delete")


class BulkDeleteResponse(BaseModel):
    deleted_count: int


class UpdateResourceRequest(BaseModel):
    """Fields of a study resource the owner may change. Omitted fields are kept."""
    title: Optional[str] = None
    url: Optional[str] = None
    type: Optional[ResourceType] = None
    recommendation: Optional[Recommendation] = None
    recommended_order: Optional[int] = Field(None, ge=1)
    is_pinned: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True)

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class AddPracticeProblemRequest(BaseModel):
    title: str = Field(..., min_length=1)
    url: str = ""
    source: ProblemSource = ProblemSource.OTHER
    difficulty: Difficulty = Difficulty.MEDIUM

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class ResumeUploadResponse(BaseModel):
    url: str
    extracted_text: str


class StartSessionRequest(BaseModel):
    type: InterviewType
    difficulty: Difficulty = Difficulty.MEDIUM
    resume_content: Optional[str] = Field(None, description="Text extracted from the uploaded resume")
    resume_url: Optional[str] = None
    focus_area: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class StartSessionResponse(BaseModel):
    session_id: str
    first_question: str
    opening_remark: str = ""


class TranscriptRequest(BaseModel):
    transcript: List[TranscriptEntry] = Field(default_factory=list)


class NextQuestionRequest(TranscriptRequest):
    revision: Optional[int] = Field(None, description="Session revision the client last saw")


class NextQuestionResponse(BaseModel):
    next_question: Optional[str] = Field(None, description="Null when the question limit is reached")
    revision: int


class WarningResponse(BaseModel):
    warning: str


class AssistRequest(BaseModel):
    issue_type: str = Field(..., description="need_hint, irrelevant_question or too_hard")
    current_question: str


class AssistResponse(BaseModel):
    empathetic_message: str
    response: str


class EndSessionResponse(BaseModel):
    feedback: Optional[FeedbackReport]
    already_concluded: bool = False


class CreateBankQuestionRequest(BaseModel):
    question: str
    target_role: str
    target_company: Optional[str] = None
    difficulty: Difficulty = Difficulty.MEDIUM
    topics_covered: List[str] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class UpdateBankQuestionRequest(BaseModel):
    question: Optional[str] = None
    target_role: Optional[str] = None
    target_company: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    topics_covered: Optional[List[str]] = None

    model_config = ConfigDict(use_enum_values=True)

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class BankQuestionListResponse(BaseModel):
    questions: List[BankQuestion]

