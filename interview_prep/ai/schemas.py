"""
Expected response shapes for every model call.

Each operation validates the model's JSON against one of these models and
aborts on mismatch.
"""
from typing import List

from pydantic import BaseModel, Field, field_validator

from interview_prep.models.plan import (
    PracticeProblem,
    PreparedQuestion,
    StoryBankEntry,
    StudyTopic,
)
from interview_prep.models.session import FeedbackReport


class GeneratedPlanContent(BaseModel):
    """Initial content of a new plan."""
    study_topics: List[StudyTopic] = Field(..., min_length=1)
    prepared_questions: List[PreparedQuestion] = Field(default_factory=list)
    practice_problems: List[PracticeProblem] = Field(..., min_length=1)
    story_bank: List[StoryBankEntry] = Field(default_factory=list)


class GeneratedLearningItems(BaseModel):
    study_topics: List[StudyTopic] = Field(..., min_length=1)
    prepared_questions: List[PreparedQuestion] = Field(default_factory=list)


class GeneratedPracticeItems(BaseModel):
    practice_problems: List[PracticeProblem] = Field(..., min_length=1)
    story_bank: List[StoryBankEntry] = Field(default_factory=list)


class GeneratedQuestions(BaseModel):
    prepared_questions: List[PreparedQuestion] = Field(..., min_length=1)


def require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be blank")
    return value.strip()


class OpeningQuestion(BaseModel):
    opening_remark: str = ""
    first_question: str

    @field_validator("first_question")
    @classmethod
    def strip_question(cls, value: str) -> str:
        return require_text(value)


class NextQuestion(BaseModel):
    next_question: str

    @field_validator("next_question")
    @classmethod
    def strip_question(cls, value: str) -> str:
        return require_text(value)


class WarningSuggestion(BaseModel):
    warning: str

    @field_validator("warning")
    @classmethod
    def strip_warning(cls, value: str) -> str:
        return require_text(value)


class AssistReply(BaseModel):
    empathetic_message: str
    response: str


__all__ = [
    "GeneratedPlanContent",
    "GeneratedLearningItems",
    "GeneratedPracticeItems",
    "GeneratedQuestions",
    "OpeningQuestion",
    "NextQuestion",
    "WarningSuggestion",
    "AssistReply",
    "FeedbackReport",
]
