"""
Preparation plan data models for the Interview Prep engine.

A plan is stored as one MongoDB document. Learning, practice and assessment
content live in embedded arrays; every embedded item carries its own id so it
can be addressed individually.
"""

import uuid
from typing import Optional, List
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from interview_prep.models.session import MockInterviewSession, utc_now


def new_item_id() -> str:
    """Identifier for embedded sub-documents."""
    return uuid.uuid4().hex[:12]


class PlanStatus(str, Enum):
    """Progress of a plan. Set by the owner, never derived from sessions."""
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TopicCategory(str, Enum):
    DATA_STRUCTURES = "data-structures"
    ALGORITHMS = "algorithms"
    SYSTEM_DESIGN = "system-design"
    BEHAVIORAL = "behavioral"
    DOMAIN_KNOWLEDGE = "domain-knowledge"
    COMPANY_VALUES = "company-values"


class ResourceType(str, Enum):
    ARTICLE = "article"
    VIDEO = "video"
    COURSE = "course"
    DOCUMENTATION = "documentation"
    BOOK = "book"


class Recommendation(str, Enum):
    BEST = "best"
    GOOD = "good"
    AVERAGE = "average"


class QuestionCategory(str, Enum):
    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"
    SITUATIONAL = "situational"
    COMPANY_SPECIFIC = "company-specific"
    GENERAL = "general"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ProblemSource(str, Enum):
    LEETCODE = "leetcode"
    HACKERRANK = "hackerrank"
    CODEWARS = "codewars"
    CUSTOM = "custom"
    OTHER = "other"


class Target(BaseModel):
    """The job the plan prepares for."""
    role: str = Field(..., description="Target role, e.g. Backend Engineer")
    company: str = Field(..., description="Target company")
    level: str = Field(default="Entry-level", description="Seniority of the role")
    location: Optional[str] = Field(None, description="Job location")


class StudyResource(BaseModel):
    id: str = Field(default_factory=new_item_id)
    title: str
    url: str = ""
    type: ResourceType = ResourceType.ARTICLE
    recommendation: Recommendation = Recommendation.GOOD
    recommended_order: int = Field(default=1, ge=1)
    is_pinned: bool = False

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class StudyTopic(BaseModel):
    id: str = Field(default_factory=new_item_id)
    topic: str
    category: TopicCategory
    priority: int = Field(default=3, ge=1, le=5)
    resources: List[StudyResource] = Field(default_factory=list)

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class PreparedQuestion(BaseModel):
    id: str = Field(default_factory=new_item_id)
    question: str
    answer: str = ""
    category: QuestionCategory = QuestionCategory.GENERAL
    difficulty: Difficulty = Difficulty.MEDIUM
    keywords: List[str] = Field(default_factory=list)
    is_pinned: bool = False

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class PracticeProblem(BaseModel):
    id: str = Field(default_factory=new_item_id)
    title: str
    url: str = ""
    source: ProblemSource = ProblemSource.OTHER
    difficulty: Difficulty = Difficulty.MEDIUM

    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class StoryBankEntry(BaseModel):
    """A STAR-format story for behavioral questions."""
    id: str = Field(default_factory=new_item_id)
    prompt: str
    situation: str
    task: str
    action: str
    result: str
    keywords: List[str] = Field(default_factory=list)


class PreparationPlan(BaseModel):
    """A user's interview preparation document."""
    plan_id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Unique plan identifier")
    user_id: str = Field(..., description="Owner of the plan")
    title: str
    description: Optional[str] = None
    target: Target
    experience_level: str = "Entry-level"
    status: PlanStatus = PlanStatus.NOT_STARTED

    study_topics: List[StudyTopic] = Field(default_factory=list)
    prepared_questions: List[PreparedQuestion] = Field(default_factory=list)
    practice_problems: List[PracticeProblem] = Field(default_factory=list)
    story_bank: List[StoryBankEntry] = Field(default_factory=list)
    mock_interview_sessions: List[MockInterviewSession] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    def find_session(self, session_id: str) -> Optional[MockInterviewSession]:
        """Return the embedded session with the given id, if any."""
        for session in self.mock_interview_sessions:
            if session.id == session_id:
                return session
        return None


class BankQuestion(BaseModel):
    """Curated opening question for role-based interviews."""
    id: str = Field(default_factory=new_item_id)
    question: str
    target_role: str
    target_company: Optional[str] = None
    difficulty: Difficulty = Difficulty.MEDIUM
    topics_covered: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(use_enum_values=True, validate_default=True)
