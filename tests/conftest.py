"""
Shared factories for the unit tests.
"""
from datetime import timedelta

import pytest

from interview_prep.models.plan import (
    PracticeProblem,
    PreparationPlan,
    PreparedQuestion,
    StoryBankEntry,
    StudyTopic,
    Target,
)
from interview_prep.models.session import (
    FeedbackReport,
    MockInterviewSession,
    SessionStatus,
    TranscriptEntry,
    utc_now,
)


def make_feedback(score: float = 72) -> FeedbackReport:
    return FeedbackReport(
        overall_score=score,
        performance_summary="Clear structure, answers could use more measurable results.",
        content_analysis={
            "clarity": {"score": 8, "feedback": "Easy to follow."},
            "conciseness": {"score": 6, "feedback": "Some answers ran long."},
            "technical_accuracy": {"score": 7, "feedback": "Mostly accurate."},
            "use_of_keywords": ["ownership"],
        },
        communication_analysis={
            "pacing": "good",
            "filler_words": {"count": 2, "words": ["um"]},
            "confidence_level": "medium",
        },
        suggested_answers=[{"question": "Tell me about a conflict.", "suggested_answer": "Situation..."}],
    )


def make_transcript(*turns):
    """Build entries from (speaker, content) pairs, one second apart."""
    start = utc_now() - timedelta(minutes=5)
    return [
        TranscriptEntry(speaker=speaker, content=content, timestamp=start + timedelta(seconds=index))
        for index, (speaker, content) in enumerate(turns)
    ]


def make_session(session_id: str = "is_abc123def456", status: str = SessionStatus.ACTIVE.value,
                 revision: int = 0, transcript=None, feedback=None,
                 interview_type: str = "behavioral") -> MockInterviewSession:
    return MockInterviewSession(
        id=session_id,
        interview_type=interview_type,
        start_timestamp=utc_now() - timedelta(minutes=10),
        transcript=transcript if transcript is not None else make_transcript(("ai", "Tell me about a conflict.")),
        status=status,
        revision=revision,
        feedback=feedback,
    )


def make_plan(plan_id: str = "plan-1", user_id: str = "user-1", sessions=None, **overrides) -> PreparationPlan:
    fields = dict(
        plan_id=plan_id,
        user_id=user_id,
        title="Stripe backend loop",
        target=Target(role="Backend Engineer", company="Stripe", level="Mid-level"),
        study_topics=[StudyTopic(id="t1", topic="Graphs", category="algorithms")],
        prepared_questions=[PreparedQuestion(id="q1", question="Why Stripe?")],
        practice_problems=[PracticeProblem(id="p1", title="Two Sum", url="https://leetcode.com/problems/two-sum/")],
        story_bank=[StoryBankEntry(id="s1", prompt="A time you failed", situation="s", task="t",
                                   action="a", result="r")],
        mock_interview_sessions=sessions or [],
    )
    fields.update(overrides)
    return PreparationPlan(**fields)


@pytest.fixture
def feedback_report():
    return make_feedback()
