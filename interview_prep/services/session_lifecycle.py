"""
Mock interview session lifecycle.

Sessions move Created -> Active (start) -> Active (next, any number of times)
-> Concluded (end). Every model call happens before the write that depends on
it, so a failed call leaves the stored session untouched.
"""
import logging
from typing import List, Optional

from interview_prep.ai.model_client import ResilientModelClient
from interview_prep.ai.prompts.interview_prompts import (
    ASSIST_PROMPT,
    FEEDBACK_PROMPT,
    NEXT_QUESTION_PROMPT,
    OPENING_PROMPT,
    TYPE_GUIDANCE,
    WARNING_PROMPT,
)
from interview_prep.ai.schemas import AssistReply, NextQuestion, OpeningQuestion, WarningSuggestion
from interview_prep.core.exceptions import (
    ConcurrencyNoop,
    SessionNotFound,
    StaleSessionWrite,
    ValidationError,
)
from interview_prep.models.api import (
    EndSessionResponse,
    NextQuestionResponse,
    StartSessionRequest,
    StartSessionResponse,
)
from interview_prep.models.plan import PreparationPlan
from interview_prep.models.session import (
    FeedbackReport,
    InterviewType,
    MockInterviewSession,
    Speaker,
    TranscriptEntry,
    utc_now,
)
from interview_prep.services.plan_repository import PlanRepository
from interview_prep.services.question_bank import QuestionBank
from interview_prep.utils.config import get_session_config
from interview_prep.utils.constants import RESUME_PROMPT_CHAR_LIMIT
from interview_prep.utils.transcript import count_ai_entries, format_transcript, validate_transcript

# Set up logging
logger = logging.getLogger(__name__)

ASSIST_ISSUE_TYPES = ("need_hint", "irrelevant_question", "too_hard")


class SessionLifecycleManager:
    """
    Creates, advances and concludes mock interview sessions embedded in a plan.

    All session writes go through PlanRepository, which addresses the single
    session sub-document by id.
    """

    def __init__(
        self,
        model_client: ResilientModelClient,
        repository: PlanRepository,
        question_bank: Optional[QuestionBank] = None,
        max_questions: Optional[int] = None,
        interviewer_name: Optional[str] = None,
    ):
        session_config = get_session_config()
        self.model_client = model_client
        self.repository = repository
        self.question_bank = question_bank
        self.max_questions = max_questions or session_config["max_questions"]
        self.interviewer_name = interviewer_name or session_config["interviewer_name"]

    def _prompt_context(self, plan: PreparationPlan, interview_type: str, difficulty: str,
                        focus_area: Optional[str]) -> dict:
        return {
            "interviewer_name": self.interviewer_name,
            "interview_type": interview_type,
            "role": plan.target.role,
            "company": plan.target.company,
            "difficulty": difficulty,
            "focus_line": f"Focus area requested by the candidate: {focus_area}" if focus_area else "",
            "type_guidance": TYPE_GUIDANCE.get(interview_type, ""),
        }

    def _session_context(self, plan: PreparationPlan, session: MockInterviewSession) -> dict:
        return self._prompt_context(plan, session.interview_type, session.difficulty, session.focus_area)

    async def _load_active(self, user_id: str, plan_id: str, session_id: str):
        """Return (plan, session) for an Active session, or raise SessionNotFound."""
        plan = await self.repository.get_plan(plan_id, user_id)
        session = plan.find_session(session_id)
        if session is None or not session.is_active:
            raise SessionNotFound(f"Active session {session_id} not found")
        return plan, session

    async def start(self, user_id: str, plan_id: str, request: StartSessionRequest) -> StartSessionResponse:
        """
        Open a new session and produce its first question.

        Raises:
            ValidationError: resume-based interview without resume text
            PlanNotFound: unknown plan
            ModelUnavailable / MalformedResponse: no session is created
        """
        interview_type = request.type
        resume_text = (request.resume_content or "").strip()
        if interview_type == InterviewType.RESUME_BASED.value and not resume_text:
            raise ValidationError("A resume-based interview requires the extracted resume text")

        plan = await self.repository.get_plan(plan_id, user_id)

        opening: Optional[OpeningQuestion] = None
        if interview_type == InterviewType.ROLE_BASED.value and self.question_bank is not None:
            bank_question = await self.question_bank.find_opening_question(plan.target.role, plan.target.company)
            if bank_question:
                opening = OpeningQuestion(
                    opening_remark=f"Hi, I'm {self.interviewer_name}. Let's get started.",
                    first_question=bank_question.question,
                )

        if opening is None:
            resume_block = ""
            if resume_text:
                resume_block = (
                    "Candidate resume (excerpt):\n---\n"
                    f"{resume_text[:RESUME_PROMPT_CHAR_LIMIT]}\n---\n"
                )
            prompt = OPENING_PROMPT.format(
                resume_block=resume_block,
                **self._prompt_context(plan, interview_type, request.difficulty, request.focus_area),
            )
            opening = await self.model_client.invoke(prompt, OpeningQuestion)

        session = MockInterviewSession(
            interview_type=interview_type,
            difficulty=request.difficulty,
            resume_ref=request.resume_url,
            focus_area=request.focus_area,
            transcript=[TranscriptEntry(speaker=Speaker.AI, content=opening.first_question, timestamp=utc_now())],
        )
        await self.repository.append_session(plan_id, user_id, session)
        logger.info(f"Started {interview_type} session {session.id} in plan {plan_id}")
        return StartSessionResponse(
            session_id=session.id,
            first_question=opening.first_question,
            opening_remark=opening.opening_remark,
        )

    async def next(
        self,
        user_id: str,
        plan_id: str,
        session_id: str,
        transcript: List[TranscriptEntry],
        revision: Optional[int] = None,
    ) -> NextQuestionResponse:
        """
        Store the caller's transcript and append the next AI question.

        Returns next_question=None once the question limit is reached; the
        submitted transcript is still stored.

        Raises:
            ValidationError: timestamps out of order
            SessionNotFound: unknown or concluded session
            StaleSessionWrite: revision mismatch
        """
        entries = validate_transcript(transcript)
        plan, session = await self._load_active(user_id, plan_id, session_id)
        if revision is not None and session.revision != revision:
            raise StaleSessionWrite(f"Session {session_id} is at revision {session.revision}, not {revision}")

        asked = count_ai_entries(entries)
        if asked >= self.max_questions:
            logger.info(f"Session {session_id} reached the limit of {self.max_questions} questions")
            await self.repository.replace_transcript(
                plan_id, user_id, session_id, [e.model_dump() for e in entries], expected_revision=revision
            )
            return NextQuestionResponse(next_question=None, revision=session.revision + 1)

        prompt = NEXT_QUESTION_PROMPT.format(
            transcript=format_transcript(entries),
            **self._session_context(plan, session),
        )
        generated = await self.model_client.invoke(prompt, NextQuestion)

        stamp = utc_now()
        if entries and entries[-1].timestamp > stamp:
            stamp = entries[-1].timestamp
        entries.append(TranscriptEntry(speaker=Speaker.AI, content=generated.next_question, timestamp=stamp))

        await self.repository.replace_transcript(
            plan_id, user_id, session_id, [e.model_dump() for e in entries], expected_revision=revision
        )
        return NextQuestionResponse(next_question=generated.next_question, revision=session.revision + 1)

    async def end(
        self, user_id: str, plan_id: str, session_id: str, transcript: List[TranscriptEntry]
    ) -> EndSessionResponse:
        """
        Conclude a session with a feedback report.

        Ending a session that is already concluded is a no-op that returns the
        stored feedback.
        """
        plan = await self.repository.get_plan(plan_id, user_id)
        session = plan.find_session(session_id)
        if session is None:
            raise SessionNotFound(f"Session {session_id} not found")
        if not session.is_active:
            logger.warning(f"ConcurrencyNoop: session {session_id} is already concluded")
            return EndSessionResponse(feedback=session.feedback, already_concluded=True)

        entries = validate_transcript(transcript) or list(session.transcript)
        duration_seconds = max(0, int((utc_now() - session.start_timestamp).total_seconds()))

        prompt = FEEDBACK_PROMPT.format(
            duration_seconds=duration_seconds,
            transcript=format_transcript(entries),
            **self._session_context(plan, session),
        )
        feedback = await self.model_client.invoke(prompt, FeedbackReport)

        try:
            await self.repository.conclude_session(
                plan_id,
                user_id,
                session_id,
                [e.model_dump() for e in entries],
                feedback.model_dump(),
                duration_seconds,
            )
        except ConcurrencyNoop as e:
            logger.warning(f"ConcurrencyNoop: {e.message}")
            plan = await self.repository.get_plan(plan_id, user_id)
            stored = plan.find_session(session_id)
            return EndSessionResponse(feedback=stored.feedback if stored else None, already_concluded=True)

        logger.info(f"Session {session_id} concluded with score {feedback.overall_score}")
        return EndSessionResponse(feedback=feedback)

    async def warning(
        self, user_id: str, plan_id: str, session_id: str, transcript: List[TranscriptEntry]
    ) -> str:
        """Short redirect suggestion for an off-track answer. Nothing is written."""
        entries = validate_transcript(transcript)
        plan, session = await self._load_active(user_id, plan_id, session_id)
        prompt = WARNING_PROMPT.format(
            transcript=format_transcript(entries or session.transcript),
            **self._session_context(plan, session),
        )
        suggestion = await self.model_client.invoke(prompt, WarningSuggestion)
        return suggestion.warning

    async def assist(
        self, user_id: str, plan_id: str, session_id: str, issue_type: str, current_question: str
    ) -> AssistReply:
        """Hint, alternative or simplified question for a struggling candidate. Nothing is written."""
        if issue_type not in ASSIST_ISSUE_TYPES:
            raise ValidationError(f"issue_type must be one of: {', '.join(ASSIST_ISSUE_TYPES)}")
        if not (current_question or "").strip():
            raise ValidationError("current_question is required")

        plan, session = await self._load_active(user_id, plan_id, session_id)
        prompt = ASSIST_PROMPT.format(
            current_question=current_question.strip(),
            issue_type=issue_type,
            **self._session_context(plan, session),
        )
        return await self.model_client.invoke(prompt, AssistReply)
