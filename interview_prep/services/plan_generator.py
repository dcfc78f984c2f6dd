"""
Preparation plan generation.

This module builds a plan's learning and practice content with one model call
per operation. Creation writes nothing unless the model output validated;
"generate more" operations only ever append.
"""
import logging
from typing import Iterable, List, Set

from interview_prep.ai.model_client import ResilientModelClient
from interview_prep.ai.prompts.plan_prompts import (
    CREATE_PLAN_PROMPT,
    MORE_LEARNING_PROMPT,
    MORE_PRACTICE_PROMPT,
    MORE_QUESTIONS_PROMPT,
)
from interview_prep.ai.schemas import (
    GeneratedLearningItems,
    GeneratedPlanContent,
    GeneratedPracticeItems,
    GeneratedQuestions,
)
from interview_prep.core.exceptions import ValidationError
from interview_prep.models.api import CreatePlanRequest
from interview_prep.models.plan import PreparationPlan, Target
from interview_prep.services.plan_repository import PlanRepository
from interview_prep.utils.constants import (
    PLAN_PROBLEMS_KEY,
    PLAN_QUESTIONS_KEY,
    PLAN_STORIES_KEY,
    PLAN_TOPICS_KEY,
)

logger = logging.getLogger(__name__)


def _normalize(text: str) -> str:
    return " ".join((text or "").lower().split())


def _bullet_list(titles: Iterable[str]) -> str:
    items = [f"- {title}" for title in titles if title]
    return "\n".join(items) if items else "(none yet)"


def _fresh(items: List, key, seen: Set[str]) -> List:
    """Drop items whose normalized key was already seen, including repeats within items."""
    kept = []
    for item in items:
        marker = _normalize(key(item))
        if not marker or marker in seen:
            continue
        seen.add(marker)
        kept.append(item)
    return kept


class PreparationPlanGenerator:
    """Creates plans and grows their learning and practice sections."""

    def __init__(self, model_client: ResilientModelClient, repository: PlanRepository):
        self.model_client = model_client
        self.repository = repository

    @staticmethod
    def _context(plan_like) -> dict:
        target = plan_like.target
        description = getattr(plan_like, "description", None)
        return {
            "role": target.role,
            "company": target.company,
            "level": target.level,
            "experience_level": plan_like.experience_level,
            "title": plan_like.title,
            "description": f"Notes from the candidate: {description}" if description else "",
        }

    async def create_plan(self, user_id: str, request: CreatePlanRequest) -> PreparationPlan:
        """
        Create a plan from user input plus one model call.

        Raises:
            ValidationError: title, target role or target company missing
            ModelUnavailable / MalformedResponse: generation failed; nothing was written
        """
        missing = [
            name for name, value in (
                ("title", request.title),
                ("target.role", request.target.role),
                ("target.company", request.target.company),
            ) if not (value or "").strip()
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        prompt = CREATE_PLAN_PROMPT.format(**self._context(request))
        logger.info(f"Generating plan '{request.title}' for {request.target.role} at {request.target.company}")
        content = await self.model_client.invoke(prompt, GeneratedPlanContent)

        plan = PreparationPlan(
            user_id=user_id,
            title=request.title.strip(),
            description=request.description,
            target=Target(**request.target.model_dump()),
            experience_level=request.experience_level,
            study_topics=content.study_topics,
            prepared_questions=content.prepared_questions,
            practice_problems=content.practice_problems,
            story_bank=content.story_bank,
        )
        await self.repository.insert_plan(plan)
        return plan

    async def generate_more_learning_items(self, user_id: str, plan_id: str) -> PreparationPlan:
        """Append new study topics and prepared questions; existing items are never replaced."""
        plan = await self.repository.get_plan(plan_id, user_id)
        prompt = MORE_LEARNING_PROMPT.format(
            existing_topics=_bullet_list(t.topic for t in plan.study_topics),
            existing_questions=_bullet_list(q.question for q in plan.prepared_questions),
            **self._context(plan),
        )
        generated = await self.model_client.invoke(prompt, GeneratedLearningItems)

        topics = _fresh(generated.study_topics, lambda t: t.topic, {_normalize(t.topic) for t in plan.study_topics})
        questions = _fresh(
            generated.prepared_questions, lambda q: q.question,
            {_normalize(q.question) for q in plan.prepared_questions},
        )
        await self.repository.append_items(plan_id, user_id, {
            PLAN_TOPICS_KEY: [t.model_dump() for t in topics],
            PLAN_QUESTIONS_KEY: [q.model_dump() for q in questions],
        })
        return await self.repository.get_plan(plan_id, user_id)

    async def generate_more_practice_items(self, user_id: str, plan_id: str) -> PreparationPlan:
        """Append new practice problems and story-bank prompts."""
        plan = await self.repository.get_plan(plan_id, user_id)
        prompt = MORE_PRACTICE_PROMPT.format(
            existing_problems=_bullet_list(p.title for p in plan.practice_problems),
            existing_stories=_bullet_list(s.prompt for s in plan.story_bank),
            **self._context(plan),
        )
        generated = await self.model_client.invoke(prompt, GeneratedPracticeItems)

        seen_problems = {_normalize(p.title) for p in plan.practice_problems}
        seen_problems |= {_normalize(p.url) for p in plan.practice_problems if p.url}
        problems = [
            p for p in _fresh(generated.practice_problems, lambda p: p.title, seen_problems)
            if not p.url or _normalize(p.url) not in seen_problems
        ]
        stories = _fresh(generated.story_bank, lambda s: s.prompt, {_normalize(s.prompt) for s in plan.story_bank})
        await self.repository.append_items(plan_id, user_id, {
            PLAN_PROBLEMS_KEY: [p.model_dump() for p in problems],
            PLAN_STORIES_KEY: [s.model_dump() for s in stories],
        })
        return await self.repository.get_plan(plan_id, user_id)

    async def generate_more_questions(self, user_id: str, plan_id: str) -> PreparationPlan:
        plan = await self.repository.get_plan(plan_id, user_id)
        prompt = MORE_QUESTIONS_PROMPT.format(
            existing_questions=_bullet_list(q.question for q in plan.prepared_questions),
            **self._context(plan),
        )
        generated = await self.model_client.invoke(prompt, GeneratedQuestions)
        questions = _fresh(
            generated.prepared_questions, lambda q: q.question,
            {_normalize(q.question) for q in plan.prepared_questions},
        )
        await self.repository.append_items(plan_id, user_id, {
            PLAN_QUESTIONS_KEY: [q.model_dump() for q in questions],
        })
        return await self.repository.get_plan(plan_id, user_id)
