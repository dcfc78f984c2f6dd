"""
MongoDB persistence for preparation plans.

Plans are single documents; sessions are embedded sub-documents addressed by
id with the positional operator. Session writes never rewrite the whole
sessions array, so concurrent writes to sibling sessions or to other plan
fields are not lost.
"""

import logging
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
import pymongo

from interview_prep.core.exceptions import (
    ConcurrencyNoop,
    ItemNotFound,
    PlanNotFound,
    SessionNotFound,
    StaleSessionWrite,
    ValidationError,
)
from interview_prep.models.plan import PracticeProblem, PreparationPlan
from interview_prep.models.session import MockInterviewSession, SessionStatus, utc_now
from interview_prep.utils.config import get_db_config
from interview_prep.utils.constants import (
    PLAN_PROBLEMS_KEY,
    PLAN_QUESTIONS_KEY,
    PLAN_SESSIONS_KEY,
    PLAN_TOPICS_KEY,
)

logger = logging.getLogger(__name__)

SESSION_FIELD = PLAN_SESSIONS_KEY
# Positional path of the sub-document matched by the update filter
SESSION_POS = f"{PLAN_SESSIONS_KEY}.$"
# Resources of every topic
RESOURCES_ALL_POS = f"{PLAN_TOPICS_KEY}.$[].resources"


class PlanRepository:
    """Data access for plan documents and their embedded sessions."""

    def __init__(self, database: AsyncIOMotorDatabase, collection_name: Optional[str] = None):
        """Initialize the repository on a motor database."""
        self.db = database
        name = collection_name or get_db_config()["plans_collection"]
        self.collection: AsyncIOMotorCollection = database[name]

    async def setup_indexes(self):
        """Set up database indexes for optimal performance."""
        try:
            await self.collection.create_index("plan_id", unique=True)
            await self.collection.create_index([("user_id", pymongo.ASCENDING), ("created_at", pymongo.DESCENDING)])
            await self.collection.create_index(f"{SESSION_FIELD}.id")
            logger.info("Plan collection indexes created successfully")
        except Exception as e:
            logger.warning(f"Error creating plan indexes: {e}")

    @staticmethod
    def _owner_filter(plan_id: str, user_id: str) -> Dict[str, Any]:
        return {"plan_id": plan_id, "user_id": user_id}

    # ---- plans ----

    async def insert_plan(self, plan: PreparationPlan) -> PreparationPlan:
        await self.collection.insert_one(plan.model_dump())
        logger.info(f"Inserted plan {plan.plan_id} for user {plan.user_id}")
        return plan

    async def get_plan(self, plan_id: str, user_id: str) -> PreparationPlan:
        """Load a plan owned by user_id, or raise PlanNotFound."""
        document = await self.collection.find_one(self._owner_filter(plan_id, user_id), {"_id": 0})
        if not document:
            raise PlanNotFound(f"Preparation plan {plan_id} not found")
        return PreparationPlan.model_validate(document)

    async def list_plans(self, user_id: str, limit: int = 100) -> List[PreparationPlan]:
        cursor = self.collection.find({"user_id": user_id}, {"_id": 0}).sort("created_at", pymongo.DESCENDING)
        documents = await cursor.to_list(length=limit)
        return [PreparationPlan.model_validate(doc) for doc in documents]

    async def update_status(self, plan_id: str, user_id: str, status: str) -> None:
        result = await self.collection.update_one(
            self._owner_filter(plan_id, user_id),
            {"$set": {"status": status, "updated_at": utc_now()}},
        )
        if result.matched_count == 0:
            raise PlanNotFound(f"Preparation plan {plan_id} not found")
        logger.info(f"Plan {plan_id} status set to {status}")

    async def delete_plan(self, plan_id: str, user_id: str) -> None:
        """Delete a plan together with all of its sessions."""
        result = await self.collection.delete_one(self._owner_filter(plan_id, user_id))
        if result.deleted_count == 0:
            raise PlanNotFound(f"Preparation plan {plan_id} not found")
        logger.info(f"Deleted plan {plan_id}")

    async def append_items(self, plan_id: str, user_id: str, items: Dict[str, List[Dict[str, Any]]]) -> None:
        """
        Append generated items to the plan's arrays.

        Args:
            plan_id: Plan identifier
            user_id: Owner identifier
            items: Mapping of array field name to the documents to append
        """
        push = {field: {"$each": docs} for field, docs in items.items() if docs}
        update: Dict[str, Any] = {"$set": {"updated_at": utc_now()}}
        if push:
            update["$push"] = push
        result = await self.collection.update_one(self._owner_filter(plan_id, user_id), update)
        if result.matched_count == 0:
            raise PlanNotFound(f"Preparation plan {plan_id} not found")
        counts = {field: len(docs) for field, docs in items.items()}
        logger.info(f"Appended items to plan {plan_id}: {counts}")

    async def set_question_pin(
        self, plan_id: str, user_id: str, question_id: str, pinned: Optional[bool] = None
    ) -> bool:
        """Pin or unpin a prepared question; toggles when pinned is None. Returns the new state."""
        if pinned is None:
            plan = await self.get_plan(plan_id, user_id)
            current = next((q for q in plan.prepared_questions if q.id == question_id), None)
            if current is None:
                raise ItemNotFound(f"Question {question_id} not found in plan {plan_id}")
            pinned = not current.is_pinned

        result = await self.collection.update_one(
            {**self._owner_filter(plan_id, user_id), f"{PLAN_QUESTIONS_KEY}.id": question_id},
            {"$set": {f"{PLAN_QUESTIONS_KEY}.$.is_pinned": pinned, "updated_at": utc_now()}},
        )
        if result.matched_count == 0:
            await self.get_plan(plan_id, user_id)
            raise ItemNotFound(f"Question {question_id} not found in plan {plan_id}")
        return pinned

    async def delete_plans(self, user_id: str, plan_ids: List[str]) -> int:
        """Delete several of the user's plans at once. Returns how many were removed."""
        if not plan_ids:
            raise ValidationError("Provide at least one plan id to delete")
        result = await self.collection.delete_many({"plan_id": {"$in": plan_ids}, "user_id": user_id})
        logger.info(f"Deleted {result.deleted_count} of {len(plan_ids)} plans for user {user_id}")
        return result.deleted_count

    async def _pull_items(self, plan_id: str, user_id: str, path: str, item_ids: List[str]) -> None:
        if not item_ids:
            raise ValidationError("Provide at least one item id to delete")
        result = await self.collection.update_one(
            self._owner_filter(plan_id, user_id),
            {"$pull": {path: {"id": {"$in": item_ids}}}, "$set": {"updated_at": utc_now()}},
        )
        if result.matched_count == 0:
            raise PlanNotFound(f"Preparation plan {plan_id} not found")
        logger.info(f"Removed up to {len(item_ids)} items from {path} in plan {plan_id}")

    async def remove_questions(self, plan_id: str, user_id: str, question_ids: List[str]) -> None:
        await self._pull_items(plan_id, user_id, PLAN_QUESTIONS_KEY, question_ids)

    async def remove_study_topics(self, plan_id: str, user_id: str, topic_ids: List[str]) -> None:
        await self._pull_items(plan_id, user_id, PLAN_TOPICS_KEY, topic_ids)

    async def remove_resources(self, plan_id: str, user_id: str, resource_ids: List[str]) -> None:
        """Remove study resources from whichever topics hold them."""
        await self._pull_items(plan_id, user_id, RESOURCES_ALL_POS, resource_ids)

    async def update_resource(self, plan_id: str, user_id: str, resource_id: str, changes: Dict[str, Any]) -> None:
        """
        Set fields of one study resource in place.

        Args:
            changes: Field name to new value, e.g. {"is_pinned": True}
        """
        if not changes:
            raise ValidationError("No resource fields to update")
        fields = {f"{RESOURCES_ALL_POS}.$[resource].{name}": value for name, value in changes.items()}
        fields["updated_at"] = utc_now()
        result = await self.collection.update_one(
            {**self._owner_filter(plan_id, user_id), f"{PLAN_TOPICS_KEY}.resources.id": resource_id},
            {"$set": fields},
            array_filters=[{"resource.id": resource_id}],
        )
        if result.matched_count == 0:
            await self.get_plan(plan_id, user_id)
            raise ItemNotFound(f"Resource {resource_id} not found in plan {plan_id}")
        logger.info(f"Updated resource {resource_id} in plan {plan_id}: {sorted(changes)}")

    async def add_practice_problem(self, plan_id: str, user_id: str, problem: PracticeProblem) -> PracticeProblem:
        await self.append_items(plan_id, user_id, {PLAN_PROBLEMS_KEY: [problem.model_dump()]})
        return problem

    # ---- sessions ----

    async def append_session(self, plan_id: str, user_id: str, session: MockInterviewSession) -> None:
        result = await self.collection.update_one(
            self._owner_filter(plan_id, user_id),
            {
                "$push": {SESSION_FIELD: session.model_dump()},
                "$set": {"updated_at": utc_now()},
            },
        )
        if result.matched_count == 0:
            raise PlanNotFound(f"Preparation plan {plan_id} not found")
        logger.info(f"Appended session {session.id} to plan {plan_id}")

    def _active_session_filter(
        self, plan_id: str, user_id: str, session_id: str, expected_revision: Optional[int] = None
    ) -> Dict[str, Any]:
        match: Dict[str, Any] = {"id": session_id, "status": SessionStatus.ACTIVE.value}
        if expected_revision is not None:
            match["revision"] = expected_revision
        return {**self._owner_filter(plan_id, user_id), SESSION_FIELD: {"$elemMatch": match}}

    async def replace_transcript(
        self,
        plan_id: str,
        user_id: str,
        session_id: str,
        transcript: List[Dict[str, Any]],
        expected_revision: Optional[int] = None,
    ) -> None:
        """
        Replace one active session's transcript.

        Raises:
            SessionNotFound: the session is unknown or no longer active
            StaleSessionWrite: expected_revision no longer matches
        """
        result = await self.collection.update_one(
            self._active_session_filter(plan_id, user_id, session_id, expected_revision),
            {
                "$set": {f"{SESSION_POS}.transcript": transcript, "updated_at": utc_now()},
                "$inc": {f"{SESSION_POS}.revision": 1},
            },
        )
        if result.matched_count == 0:
            await self._raise_for_missed_write(plan_id, user_id, session_id, expected_revision)

    async def conclude_session(
        self,
        plan_id: str,
        user_id: str,
        session_id: str,
        transcript: List[Dict[str, Any]],
        feedback: Dict[str, Any],
        duration_seconds: int,
    ) -> None:
        """
        Seal an active session with its final transcript and feedback.

        Raises:
            ConcurrencyNoop: the session was concluded by someone else first
        """
        result = await self.collection.update_one(
            self._active_session_filter(plan_id, user_id, session_id),
            {
                "$set": {
                    f"{SESSION_POS}.transcript": transcript,
                    f"{SESSION_POS}.feedback": feedback,
                    f"{SESSION_POS}.overall_score": feedback.get("overall_score"),
                    f"{SESSION_POS}.duration_seconds": duration_seconds,
                    f"{SESSION_POS}.status": SessionStatus.CONCLUDED.value,
                    f"{SESSION_POS}.ended_at": utc_now(),
                    "updated_at": utc_now(),
                },
                "$inc": {f"{SESSION_POS}.revision": 1},
            },
        )
        if result.matched_count == 0:
            raise ConcurrencyNoop(f"Session {session_id} in plan {plan_id} was already concluded")
        logger.info(f"Concluded session {session_id} in plan {plan_id}")

    async def _raise_for_missed_write(
        self, plan_id: str, user_id: str, session_id: str, expected_revision: Optional[int]
    ) -> None:
        """Work out why a conditional session write matched nothing."""
        plan = await self.get_plan(plan_id, user_id)
        session = plan.find_session(session_id)
        if session is None or not session.is_active:
            raise SessionNotFound(f"Active session {session_id} not found")
        if expected_revision is not None and session.revision != expected_revision:
            raise StaleSessionWrite(
                f"Session {session_id} is at revision {session.revision}, not {expected_revision}"
            )
        raise SessionNotFound(f"Active session {session_id} not found")
