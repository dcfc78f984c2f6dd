"""
Curated question bank used to open role-based interviews.
"""

import logging
import re
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
import pymongo
from pymongo import ReturnDocument

from interview_prep.core.exceptions import ItemNotFound, ValidationError
from interview_prep.models.plan import BankQuestion
from interview_prep.utils.config import get_db_config

logger = logging.getLogger(__name__)


def _contains(text: str) -> dict:
    """Case-insensitive substring match on the literal text."""
    return {"$regex": re.escape(text.strip()), "$options": "i"}


class QuestionBank:
    """Stores admin-authored questions and looks them up by role and company."""

    def __init__(self, database: AsyncIOMotorDatabase, collection_name: Optional[str] = None):
        name = collection_name or get_db_config()["question_bank_collection"]
        self.collection: AsyncIOMotorCollection = database[name]

    async def setup_indexes(self):
        try:
            await self.collection.create_index("id", unique=True)
            await self.collection.create_index([("target_role", pymongo.ASCENDING), ("target_company", pymongo.ASCENDING)])
        except Exception as e:
            logger.warning(f"Error creating question bank indexes: {e}")

    async def add_question(self, question: BankQuestion) -> BankQuestion:
        await self.collection.insert_one(question.model_dump())
        logger.info(f"Added bank question {question.id} for role {question.target_role}")
        return question

    async def list_questions(
        self, role: Optional[str] = None, company: Optional[str] = None, limit: int = 200
    ) -> List[BankQuestion]:
        query = {}
        if role:
            query["target_role"] = _contains(role)
        if company:
            query["target_company"] = _contains(company)
        cursor = self.collection.find(query, {"_id": 0}).sort("created_at", pymongo.DESCENDING)
        return [BankQuestion.model_validate(doc) for doc in await cursor.to_list(length=limit)]

    async def update_question(self, question_id: str, changes: Dict[str, Any]) -> BankQuestion:
        """Set the given fields of a bank question and return the stored result."""
        if not changes:
            raise ValidationError("No question fields to update")
        document = await self.collection.find_one_and_update(
            {"id": question_id},
            {"$set": changes},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )
        if not document:
            raise ItemNotFound(f"Bank question {question_id} not found")
        logger.info(f"Updated bank question {question_id}: {sorted(changes)}")
        return BankQuestion.model_validate(document)

    async def delete_questions(self, question_ids: List[str]) -> int:
        if not question_ids:
            raise ValidationError("Provide at least one question id to delete")
        result = await self.collection.delete_many({"id": {"$in": question_ids}})
        logger.info(f"Deleted {result.deleted_count} bank questions")
        return result.deleted_count

    async def find_opening_question(self, role: str, company: str) -> Optional[BankQuestion]:
        """First bank question matching both the role and the company, if any."""
        document = await self.collection.find_one(
            {"target_role": _contains(role), "target_company": _contains(company)},
            {"_id": 0},
        )
        if document:
            logger.info(f"Using bank question {document.get('id')} for {role} at {company}")
            return BankQuestion.model_validate(document)
        return None
