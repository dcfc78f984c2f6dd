"""
Unit tests for QuestionBank lookups.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, Mock

from interview_prep.core.exceptions import ItemNotFound, ValidationError
from interview_prep.models.plan import BankQuestion
from interview_prep.services.question_bank import QuestionBank


@pytest.fixture
def collection():
    coll = Mock()
    coll.find_one = AsyncMock(return_value=None)
    coll.insert_one = AsyncMock()
    return coll


@pytest.fixture
def bank(collection):
    database = MagicMock()
    database.__getitem__.return_value = collection
    return QuestionBank(database, collection_name="question_bank")


class TestQuestionBank:
    @pytest.mark.asyncio
    async def test_lookup_is_case_insensitive_and_escaped(self, bank, collection):
        await bank.find_opening_question(" C++ ", "Acme")

        query = collection.find_one.await_args.args[0]
        assert query["target_role"] == {"$regex": r"C\+\+", "$options": "i"}
        assert query["target_company"]["$options"] == "i"

    @pytest.mark.asyncio
    async def test_returns_match(self, bank, collection):
        question = BankQuestion(question="Design a rate limiter.", target_role="Backend Engineer",
                                target_company="Stripe")
        collection.find_one.return_value = question.model_dump()

        found = await bank.find_opening_question("backend engineer", "stripe")

        assert found.question == "Design a rate limiter."

    @pytest.mark.asyncio
    async def test_no_match(self, bank):
        assert await bank.find_opening_question("Chef", "Nowhere") is None

    @pytest.mark.asyncio
    async def test_add_question(self, bank, collection):
        question = BankQuestion(question="Why Stripe?", target_role="Backend Engineer")

        await bank.add_question(question)

        assert collection.insert_one.await_args.args[0]["id"] == question.id

    @pytest.mark.asyncio
    async def test_role_filter_is_a_substring_match(self, bank, collection):
        await bank.find_opening_question("Backend", "Stripe")

        pattern = collection.find_one.await_args.args[0]["target_role"]["$regex"]
        assert pattern == "Backend"
        assert not pattern.startswith("^") and not pattern.endswith("$")


class TestQuestionBankAdmin:
    @pytest.mark.asyncio
    async def test_update_question(self, bank, collection):
        stored = BankQuestion(id="bq1", question="Why Stripe?", target_role="Backend Engineer", difficulty="hard")
        collection.find_one_and_update = AsyncMock(return_value=stored.model_dump())

        updated = await bank.update_question("bq1", {"difficulty": "hard"})

        query, update = collection.find_one_and_update.await_args.args
        assert query == {"id": "bq1"}
        assert update == {"$set": {"difficulty": "hard"}}
        assert updated.difficulty == "hard"

    @pytest.mark.asyncio
    async def test_update_missing_question(self, bank, collection):
        collection.find_one_and_update = AsyncMock(return_value=None)

        with pytest.raises(ItemNotFound):
            await bank.update_question("missing", {"question": "New text"})

    @pytest.mark.asyncio
    async def test_update_without_changes(self, bank, collection):
        collection.find_one_and_update = AsyncMock()

        with pytest.raises(ValidationError):
            await bank.update_question("bq1", {})
        collection.find_one_and_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_questions(self, bank, collection):
        collection.delete_many = AsyncMock(return_value=Mock(deleted_count=2))

        deleted = await bank.delete_questions(["bq1", "bq2"])

        assert deleted == 2
        assert collection.delete_many.await_args.args[0] == {"id": {"$in": ["bq1", "bq2"]}}

    @pytest.mark.asyncio
    async def test_delete_requires_ids(self, bank):
        with pytest.raises(ValidationError):
            await bank.delete_questions([])
