"""
Unit tests for PlanRepository update documents.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, Mock

from conftest import make_plan, make_session
from interview_prep.core.exceptions import (
    ConcurrencyNoop,
    ItemNotFound,
    PlanNotFound,
    SessionNotFound,
    StaleSessionWrite,
    ValidationError,
)
from interview_prep.models.plan import PracticeProblem
from interview_prep.services.plan_repository import PlanRepository


@pytest.fixture
def collection():
    coll = Mock()
    coll.update_one = AsyncMock(return_value=Mock(matched_count=1))
    coll.find_one = AsyncMock(return_value=None)
    coll.insert_one = AsyncMock()
    coll.delete_one = AsyncMock(return_value=Mock(deleted_count=1))
    return coll


@pytest.fixture
def repository(collection):
    database = MagicMock()
    database.__getitem__.return_value = collection
    return PlanRepository(database, collection_name="plans")


def plan_document(**kwargs):
    return make_plan(**kwargs).model_dump()


class TestPlans:
    @pytest.mark.asyncio
    async def test_get_plan_scoped_to_owner(self, repository, collection):
        collection.find_one.return_value = plan_document()

        plan = await repository.get_plan("plan-1", "user-1")

        assert plan.plan_id == "plan-1"
        query, projection = collection.find_one.await_args.args
        assert query == {"plan_id": "plan-1", "user_id": "user-1"}
        assert projection == {"_id": 0}

    @pytest.mark.asyncio
    async def test_get_missing_plan(self, repository):
        with pytest.raises(PlanNotFound):
            await repository.get_plan("plan-1", "someone-else")

    @pytest.mark.asyncio
    async def test_append_items_pushes_each(self, repository, collection):
        await repository.append_items("plan-1", "user-1", {
            "study_topics": [{"topic": "Heaps"}],
            "prepared_questions": [],
        })

        update = collection.update_one.await_args.args[1]
        assert update["$push"] == {"study_topics": {"$each": [{"topic": "Heaps"}]}}
        assert "study_topics" not in update["$set"]

    @pytest.mark.asyncio
    async def test_delete_missing_plan(self, repository, collection):
        collection.delete_one.return_value = Mock(deleted_count=0)

        with pytest.raises(PlanNotFound):
            await repository.delete_plan("plan-1", "user-1")

    @pytest.mark.asyncio
    async def test_pin_toggles_when_unspecified(self, repository, collection):
        collection.find_one.return_value = plan_document()

        pinned = await repository.set_question_pin("plan-1", "user-1", "q1")

        assert pinned is True
        query, update = collection.update_one.await_args.args
        assert query["prepared_questions.id"] == "q1"
        assert update["$set"]["prepared_questions.$.is_pinned"] is True


class TestItemManagement:
    @pytest.mark.asyncio
    async def test_delete_plans_scoped_to_owner(self, repository, collection):
        collection.delete_many = AsyncMock(return_value=Mock(deleted_count=2))

        deleted = await repository.delete_plans("user-1", ["plan-1", "plan-2"])

        assert deleted == 2
        assert collection.delete_many.await_args.args[0] == {
            "plan_id": {"$in": ["plan-1", "plan-2"]},
            "user_id": "user-1",
        }

    @pytest.mark.asyncio
    async def test_delete_plans_requires_ids(self, repository, collection):
        collection.delete_many = AsyncMock()

        with pytest.raises(ValidationError):
            await repository.delete_plans("user-1", [])
        collection.delete_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_remove_questions_pulls_by_id(self, repository, collection):
        await repository.remove_questions("plan-1", "user-1", ["q1", "q2"])

        query, update = collection.update_one.await_args.args
        assert query == {"plan_id": "plan-1", "user_id": "user-1"}
        assert update["$pull"] == {"prepared_questions": {"id": {"$in": ["q1", "q2"]}}}
        assert "mock_interview_sessions" not in update["$pull"]

    @pytest.mark.asyncio
    async def test_remove_study_topics(self, repository, collection):
        await repository.remove_study_topics("plan-1", "user-1", ["t1"])

        update = collection.update_one.await_args.args[1]
        assert update["$pull"] == {"study_topics": {"id": {"$in": ["t1"]}}}

    @pytest.mark.asyncio
    async def test_remove_resources_from_every_topic(self, repository, collection):
        await repository.remove_resources("plan-1", "user-1", ["r1"])

        update = collection.update_one.await_args.args[1]
        assert update["$pull"] == {"study_topics.$[].resources": {"id": {"$in": ["r1"]}}}

    @pytest.mark.asyncio
    async def test_remove_from_missing_plan(self, repository, collection):
        collection.update_one.return_value = Mock(matched_count=0)

        with pytest.raises(PlanNotFound):
            await repository.remove_questions("plan-1", "user-1", ["q1"])

    @pytest.mark.asyncio
    async def test_update_resource_sets_fields_in_place(self, repository, collection):
        await repository.update_resource("plan-1", "user-1", "r1", {"is_pinned": True, "recommended_order": 2})

        call = collection.update_one.await_args
        query, update = call.args
        assert query["study_topics.resources.id"] == "r1"
        assert update["$set"]["study_topics.$[].resources.$[resource].is_pinned"] is True
        assert update["$set"]["study_topics.$[].resources.$[resource].recommended_order"] == 2
        assert call.kwargs["array_filters"] == [{"resource.id": "r1"}]

    @pytest.mark.asyncio
    async def test_update_missing_resource(self, repository, collection):
        collection.update_one.return_value = Mock(matched_count=0)
        collection.find_one.return_value = plan_document()

        with pytest.raises(ItemNotFound):
            await repository.update_resource("plan-1", "user-1", "missing", {"is_pinned": True})

    @pytest.mark.asyncio
    async def test_update_resource_without_changes(self, repository, collection):
        with pytest.raises(ValidationError):
            await repository.update_resource("plan-1", "user-1", "r1", {})
        collection.update_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_practice_problem_appends(self, repository, collection):
        problem = PracticeProblem(title="LRU Cache", source="leetcode")

        added = await repository.add_practice_problem("plan-1", "user-1", problem)

        update = collection.update_one.await_args.args[1]
        assert update["$push"]["practice_problems"]["$each"][0]["id"] == added.id


class TestSessionWrites:
    @pytest.mark.asyncio
    async def test_append_session_pushes_one_subdocument(self, repository, collection):
        session = make_session()

        await repository.append_session("plan-1", "user-1", session)

        update = collection.update_one.await_args.args[1]
        assert update["$push"]["mock_interview_sessions"]["id"] == session.id

    @pytest.mark.asyncio
    async def test_replace_transcript_targets_one_active_session(self, repository, collection):
        await repository.replace_transcript("plan-1", "user-1", "is_1", [{"speaker": "ai"}], expected_revision=4)

        query, update = collection.update_one.await_args.args
        assert query["mock_interview_sessions"]["$elemMatch"] == {"id": "is_1", "status": "active", "revision": 4}
        assert update["$set"]["mock_interview_sessions.$.transcript"] == [{"speaker": "ai"}]
        assert update["$inc"] == {"mock_interview_sessions.$.revision": 1}
        assert "mock_interview_sessions" not in update["$set"]

    @pytest.mark.asyncio
    async def test_replace_transcript_on_concluded_session(self, repository, collection):
        collection.update_one.return_value = Mock(matched_count=0)
        collection.find_one.return_value = plan_document(
            sessions=[make_session(session_id="is_1", status="concluded")]
        )

        with pytest.raises(SessionNotFound):
            await repository.replace_transcript("plan-1", "user-1", "is_1", [])

    @pytest.mark.asyncio
    async def test_replace_transcript_with_stale_revision(self, repository, collection):
        collection.update_one.return_value = Mock(matched_count=0)
        collection.find_one.return_value = plan_document(sessions=[make_session(session_id="is_1", revision=5)])

        with pytest.raises(StaleSessionWrite):
            await repository.replace_transcript("plan-1", "user-1", "is_1", [], expected_revision=2)

    @pytest.mark.asyncio
    async def test_conclude_sets_status_and_feedback(self, repository, collection, feedback_report):
        await repository.conclude_session("plan-1", "user-1", "is_1", [], feedback_report.model_dump(), 300)

        query, update = collection.update_one.await_args.args
        assert query["mock_interview_sessions"]["$elemMatch"] == {"id": "is_1", "status": "active"}
        fields = update["$set"]
        assert fields["mock_interview_sessions.$.status"] == "concluded"
        assert fields["mock_interview_sessions.$.duration_seconds"] == 300
        assert fields["mock_interview_sessions.$.overall_score"] == feedback_report.overall_score

    @pytest.mark.asyncio
    async def test_conclude_twice_is_noop(self, repository, collection, feedback_report):
        collection.update_one.return_value = Mock(matched_count=0)

        with pytest.raises(ConcurrencyNoop):
            await repository.conclude_session("plan-1", "user-1", "is_1", [], feedback_report.model_dump(), 300)
