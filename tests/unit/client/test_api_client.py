"""
Unit tests for InterviewPrepApiClient request building.
"""
import pytest
from unittest.mock import AsyncMock, patch

from interview_prep.client.api_client import InterviewPrepApiClient


@pytest.fixture
def api():
    return InterviewPrepApiClient("user-1", plan_id="plan-1", base_url="http://testserver/")


class TestSessionCalls:
    @pytest.mark.asyncio
    async def test_start(self, api):
        reply = {"session_id": "is_1", "first_question": "Why?", "opening_remark": ""}
        with patch.object(api, "_request", AsyncMock(return_value=reply)) as request:
            started = await api.start("behavioral", difficulty="hard")

        method, path = request.await_args.args
        assert (method, path) == ("POST", "/plans/plan-1/assessment/start")
        assert request.await_args.kwargs["json"]["type"] == "behavioral"
        assert started.session_id == "is_1"

    @pytest.mark.asyncio
    async def test_next_sends_revision(self, api):
        with patch.object(api, "_request", AsyncMock(return_value={"next_question": None, "revision": 4})) as request:
            reply = await api.next("is_1", [], revision=3)

        assert request.await_args.args[1] == "/plans/plan-1/assessment/is_1/next"
        assert request.await_args.kwargs["json"] == {"transcript": [], "revision": 3}
        assert reply.next_question is None

    @pytest.mark.asyncio
    async def test_end(self, api, feedback_report):
        body = {"feedback": feedback_report.model_dump(mode="json"), "already_concluded": False}
        with patch.object(api, "_request", AsyncMock(return_value=body)):
            result = await api.end("is_1", [])

        assert result.feedback.overall_score == feedback_report.overall_score

    def test_base_url_is_normalized(self, api):
        assert api.base_url == "http://testserver"

    @pytest.mark.asyncio
    async def test_plan_scoped_call_without_plan(self):
        api = InterviewPrepApiClient("user-1", base_url="http://testserver")

        with pytest.raises(ValueError):
            await api.start("behavioral")
