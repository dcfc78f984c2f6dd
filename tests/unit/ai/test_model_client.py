"""
Unit tests for ResilientModelClient.
"""
import asyncio
import json
import logging
import pytest
import aiohttp
from unittest.mock import AsyncMock, patch

from interview_prep.ai.model_client import ResilientModelClient, is_transient_status
from interview_prep.ai.schemas import NextQuestion
from interview_prep.core.exceptions import MalformedResponse, ModelUnavailable


def envelope(text: str) -> str:
    return json.dumps({"candidates": [{"content": {"parts": [{"text": text}]}}]})


OK_BODY = envelope('{"next_question": "What did you learn from it?"}')


@pytest.fixture
def client():
    """Client with explicit settings so the environment does not matter."""
    return ResilientModelClient(api_key="test-key", model="gemini-test", max_attempts=5, request_timeout=5)


class TestTransientStatus:
    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_transient(self, status):
        assert is_transient_status(status) is True

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422])
    def test_not_transient(self, status):
        assert is_transient_status(status) is False


class TestPayload:
    def test_requests_json_output(self, client):
        payload = client.build_payload("hello")

        assert payload["contents"][0]["parts"][0]["text"] == "hello"
        assert payload["generationConfig"]["responseMimeType"] == "application/json"

    def test_endpoint(self, client):
        assert client.endpoint.endswith("/models/gemini-test:generateContent")


class TestRetryPolicy:
    """Retry schedule of invoke()."""

    @pytest.mark.asyncio
    async def test_two_rate_limits_then_success(self, client):
        """429, 429, 200 gives exactly three attempts with growing delays."""
        post = AsyncMock(side_effect=[(429, "quota"), (429, "quota"), (200, OK_BODY)])
        with patch.object(client, "_post", post), \
                patch("interview_prep.ai.model_client.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await client.invoke("prompt", NextQuestion)

        assert result.next_question == "What did you learn from it?"
        assert post.await_count == 3
        delays = [call.args[0] for call in sleep.await_args_list]
        assert len(delays) == 2
        assert delays == sorted(delays)
        assert 1 <= delays[0] < 2
        assert 2 <= delays[1] < 3

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self, client):
        post = AsyncMock(side_effect=[(503, "overloaded"), (200, OK_BODY)])
        with patch.object(client, "_post", post), \
                patch("interview_prep.ai.model_client.asyncio.sleep", new_callable=AsyncMock):
            result = await client.invoke("prompt", NextQuestion)

        assert result.next_question
        assert post.await_count == 2

    @pytest.mark.asyncio
    async def test_network_error_is_retried(self, client):
        post = AsyncMock(side_effect=[aiohttp.ClientConnectionError("reset"), (200, OK_BODY)])
        with patch.object(client, "_post", post), \
                patch("interview_prep.ai.model_client.asyncio.sleep", new_callable=AsyncMock):
            result = await client.invoke("prompt", NextQuestion)

        assert result.next_question == "What did you learn from it?"

    @pytest.mark.asyncio
    async def test_client_error_fails_immediately(self, client):
        post = AsyncMock(return_value=(400, "bad request"))
        with patch.object(client, "_post", post), \
                patch("interview_prep.ai.model_client.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(ModelUnavailable) as exc_info:
                await client.invoke("prompt", NextQuestion)

        assert exc_info.value.retryable is False
        assert exc_info.value.status_code == 502
        assert exc_info.value.last_status == 400
        assert post.await_count == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exhausted_attempts(self, client):
        post = AsyncMock(return_value=(503, "overloaded"))
        with patch.object(client, "_post", post), \
                patch("interview_prep.ai.model_client.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(ModelUnavailable) as exc_info:
                await client.invoke("prompt", NextQuestion)

        assert exc_info.value.retryable is True
        assert exc_info.value.status_code == 503
        assert exc_info.value.attempts == 5
        assert post.await_count == 5
        assert sleep.await_count == 4

    @pytest.mark.asyncio
    async def test_exhausted_network_errors(self, client):
        post = AsyncMock(side_effect=asyncio.TimeoutError())
        with patch.object(client, "_post", post), \
                patch("interview_prep.ai.model_client.asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(ModelUnavailable) as exc_info:
                await client.invoke("prompt", NextQuestion)

        assert exc_info.value.retryable is True
        assert exc_info.value.last_status is None
        assert post.await_count == 5

    @pytest.mark.asyncio
    async def test_each_retry_is_logged(self, client, caplog):
        post = AsyncMock(side_effect=[(429, "quota"), (200, OK_BODY)])
        with patch.object(client, "_post", post), \
                patch("interview_prep.ai.model_client.asyncio.sleep", new_callable=AsyncMock), \
                caplog.at_level(logging.WARNING, logger="interview_prep.ai.model_client"):
            await client.invoke("prompt", NextQuestion)

        assert any("Retrying" in record.getMessage() for record in caplog.records)


class TestResponseHandling:
    """Extraction and validation of successful replies."""

    @pytest.mark.asyncio
    async def test_fenced_reply(self, client):
        body = envelope('Sure!\n```json\n{"next_question": "Why?"}\n```')
        with patch.object(client, "_post", AsyncMock(return_value=(200, body))):
            result = await client.invoke("prompt", NextQuestion)

        assert result.next_question == "Why?"

    @pytest.mark.asyncio
    async def test_wrong_shape_is_not_retried(self, client):
        post = AsyncMock(return_value=(200, envelope('{"question": "Why?"}')))
        with patch.object(client, "_post", post):
            with pytest.raises(MalformedResponse) as exc_info:
                await client.invoke("prompt", NextQuestion)

        assert post.await_count == 1
        assert exc_info.value.raw_text == '{"question": "Why?"}'

    @pytest.mark.asyncio
    async def test_blank_question_rejected(self, client):
        with patch.object(client, "_post", AsyncMock(return_value=(200, envelope('{"next_question": "  "}')))):
            with pytest.raises(MalformedResponse):
                await client.invoke("prompt", NextQuestion)

    @pytest.mark.asyncio
    async def test_unexpected_envelope(self, client):
        with patch.object(client, "_post", AsyncMock(return_value=(200, '{"candidates": []}'))):
            with pytest.raises(MalformedResponse):
                await client.invoke("prompt", NextQuestion)
