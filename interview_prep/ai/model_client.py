"""
Resilient client for the external text-generation service.

This module wraps a single Gemini generateContent call with retry/backoff for
transient failures and with extraction, repair and structural validation of
the JSON the model returns.
"""
import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

import aiohttp
from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from interview_prep.ai.response_parser import parse_model_json, validate_shape
from interview_prep.core.exceptions import MalformedResponse, ModelUnavailable
from interview_prep.utils.config import get_llm_config
from interview_prep.utils.constants import DEFAULT_MAX_OUTPUT_TOKENS

# Set up logging
logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def is_transient_status(status: int) -> bool:
    """429 and every 5xx are worth another attempt; other 4xx are not."""
    return status == 429 or 500 <= status < 600


class TransientModelError(Exception):
    """A failed attempt that the retry policy may repeat."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ResilientModelClient:
    """
    Invokes the model with a prompt and returns a validated structured object.

    Failure modes:
    - ModelUnavailable: transient failures exhausted the attempt budget, or the
      service rejected the request with a non-retryable 4xx
    - MalformedResponse: the reply could not be turned into the expected shape
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        temperature: Optional[float] = None,
        max_attempts: Optional[int] = None,
        request_timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Gemini API key (from env if None)
            model: Model name (from env if None)
            api_base: Base URL of the REST API (from env if None)
            temperature: Sampling temperature (from env if None)
            max_attempts: Total attempts per invocation, first call included
            request_timeout: Per-attempt timeout in seconds
            session: Optional shared aiohttp session
        """
        llm_config = get_llm_config()
        self.api_key = api_key if api_key is not None else llm_config["api_key"]
        self.model = model or llm_config["model"]
        self.api_base = (api_base or llm_config["api_base"]).rstrip("/")
        self.temperature = temperature if temperature is not None else llm_config["temperature"]
        self.max_attempts = max_attempts or llm_config["max_attempts"]
        self.request_timeout = request_timeout or llm_config["request_timeout"]
        self._session = session
        self._owns_session = session is None

        logger.info(f"ResilientModelClient initialized for model {self.model} ({self.max_attempts} attempts)")

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.request_timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close the underlying HTTP session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "temperature": self.temperature,
                "maxOutputTokens": DEFAULT_MAX_OUTPUT_TOKENS,
            },
        }

    async def _post(self, payload: Dict[str, Any]) -> Tuple[int, str]:
        """Send one request and return (status, body text)."""
        session = await self._get_session()
        async with session.post(
            self.endpoint,
            params={"key": self.api_key},
            json=payload,
            headers={"Content-Type": "application/json"},
        ) as response:
            body = await response.text()
            return response.status, body

    async def _attempt(self, payload: Dict[str, Any], attempt_number: int) -> str:
        """One request; transient failures raise TransientModelError for the retry policy."""
        try:
            status, body = await self._post(payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransientModelError(f"network error: {e!r}") from e

        if 200 <= status < 300:
            return body
        if is_transient_status(status):
            raise TransientModelError(f"HTTP {status}", status=status)

        logger.error(f"Model call rejected with HTTP {status}: {body[:500]}")
        raise ModelUnavailable(
            f"Model service rejected the request (HTTP {status})",
            retryable=False,
            attempts=attempt_number,
            last_status=status,
        )

    def _retrying(self) -> AsyncRetrying:
        """2**attempt seconds plus up to one second of jitter between attempts."""
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, exp_base=2) + wait_random(0, 1),
            retry=retry_if_exception_type(TransientModelError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=asyncio.sleep,
        )

    async def invoke(self, prompt: str, response_model: Type[T]) -> T:
        """
        Run one model call and return the validated object.

        Args:
            prompt: Full prompt text
            response_model: Pydantic model describing the expected JSON shape

        Returns:
            An instance of response_model
        """
        payload = self.build_payload(prompt)

        try:
            async for attempt in self._retrying():
                with attempt:
                    body = await self._attempt(payload, attempt.retry_state.attempt_number)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            logger.error(f"Model call failed after {self.max_attempts} attempts ({last_error})")
            raise ModelUnavailable(
                f"Model service unavailable after {self.max_attempts} attempts",
                retryable=True,
                attempts=self.max_attempts,
                last_status=getattr(last_error, "status", None),
            ) from last_error

        if attempt.retry_state.attempt_number > 1:
            logger.info(f"Model call succeeded after {attempt.retry_state.attempt_number} attempts")
        return self._parse_body(body, response_model)

    def _parse_body(self, body: str, response_model: Type[T]) -> T:
        """Pull the text part out of the generateContent envelope and validate it."""
        try:
            envelope = json.loads(body)
            text = envelope["candidates"][0]["content"]["parts"][0]["text"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected generateContent envelope: {body[:1000]!r}")
            raise MalformedResponse("Unexpected response envelope from the model service", raw_text=body) from e

        data = parse_model_json(text)
        return validate_shape(data, response_model, raw_text=text)
