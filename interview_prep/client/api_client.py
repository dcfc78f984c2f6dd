"""
aiohttp client for the Interview Prep HTTP API.
"""
import logging
import os
from typing import Any, Dict, List, Optional

import aiohttp

from interview_prep.client.collaborators import SessionApi
from interview_prep.core.exceptions import ApiRequestError
from interview_prep.models.api import (
    AssistResponse,
    EndSessionResponse,
    NextQuestionResponse,
    ResumeUploadResponse,
    StartSessionResponse,
)
from interview_prep.models.plan import PreparationPlan
from interview_prep.utils.config import API_BASE_URL

logger = logging.getLogger(__name__)

RESUME_CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


class InterviewPrepApiClient(SessionApi):
    """
    Talks to one plan's endpoints on behalf of one user.

    Non-2xx answers raise ApiRequestError carrying the server's status and detail.
    """

    def __init__(self, user_id: str, plan_id: Optional[str] = None, base_url: Optional[str] = None,
                 session: Optional[aiohttp.ClientSession] = None, timeout: float = 120.0):
        self.user_id = user_id
        self.plan_id = plan_id
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"X-User-Id": self.user_id},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _plan_path(self, suffix: str = "") -> str:
        if not self.plan_id:
            raise ValueError("plan_id is not set")
        return f"/plans/{self.plan_id}{suffix}"

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        session = await self._get_session()
        kwargs.setdefault("headers", {})["X-User-Id"] = self.user_id
        async with session.request(method, f"{self.base_url}{path}", **kwargs) as response:
            try:
                body = await response.json(content_type=None)
            except ValueError:
                body = {"detail": await response.text()}
            if response.status >= 400:
                detail = body.get("detail", "") if isinstance(body, dict) else str(body)
                logger.warning(f"{method} {path} failed with HTTP {response.status}: {detail}")
                raise ApiRequestError(str(detail) or f"HTTP {response.status}", response.status)
            return body

    # ---- plans ----

    async def create_plan(self, title: str, role: str, company: str, level: str = "Entry-level",
                          experience_level: str = "Entry-level",
                          description: Optional[str] = None) -> PreparationPlan:
        body = await self._request("POST", "/plans", json={
            "title": title,
            "description": description,
            "target": {"role": role, "company": company, "level": level},
            "experience_level": experience_level,
        })
        plan = PreparationPlan.model_validate(body["plan"])
        self.plan_id = plan.plan_id
        return plan

    async def list_plans(self) -> List[PreparationPlan]:
        body = await self._request("GET", "/plans")
        return [PreparationPlan.model_validate(item) for item in body["plans"]]

    async def get_plan(self) -> PreparationPlan:
        body = await self._request("GET", self._plan_path())
        return PreparationPlan.model_validate(body["plan"])

    async def upload_resume(self, path: str) -> ResumeUploadResponse:
        content_type = RESUME_CONTENT_TYPES.get(os.path.splitext(path)[1].lower(), "text/plain")
        with open(path, "rb") as handle:
            data = handle.read()
        form = aiohttp.FormData()
        form.add_field("file", data, filename=os.path.basename(path), content_type=content_type)
        body = await self._request("POST", self._plan_path("/assessment/upload-resume"), data=form)
        return ResumeUploadResponse.model_validate(body)

    # ---- sessions ----

    async def start(
        self,
        interview_type: str,
        difficulty: str = "medium",
        resume_content: Optional[str] = None,
        resume_url: Optional[str] = None,
        focus_area: Optional[str] = None,
    ) -> StartSessionResponse:
        body = await self._request("POST", self._plan_path("/assessment/start"), json={
            "type": interview_type,
            "difficulty": difficulty,
            "resume_content": resume_content,
            "resume_url": resume_url,
            "focus_area": focus_area,
        })
        return StartSessionResponse.model_validate(body)

    async def next(
        self, session_id: str, transcript: List[Dict[str, Any]], revision: Optional[int] = None
    ) -> NextQuestionResponse:
        body = await self._request(
            "POST",
            self._plan_path(f"/assessment/{session_id}/next"),
            json={"transcript": transcript, "revision": revision},
        )
        return NextQuestionResponse.model_validate(body)

    async def warning(self, session_id: str, transcript: List[Dict[str, Any]]) -> str:
        body = await self._request(
            "POST", self._plan_path(f"/assessment/{session_id}/warning"), json={"transcript": transcript}
        )
        return body["warning"]

    async def assist(self, session_id: str, issue_type: str, current_question: str) -> AssistResponse:
        body = await self._request(
            "POST",
            self._plan_path(f"/assessment/{session_id}/assist"),
            json={"issue_type": issue_type, "current_question": current_question},
        )
        return AssistResponse.model_validate(body)

    async def end(self, session_id: str, transcript: List[Dict[str, Any]]) -> EndSessionResponse:
        body = await self._request(
            "POST", self._plan_path(f"/assessment/{session_id}/end"), json={"transcript": transcript}
        )
        return EndSessionResponse.model_validate(body)
