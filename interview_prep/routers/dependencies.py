"""
Shared FastAPI dependencies for the Interview Prep routers.
"""

import logging
from datetime import datetime
from typing import Optional
from fastapi import Header, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from interview_prep.services.plan_generator import PreparationPlanGenerator
from interview_prep.services.plan_repository import PlanRepository
from interview_prep.services.question_bank import QuestionBank
from interview_prep.services.resume_service import ResumeService
from interview_prep.services.session_lifecycle import SessionLifecycleManager

logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(key_func=get_remote_address)


async def log_request_time(request: Request):
    """Log request timing for HTTP endpoints."""
    request.state.start_time = datetime.now()
    yield
    process_time = (datetime.now() - request.state.start_time).total_seconds() * 1000
    logger.info(f"Request to {request.url.path} took {process_time:.2f}ms")


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Caller identity from the trusted X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def _from_state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        logger.error(f"{name} not available in app state")
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service


def get_plan_repository(request: Request) -> PlanRepository:
    """Dependency to get the plan repository from app state."""
    return _from_state(request, "plan_repository")


def get_plan_generator(request: Request) -> PreparationPlanGenerator:
    return _from_state(request, "plan_generator")


def get_session_manager(request: Request) -> SessionLifecycleManager:
    return _from_state(request, "session_manager")


def get_resume_service(request: Request) -> ResumeService:
    return _from_state(request, "resume_service")


def get_question_bank(request: Request) -> QuestionBank:
    return _from_state(request, "question_bank")
