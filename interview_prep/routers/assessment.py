"""
FastAPI router for mock interview (assessment) endpoints.

Sessions live inside a plan, so every route is scoped by plan id.
"""

import logging
from fastapi import APIRouter, Depends, File, Request, UploadFile

from interview_prep.models.api import (
    AssistRequest,
    AssistResponse,
    EndSessionResponse,
    NextQuestionRequest,
    NextQuestionResponse,
    ResumeUploadResponse,
    StartSessionRequest,
    StartSessionResponse,
    TranscriptRequest,
    WarningResponse,
)
from interview_prep.routers.dependencies import (
    get_current_user_id,
    get_plan_repository,
    get_resume_service,
    get_session_manager,
    limiter,
    log_request_time,
)
from interview_prep.services.plan_repository import PlanRepository
from interview_prep.services.resume_service import ResumeService
from interview_prep.services.session_lifecycle import SessionLifecycleManager

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/plans/{plan_id}/assessment",
    tags=["assessment"],
    dependencies=[Depends(log_request_time)],
)


@router.post("/upload-resume", response_model=ResumeUploadResponse)
@limiter.limit("10/minute")
async def upload_resume(
    request: Request,
    plan_id: str,
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
    resume_service: ResumeService = Depends(get_resume_service),
):
    """Store a resume and return its URL and extracted text."""
    await repository.get_plan(plan_id, user_id)
    data = await file.read()
    return await resume_service.process_upload(plan_id, file.filename, file.content_type, data)


@router.post("/start", response_model=StartSessionResponse, status_code=201)
@limiter.limit("10/minute")
async def start_session(
    request: Request,
    plan_id: str,
    start_request: StartSessionRequest,
    user_id: str = Depends(get_current_user_id),
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    """Open a mock interview session and return its first question."""
    return await manager.start(user_id, plan_id, start_request)


@router.post("/{session_id}/next", response_model=NextQuestionResponse)
@limiter.limit("60/minute")
async def next_question(
    request: Request,
    plan_id: str,
    session_id: str,
    next_request: NextQuestionRequest,
    user_id: str = Depends(get_current_user_id),
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    return await manager.next(user_id, plan_id, session_id, next_request.transcript, next_request.revision)


@router.post("/{session_id}/warning", response_model=WarningResponse)
@limiter.limit("30/minute")
async def warning(
    request: Request,
    plan_id: str,
    session_id: str,
    transcript_request: TranscriptRequest,
    user_id: str = Depends(get_current_user_id),
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    """Suggest a redirect for an off-track answer."""
    text = await manager.warning(user_id, plan_id, session_id, transcript_request.transcript)
    return WarningResponse(warning=text)


@router.post("/{session_id}/assist", response_model=AssistResponse)
@limiter.limit("30/minute")
async def assist(
    request: Request,
    plan_id: str,
    session_id: str,
    assist_request: AssistRequest,
    user_id: str = Depends(get_current_user_id),
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    reply = await manager.assist(
        user_id, plan_id, session_id, assist_request.issue_type, assist_request.current_question
    )
    return AssistResponse(empathetic_message=reply.empathetic_message, response=reply.response)


@router.post("/{session_id}/end", response_model=EndSessionResponse)
@limiter.limit("10/minute")
async def end_session(
    request: Request,
    plan_id: str,
    session_id: str,
    transcript_request: TranscriptRequest,
    user_id: str = Depends(get_current_user_id),
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    """Conclude the session and return its feedback report."""
    return await manager.end(user_id, plan_id, session_id, transcript_request.transcript)
