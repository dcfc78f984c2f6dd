"""
FastAPI router for the curated question bank.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request

from interview_prep.models.api import (
    BankQuestionListResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
    CreateBankQuestionRequest,
    UpdateBankQuestionRequest,
)
from interview_prep.models.plan import BankQuestion
from interview_prep.routers.dependencies import (
    get_current_user_id,
    get_question_bank,
    limiter,
    log_request_time,
)
from interview_prep.services.question_bank import QuestionBank

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/question-bank", tags=["question-bank"], dependencies=[Depends(log_request_time)])


@router.post("", response_model=BankQuestion, status_code=201)
@limiter.limit("20/minute")
async def add_bank_question(
    request: Request,
    question_request: CreateBankQuestionRequest,
    user_id: str = Depends(get_current_user_id),
    bank: QuestionBank = Depends(get_question_bank),
):
    """Add a question used to open role-based interviews."""
    question = BankQuestion(**question_request.model_dump())
    await bank.add_question(question)
    logger.info(f"User {user_id} added bank question {question.id}")
    return question


@router.get("", response_model=BankQuestionListResponse)
@limiter.limit("30/minute")
async def list_bank_questions(
    request: Request,
    role: Optional[str] = None,
    company: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    bank: QuestionBank = Depends(get_question_bank),
):
    return BankQuestionListResponse(questions=await bank.list_questions(role=role, company=company))


@router.patch("/{question_id}", response_model=BankQuestion)
@limiter.limit("20/minute")
async def update_bank_question(
    request: Request,
    question_id: str,
    question_request: UpdateBankQuestionRequest,
    user_id: str = Depends(get_current_user_id),
    bank: QuestionBank = Depends(get_question_bank),
):
    question = await bank.update_question(question_id, question_request.changes())
    logger.info(f"User {user_id} updated bank question {question_id}")
    return question


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
@limiter.limit("10/minute")
async def delete_bank_questions(
    request: Request,
    delete_request: BulkDeleteRequest,
    user_id: str = Depends(get_current_user_id),
    bank: QuestionBank = Depends(get_question_bank),
):
    deleted = await bank.delete_questions(delete_request.ids)
    logger.info(f"User {user_id} deleted {deleted} bank questions")
    return BulkDeleteResponse(deleted_count=deleted)
