"""
FastAPI router for preparation plan endpoints.

This module provides REST API endpoints for creating, reading, growing
and pruning preparation plans.
"""

import logging
from fastapi import APIRouter, Depends, Request

from interview_prep.core.exceptions import ValidationError
from interview_prep.models.api import (
    AddPracticeProblemRequest,
    BulkDeleteRequest,
    BulkDeleteResponse,
    CreatePlanRequest,
    PinQuestionRequest,
    PlanListResponse,
    PlanResponse,
    UpdatePlanStatusRequest,
    UpdateResourceRequest,
)
from interview_prep.models.plan import PracticeProblem
from interview_prep.routers.dependencies import (
    get_current_user_id,
    get_plan_generator,
    get_plan_repository,
    limiter,
    log_request_time,
)
from interview_prep.services.plan_generator import PreparationPlanGenerator
from interview_prep.services.plan_repository import PlanRepository

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/plans", tags=["plans"], dependencies=[Depends(log_request_time)])


@router.post("", response_model=PlanResponse, status_code=201)
@limiter.limit("5/minute")
async def create_plan(
    request: Request,
    plan_request: CreatePlanRequest,
    user_id: str = Depends(get_current_user_id),
    generator: PreparationPlanGenerator = Depends(get_plan_generator),
):
    """Create a plan and generate its initial content."""
    plan = await generator.create_plan(user_id, plan_request)
    logger.info(f"Created plan {plan.plan_id} for user {user_id}")
    return PlanResponse(plan=plan)


@router.get("", response_model=PlanListResponse)
@limiter.limit("30/minute")
async def list_plans(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    return PlanListResponse(plans=await repository.list_plans(user_id))


@router.get("/{plan_id}", response_model=PlanResponse)
@limiter.limit("30/minute")
async def get_plan(
    request: Request,
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    return PlanResponse(plan=await repository.get_plan(plan_id, user_id))


@router.patch("/{plan_id}/status", response_model=PlanResponse)
@limiter.limit("20/minute")
async def update_plan_status(
    request: Request,
    plan_id: str,
    status_request: UpdatePlanStatusRequest,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    """Set the plan's progress status."""
    await repository.update_status(plan_id, user_id, status_request.status.value)
    return PlanResponse(plan=await repository.get_plan(plan_id, user_id))


@router.delete("/{plan_id}")
@limiter.limit("10/minute")
async def delete_plan(
    request: Request,
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    """Delete a plan and every session in it."""
    await repository.delete_plan(plan_id, user_id)
    return {"message": "Preparation plan deleted", "plan_id": plan_id}


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
@limiter.limit("10/minute")
async def delete_plans(
    request: Request,
    delete_request: BulkDeleteRequest,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    """Delete several plans, with their sessions, at once."""
    return BulkDeleteResponse(deleted_count=await repository.delete_plans(user_id, delete_request.ids))


@router.post("/{plan_id}/questions/bulk-delete", response_model=PlanResponse)
@limiter.limit("20/minute")
async def delete_questions(
    request: Request,
    plan_id: str,
    delete_request: BulkDeleteRequest,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    await repository.remove_questions(plan_id, user_id, delete_request.ids)
    return PlanResponse(plan=await repository.get_plan(plan_id, user_id))


@router.post("/{plan_id}/topics/bulk-delete", response_model=PlanResponse)
@limiter.limit("20/minute")
async def delete_study_topics(
    request: Request,
    plan_id: str,
    delete_request: BulkDeleteRequest,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    """Remove study topics together with their resources."""
    await repository.remove_study_topics(plan_id, user_id, delete_request.ids)
    return PlanResponse(plan=await repository.get_plan(plan_id, user_id))


@router.post("/{plan_id}/resources/bulk-delete", response_model=PlanResponse)
@limiter.limit("20/minute")
async def delete_resources(
    request: Request,
    plan_id: str,
    delete_request: BulkDeleteRequest,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    await repository.remove_resources(plan_id, user_id, delete_request.ids)
    return PlanResponse(plan=await repository.get_plan(plan_id, user_id))


@router.patch("/{plan_id}/resources/{resource_id}", response_model=PlanResponse)
@limiter.limit("30/minute")
async def update_resource(
    request: Request,
    plan_id: str,
    resource_id: str,
    resource_request: UpdateResourceRequest,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    """Pin a resource or change its recommendation and order."""
    await repository.update_resource(plan_id, user_id, resource_id, resource_request.changes())
    return PlanResponse(plan=await repository.get_plan(plan_id, user_id))


@router.post("/{plan_id}/practice", response_model=PlanResponse, status_code=201)
@limiter.limit("20/minute")
async def add_practice_problem(
    request: Request,
    plan_id: str,
    problem_request: AddPracticeProblemRequest,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    """Add a practice problem by hand."""
    if not problem_request.title.strip():
        raise ValidationError("Practice problem title is required")
    problem = PracticeProblem(**problem_request.model_dump())
    await repository.add_practice_problem(plan_id, user_id, problem)
    logger.info(f"Added practice problem {problem.id} to plan {plan_id}")
    return PlanResponse(plan=await repository.get_plan(plan_id, user_id))


@router.patch("/{plan_id}/questions/{question_id}/pin", response_model=PlanResponse)
@limiter.limit("30/minute")
async def pin_question(
    request: Request,
    plan_id: str,
    question_id: str,
    pin_request: PinQuestionRequest,
    user_id: str = Depends(get_current_user_id),
    repository: PlanRepository = Depends(get_plan_repository),
):
    pinned = await repository.set_question_pin(plan_id, user_id, question_id, pin_request.pinned)
    logger.info(f"Question {question_id} in plan {plan_id} pinned={pinned}")
    return PlanResponse(plan=await repository.get_plan(plan_id, user_id))


@router.post("/{plan_id}/learning/generate", response_model=PlanResponse)
@limiter.limit("5/minute")
async def generate_learning_items(
    request: Request,
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    generator: PreparationPlanGenerator = Depends(get_plan_generator),
):
    """Append more study topics and prepared questions."""
    return PlanResponse(plan=await generator.generate_more_learning_items(user_id, plan_id))


@router.post("/{plan_id}/practice/generate", response_model=PlanResponse)
@limiter.limit("5/minute")
async def generate_practice_items(
    request: Request,
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    generator: PreparationPlanGenerator = Depends(get_plan_generator),
):
    """Append more practice problems and story-bank prompts."""
    return PlanResponse(plan=await generator.generate_more_practice_items(user_id, plan_id))


@router.post("/{plan_id}/questions/generate", response_model=PlanResponse)
@limiter.limit("5/minute")
async def generate_questions(
    request: Request,
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    generator: PreparationPlanGenerator = Depends(get_plan_generator),
):
    return PlanResponse(plan=await generator.generate_more_questions(user_id, plan_id))
