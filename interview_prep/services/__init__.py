"""
Service layer for the Interview Prep platform.

This module contains business logic services that handle core functionality
of the application.
"""

from .plan_repository import PlanRepository
from .plan_generator import PreparationPlanGenerator
from .question_bank import QuestionBank
from .resume_service import ResumeService
from .session_lifecycle import SessionLifecycleManager

__all__ = [
    "PlanRepository",
    "PreparationPlanGenerator",
    "QuestionBank",
    "ResumeService",
    "SessionLifecycleManager",
]
