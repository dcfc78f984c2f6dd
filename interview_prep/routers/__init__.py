"""
FastAPI routers for the Interview Prep platform.

This module contains FastAPI routers for organizing API endpoints
into logical groups.
"""

from . import assessment, plans, question_bank

__all__ = ["assessment", "plans", "question_bank"]
