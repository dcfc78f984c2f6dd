"""
AI components for the {SYSTEM_NAME} platform.

This package contains the resilient model client, response parsing and the
prompt templates.
"""

from interview_prep.ai.model_client import ResilientModelClient
from interview_prep.ai.response_parser import parse_model_json

__all__ = [
    'ResilientModelClient',
    'parse_model_json',
]
