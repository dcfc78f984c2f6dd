"""
{SYSTEM_NAME} Package.

This package generates interview preparation plans and runs live AI mock
interviews.
"""

from interview_prep.utils.config import SYSTEM_NAME

__version__ = "0.1.0"
