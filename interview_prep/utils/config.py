"""
Configuration module for the Interview Prep engine.

This module provides configuration settings and utilities read from the
environment (and a local .env file when present).
"""
import os
import logging
from typing import Dict, Any
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()
# Get the absolute path to the project root directory
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# MongoDB configuration
MONGODB_URI = os.environ.get("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DATABASE = os.environ.get("MONGODB_DATABASE", "interview_prep")
MONGODB_PLANS_COLLECTION = os.environ.get("MONGODB_PLANS_COLLECTION", "preparation_plans")
MONGODB_QUESTION_BANK_COLLECTION = os.environ.get("MONGODB_QUESTION_BANK_COLLECTION", "question_bank")
MONGODB_SERVER_SELECTION_TIMEOUT_MS = int(os.environ.get("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "30000"))
MONGODB_SOCKET_TIMEOUT_MS = int(os.environ.get("MONGODB_SOCKET_TIMEOUT_MS", "45000"))
MONGODB_CONNECT_TIMEOUT_MS = int(os.environ.get("MONGODB_CONNECT_TIMEOUT_MS", "30000"))

# LLM configuration
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "")
GEMINI_API_BASE = os.environ.get("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
LLM_MODEL = os.environ.get("LLM_MODEL", "gemini-2.0-flash")
LLM_TEMPERATURE = float(os.environ.get("LLM_TEMPERATURE", "0.4"))
LLM_MAX_ATTEMPTS = int(os.environ.get("LLM_MAX_ATTEMPTS", "5"))
LLM_REQUEST_TIMEOUT = float(os.environ.get("LLM_REQUEST_TIMEOUT", "60.0"))  # Per-attempt timeout in seconds

# Session configuration
MAX_INTERVIEW_QUESTIONS = int(os.environ.get("MAX_INTERVIEW_QUESTIONS", "15"))
INTERVIEW_DURATION_SECONDS = int(os.environ.get("INTERVIEW_DURATION_SECONDS", "1200"))
INTERVIEWER_NAME = os.environ.get("INTERVIEWER_NAME", "Alex")

# Resume upload configuration
RESUME_UPLOAD_DIR = os.environ.get("RESUME_UPLOAD_DIR", os.path.join(PROJECT_ROOT, "uploads", "resumes"))
RESUME_MAX_BYTES = int(os.environ.get("RESUME_MAX_BYTES", str(5 * 1024 * 1024)))

# Client configuration
API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8000")

# --- System Configuration ---
SYSTEM_NAME = os.getenv("SYSTEM_NAME", "Interview Prep")

def get_db_config() -> Dict[str, Any]:
    """
    Get MongoDB configuration.

    Returns:
        Dictionary with MongoDB configuration
    """
    return {
        "uri": MONGODB_URI,
        "database": MONGODB_DATABASE,
        "plans_collection": MONGODB_PLANS_COLLECTION,
        "question_bank_collection": MONGODB_QUESTION_BANK_COLLECTION,
        "options": {
            "serverSelectionTimeoutMS": MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            "socketTimeoutMS": MONGODB_SOCKET_TIMEOUT_MS,
            "connectTimeoutMS": MONGODB_CONNECT_TIMEOUT_MS,
        },
    }

def get_llm_config() -> Dict[str, Any]:
    """
    Get LLM configuration.

    Returns:
        Dictionary with LLM configuration
    """
    return {
        "api_key": GEMINI_API_KEY,
        "api_base": GEMINI_API_BASE,
        "model": LLM_MODEL,
        "temperature": LLM_TEMPERATURE,
        "max_attempts": LLM_MAX_ATTEMPTS,
        "request_timeout": LLM_REQUEST_TIMEOUT,
    }

def get_session_config() -> Dict[str, Any]:
    """
    Get mock interview session configuration.

    Returns:
        Dictionary with session configuration
    """
    return {
        "max_questions": MAX_INTERVIEW_QUESTIONS,
        "duration_seconds": INTERVIEW_DURATION_SECONDS,
        "interviewer_name": INTERVIEWER_NAME,
    }

def get_upload_config() -> Dict[str, Any]:
    """Get resume upload configuration."""
    return {
        "directory": RESUME_UPLOAD_DIR,
        "max_bytes": RESUME_MAX_BYTES,
    }

def log_config():
    """Log current configuration values (excluding sensitive information)."""
    logger.info("Current configuration:")
    logger.info(f"- MongoDB Database: {MONGODB_DATABASE}")
    logger.info(f"- Plans Collection: {MONGODB_PLANS_COLLECTION}")
    logger.info(f"- Question Bank Collection: {MONGODB_QUESTION_BANK_COLLECTION}")
    logger.info(f"- LLM Model: {LLM_MODEL}")
    logger.info(f"- LLM Temperature: {LLM_TEMPERATURE}")
    logger.info(f"- LLM Max Attempts: {LLM_MAX_ATTEMPTS}")
    logger.info(f"- Max Interview Questions: {MAX_INTERVIEW_QUESTIONS}")
    logger.info(f"- Interview Duration: {INTERVIEW_DURATION_SECONDS} seconds")
    logger.info(f"- Resume Upload Dir: {RESUME_UPLOAD_DIR}")
    logger.info(f"- Gemini API Key: {'Configured' if GEMINI_API_KEY else 'Not configured'}")
