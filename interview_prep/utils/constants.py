"""
Constants used throughout the Interview Prep application.
"""

# Model call limits
DEFAULT_MAX_OUTPUT_TOKENS = 8192
RESUME_PROMPT_CHAR_LIMIT = 4000

# Plan document keys
PLAN_SESSIONS_KEY = "mock_interview_sessions"
PLAN_TOPICS_KEY = "study_topics"
PLAN_QUESTIONS_KEY = "prepared_questions"
PLAN_PROBLEMS_KEY = "practice_problems"
PLAN_STORIES_KEY = "story_bank"

# Error messages shown to end users
ERROR_TRY_AGAIN = "The AI service returned an unexpected response. Please try again."
ERROR_MODEL_BUSY = "The AI service is temporarily unavailable. It is safe to retry in a moment."
ERROR_INTERNAL = "An internal server error occurred. Please try again later."

# Spoken when the loop cannot get another question
FALLBACK_CLOSING_REMARK = "Thank you, that concludes our interview. Let me put together your feedback."

# Shown when no feedback report could be produced
FEEDBACK_UNAVAILABLE_MESSAGE = "Your interview has ended, but the feedback report could not be generated. Please try again later."
