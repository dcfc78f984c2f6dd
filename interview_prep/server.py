"""
FastAPI server for the Interview Prep platform.

This module provides the REST API for preparation plans and live mock
interview sessions.
"""
import contextlib
import os
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from interview_prep.ai.model_client import ResilientModelClient
from interview_prep.core.exceptions import InterviewPrepError, MalformedResponse, ModelUnavailable
from interview_prep.routers import assessment, plans, question_bank
from interview_prep.routers.dependencies import limiter
from interview_prep.services.plan_generator import PreparationPlanGenerator
from interview_prep.services.plan_repository import PlanRepository
from interview_prep.services.question_bank import QuestionBank
from interview_prep.services.resume_service import ResumeService
from interview_prep.services.session_lifecycle import SessionLifecycleManager
from interview_prep.utils.config import get_upload_config, log_config
from interview_prep.utils.constants import ERROR_INTERNAL, ERROR_MODEL_BUSY, ERROR_TRY_AGAIN
from interview_prep.utils.db import connect_database, get_mongodb_client

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """
    Lifespan context manager for FastAPI app.

    Builds the database handle and the services and stores them in app state.
    """
    log_config()
    client = get_mongodb_client()
    database = await connect_database(client)

    repository = PlanRepository(database)
    await repository.setup_indexes()
    bank = QuestionBank(database)
    await bank.setup_indexes()
    model_client = ResilientModelClient()

    app_instance.state.plan_repository = repository
    app_instance.state.question_bank = bank
    app_instance.state.model_client = model_client
    app_instance.state.plan_generator = PreparationPlanGenerator(model_client, repository)
    app_instance.state.session_manager = SessionLifecycleManager(model_client, repository, bank)
    app_instance.state.resume_service = ResumeService()
    logger.info("Interview Prep services initialized via lifespan event.")

    yield

    # Cleanup on shutdown
    await model_client.close()
    client.close()
    logger.info("Interview Prep services shut down")


app = FastAPI(
    title="Interview Prep API",
    description="""
    REST API for AI-generated interview preparation plans and live mock interviews.

    ## Features

    * Preparation plans with study topics, prepared questions, practice problems and a story bank
    * Mock interview sessions: start, next question, redirect warnings, assistance, feedback
    * Curated question bank for role-based interviews

    The caller is identified by the `X-User-Id` header.
    """,
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Add rate limiter exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware to allow cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],  # Frontend URL
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plans.router)
app.include_router(assessment.router)
app.include_router(question_bank.router)

app.mount(
    "/uploads/resumes",
    StaticFiles(directory=get_upload_config()["directory"], check_dir=False),
    name="resumes",
)


@app.exception_handler(InterviewPrepError)
async def interview_prep_exception_handler(request: Request, exc: InterviewPrepError):
    """Map engine errors to their HTTP status with a safe message."""
    if isinstance(exc, ModelUnavailable):
        logger.error(f"Model unavailable on {request.url.path}: {exc.message} (last status {exc.last_status})")
        detail = ERROR_MODEL_BUSY if exc.retryable else ERROR_TRY_AGAIN
    elif isinstance(exc, MalformedResponse):
        logger.error(f"Malformed model response on {request.url.path}: {exc.message}")
        detail = ERROR_TRY_AGAIN
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        detail = exc.message
    return JSONResponse(status_code=exc.status_code, content={"detail": detail})


# Exception handler for general exceptions
@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": ERROR_INTERNAL})


@app.get("/api/health")
async def health_check():
    """Liveness check."""
    return {"status": "ok"}


def start_server(host: str = "0.0.0.0", port: int = 8000):
    """
    Start the FastAPI server.

    Args:
        host: Host to bind the server to
        port: Port to bind the server to
    """
    import uvicorn

    os.makedirs(get_upload_config()["directory"], exist_ok=True)

    # Configure Uvicorn logging
    uvicorn_log_config = uvicorn.config.LOGGING_CONFIG
    uvicorn_log_config["formatters"]["access"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    uvicorn_log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

    uvicorn.run(app, host=host, port=port, log_config=uvicorn_log_config)


if __name__ == "__main__":
    start_server()
