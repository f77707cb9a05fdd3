"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from learnhub.config import (
    API_HOST,
    API_PORT,
    BOOTSTRAP_DEFAULT_USERS,
    CORS_ALLOWED_ORIGINS,
)
from learnhub.core.database import SessionLocal, init_db
from learnhub.core.logging_config import setup_logging
from learnhub.api.routes import (
    ai,
    analytics,
    auth,
    course,
    enrollment,
    lesson,
    review,
    users,
)
from learnhub.utils.user_manager import UserManager

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

API_NAME = "LearnHub API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Backend API service for the LearnHub e-learning platform."

# Initialize FastAPI application
app = FastAPI(
    title=API_NAME,
    description=API_DESCRIPTION,
    version=API_VERSION,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(course.router)
app.include_router(lesson.router)
app.include_router(enrollment.router)
app.include_router(review.router)
app.include_router(ai.router)
app.include_router(analytics.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 with the field errors."""
    errors = [
        {
            "loc": list(error.get("loc", ())),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation error", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.on_event("startup")
def startup_tasks() -> None:
    """Create tables and, on first run, the default accounts."""
    init_db()
    if BOOTSTRAP_DEFAULT_USERS:
        db = SessionLocal()
        try:
            UserManager(db).ensure_default_users()
        finally:
            db.close()


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root path, returns API information and documentation links.

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "description": API_DESCRIPTION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    logger.info("Starting %s at %s (docs: %s/docs)", API_NAME, server_url, server_url)
    uvicorn.run("learnhub.app:app", host=API_HOST, port=API_PORT, reload=True)
