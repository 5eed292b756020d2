"""
FastAPI application entry point.

Serve it with uvicorn from the ``backend`` directory:

    uvicorn release_validator.main:app --host 0.0.0.0 --port 8000
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from release_validator import __version__
from release_validator.api.v1 import pipeline
from release_validator.core.config import settings, validate_startup
from release_validator.core.logging import get_logger, setup_logging
from release_validator.core.tracing import setup_tracing


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging("DEBUG" if settings.APP_ENV == "development" else "INFO")
    setup_tracing()
    validate_startup(settings)
    logger = get_logger("startup")
    logger.info("Application starting", env=settings.APP_ENV)
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Release Validator API",
    description="Test plan generation and preview testing for pull requests",
    version=__version__,
    lifespan=lifespan,
)

API_PREFIX = "/api/v1"
app.include_router(pipeline.router, prefix=API_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Public health-check endpoint."""
    return {"status": "ok", "env": settings.APP_ENV}
