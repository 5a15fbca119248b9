"""Entry point for the FastAPI application.

This module constructs the FastAPI app, includes the ingestion router
and sets up startup and shutdown events. When run with uvicorn it
creates the database tables and loads configuration from
``kitchen_ingest.core.config``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from kitchen_ingest.api.error_handlers import (
    generic_exception_handler,
    ingestion_exception_handler,
    validation_exception_handler,
)
from kitchen_ingest.api.routes.ingest import router as ingest_router
from kitchen_ingest.core.config import settings
from kitchen_ingest.core.database import init_db
from kitchen_ingest.core.errors import IngestionError
from kitchen_ingest.core.observability import init_sentry

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    logger.info("Starting up...")
    if init_sentry("api"):
        logger.info("Sentry SDK initialized (api)")
    await init_db()
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Kitchen Ingest API",
    version="1.0.0",
    lifespan=lifespan,
)


def _allowed_origins() -> list[str]:
    """CORS origins.

    Development allows everything. Otherwise start from
    BACKEND_CORS_ORIGINS and add the FRONTEND_BASE_URL origin, keeping
    order and dropping duplicates.
    """
    if (settings.ENVIRONMENT or "development").lower() == "development":
        return ["*"]
    origins = list(settings.BACKEND_CORS_ORIGINS or [])
    parsed = urlparse(settings.FRONTEND_BASE_URL or "")
    if parsed.scheme and parsed.netloc:
        origins.append(f"{parsed.scheme}://{parsed.netloc}")
    seen: set[str] = set()
    return [o for o in origins if not (o in seen or seen.add(o))]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register custom exception handlers
app.add_exception_handler(IngestionError, ingestion_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include routers
app.include_router(ingest_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Welcome to the Kitchen Ingest API"}


@app.api_route("/health", methods=["GET", "HEAD"])
async def health_check():
    """Health check endpoint (supports GET & HEAD)."""
    return {"status": "healthy"}
