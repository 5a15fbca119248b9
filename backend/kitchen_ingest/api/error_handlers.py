"""
Custom exception handlers for FastAPI.
Every failure is answered with a single ``{"error": ...}`` message and a
status code; stack traces and internal state never reach the response.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from kitchen_ingest.core.errors import IngestionError
from kitchen_ingest.core.observability import sentry_capture

logger = logging.getLogger(__name__)


def ingestion_exception_handler(request: Request, exc: IngestionError):
    if exc.status_code >= 500:
        sentry_capture(exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation error",
            "details": [
                {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                for err in exc.errors()
            ],
        },
    )


def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("[api] unhandled error path=%s", request.url.path)
    sentry_capture(exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )
