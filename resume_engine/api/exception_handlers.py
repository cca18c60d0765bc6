"""
Exception handlers for the import service.
"""

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from resume_engine.core.errors import (
    DecodeError,
    FileValidationError,
    ResumeEngineError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)


async def resume_engine_exception_handler(request: Request, exc: ResumeEngineError) -> JSONResponse:
    """
    Handle import pipeline exceptions that escaped the importer.

    Args:
        request: The FastAPI request.
        exc: The pipeline exception.

    Returns:
        JSONResponse with error details (never a 5xx).
    """
    logger.warning(f"Import error in {request.url.path}: {exc}")

    status_code = 400
    if isinstance(exc, UnsupportedFormatError):
        status_code = 415
    elif isinstance(exc, DecodeError):
        status_code = 422
    elif isinstance(exc, FileValidationError):
        status_code = 400

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": exc.message,
            "suggestion": exc.suggestion,
            "type": exc.__class__.__name__,
        },
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions with the same body shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException",
        },
    )
