"""
Centralized exception handling module.

The HTTP layer lives outside this package; it calls
register_exception_handlers() on its FastAPI app so grade validation
failures raised here reach clients as structured 4xx responses.
"""

from typing import Any, Dict, Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from boulderlog.core.exceptions import BoulderLogException, InvalidGradeError
from boulderlog.core.logging import logger


def create_error_response(
    status_code: int,
    message: str,
    error_type: str,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Create a standardized error response dictionary.

    Args:
        status_code: HTTP status code
        message: Error message
        error_type: Type of error
        details: Additional error details

    Returns:
        Structured error response dictionary
    """
    response = {
        "error": {
            "status_code": status_code,
            "message": message,
            "type": error_type
        }
    }
    if details:
        response["error"]["details"] = details
    return response


async def boulderlog_exception_handler(
    request: Request,
    exc: BoulderLogException
) -> JSONResponse:
    """Handle BoulderLog exceptions with structured logging."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "BoulderLog application error",
        extra={
            "error_type": exc.__class__.__name__,
            "error": str(exc.detail),
            "path": request.url.path,
            "method": request.method,
            "status_code": exc.status_code
        }
    )

    details = None
    if isinstance(exc, InvalidGradeError):
        details = {
            "field": exc.field,
            "grade": exc.grade,
            "grading_system": exc.grading_system,
            "expected_pattern": exc.expected_pattern,
        }
    elif exc.context:
        details = {k: v for k, v in exc.context.items() if v is not None}

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(
            status_code=exc.status_code,
            message=str(exc.detail),
            error_type=exc.__class__.__name__,
            details=details
        ),
        headers=exc.headers
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the BoulderLog handlers to an application."""
    app.add_exception_handler(BoulderLogException, boulderlog_exception_handler)
