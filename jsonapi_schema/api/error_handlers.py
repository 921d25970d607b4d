"""Error Handlers — global exception handlers for the schema service.

Invariants:
    - SchemaCompilationError raised by a route → its own http_status and to_response()
    - RequestValidationError → 400, one detail per rejected query/path parameter
    - Exception (catch-all) → 500 that never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from jsonapi_schema.core.errors import ErrorCategory, ErrorSeverity, SchemaCompilationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(SchemaCompilationError, compilation_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


async def compilation_error_handler(request: Request, exc: SchemaCompilationError):
    """Lookups against the compiled document (unknown definition, ...)."""
    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        f"{type(exc).__name__}: {exc.message}",
        extra={
            "error_code": exc.code,
            "resource_type": exc.context.resource_type,
            "path": request.url.path,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        f"Rejected parameters on {request.url.path}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_validation_error_response(exc),
    )


async def generic_error_handler(request: Request, exc: Exception):
    """Catch-all: never leaks internal details."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )


def _validation_error_response(exc: RequestValidationError) -> dict:
    # loc is ("query" | "path", name): report the name as the offending parameter
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request parameters",
            "category": ErrorCategory.VALIDATION.value,
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "parameter": str(e["loc"][-1]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
