"""
Centralized Error Handling and Logging
Maps domain errors to HTTP responses and writes structured error logs with trace IDs.
"""

import json
import logging
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from blog_api.utils.errors import StorageError, ValidationError

# Context variable for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)


class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    INCLUDE_TRACE_ID = True
    INCLUDE_TIMESTAMP = True
    MAX_LOGGED_VALUE_SIZE = 500


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _truncate(value: Any) -> Any:
    if isinstance(value, str) and len(value) > ErrorHandlingConfig.MAX_LOGGED_VALUE_SIZE:
        return value[:ErrorHandlingConfig.MAX_LOGGED_VALUE_SIZE] + "...[TRUNCATED]"
    return value


class StructuredLogger:
    """Structured logging with consistent format and context"""

    @staticmethod
    def log_error(
        error_type: str,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[Exception] = None,
        extra_context: Optional[Dict] = None,
        include_traceback: bool = True
    ) -> str:
        """Log a structured error entry and return its trace ID"""
        trace_id = request_id_var.get('') or str(uuid.uuid4())[:8]

        log_entry = {
            "timestamp": _utcnow(),
            "trace_id": trace_id,
            "error_type": error_type,
            "message": message,
            "level": "ERROR"
        }

        if request:
            log_entry["request"] = {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "client_ip": request.client.host if request.client else None
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": _truncate(str(exception))
            }
            if include_traceback:
                log_entry["exception"]["traceback"] = "".join(
                    traceback.format_exception(type(exception), exception, exception.__traceback__)
                )

        if extra_context:
            log_entry["context"] = {key: _truncate(value) for key, value in extra_context.items()}

        logger.error(json.dumps(log_entry, indent=2, default=str))
        return trace_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign each request a trace ID and echo it in the response headers"""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())[:8]
        request_id_var.set(trace_id)
        request.state.trace_id = trace_id

        response = await call_next(request)
        response.headers["X-Trace-ID"] = trace_id
        return response


def _error_body(error: str, message: Any, trace_id: Optional[str]) -> Dict[str, Any]:
    content = {"error": error, "message": message}
    if ErrorHandlingConfig.INCLUDE_TRACE_ID and trace_id:
        content["trace_id"] = trace_id
    if ErrorHandlingConfig.INCLUDE_TIMESTAMP:
        content["timestamp"] = _utcnow()
    return content


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle domain validation failures (HTTP 400)"""
    trace_id = StructuredLogger.log_error(
        "validation_error_400",
        exc.message,
        request=request,
        exception=exc,
        include_traceback=False
    )
    return JSONResponse(status_code=exc.status_code, content=_error_body("Bad Request", exc.message, trace_id))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle malformed request bodies as HTTP 400 instead of FastAPI's 422"""
    validation_details = [
        {
            "field": " -> ".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "unknown")
        }
        for error in exc.errors()
    ]

    trace_id = StructuredLogger.log_error(
        "validation_error_400",
        f"Request validation failed: {len(validation_details)} validation errors",
        request=request,
        exception=exc,
        extra_context={"error_count": len(validation_details)},
        include_traceback=False
    )

    content = _error_body("Bad Request", "Request validation failed", trace_id)
    content["detail"] = validation_details
    return JSONResponse(status_code=ValidationError.status_code, content=content)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Handle persistence failures (HTTP 500)"""
    trace_id = StructuredLogger.log_error(
        "storage_error",
        exc.message,
        request=request,
        exception=exc
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("Internal Server Error", "Storage unavailable", trace_id)
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions, logging only server-side failures"""
    trace_id = None
    if exc.status_code >= 500:
        trace_id = StructuredLogger.log_error(
            f"http_{exc.status_code}",
            f"HTTP {exc.status_code}: {exc.detail}",
            request=request,
            exception=exc
        )
    else:
        logger.info(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(f"HTTP {exc.status_code}", exc.detail, trace_id),
        headers=getattr(exc, "headers", None)
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other exceptions without exposing internal details"""
    trace_id = StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {exc}",
        request=request,
        exception=exc
    )
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal Server Error", "An unexpected error occurred", trace_id)
    )


def setup_error_handling(app):
    """Setup error handling for the FastAPI app"""
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling initialized")
