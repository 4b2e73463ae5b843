"""
Error handling utilities for badge catalog audits.

This module provides custom exceptions and decorators for consistent error handling
across the application.
"""
import asyncio
import logging
import time
import uuid
from typing import Any, Callable, Optional, TypeVar, ParamSpec
from functools import wraps
from contextvars import ContextVar

from fastapi import HTTPException

logger = logging.getLogger(__name__)

# Context variable for request ID tracking across async contexts
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

# Type variables for generic function signatures
P = ParamSpec('P')
T = TypeVar('T')


# ============================================================================
# Custom Exceptions
# ============================================================================

class BadgeAuditError(Exception):
    """Base exception for badge audit errors."""
    pass


class MalformedRecordError(BadgeAuditError):
    """A badge record is missing its id, criteria type or criteria value."""

    def __init__(self, message: str, index: Optional[int] = None, record_id: Any = None):
        self.index = index
        self.record_id = record_id
        location = []
        if index is not None:
            location.append(f"index={index}")
        if record_id is not None:
            location.append(f"id={record_id!r}")
        suffix = f" ({', '.join(location)})" if location else ""
        super().__init__(f"{message}{suffix}")


class ConfigurationError(BadgeAuditError):
    """Taxonomy or client configuration is inconsistent."""
    pass


class DataSourceError(BadgeAuditError):
    """Fetching the badge snapshot from the data store failed."""
    pass


class EmptyInputWarning(UserWarning):
    """Zero badge records were supplied to an audit run."""
    pass


# ============================================================================
# Error Handler Decorator
# ============================================================================

def _to_http_exception(
    exc: Exception,
    error_message: str,
    func_name: str,
    request_id: str,
    elapsed: float
) -> HTTPException:
    """Map an audit exception to the HTTP error returned to callers."""
    headers = {"X-Request-ID": request_id}

    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, MalformedRecordError):
        logger.error(f"[{request_id}] {error_message} - Malformed record after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=422, detail=f"Malformed badge record: {exc}", headers=headers)
    if isinstance(exc, ConfigurationError):
        logger.error(f"[{request_id}] {error_message} - Configuration error after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=f"Invalid configuration: {exc}", headers=headers)
    if isinstance(exc, DataSourceError):
        logger.error(f"[{request_id}] {error_message} - Data source error after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=502, detail=f"Badge data source failed: {exc}", headers=headers)
    if isinstance(exc, BadgeAuditError):
        logger.error(f"[{request_id}] {error_message} - Audit error after {elapsed:.2f}s: {exc}")
        return HTTPException(status_code=400, detail=str(exc), headers=headers)

    logger.exception(f"[{request_id}] {error_message} - Unexpected error in {func_name} after {elapsed:.2f}s: {exc}")
    return HTTPException(status_code=500, detail=f"{error_message}: {str(exc)}", headers=headers)


def _log_completion(func_name: str, request_id: str, elapsed: float) -> None:
    """Log completion, with a warning if response time exceeds threshold."""
    from badge_audit.core.config import settings
    threshold_ms = settings.RESPONSE_TIME_WARNING_THRESHOLD_MS
    elapsed_ms = elapsed * 1000
    if elapsed_ms > threshold_ms:
        logger.warning(
            f"[{request_id}] SLOW RESPONSE: {func_name} took {elapsed:.2f}s "
            f"({elapsed_ms:.0f}ms > {threshold_ms}ms threshold)"
        )
    else:
        logger.info(f"[{request_id}] Completed {func_name} in {elapsed:.2f}s")


def handle_audit_errors(
    error_message: str = "Operation failed"
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator to handle errors in audit operations.

    Automatically converts audit errors to appropriate HTTP exceptions
    and logs them. Works with both sync and async functions.

    Args:
        error_message: Custom error message prefix

    Returns:
        Decorated function with error handling

    Example:
        @handle_audit_errors("Failed to audit badge catalog")
        async def audit(request: AuditRequest) -> AuditResponse:
            ...
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            """Async wrapper for error handling with request tracking and timing."""
            if not request_id_var.get():
                request_id_var.set(str(uuid.uuid4()))

            request_id = request_id_var.get()
            start_time = time.time()

            try:
                logger.info(f"[{request_id}] Starting {func.__name__}")
                result = await func(*args, **kwargs)
                _log_completion(func.__name__, request_id, time.time() - start_time)
                return result
            except Exception as e:
                raise _to_http_exception(
                    e, error_message, func.__name__, request_id, time.time() - start_time
                ) from e

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            """Sync wrapper for error handling with request tracking and timing."""
            if not request_id_var.get():
                request_id_var.set(str(uuid.uuid4()))

            request_id = request_id_var.get()
            start_time = time.time()

            try:
                logger.info(f"[{request_id}] Starting {func.__name__}")
                result = func(*args, **kwargs)
                _log_completion(func.__name__, request_id, time.time() - start_time)
                return result
            except Exception as e:
                raise _to_http_exception(
                    e, error_message, func.__name__, request_id, time.time() - start_time
                ) from e

        # Return appropriate wrapper based on function type
        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        else:
            return sync_wrapper  # type: ignore

    return decorator
