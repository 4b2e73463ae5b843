"""
HTTP middleware utilities.

Adds request ID propagation for structured logging and response headers.
"""
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from badge_audit.core.error_handling import request_id_var


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach/propagate request IDs so audit logs of one request can be correlated."""

    async def dispatch(self, request: Request, call_next: Callable):
        incoming = request.headers.get("X-Request-ID") or request.headers.get("X-Correlation-ID")
        request_id = incoming or str(uuid.uuid4())
        token = request_id_var.set(request_id)

        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response
