"""Middleware for request correlation."""

import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_current_request_id() -> str | None:
    """Request id of the request being handled, if any."""
    return request_id_var.get()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a request id to the log context and the response headers."""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request with a correlation id.

        Args:
            request: FastAPI request
            call_next: Next middleware/handler

        Returns:
            Response carrying the X-Request-ID header
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
