"""Request id and access key binding for structured logs."""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"


def set_access_key(access_key: str) -> None:
    """Tag the rest of this request's log lines with the verified access key."""
    structlog.contextvars.bind_contextvars(access_key=access_key)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Echo or mint an X-Request-ID and bind it for the request's logs."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response
