"""Correlation ID middleware for request tracing of webhook deliveries."""

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

import logfire


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add correlation IDs to requests for distributed tracing.

    Reuses the caller's ID when the header is present, otherwise generates
    one, and echoes it on the response.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Correlation-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(self.header_name.lower(), str(uuid.uuid4()))
        request.state.correlation_id = correlation_id

        with logfire.span("webhook request", correlation_id=correlation_id):
            response = await call_next(request)
        response.headers[self.header_name] = correlation_id
        return response
