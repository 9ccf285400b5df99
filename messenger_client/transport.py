"""HTTP transport capability.

The client never talks to the network directly. It hands
``(method, url, json_body)`` to an object implementing
:class:`MessengerHttpClient` and awaits an :class:`HttpResponse`. This keeps
the facade free of any HTTP library and lets tests plug in
:class:`MockMessengerHttpClient` instead of mocking httpx.
"""

import time
from enum import Enum
from typing import NamedTuple, Protocol, runtime_checkable

import httpx
import logfire

from messenger_client.constants import FACEBOOK_API_TIMEOUT_SECONDS
from messenger_client.logging_config import redact_url


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


class HttpResponse(NamedTuple):
    """Status code and raw body of one transport call."""

    status_code: int
    body: str


@runtime_checkable
class MessengerHttpClient(Protocol):
    """Protocol for the pluggable HTTP transport.

    Implementations raise their own network-level exceptions; the client
    propagates them unchanged.
    """

    async def execute(
        self,
        method: HttpMethod,
        url: str,
        json_body: str | None,
    ) -> HttpResponse:
        """Perform one request.

        Args:
            method: HTTP method
            url: Fully built request URL, query string included
            json_body: Serialized JSON body, or None for body-less requests

        Returns:
            Status code and body text of the response
        """
        ...


class HttpxMessengerHttpClient:
    """httpx implementation of MessengerHttpClient.

    When no ``client`` is given a short-lived ``httpx.AsyncClient`` is opened
    per request.

    Example:
        >>> transport = HttpxMessengerHttpClient(timeout=5.0)
        >>> await transport.execute(HttpMethod.GET, "https://graph.facebook.com/...", None)
        HttpResponse(status_code=200, body='{...}')
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = FACEBOOK_API_TIMEOUT_SECONDS,
    ):
        self._client = client
        self._timeout = timeout

    async def execute(
        self,
        method: HttpMethod,
        url: str,
        json_body: str | None,
    ) -> HttpResponse:
        start_time = time.time()
        content = None
        headers = {}
        if method is not HttpMethod.GET and json_body is not None:
            content = json_body.encode("utf-8")
            headers["Content-Type"] = "application/json; charset=utf-8"

        try:
            if self._client is not None:
                response = await self._client.request(
                    method.value, url, content=content, headers=headers
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.request(
                        method.value, url, content=content, headers=headers
                    )
        except httpx.HTTPError as e:
            elapsed = time.time() - start_time
            logfire.error(
                "Graph API transport error",
                method=method.value,
                url=redact_url(url),
                error=str(e),
                error_type=type(e).__name__,
                response_time_ms=elapsed * 1000,
            )
            raise

        elapsed = time.time() - start_time
        logfire.info(
            "Graph API request completed",
            method=method.value,
            url=redact_url(url),
            status_code=response.status_code,
            response_time_ms=elapsed * 1000,
        )
        return HttpResponse(status_code=response.status_code, body=response.text)


class MockMessengerHttpClient:
    """In-memory transport for testing.

    Records every call and answers with the configured response, or raises
    the configured exception.

    Example:
        >>> transport = MockMessengerHttpClient(HttpResponse(200, '{"result": "success"}'))
        >>> await transport.execute(HttpMethod.POST, "https://example.test", "{}")
        HttpResponse(status_code=200, body='{"result": "success"}')
        >>> transport.calls
        [(<HttpMethod.POST: 'POST'>, 'https://example.test', '{}')]
    """

    def __init__(
        self,
        response: HttpResponse | None = None,
        error: Exception | None = None,
    ):
        self._response = response or HttpResponse(200, '{"result": "success"}')
        self._error = error
        self.calls: list[tuple[HttpMethod, str, str | None]] = []

    async def execute(
        self,
        method: HttpMethod,
        url: str,
        json_body: str | None,
    ) -> HttpResponse:
        """Record call and return configured response."""
        self.calls.append((method, url, json_body))
        if self._error is not None:
            raise self._error
        return self._response
