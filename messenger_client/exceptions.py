"""Exception hierarchy for the Messenger client.

Transport faults raised by the HTTP client (``httpx.HTTPError`` for the
default transport) are not wrapped and reach the caller unchanged.
"""

from enum import Enum
from typing import Any


class MessengerError(Exception):
    """Base class for all errors raised by this library."""


class VerificationFailure(str, Enum):
    """Which webhook check failed."""

    INVALID_SIGNATURE = "invalid_signature"
    INVALID_MODE = "invalid_mode"
    INVALID_VERIFY_TOKEN = "invalid_verify_token"


class MessengerVerificationError(MessengerError):
    """Webhook signature, subscribe mode or verify token did not match.

    Never retryable. ``reason`` lets an HTTP layer pick a status code
    without parsing the message.
    """

    def __init__(self, message: str, reason: VerificationFailure):
        super().__init__(message)
        self.reason = reason


class MessengerValidationError(MessengerError):
    """The webhook payload does not have the shape of a page subscription."""


class MessengerApiError(MessengerError):
    """Error reported by the Graph API, or an empty API response.

    Every diagnostic field is optional. A field the platform did not send is
    ``None``, which keeps it distinguishable from an empty string.
    """

    def __init__(
        self,
        message: str | None,
        error_type: str | None = None,
        code: int | None = None,
        fbtrace_id: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message or "Graph API request failed")
        self.message = message
        self.error_type = error_type
        self.code = code
        self.fbtrace_id = fbtrace_id
        self.status_code = status_code

    @classmethod
    def from_response(
        cls, data: dict[str, Any], status_code: int | None = None
    ) -> "MessengerApiError":
        """Build an error from a Graph API ``{"error": {...}}`` payload."""
        error = data.get("error")
        if not isinstance(error, dict):
            error = {}

        code = error.get("code")
        message = error.get("message")
        error_type = error.get("type")
        fbtrace_id = error.get("fbtrace_id")
        return cls(
            message=message if isinstance(message, str) else None,
            error_type=error_type if isinstance(error_type, str) else None,
            code=code if isinstance(code, int) and not isinstance(code, bool) else None,
            fbtrace_id=fbtrace_id if isinstance(fbtrace_id, str) else None,
            status_code=status_code,
        )

    def __repr__(self) -> str:
        return (
            f"MessengerApiError(message={self.message!r}, type={self.error_type!r}, "
            f"code={self.code!r}, fbtrace_id={self.fbtrace_id!r})"
        )
