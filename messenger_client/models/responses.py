"""Typed Graph API responses and their factories.

Factories receive a response object already known to be non-empty and to
carry a 2xx status. Missing required fields raise ``MessengerApiError``.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from messenger_client.exceptions import MessengerApiError

_ResponseT = TypeVar("_ResponseT", bound="GraphResponse")


class GraphResponse(BaseModel):
    """Base for responses: immutable, unknown keys ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def create(cls: type[_ResponseT], data: dict[str, Any]) -> _ResponseT:
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise MessengerApiError(
                f"Malformed {cls.__name__}: {e.error_count()} invalid field(s)"
            ) from e


class MessageResponse(GraphResponse):
    """Result of a send API call."""

    recipient_id: str
    message_id: str
    attachment_id: str | None = None


class SetupResponse(GraphResponse):
    """Result of a messenger profile update or delete."""

    result: str


class LastAdReferral(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    source: str | None = None
    type: str | None = None
    ad_id: str | None = None


class UserProfile(GraphResponse):
    """User info from the Graph API.

    Every field is optional: the API omits fields the page may not read.
    """

    first_name: str | None = None
    last_name: str | None = None
    profile_pic: str | None = Field(default=None, description="Profile picture URL")
    locale: str | None = None
    timezone: float | None = Field(default=None, description="Offset from UTC in hours")
    gender: str | None = None
    is_payment_enabled: bool | None = None
    last_ad_referral: LastAdReferral | None = None
