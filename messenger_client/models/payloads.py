"""Outbound payloads for the send and messenger profile APIs.

Only the models the client operations need; serialized with ``None`` fields
omitted.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MessagingType(str, Enum):
    RESPONSE = "RESPONSE"
    UPDATE = "UPDATE"
    MESSAGE_TAG = "MESSAGE_TAG"


class NotificationType(str, Enum):
    REGULAR = "REGULAR"
    SILENT_PUSH = "SILENT_PUSH"
    NO_PUSH = "NO_PUSH"


class SenderAction(str, Enum):
    MARK_SEEN = "mark_seen"
    TYPING_ON = "typing_on"
    TYPING_OFF = "typing_off"


class Recipient(BaseModel):
    """Message recipient, addressed by exactly one identifier."""

    id: str | None = None
    user_ref: str | None = None
    phone_number: str | None = None

    @model_validator(mode="after")
    def _exactly_one_identifier(self) -> "Recipient":
        given = [v for v in (self.id, self.user_ref, self.phone_number) if v is not None]
        if len(given) != 1:
            raise ValueError("Recipient needs exactly one of id, user_ref, phone_number")
        return self


class QuickReply(BaseModel):
    content_type: str = "text"
    title: str | None = None
    payload: str | None = None
    image_url: str | None = None


class AttachmentPayload(BaseModel):
    """Outgoing attachment; ``payload`` is passed through as-is."""

    type: str = Field(..., description="image, audio, video, file or template")
    payload: dict[str, Any]


class Message(BaseModel):
    text: str | None = None
    attachment: AttachmentPayload | None = None
    quick_replies: list[QuickReply] | None = None
    metadata: str | None = None

    @model_validator(mode="after")
    def _text_or_attachment(self) -> "Message":
        if (self.text is None) == (self.attachment is None):
            raise ValueError("Message needs either text or an attachment")
        return self


class MessagePayload(BaseModel):
    """Body of a send API call."""

    recipient: Recipient
    message: Message | None = None
    sender_action: SenderAction | None = None
    messaging_type: MessagingType = MessagingType.RESPONSE
    notification_type: NotificationType | None = None
    tag: str | None = None

    @model_validator(mode="after")
    def _message_or_action(self) -> "MessagePayload":
        if (self.message is None) == (self.sender_action is None):
            raise ValueError("Payload needs either a message or a sender_action")
        return self

    @classmethod
    def text(cls, recipient_id: str, text: str, **kwargs: Any) -> "MessagePayload":
        """Shortcut for a plain text message to a page-scoped ID."""
        return cls(recipient=Recipient(id=recipient_id), message=Message(text=text), **kwargs)


class MessengerSettingProperty(str, Enum):
    GREETING = "greeting"
    GET_STARTED = "get_started"
    PERSISTENT_MENU = "persistent_menu"
    WHITELISTED_DOMAINS = "whitelisted_domains"
    ACCOUNT_LINKING_URL = "account_linking_url"
    HOME_URL = "home_url"
    TARGET_AUDIENCE = "target_audience"


class Greeting(BaseModel):
    locale: str = "default"
    text: str


class GetStarted(BaseModel):
    payload: str


class MessengerSettings(BaseModel):
    """Body of a messenger profile update; unset properties are left alone."""

    greeting: list[Greeting] | None = None
    get_started: GetStarted | None = None
    persistent_menu: list[dict[str, Any]] | None = None
    whitelisted_domains: list[str] | None = None
    account_linking_url: str | None = None
    home_url: dict[str, Any] | None = None
    target_audience: dict[str, Any] | None = None


class DeleteMessengerSettingsPayload(BaseModel):
    """Body of a messenger profile delete."""

    model_config = ConfigDict(populate_by_name=True)

    properties: list[MessengerSettingProperty] = Field(..., alias="fields", min_length=1)
