"""Typed webhook events.

``Event`` is a closed union: every messaging item of a webhook delivery maps
to exactly one variant, selected by ``messenger_client.webhook.create_event``.
Shapes that match no known variant become ``UnsupportedEvent``.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Values of the ``type`` discriminator of every event variant."""

    TEXT_MESSAGE = "text_message"
    ATTACHMENT_MESSAGE = "attachment_message"
    QUICK_REPLY_MESSAGE = "quick_reply_message"
    POSTBACK = "postback"
    MESSAGE_DELIVERED = "message_delivered"
    MESSAGE_READ = "message_read"
    OPT_IN = "opt_in"
    REFERRAL = "referral"
    ACCOUNT_LINKING = "account_linking"
    UNSUPPORTED = "unsupported"


class BaseEvent(BaseModel):
    """Fields common to every event."""

    model_config = ConfigDict(frozen=True)

    sender_id: str = Field(..., description="Page-scoped ID of the sender")
    recipient_id: str = Field(..., description="ID of the recipient (usually the page)")
    timestamp: int = Field(..., description="Milliseconds since epoch")

    @property
    def sent_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)


class Attachment(BaseModel):
    """Attachment of an incoming message."""

    model_config = ConfigDict(frozen=True)

    type: str
    url: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)


class Referral(BaseModel):
    """Referral details (m.me links, ads, chat plugin)."""

    model_config = ConfigDict(frozen=True)

    ref: str | None = None
    source: str | None = None
    referral_type: str | None = None
    ad_id: str | None = None


class TextMessageEvent(BaseEvent):
    type: Literal["text_message"] = "text_message"
    message_id: str | None = None
    text: str


class QuickReplyMessageEvent(BaseEvent):
    type: Literal["quick_reply_message"] = "quick_reply_message"
    message_id: str | None = None
    text: str | None = None
    payload: str | None = None


class AttachmentMessageEvent(BaseEvent):
    type: Literal["attachment_message"] = "attachment_message"
    message_id: str | None = None
    text: str | None = None
    attachments: tuple[Attachment, ...] = ()


class PostbackEvent(BaseEvent):
    type: Literal["postback"] = "postback"
    title: str | None = None
    payload: str | None = None
    referral: Referral | None = None


class MessageDeliveredEvent(BaseEvent):
    type: Literal["message_delivered"] = "message_delivered"
    watermark: int | None = None
    message_ids: tuple[str, ...] = ()


class MessageReadEvent(BaseEvent):
    type: Literal["message_read"] = "message_read"
    watermark: int | None = None


class OptInEvent(BaseEvent):
    type: Literal["opt_in"] = "opt_in"
    ref: str | None = None
    user_ref: str | None = None


class ReferralEvent(BaseEvent):
    type: Literal["referral"] = "referral"
    referral: Referral


class AccountLinkingEvent(BaseEvent):
    type: Literal["account_linking"] = "account_linking"
    status: Literal["linked", "unlinked"]
    authorization_code: str | None = None


class UnsupportedEvent(BaseModel):
    """Messaging item of an unknown shape, kept raw for diagnostics.

    Sender, recipient and timestamp are optional here because a malformed
    item may lack them.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["unsupported"] = "unsupported"
    sender_id: str | None = None
    recipient_id: str | None = None
    timestamp: int | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


Event = Annotated[
    Union[
        TextMessageEvent,
        QuickReplyMessageEvent,
        AttachmentMessageEvent,
        PostbackEvent,
        MessageDeliveredEvent,
        MessageReadEvent,
        OptInEvent,
        ReferralEvent,
        AccountLinkingEvent,
        UnsupportedEvent,
    ],
    Field(discriminator="type"),
]
