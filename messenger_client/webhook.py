"""Webhook payload normalization.

Turns the JSON body of a page subscription delivery into a list of typed
events. The payload envelope is validated strictly; individual messaging
items never fail, anything unrecognized becomes an ``UnsupportedEvent``.
"""

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from messenger_client.constants import OBJECT_TYPE_PAGE
from messenger_client.exceptions import MessengerValidationError
from messenger_client.models.events import (
    AccountLinkingEvent,
    Attachment,
    AttachmentMessageEvent,
    Event,
    MessageDeliveredEvent,
    MessageReadEvent,
    OptInEvent,
    PostbackEvent,
    QuickReplyMessageEvent,
    Referral,
    ReferralEvent,
    TextMessageEvent,
    UnsupportedEvent,
)

logger = logging.getLogger(__name__)


def _get_dict(data: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = data.get(key)
    return value if isinstance(value, dict) else None


def _get_id(data: dict[str, Any], key: str) -> str | None:
    inner = _get_dict(data, key)
    if inner is None:
        return None
    value = inner.get("id")
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value)
    return None


def _parse_referral(data: dict[str, Any]) -> Referral:
    return Referral(
        ref=data.get("ref"),
        source=data.get("source"),
        referral_type=data.get("type"),
        ad_id=data.get("ad_id"),
    )


def _parse_attachment(data: dict[str, Any]) -> Attachment:
    payload = data.get("payload")
    if payload is None:
        payload = {}
    return Attachment(
        type=data.get("type", "unknown"),
        url=payload.get("url") if isinstance(payload, dict) else None,
        payload=payload,
    )


def _create_variant(messaging: dict[str, Any], base: dict[str, Any]) -> Event | None:
    """Pick the variant by key presence, in fixed priority order."""
    delivery = _get_dict(messaging, "delivery")
    if delivery is not None:
        return MessageDeliveredEvent(
            **base,
            watermark=delivery.get("watermark"),
            message_ids=delivery.get("mids") or (),
        )

    read = _get_dict(messaging, "read")
    if read is not None:
        return MessageReadEvent(**base, watermark=read.get("watermark"))

    optin = _get_dict(messaging, "optin")
    if optin is not None:
        return OptInEvent(**base, ref=optin.get("ref"), user_ref=optin.get("user_ref"))

    postback = _get_dict(messaging, "postback")
    if postback is not None:
        referral = _get_dict(postback, "referral")
        return PostbackEvent(
            **base,
            title=postback.get("title"),
            payload=postback.get("payload"),
            referral=_parse_referral(referral) if referral is not None else None,
        )

    message = _get_dict(messaging, "message")
    if message is not None:
        message_id = message.get("mid")

        quick_reply = _get_dict(message, "quick_reply")
        if quick_reply is not None:
            return QuickReplyMessageEvent(
                **base,
                message_id=message_id,
                text=message.get("text"),
                payload=quick_reply.get("payload"),
            )

        attachments = message.get("attachments")
        if isinstance(attachments, list) and attachments:
            return AttachmentMessageEvent(
                **base,
                message_id=message_id,
                text=message.get("text"),
                # Non-object entries are left for the model to reject
                attachments=[
                    _parse_attachment(a) if isinstance(a, dict) else a for a in attachments
                ],
            )

        if isinstance(message.get("text"), str):
            return TextMessageEvent(**base, message_id=message_id, text=message["text"])

    referral = _get_dict(messaging, "referral")
    if referral is not None:
        return ReferralEvent(**base, referral=_parse_referral(referral))

    account_linking = _get_dict(messaging, "account_linking")
    if account_linking is not None:
        return AccountLinkingEvent(
            **base,
            status=account_linking.get("status"),
            authorization_code=account_linking.get("authorization_code"),
        )

    return None


def create_event(messaging: dict[str, Any]) -> Event:
    """Classify one item of an entry's ``messaging`` array.

    Args:
        messaging: Raw messaging item

    Returns:
        The matching event variant, or ``UnsupportedEvent`` carrying the raw
        item when it has no recognized shape or malformed fields
    """
    sender_id = _get_id(messaging, "sender")
    recipient_id = _get_id(messaging, "recipient")
    timestamp = messaging.get("timestamp")
    if not isinstance(timestamp, int) or isinstance(timestamp, bool):
        timestamp = None

    if sender_id is not None and recipient_id is not None and timestamp is not None:
        base = {"sender_id": sender_id, "recipient_id": recipient_id, "timestamp": timestamp}
        try:
            event = _create_variant(messaging, base)
        except PydanticValidationError as e:
            logger.warning("Malformed messaging item kept as unsupported: %s", e)
            event = None
        if event is not None:
            return event

    logger.debug("Unsupported messaging item with keys %s", sorted(messaging))
    return UnsupportedEvent(
        sender_id=sender_id,
        recipient_id=recipient_id,
        timestamp=timestamp,
        raw=messaging,
    )


def parse_events(payload: Any) -> list[Event]:
    """Normalize a page subscription delivery into events.

    Args:
        payload: Parsed webhook JSON body

    Returns:
        Events in delivery order, across all entries

    Raises:
        MessengerValidationError: ``object`` is not ``page``, or ``entry`` or
            one of the ``messaging`` arrays is missing or empty
    """
    if not isinstance(payload, dict):
        raise MessengerValidationError("Webhook payload must be a JSON object")

    object_type = payload.get("object")
    if not isinstance(object_type, str) or object_type.lower() != OBJECT_TYPE_PAGE:
        raise MessengerValidationError(
            "'object' property must be 'page'. Make sure this is a page subscription"
        )

    entries = payload.get("entry")
    if not isinstance(entries, list) or not entries:
        raise MessengerValidationError("'entry' property must be a non-empty array")

    events: list[Event] = []
    for index, entry in enumerate(entries):
        messaging_items = entry.get("messaging") if isinstance(entry, dict) else None
        if not isinstance(messaging_items, list) or not messaging_items:
            raise MessengerValidationError(
                f"Entry {index} must contain a non-empty 'messaging' array"
            )
        for messaging in messaging_items:
            if isinstance(messaging, dict):
                events.append(create_event(messaging))
            else:
                events.append(UnsupportedEvent(raw={"value": messaging}))

    return events
