"""FastAPI webhook endpoints.

Exposes the two HTTP entry points of a Messenger webhook on top of a
``Messenger`` facade:

- GET: subscription handshake, echoes ``hub.challenge`` when the mode and
  verify token match
- POST: event delivery, verified against ``X-Hub-Signature`` on the raw body
  before any JSON parsing
"""

import logging
from typing import Any, Callable

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from messenger_client.client import Messenger
from messenger_client.constants import (
    CHALLENGE_REQUEST_PARAM_NAME,
    MODE_REQUEST_PARAM_NAME,
    SIGNATURE_HEADER_NAME,
    VERIFY_TOKEN_REQUEST_PARAM_NAME,
)
from messenger_client.exceptions import (
    MessengerValidationError,
    MessengerVerificationError,
)
from messenger_client.models.events import Event

logger = logging.getLogger(__name__)


def create_webhook_router(
    messenger: Messenger,
    event_handler: Callable[[Event], Any],
) -> APIRouter:
    """Build the webhook router.

    Args:
        messenger: Facade holding the verify token and app secret
        event_handler: Called once per event of every verified delivery

    Returns:
        Router with GET and POST handlers at its root path
    """
    router = APIRouter()

    @router.get("")
    async def verify_webhook(request: Request):
        """Facebook webhook verification endpoint."""
        mode = request.query_params.get(MODE_REQUEST_PARAM_NAME)
        token = request.query_params.get(VERIFY_TOKEN_REQUEST_PARAM_NAME)
        challenge = request.query_params.get(CHALLENGE_REQUEST_PARAM_NAME)

        if mode is None or token is None or challenge is None:
            logger.warning("Webhook verification failed: missing hub parameters")
            return Response(status_code=403)

        try:
            messenger.verify_webhook(mode, token)
        except MessengerVerificationError as e:
            logger.warning("Webhook verification failed (%s)", e.reason.value)
            return Response(status_code=403)

        return PlainTextResponse(challenge)

    @router.post("")
    async def handle_webhook(request: Request):
        """Handle incoming Facebook Messenger webhook events."""
        raw_body = await request.body()
        signature = request.headers.get(SIGNATURE_HEADER_NAME)

        try:
            body = raw_body.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Malformed webhook delivery: body is not UTF-8")
            return Response(status_code=400)

        # Handler errors stop the batch and surface as a 500
        try:
            messenger.on_receive_events(body, signature, event_handler)
        except MessengerVerificationError as e:
            logger.warning("Rejected webhook delivery (%s)", e.reason.value)
            return Response(status_code=403)
        except MessengerValidationError as e:
            logger.warning("Malformed webhook delivery: %s", e)
            return Response(status_code=400)

        return {"status": "ok"}

    return router
