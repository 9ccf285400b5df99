"""Messenger Platform client facade.

All Graph API calls go through one pipeline, ``Messenger._do_request``:

1. serialize the payload (GET requests never carry a body)
2. await the transport; transport exceptions propagate unchanged
3. parse the body; malformed JSON propagates
4. an empty JSON object fails with ``MessengerApiError``, whatever the status
5. a 2xx status is mapped by the operation's response factory
6. any other status fails with ``MessengerApiError`` built from the body

Webhook handling (``on_receive_events``, ``verify_webhook``) is synchronous.
"""

from typing import Any, Callable, TypeVar
from urllib.parse import quote, urlencode

import logfire

from messenger_client.config import MessengerConfig
from messenger_client.constants import (
    EMPTY_RESPONSE_MESSAGE,
    FACEBOOK_GRAPH_API_BASE_URL,
    HUB_MODE_SUBSCRIBE,
    MESSAGES_PATH,
    MESSENGER_PROFILE_PATH,
    USER_PROFILE_FIELDS,
)
from messenger_client.exceptions import (
    MessengerApiError,
    MessengerValidationError,
    MessengerVerificationError,
    VerificationFailure,
)
from messenger_client.logging_config import redact_url
from messenger_client.models.events import Event
from messenger_client.models.payloads import (
    DeleteMessengerSettingsPayload,
    MessagePayload,
    MessengerSettingProperty,
    MessengerSettings,
)
from messenger_client.models.responses import MessageResponse, SetupResponse, UserProfile
from messenger_client.signature import is_signature_valid
from messenger_client.transport import HttpMethod
from messenger_client.webhook import parse_events

_ResultT = TypeVar("_ResultT")


class Messenger:
    """Entry point to the Messenger Platform.

    Example:
        >>> messenger = Messenger(
        ...     MessengerConfig.builder()
        ...     .page_access_token("EAAB...")
        ...     .app_secret("secret")
        ...     .verify_token("verify-me")
        ...     .build()
        ... )
        >>> response = await messenger.send(MessagePayload.text("1254459154682919", "Hello!"))
        >>> response.message_id
        'mid.1456970487936:c34767dfe57ee6e339'
    """

    def __init__(self, config: MessengerConfig):
        self._config = config
        base_url = f"{FACEBOOK_GRAPH_API_BASE_URL}/{config.api_version}"
        token_query = urlencode({"access_token": config.page_access_token})
        self._base_url = base_url
        self._messages_url = f"{base_url}/{MESSAGES_PATH}?{token_query}"
        self._messenger_profile_url = f"{base_url}/{MESSENGER_PROFILE_PATH}?{token_query}"

    @property
    def config(self) -> MessengerConfig:
        return self._config

    # ------------------------------------------------------------------
    # Graph API operations
    # ------------------------------------------------------------------

    async def send(self, payload: MessagePayload) -> MessageResponse:
        """Send a message or sender action.

        Raises:
            MessengerApiError: the API rejected the request or answered ``{}``
        """
        return await self._do_request(
            HttpMethod.POST, self._messages_url, payload, MessageResponse.create
        )

    async def query_user_profile(self, user_id: str) -> UserProfile:
        """Fetch the public profile fields of a page-scoped user ID."""
        query = urlencode(
            {
                "fields": ",".join(USER_PROFILE_FIELDS),
                "access_token": self._config.page_access_token,
            },
            safe=",",
        )
        url = f"{self._base_url}/{quote(user_id, safe='')}?{query}"
        return await self._do_request(HttpMethod.GET, url, None, UserProfile.create)

    async def update_settings(self, settings: MessengerSettings) -> SetupResponse:
        """Set messenger profile properties (greeting, get started, menu...)."""
        return await self._do_request(
            HttpMethod.POST, self._messenger_profile_url, settings, SetupResponse.create
        )

    async def delete_settings(
        self,
        prop: MessengerSettingProperty,
        *props: MessengerSettingProperty,
    ) -> SetupResponse:
        """Delete one or more messenger profile properties."""
        payload = DeleteMessengerSettingsPayload(properties=[prop, *props])
        return await self._do_request(
            HttpMethod.DELETE, self._messenger_profile_url, payload, SetupResponse.create
        )

    async def _do_request(
        self,
        method: HttpMethod,
        url: str,
        payload: Any,
        response_factory: Callable[[dict[str, Any]], _ResultT],
    ) -> _ResultT:
        json_body = None
        if payload is not None and method is not HttpMethod.GET:
            json_body = self._config.json_codec.serialize(payload)

        logfire.info(
            "Sending Graph API request",
            method=method.value,
            url=redact_url(url),
            has_body=json_body is not None,
        )

        response = await self._config.http_client.execute(method, url, json_body)

        data = self._config.json_codec.parse(response.body)
        if not isinstance(data, dict):
            raise ValueError(
                f"Expected a JSON object in the Graph API response, got {type(data).__name__}"
            )

        if not data:
            logfire.error(
                "Graph API returned an empty response",
                method=method.value,
                url=redact_url(url),
                status_code=response.status_code,
            )
            raise MessengerApiError(EMPTY_RESPONSE_MESSAGE, status_code=response.status_code)

        if 200 <= response.status_code < 300:
            return response_factory(data)

        error = MessengerApiError.from_response(data, status_code=response.status_code)
        logfire.error(
            "Graph API request failed",
            method=method.value,
            url=redact_url(url),
            status_code=response.status_code,
            error=error.message,
            error_type=error.error_type,
            error_code=error.code,
            fbtrace_id=error.fbtrace_id,
        )
        raise error

    # ------------------------------------------------------------------
    # Webhook
    # ------------------------------------------------------------------

    def receive_events(self, request_payload: str, signature: str | None) -> list[Event]:
        """Verify and parse a webhook delivery.

        Args:
            request_payload: Raw request body, exactly as received
            signature: ``X-Hub-Signature`` header value, or None if absent

        Returns:
            Events in delivery order

        Raises:
            MessengerVerificationError: the signature does not match
            MessengerValidationError: the body is not valid JSON, or not a
                page subscription
        """
        if signature is not None:
            if not is_signature_valid(request_payload, signature, self._config.app_secret):
                logfire.warn("Webhook signature verification failed")
                raise MessengerVerificationError(
                    "Signature verification failed. "
                    "Provided signature does not match calculated signature.",
                    VerificationFailure.INVALID_SIGNATURE,
                )
        else:
            logfire.warn(
                "No signature provided, hence the signature verification is skipped. "
                "THIS IS NOT RECOMMENDED"
            )

        try:
            payload = self._config.json_codec.parse(request_payload)
        except ValueError as e:
            raise MessengerValidationError("Webhook payload is not valid JSON") from e
        events = parse_events(payload)
        logfire.info("Webhook events received", event_count=len(events))
        return events

    def on_receive_events(
        self,
        request_payload: str,
        signature: str | None,
        event_handler: Callable[[Event], Any],
    ) -> None:
        """Verify, parse and dispatch a webhook delivery.

        The handler is called once per event, in order, after the whole
        payload has been validated. An exception raised by the handler stops
        the batch and propagates.
        """
        for event in self.receive_events(request_payload, signature):
            event_handler(event)

    def verify_webhook(self, mode: str, verify_token: str) -> None:
        """Check a subscription handshake (``hub.mode`` / ``hub.verify_token``).

        Raises:
            MessengerVerificationError: with reason ``INVALID_MODE`` or
                ``INVALID_VERIFY_TOKEN``
        """
        if mode != HUB_MODE_SUBSCRIBE:
            raise MessengerVerificationError(
                f"Webhook verification failed. Mode '{mode}' is invalid.",
                VerificationFailure.INVALID_MODE,
            )
        if verify_token != self._config.verify_token:
            raise MessengerVerificationError(
                "Webhook verification failed. Verification token is invalid.",
                VerificationFailure.INVALID_VERIFY_TOKEN,
            )
        logfire.info("Webhook verified successfully")
