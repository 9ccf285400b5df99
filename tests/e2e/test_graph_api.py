"""End-to-end tests of Graph API calls over the default httpx transport."""

import json

import httpx
import pytest
import respx

from messenger_client.client import Messenger
from messenger_client.config import MessengerConfig
from messenger_client.exceptions import MessengerApiError
from messenger_client.models.payloads import MessagePayload, MessengerSettingProperty


@pytest.fixture
def live_messenger():
    """Messenger using the default HttpxMessengerHttpClient."""
    return Messenger(
        MessengerConfig.builder()
        .page_access_token("test-page-token")
        .app_secret("test-app-secret")
        .verify_token("test-verify-token")
        .build()
    )


class TestGraphApiOverHttpx:
    @pytest.mark.asyncio
    @respx.mock
    async def test_send_round_trip(self, live_messenger):
        respx.post("https://graph.facebook.com/v2.11/me/messages").mock(
            return_value=httpx.Response(200, json={"recipient_id": "X", "message_id": "Y"})
        )

        response = await live_messenger.send(MessagePayload.text("X", "Hello"))

        assert (response.recipient_id, response.message_id) == ("X", "Y")
        request = respx.calls.last.request
        assert request.url.params["access_token"] == "test-page-token"
        assert json.loads(request.content) == {
            "recipient": {"id": "X"},
            "message": {"text": "Hello"},
            "messaging_type": "RESPONSE",
        }

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_token(self, live_messenger):
        respx.post("https://graph.facebook.com/v2.11/me/messages").mock(
            return_value=httpx.Response(
                400,
                json={"error": {"message": "Invalid token", "type": "OAuthException", "code": 190}},
            )
        )

        with pytest.raises(MessengerApiError) as exc_info:
            await live_messenger.send(MessagePayload.text("X", "Hello"))

        assert exc_info.value.code == 190
        assert exc_info.value.fbtrace_id is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_success_response(self, live_messenger):
        respx.delete("https://graph.facebook.com/v2.11/me/messenger_profile").mock(
            return_value=httpx.Response(200, json={})
        )

        with pytest.raises(MessengerApiError):
            await live_messenger.delete_settings(MessengerSettingProperty.GREETING)

    @pytest.mark.asyncio
    @respx.mock
    async def test_user_profile(self, live_messenger):
        respx.get("https://graph.facebook.com/v2.11/42").mock(
            return_value=httpx.Response(200, json={"first_name": "Ada", "timezone": 1})
        )

        profile = await live_messenger.query_user_profile("42")

        assert profile.first_name == "Ada"
        request = respx.calls.last.request
        assert request.method == "GET"
        assert request.url.params["fields"].split(",")[0] == "first_name"

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error_reaches_caller(self, live_messenger):
        respx.post("https://graph.facebook.com/v2.11/me/messages").mock(
            side_effect=httpx.ConnectError("Connection failed")
        )

        with pytest.raises(httpx.ConnectError):
            await live_messenger.send(MessagePayload.text("X", "Hello"))
