"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Credentials and settings: mock_settings, messenger_config
2. Transport: mock_http_client, make_messenger
3. Webhook payloads: text_message_payload, sign_payload
4. Infrastructure: mock_logfire (autouse), received_events, test_client
"""

import json
import os
from contextlib import contextmanager
from unittest.mock import MagicMock, Mock

import pytest

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

from messenger_client.client import Messenger
from messenger_client.config import MessengerConfig, Settings
from messenger_client.signature import compute_signature
from messenger_client.transport import HttpResponse, MockMessengerHttpClient

TEST_PAGE_ACCESS_TOKEN = "test-page-token"
TEST_APP_SECRET = "test-app-secret"
TEST_VERIFY_TOKEN = "test-verify-token"

LOGFIRE_MODULES = (
    "messenger_client.client",
    "messenger_client.transport",
    "messenger_client.logging_config",
    "messenger_client.api.correlation_id",
)


@pytest.fixture(autouse=True)
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Auto-applied so that no test depends on logfire being configured.
    """

    @contextmanager
    def mock_span(*args, **kwargs):
        yield {}

    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warn = Mock()
    mock_logfire_module.error = Mock()
    mock_logfire_module.span = mock_span
    mock_logfire_module.configure = Mock()
    mock_logfire_module.instrument_fastapi = Mock()
    mock_logfire_module.instrument_pydantic = Mock()

    for module in LOGFIRE_MODULES:
        monkeypatch.setattr(f"{module}.logfire", mock_logfire_module)

    return mock_logfire_module


@pytest.fixture
def mock_settings():
    """Settings with test credentials."""
    return Settings(
        page_access_token=TEST_PAGE_ACCESS_TOKEN,
        app_secret=TEST_APP_SECRET,
        verify_token=TEST_VERIFY_TOKEN,
        env="local",
        logfire_token=None,
    )


@pytest.fixture
def mock_http_client():
    """Transport answering with a successful setup response."""
    return MockMessengerHttpClient()


@pytest.fixture
def messenger_config(mock_http_client):
    return MessengerConfig(
        page_access_token=TEST_PAGE_ACCESS_TOKEN,
        app_secret=TEST_APP_SECRET,
        verify_token=TEST_VERIFY_TOKEN,
        http_client=mock_http_client,
    )


@pytest.fixture
def messenger(messenger_config):
    return Messenger(messenger_config)


@pytest.fixture
def make_messenger():
    """Factory building a Messenger whose transport returns the given response.

    Usage:
        messenger, transport = make_messenger(200, {"result": "success"})
    """

    def _make(status_code=200, body=None, error=None):
        if body is None:
            body = {"result": "success"}
        text = body if isinstance(body, str) else json.dumps(body)
        transport = MockMessengerHttpClient(HttpResponse(status_code, text), error=error)
        config = MessengerConfig(
            page_access_token=TEST_PAGE_ACCESS_TOKEN,
            app_secret=TEST_APP_SECRET,
            verify_token=TEST_VERIFY_TOKEN,
            http_client=transport,
        )
        return Messenger(config), transport

    return _make


@pytest.fixture
def text_message_payload():
    """Webhook body with a single text message."""
    return {
        "object": "page",
        "entry": [
            {
                "id": "PAGE_ID",
                "time": 1458692752478,
                "messaging": [
                    {
                        "sender": {"id": "USER_ID"},
                        "recipient": {"id": "PAGE_ID"},
                        "timestamp": 1458692752478,
                        "message": {"mid": "mid.1457764197618:41d102a3e1ae206a38", "text": "hello, world!"},
                    }
                ],
            }
        ],
    }


@pytest.fixture
def sign_payload():
    """Return (body, signature) for a payload dict signed with the test secret."""

    def _sign(payload, app_secret=TEST_APP_SECRET):
        body = json.dumps(payload)
        return body, compute_signature(body, app_secret)

    return _sign


@pytest.fixture
def received_events():
    return []


@pytest.fixture
def test_client(messenger, received_events):
    """FastAPI TestClient serving the webhook of the test messenger."""
    from fastapi.testclient import TestClient

    from messenger_client.api.app import create_app

    app = create_app(messenger, received_events.append, configure_logging=False)
    return TestClient(app)
