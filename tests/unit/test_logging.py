"""Tests for logging configuration and redaction helpers."""

from unittest.mock import patch

from messenger_client.logging_config import mask_pii, redact_tokens, redact_url, setup_logfire


class TestMaskPii:
    def test_masks_middle(self):
        assert mask_pii("EAABsbCS1iHgBA") == "EA**********BA"

    def test_short_values_fully_masked(self):
        assert mask_pii("abcd") == "****"

    def test_empty(self):
        assert mask_pii(None) == ""
        assert mask_pii("") == ""


class TestRedaction:
    def test_redact_tokens_nested(self):
        redacted = redact_tokens({"access_token": "secret-token", "app_secret": {"token": "abcdefgh"}, "id": "1"})
        assert redacted["access_token"] == "se********en"
        assert redacted["app_secret"] == {"token": "ab****gh"}
        assert redacted["id"] == "1"

    def test_redact_url_masks_access_token(self):
        url = "https://graph.facebook.com/v2.11/123?fields=first_name,last_name&access_token=EAABsbCS1iHgBA"
        redacted = redact_url(url)
        assert "EAABsbCS1iHgBA" not in redacted
        assert "access_token=EA**********BA" in redacted
        assert "fields=first_name,last_name" in redacted

    def test_redact_url_without_query(self):
        assert redact_url("https://graph.facebook.com/v2.11/me") == "https://graph.facebook.com/v2.11/me"


class TestSetupLogfire:
    def test_configures_logfire(self, mock_logfire, mock_settings):
        with patch("messenger_client.logging_config.logging.basicConfig") as basic_config:
            setup_logfire(settings=mock_settings)

        mock_logfire.configure.assert_called_once()
        assert mock_logfire.configure.call_args.kwargs["environment"] == "local"
        assert "token" not in mock_logfire.configure.call_args.kwargs
        mock_logfire.instrument_fastapi.assert_not_called()
        mock_logfire.instrument_pydantic.assert_called_once()
        basic_config.assert_called_once()

    def test_instruments_app_and_passes_token(self, mock_logfire, mock_settings):
        from fastapi import FastAPI

        app = FastAPI()
        settings = mock_settings.model_copy(update={"logfire_token": "lf-token", "env": "prod"})
        with patch("messenger_client.logging_config.logging.basicConfig"):
            setup_logfire(app, settings)

        mock_logfire.instrument_fastapi.assert_called_once_with(app)
        assert mock_logfire.configure.call_args.kwargs["token"] == "lf-token"
