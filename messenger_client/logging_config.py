"""Centralized logging configuration with Pydantic Logfire integration."""

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import logfire

if TYPE_CHECKING:
    from fastapi import FastAPI

    from messenger_client.config import Settings


def setup_logfire(app: "FastAPI | None" = None, settings: "Settings | None" = None) -> None:
    """
    Initialize and configure Pydantic Logfire for observability.

    Sets up:
    - FastAPI instrumentation when a webhook app is given
    - Pydantic instrumentation (model validation logging)
    - Environment-aware stdlib logging format
    """
    if settings is None:
        from messenger_client.config import get_settings

        settings = get_settings()

    logfire_config: dict[str, Any] = {
        "environment": settings.env,
        "send_to_logfire": "if-token-present",
    }

    if settings.logfire_token:
        logfire_config["token"] = settings.logfire_token

    logfire.configure(**logfire_config)

    if app is not None:
        logfire.instrument_fastapi(app)
    logfire.instrument_pydantic()

    log_level = settings.log_level.upper()

    if settings.env == "local":
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        # Logfire handles structured formatting
        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(message)s",
        )


def mask_pii(value: str | None, mask_char: str = "*") -> str:
    """
    Mask potentially sensitive data in logs.

    Args:
        value: Value to mask
        mask_char: Character to use for masking

    Returns:
        Masked string
    """
    if not value:
        return ""

    if len(value) <= 4:
        return mask_char * len(value)

    # Show first 2 and last 2 characters
    return f"{value[:2]}{mask_char * (len(value) - 4)}{value[-2:]}"


def redact_tokens(data: dict[str, Any]) -> dict[str, Any]:
    """
    Redact authentication tokens and API keys from log data.

    Args:
        data: Dictionary that may contain sensitive tokens

    Returns:
        Dictionary with tokens redacted
    """
    redacted = data.copy()
    sensitive_keys = [
        "token",
        "access_token",
        "verify_token",
        "app_secret",
        "secret",
        "authorization",
    ]

    for key in sensitive_keys:
        if key in redacted:
            if isinstance(redacted[key], str):
                redacted[key] = mask_pii(redacted[key])
            elif isinstance(redacted[key], dict):
                redacted[key] = redact_tokens(redacted[key])

    return redacted


def redact_url(url: str) -> str:
    """Mask sensitive query parameters (the page access token) of a URL."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    params = redact_tokens(dict(parse_qsl(parts.query, keep_blank_values=True)))
    return urlunsplit(parts._replace(query=urlencode(params, safe=",*")))
