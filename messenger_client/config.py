"""Client configuration.

Two layers:

- ``Settings`` reads credentials from the environment (pydantic-settings),
  the way an application or the CLI obtains them.
- ``MessengerConfig`` is the immutable bundle the ``Messenger`` facade is
  built from. It is assembled once, through ``MessengerConfig.builder()``,
  the named constructor or ``MessengerConfig.from_settings()``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from messenger_client.codec import JsonCodec, PydanticJsonCodec
from messenger_client.constants import (
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_VERSION,
)
from messenger_client.transport import HttpxMessengerHttpClient, MessengerHttpClient


class Settings(BaseSettings):
    """Settings loaded from ``MESSENGER_*`` environment variables."""

    model_config = SettingsConfigDict(
        # .env.local takes precedence over .env
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        env_prefix="MESSENGER_",
        case_sensitive=False,
        extra="ignore",
    )

    page_access_token: str = Field(..., description="Facebook Page access token")
    app_secret: str = Field(..., description="App secret used to sign webhook bodies")
    verify_token: str = Field(..., description="Webhook subscription verify token")

    api_version: str = Field(
        default=FACEBOOK_GRAPH_API_VERSION, description="Graph API version"
    )
    http_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        description="Timeout for Facebook Graph API calls (seconds)",
    )

    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="stdlib logging level")
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token (optional)"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class MessengerConfig(BaseModel):
    """Immutable configuration bundle of a ``Messenger`` facade."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    page_access_token: str = Field(..., min_length=1)
    app_secret: str = Field(..., min_length=1)
    verify_token: str = Field(..., min_length=1)
    http_client: MessengerHttpClient = Field(default_factory=HttpxMessengerHttpClient)
    json_codec: JsonCodec = Field(default_factory=PydanticJsonCodec)
    api_version: str = FACEBOOK_GRAPH_API_VERSION

    @classmethod
    def builder(cls) -> "MessengerConfigBuilder":
        return MessengerConfigBuilder()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        http_client: MessengerHttpClient | None = None,
    ) -> "MessengerConfig":
        """Build a config from environment settings.

        Args:
            settings: Settings to use (``get_settings()`` when omitted)
            http_client: Transport override; defaults to httpx with the
                configured timeout
        """
        settings = settings or get_settings()
        return cls(
            page_access_token=settings.page_access_token,
            app_secret=settings.app_secret,
            verify_token=settings.verify_token,
            http_client=http_client
            or HttpxMessengerHttpClient(timeout=settings.http_timeout_seconds),
            api_version=settings.api_version,
        )


class MessengerConfigBuilder:
    """Staged builder for ``MessengerConfig``.

    Example:
        >>> config = (
        ...     MessengerConfig.builder()
        ...     .page_access_token("EAAB...")
        ...     .app_secret("secret")
        ...     .verify_token("verify-me")
        ...     .build()
        ... )
    """

    def __init__(self):
        self._values: dict = {}

    def page_access_token(self, page_access_token: str) -> "MessengerConfigBuilder":
        self._values["page_access_token"] = page_access_token
        return self

    def app_secret(self, app_secret: str) -> "MessengerConfigBuilder":
        self._values["app_secret"] = app_secret
        return self

    def verify_token(self, verify_token: str) -> "MessengerConfigBuilder":
        self._values["verify_token"] = verify_token
        return self

    def http_client(self, http_client: MessengerHttpClient) -> "MessengerConfigBuilder":
        self._values["http_client"] = http_client
        return self

    def json_codec(self, json_codec: JsonCodec) -> "MessengerConfigBuilder":
        self._values["json_codec"] = json_codec
        return self

    def api_version(self, api_version: str) -> "MessengerConfigBuilder":
        self._values["api_version"] = api_version
        return self

    def build(self) -> MessengerConfig:
        """Validate and freeze the collected values.

        Raises:
            pydantic.ValidationError: a credential is missing or empty
        """
        return MessengerConfig(**self._values)
