"""Ready-made FastAPI application serving a Messenger webhook."""

from typing import Any, Callable

from fastapi import FastAPI

from messenger_client.api.correlation_id import CorrelationIDMiddleware
from messenger_client.api.webhook import create_webhook_router
from messenger_client.client import Messenger
from messenger_client.config import Settings
from messenger_client.logging_config import setup_logfire
from messenger_client.models.events import Event


def create_app(
    messenger: Messenger,
    event_handler: Callable[[Event], Any],
    settings: Settings | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Build an app mounting the webhook router at ``/webhook``.

    Args:
        messenger: Facade used to verify and parse deliveries
        event_handler: Called once per received event
        settings: Settings for logfire setup (``get_settings()`` when omitted)
        configure_logging: Set False when the host application already
            configured logfire
    """
    app = FastAPI(title="Messenger Webhook")

    if configure_logging:
        setup_logfire(app, settings)

    # Correlation ID middleware must be first for request tracing
    app.add_middleware(CorrelationIDMiddleware)
    app.include_router(
        create_webhook_router(messenger, event_handler),
        prefix="/webhook",
        tags=["webhook"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
