"""Client library for the Facebook Messenger Platform."""

from messenger_client.client import Messenger
from messenger_client.config import MessengerConfig, MessengerConfigBuilder, Settings
from messenger_client.exceptions import (
    MessengerApiError,
    MessengerError,
    MessengerValidationError,
    MessengerVerificationError,
    VerificationFailure,
)
from messenger_client.models.events import Event, EventType
from messenger_client.signature import compute_signature, is_signature_valid
from messenger_client.transport import (
    HttpMethod,
    HttpResponse,
    HttpxMessengerHttpClient,
    MessengerHttpClient,
)

__all__ = [
    "Event",
    "EventType",
    "HttpMethod",
    "HttpResponse",
    "HttpxMessengerHttpClient",
    "Messenger",
    "MessengerApiError",
    "MessengerConfig",
    "MessengerConfigBuilder",
    "MessengerError",
    "MessengerHttpClient",
    "MessengerValidationError",
    "MessengerVerificationError",
    "Settings",
    "VerificationFailure",
    "compute_signature",
    "is_signature_valid",
]
