"""X-Hub-Signature verification for webhook deliveries.

The platform signs the raw request body with HMAC-SHA1 keyed by the app
secret. Verification must run on the exact body text, before any JSON
parsing.
"""

import hashlib
import hmac

from messenger_client.constants import SIGNATURE_SCHEME


def compute_signature(payload: str, app_secret: str) -> str:
    """Return the ``sha1=<hex>`` header value for a body."""
    digest = hmac.new(
        app_secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha1
    ).hexdigest()
    return f"{SIGNATURE_SCHEME}={digest}"


def is_signature_valid(payload: str, signature: str, app_secret: str) -> bool:
    """Check an ``X-Hub-Signature`` header against the raw body.

    Args:
        payload: Raw request body, exactly as received
        signature: Header value, ``sha1=<hex>``
        app_secret: App secret the platform signs with

    Returns:
        True if the signature matches. A malformed header is False, never an
        exception.
    """
    if not signature or "=" not in signature:
        return False

    scheme, _, provided = signature.partition("=")
    if scheme.strip().lower() != SIGNATURE_SCHEME or not provided:
        return False

    expected = compute_signature(payload, app_secret).partition("=")[2]
    return hmac.compare_digest(
        expected.encode("ascii"), provided.strip().lower().encode("utf-8")
    )
