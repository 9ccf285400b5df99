"""Library-wide constants.

This module centralizes Graph API endpoints, webhook wire names and
default timeouts so that the client, the webhook router and the CLI share
a single source of truth.
"""

# =============================================================================
# Facebook Graph API
# =============================================================================

# Graph API version used when none is configured
FACEBOOK_GRAPH_API_VERSION = "v2.11"

FACEBOOK_GRAPH_API_BASE_URL = "https://graph.facebook.com"

# Path templates, relative to the versioned base URL
MESSAGES_PATH = "me/messages"
MESSENGER_PROFILE_PATH = "me/messenger_profile"

# Fields requested by the user profile query (order is significant for the URL)
USER_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "profile_pic",
    "locale",
    "timezone",
    "gender",
    "is_payment_enabled",
    "last_ad_referral",
)

# Timeout for Facebook Graph API calls made by the default transport (seconds)
FACEBOOK_API_TIMEOUT_SECONDS = 10.0

# =============================================================================
# Webhook
# =============================================================================

MODE_REQUEST_PARAM_NAME = "hub.mode"
CHALLENGE_REQUEST_PARAM_NAME = "hub.challenge"
VERIFY_TOKEN_REQUEST_PARAM_NAME = "hub.verify_token"

SIGNATURE_HEADER_NAME = "X-Hub-Signature"

# Only page subscriptions deliver messaging events
OBJECT_TYPE_PAGE = "page"

HUB_MODE_SUBSCRIBE = "subscribe"

# Scheme token of the X-Hub-Signature header value
SIGNATURE_SCHEME = "sha1"

EMPTY_RESPONSE_MESSAGE = "The response JSON does not contain any key/value pair"
