"""Centralized constants for the registry.

Sentinel identities and fixed formats live here to avoid string literals
scattered across modules.
"""

# Management principal text form. Marks burned tokens and is rejected as a
# safe-transfer target.
ZERO_PRINCIPAL = "aaaaa-aa"

# Fixed format for mint window bounds (always UTC)
MINT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Method invoked on the recipient after transfer_from_notify
NOTIFY_METHOD = "onDIP721Received"

# metadata locationType tag for "URI"
LOCATION_TYPE_URI = 3

DEFAULT_LOGO_TYPE = "image/png"
# 1x1 transparent PNG
DEFAULT_LOGO_DATA = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)
