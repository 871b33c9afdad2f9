"""Constants for the lightctl gateway client."""

from __future__ import annotations

from enum import IntEnum


class Root(IntEnum):
    """Collection roots exposed by the gateway."""

    DEVICES = 15001
    GROUPS = 15004
    GATEWAY = 15011


# Authentication endpoint (gateway root / auth resource)
AUTH_PATH = f"/{int(Root.GATEWAY)}/9063"
AUTH_IDENTITY = "Client_identity"

# Transport defaults
DEFAULT_GATEWAY = "coaps://10.0.1.11:5684"
DEFAULT_PORT = 5684
DEFAULT_TIMEOUT = 3.0

# CoAP content format for application/json
CONTENT_FORMAT_JSON = 50

# Codes above this are failures (2.xx success lives below it)
FAILURE_THRESHOLD = 100
CODE_NOT_FOUND = 132  # 4.04

# Wire ranges
DIMMER_MAX = 255
MIREDS_MIN = 250  # cool white
MIREDS_MAX = 454  # warm white

# =============================================================================
# Numeric field identifiers
# =============================================================================

# Resource header
KEY_NAME = "9001"
KEY_CREATED_AT = "9002"
KEY_ID = "9003"

# Device
KEY_DEVICE_INFO = "3"
KEY_REACHABLE = "9019"
KEY_LAST_SEEN = "9020"
KEY_LIGHT_CONTROL = "3311"

# Device info block
KEY_MANUFACTURER = "0"
KEY_MODEL = "1"
KEY_SERIAL = "2"
KEY_FIRMWARE = "3"
KEY_POWER_SOURCE = "6"
KEY_BATTERY_LEVEL = "9"

# Light control
KEY_COLOR_HEX = "5706"
KEY_COLOR_X = "5709"
KEY_COLOR_Y = "5710"
KEY_MIREDS = "5711"
KEY_TRANSITION = "5712"
KEY_RESERVED = "5717"
KEY_STATE = "5850"
KEY_DIMMER = "5851"

# Group
KEY_GROUP_MEMBERS = "9018"
KEY_MOOD_ID = "9039"
KEY_HS_LINK = "15002"

# Authentication
KEY_USERNAME = "9090"
KEY_PSK = "9091"
KEY_GATEWAY_FIRMWARE = "9029"


def format_code(code: int) -> str:
    """Render a numeric response code in dotted class.detail form.

    Examples:
        69 -> "2.05"
        132 -> "4.04"
    """
    return f"{code >> 5}.{code & 0x1F:02d}"


def is_failure(code: int) -> bool:
    """Return True if the response code signals failure."""
    return code > FAILURE_THRESHOLD
