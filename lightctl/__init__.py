"""lightctl - Async client for IKEA TRÅDFRI-style lighting gateways.

The gateway speaks CoAP over DTLS-PSK with JSON payloads keyed by
numeric identifiers. This package provides a typed interface on top.

Main components:
- bootstrap: Trade the gateway's setup code for a durable pre-shared key
- ResourceClient: Get/list/set devices and groups over one session
- commands: Percentage and warmth intents mapped to wire writes
- codec: Numeric-key field tables for decoding and encoding payloads

Example:
    from lightctl import ResourceClient, Root, commands, dial

    async with await dial(gateway, creds.username, creds.psk) as session:
        client = ResourceClient(session)
        await commands.set_level(client, Root.GROUPS, 131073, 75)
"""

from .auth import bootstrap
from .client import ResourceClient, resource_path
from .const import Root
from .exceptions import (
    AuthenticationRejected,
    ConfigError,
    LightctlException,
    MalformedPayload,
    RequestFailed,
    ResourceNotFound,
    TransportFailure,
    TransportTimeout,
    WriteRejected,
)
from .models import (
    AuthResponse,
    Credentials,
    Device,
    DeviceInfo,
    Group,
    LightControl,
    LightControlUpdate,
    PowerSource,
    Resource,
    Setting,
)
from .transport import CoapSession, Response, dial

__all__ = [
    # Client
    "bootstrap",
    "CoapSession",
    "dial",
    "resource_path",
    "ResourceClient",
    "Response",
    "Root",
    # Models
    "AuthResponse",
    "Credentials",
    "Device",
    "DeviceInfo",
    "Group",
    "LightControl",
    "LightControlUpdate",
    "PowerSource",
    "Resource",
    "Setting",
    # Exceptions
    "AuthenticationRejected",
    "ConfigError",
    "LightctlException",
    "MalformedPayload",
    "RequestFailed",
    "ResourceNotFound",
    "TransportFailure",
    "TransportTimeout",
    "WriteRejected",
]
