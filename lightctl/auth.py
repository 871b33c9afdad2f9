"""Credential bootstrap.

Trades the setup code printed on the gateway for a durable pre-shared
key bound to a username of the caller's choice. The exchange runs once
and is never retried: the setup code is short-lived, and repeated
attempts can lock the gateway out.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol

from . import codec
from .const import AUTH_IDENTITY, AUTH_PATH, CONTENT_FORMAT_JSON, DEFAULT_TIMEOUT, is_failure
from .exceptions import AuthenticationRejected, MalformedPayload
from .models import AuthResponse
from .transport import Response, dial


class BootstrapSession(Protocol):
    """What bootstrap needs from a transport session."""

    async def post(self, path: str, content_format: int, payload: bytes) -> Response:
        ...

    async def close(self) -> None:
        ...


Dialer = Callable[[str, str, str, float], Awaitable[BootstrapSession]]


async def request_psk(session: BootstrapSession, username: str) -> AuthResponse:
    """Submit username on a session keyed with the setup code.

    Raises:
        AuthenticationRejected: If the gateway answers with a failure code
        MalformedPayload: If the reply cannot be decoded or carries no key
    """
    response = await session.post(
        AUTH_PATH, CONTENT_FORMAT_JSON, codec.encode_auth_request(username)
    )
    if is_failure(response.code):
        raise AuthenticationRejected(AUTH_PATH, response.code)
    result = codec.decode_auth_response(AUTH_PATH, response.payload)
    if not result.psk:
        raise MalformedPayload(AUTH_PATH, "string at key 9091", "no key")
    return result


async def bootstrap(
    gateway: str,
    username: str,
    setup_code: str,
    timeout: float = DEFAULT_TIMEOUT,
    dialer: Dialer = dial,
) -> str:
    """Obtain a pre-shared key for username.

    Args:
        gateway: Gateway address
        username: Username of the caller's choice
        setup_code: Security code printed on the gateway
        timeout: Per-request timeout in seconds
        dialer: Session factory, dial() unless substituted

    Returns:
        The gateway-issued pre-shared key

    Raises:
        TransportFailure: If the session cannot be dialed or the request fails
        AuthenticationRejected: If the gateway refuses the exchange
    """
    session = await dialer(gateway, AUTH_IDENTITY, setup_code, timeout)
    try:
        result = await request_psk(session, username)
    finally:
        await session.close()
    return result.psk
