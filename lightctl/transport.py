"""Secured datagram transport to the gateway.

This module handles:
- DTLS-PSK session setup (via aiocoap's tinydtls transport)
- Addressed GET/PUT/POST requests with a bounded timeout
- Mapping channel errors to TransportFailure

No payload decoding here - just (code, bytes) in/out.
"""

from __future__ import annotations

import asyncio
import logging
from typing import NamedTuple
from urllib.parse import urlsplit

from aiocoap import GET, POST, PUT, Context, Message
from aiocoap.error import Error as CoapError

from .const import DEFAULT_PORT, DEFAULT_TIMEOUT, format_code
from .exceptions import TransportFailure, TransportTimeout

_LOGGER = logging.getLogger(__name__)

# Schemes accepted for the gateway address
SECURE_SCHEMES = frozenset({"coaps", "udp"})


class Response(NamedTuple):
    """A response from the gateway."""

    code: int
    payload: bytes


def parse_gateway(address: str) -> tuple[str, int]:
    """Parse a gateway address into (host, port).

    Accepts "coaps://host:port", "udp://host:port" or a bare "host[:port]".

    Raises:
        ValueError: If the scheme is not supported or no host is given
    """
    if "://" not in address:
        address = f"coaps://{address}"
    parts = urlsplit(address)
    if parts.scheme not in SECURE_SCHEMES:
        raise ValueError(f"Unsupported gateway scheme: {parts.scheme}")
    if not parts.hostname:
        raise ValueError(f"Gateway address has no host: {address}")
    return parts.hostname, parts.port or DEFAULT_PORT


class CoapSession:
    """One authenticated session with a gateway.

    Requests are issued one at a time; callers await each before sending
    the next. There is no retry: a failed or timed out request raises and
    the operation ends.

    Example:
        async with await dial("coaps://10.0.1.11", "user", "psk") as session:
            response = await session.get("/15001")
    """

    def __init__(
        self,
        context: Context,
        host: str,
        port: int,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize session.

        Args:
            context: aiocoap client context
            host: Gateway hostname or IP
            port: Gateway DTLS port
            timeout: Per-request timeout in seconds
        """
        self._context = context
        self._host = host
        self._port = port
        self._timeout = timeout

    def _uri(self, path: str) -> str:
        host = f"[{self._host}]" if ":" in self._host else self._host
        return f"coaps://{host}:{self._port}{path}"

    def load_psk(self, identity: str, psk: str) -> None:
        """Register DTLS-PSK credentials for every path on the gateway."""
        self._context.client_credentials.load_from_dict(
            {
                self._uri("/*"): {
                    "dtls": {
                        "psk": psk.encode("utf-8"),
                        "client-identity": identity.encode("utf-8"),
                    }
                }
            }
        )

    async def get(self, path: str) -> Response:
        """Issue a GET."""
        return await self._request(Message(code=GET, uri=self._uri(path)), path)

    async def put(self, path: str, content_format: int, payload: bytes) -> Response:
        """Issue a PUT with payload."""
        message = Message(
            code=PUT,
            uri=self._uri(path),
            payload=payload,
            content_format=content_format,
        )
        return await self._request(message, path)

    async def post(self, path: str, content_format: int, payload: bytes) -> Response:
        """Issue a POST with payload."""
        message = Message(
            code=POST,
            uri=self._uri(path),
            payload=payload,
            content_format=content_format,
        )
        return await self._request(message, path)

    async def _request(self, message: Message, path: str) -> Response:
        _LOGGER.debug("%s %s: %s", message.code, path, message.payload)
        try:
            reply = await asyncio.wait_for(
                self._context.request(message).response,
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as err:
            raise TransportTimeout(
                f"no response within {self._timeout:g}s", path
            ) from err
        except (CoapError, OSError) as err:
            raise TransportFailure(f"request failed: {err}", path) from err

        code = int(reply.code)
        _LOGGER.debug("%s %s -> %s: %s", message.code, path, format_code(code), reply.payload)
        return Response(code, reply.payload)

    async def close(self) -> None:
        """Shut down the client context."""
        await self._context.shutdown()
        _LOGGER.debug("Session to %s:%s closed", self._host, self._port)

    async def __aenter__(self) -> "CoapSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


async def dial(
    address: str,
    identity: str,
    psk: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> CoapSession:
    """Open a DTLS-PSK session to a gateway.

    Args:
        address: Gateway address, e.g. "coaps://10.0.1.11:5684"
        identity: PSK identity (username, or the fixed bootstrap identity)
        psk: Pre-shared key
        timeout: Per-request timeout in seconds

    Returns:
        A session ready for requests

    Raises:
        TransportFailure: If the address is invalid or the context fails
    """
    try:
        host, port = parse_gateway(address)
    except ValueError as err:
        raise TransportFailure(str(err)) from err

    try:
        context = await Context.create_client_context()
    except (CoapError, OSError) as err:
        raise TransportFailure(f"failed to create client context: {err}") from err

    session = CoapSession(context, host, port, timeout)
    session.load_psk(identity, psk)
    _LOGGER.info("Dialing %s:%s as %s", host, port, identity)
    return session
