"""Fake gateway session for testing."""

from __future__ import annotations

import json
from typing import Any

from lightctl.transport import Response

CONTENT = 69  # 2.05
CHANGED = 68  # 2.04
CREATED = 65  # 2.01
BAD_REQUEST = 128  # 4.00
UNAUTHORIZED = 129  # 4.01
NOT_FOUND = 132  # 4.04


class FakeGateway:
    """An in-memory stand-in for a CoapSession.

    Simulates:
    - GET responses from a path -> (code, payload) table
    - PUT/POST responses with a configurable code
    - A request log for asserting order and payloads
    """

    def __init__(self) -> None:
        """Initialize the fake gateway."""
        self._resources: dict[str, Response] = {}
        self._write_codes: dict[str, int] = {}
        self._post_replies: dict[str, Response] = {}
        self._errors: dict[str, Exception] = {}
        self.requests: list[tuple[str, str, bytes | None]] = []
        self.closed = False

    def add_json(self, path: str, data: Any, code: int = CONTENT) -> None:
        """Serve data as JSON at path."""
        self._resources[path] = Response(code, json.dumps(data).encode())

    def add_raw(self, path: str, payload: bytes, code: int = CONTENT) -> None:
        """Serve raw bytes at path."""
        self._resources[path] = Response(code, payload)

    def fail(self, path: str, error: Exception) -> None:
        """Raise error for any request to path."""
        self._errors[path] = error

    def set_write_code(self, path: str, code: int) -> None:
        """Answer PUTs to path with code."""
        self._write_codes[path] = code

    def set_post_reply(self, path: str, data: Any, code: int = CREATED) -> None:
        """Answer POSTs to path with code and JSON data."""
        payload = json.dumps(data).encode() if data is not None else b""
        self._post_replies[path] = Response(code, payload)

    @property
    def paths(self) -> list[str]:
        """Return requested paths in order."""
        return [path for _, path, _ in self.requests]

    def written(self, index: int = -1) -> dict[str, Any]:
        """Return the decoded payload of a logged write."""
        return json.loads(self.requests[index][2])

    async def get(self, path: str) -> Response:
        self.requests.append(("GET", path, None))
        if path in self._errors:
            raise self._errors[path]
        return self._resources.get(path, Response(NOT_FOUND, b""))

    async def put(self, path: str, content_format: int, payload: bytes) -> Response:
        self.requests.append(("PUT", path, payload))
        if path in self._errors:
            raise self._errors[path]
        return Response(self._write_codes.get(path, CHANGED), b"")

    async def post(self, path: str, content_format: int, payload: bytes) -> Response:
        self.requests.append(("POST", path, payload))
        if path in self._errors:
            raise self._errors[path]
        return self._post_replies.get(path, Response(BAD_REQUEST, b""))

    async def close(self) -> None:
        self.closed = True


class FakeDialer:
    """Records dial arguments and hands out a FakeGateway."""

    def __init__(self, gateway: FakeGateway) -> None:
        self.gateway = gateway
        self.calls: list[tuple[str, str, str, float]] = []

    async def __call__(
        self, address: str, identity: str, psk: str, timeout: float = 3.0
    ) -> FakeGateway:
        self.calls.append((address, identity, psk, timeout))
        return self.gateway


# =============================================================================
# Sample payloads captured from a gateway
# =============================================================================

BULB = {
    "9001": "Desk lamp",
    "9002": 1580000000,
    "9003": 65537,
    "9019": 1,
    "9020": 1580003600,
    "9054": 0,
    "3": {
        "0": "IKEA of Sweden",
        "1": "TRADFRI bulb E27 WS opal 980lm",
        "2": "",
        "3": "2.3.050",
        "6": 1,
    },
    "3311": [
        {
            "5706": "f1e0b5",
            "5709": 30138,
            "5710": 26909,
            "5711": 370,
            "5717": 0,
            "5850": 1,
            "5851": 203,
            "9003": 0,
        }
    ],
}

PANEL = {
    "9001": "Hall panel",
    "9002": 1580000100,
    "9003": 65540,
    "9019": 0,
    "3": {"0": "IKEA of Sweden", "1": "FLOALT panel WS 30x30", "6": 6},
    "3311": [{"5850": 0, "5851": 0}],
}

GROUP = {
    "9001": "Living room",
    "9002": 1580000200,
    "9003": 131073,
    "5850": 1,
    "5851": 128,
    "9039": 196608,
    "9018": {"15002": {"9003": [65540, 65537]}},
}
