"""Pytest configuration for lightctl tests."""

import pytest

from .fake_gateway import BULB, GROUP, PANEL, FakeGateway


@pytest.fixture
def gateway():
    """An in-memory gateway with one bulb, one panel and one group."""
    gw = FakeGateway()
    gw.add_json("/15001", [65537, 65540])
    gw.add_json("/15001/65537", BULB)
    gw.add_json("/15001/65540", PANEL)
    gw.add_json("/15004", [131073])
    gw.add_json("/15004/131073", GROUP)
    return gw
