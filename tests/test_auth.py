"""Tests for the credential bootstrap."""

import pytest

from lightctl import bootstrap
from lightctl.auth import request_psk
from lightctl.exceptions import AuthenticationRejected, MalformedPayload, TransportFailure

from .fake_gateway import BAD_REQUEST, UNAUTHORIZED, FakeDialer, FakeGateway

SETUP_CODE = "ABCD1234EFGH5678"


@pytest.fixture
def auth_gateway():
    gw = FakeGateway()
    gw.set_post_reply("/15011/9063", {"9091": "mK3bdW8qKx1s2Zpn", "9029": "1.10.36"})
    return gw


class TestBootstrap:
    """Tests for bootstrap()."""

    @pytest.mark.asyncio
    async def test_returns_issued_psk(self, auth_gateway):
        dialer = FakeDialer(auth_gateway)

        psk = await bootstrap("coaps://10.0.1.11", "lightctl", SETUP_CODE, dialer=dialer)

        assert psk == "mK3bdW8qKx1s2Zpn"

    @pytest.mark.asyncio
    async def test_dials_with_fixed_identity_and_setup_code(self, auth_gateway):
        dialer = FakeDialer(auth_gateway)

        await bootstrap("coaps://10.0.1.11", "lightctl", SETUP_CODE, 5.0, dialer=dialer)

        assert dialer.calls == [("coaps://10.0.1.11", "Client_identity", SETUP_CODE, 5.0)]

    @pytest.mark.asyncio
    async def test_single_write_with_username(self, auth_gateway):
        await bootstrap("gw", "lightctl", SETUP_CODE, dialer=FakeDialer(auth_gateway))

        assert auth_gateway.paths == ["/15011/9063"]
        assert auth_gateway.requests[0][0] == "POST"
        assert auth_gateway.written() == {"9090": "lightctl"}

    @pytest.mark.asyncio
    async def test_session_closed(self, auth_gateway):
        await bootstrap("gw", "lightctl", SETUP_CODE, dialer=FakeDialer(auth_gateway))
        assert auth_gateway.closed

    @pytest.mark.asyncio
    async def test_rejected_not_retried(self, auth_gateway):
        auth_gateway.set_post_reply("/15011/9063", None, code=UNAUTHORIZED)

        with pytest.raises(AuthenticationRejected) as exc_info:
            await bootstrap("gw", "lightctl", SETUP_CODE, dialer=FakeDialer(auth_gateway))

        assert exc_info.value.code == UNAUTHORIZED
        assert len(auth_gateway.requests) == 1
        assert auth_gateway.closed

    @pytest.mark.asyncio
    async def test_success_without_key_is_malformed(self, auth_gateway):
        auth_gateway.set_post_reply("/15011/9063", {"9029": "1.10.36"})

        with pytest.raises(MalformedPayload) as exc_info:
            await bootstrap("gw", "lightctl", SETUP_CODE, dialer=FakeDialer(auth_gateway))

        assert exc_info.value.path == "/15011/9063"
        assert "9091" in exc_info.value.expected
        assert auth_gateway.closed

    @pytest.mark.asyncio
    async def test_transport_failure_propagates(self, auth_gateway):
        auth_gateway.fail("/15011/9063", TransportFailure("handshake failed"))

        with pytest.raises(TransportFailure):
            await bootstrap("gw", "lightctl", SETUP_CODE, dialer=FakeDialer(auth_gateway))

        assert len(auth_gateway.requests) == 1
        assert auth_gateway.closed


class TestRequestPsk:
    """Tests for request_psk()."""

    @pytest.mark.asyncio
    async def test_firmware_version_reported(self, auth_gateway):
        result = await request_psk(auth_gateway, "lightctl")
        assert result.firmware_version == "1.10.36"

    @pytest.mark.asyncio
    async def test_bad_request(self):
        gw = FakeGateway()
        gw.set_post_reply("/15011/9063", None, code=BAD_REQUEST)

        with pytest.raises(AuthenticationRejected) as exc_info:
            await request_psk(gw, "lightctl")

        assert "4.00" in str(exc_info.value)
