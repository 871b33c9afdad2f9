"""Resource client for the gateway.

This module provides:
- Addressed GET of single devices and groups
- Collection listing with sequential per-ID fetches
- Partial light control writes for devices and groups

Each method is a single request/response (list methods: one per ID)
over an already authenticated session. Nothing is cached, retried or
read back after a write.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Awaitable, Callable, Protocol, TypeVar

from . import codec
from .const import CODE_NOT_FOUND, CONTENT_FORMAT_JSON, Root, is_failure
from .exceptions import RequestFailed, ResourceNotFound, WriteRejected
from .models import Device, Group, LightControlUpdate, Setting
from .transport import Response

R = TypeVar("R")


class Session(Protocol):
    """What the client needs from a transport session."""

    async def get(self, path: str) -> Response:
        ...

    async def put(self, path: str, content_format: int, payload: bytes) -> Response:
        ...


def resource_path(root: int, resource_id: int | None = None) -> str:
    """Build an addressed path.

    Examples:
        resource_path(Root.DEVICES) -> "/15001"
        resource_path(Root.GROUPS, 131073) -> "/15004/131073"
    """
    if resource_id is None:
        return f"/{int(root)}"
    return f"/{int(root)}/{resource_id}"


class ResourceClient:
    """Typed read/write operations against one gateway session.

    Example:
        async with await dial(gateway, creds.username, creds.psk) as session:
            client = ResourceClient(session)
            for device in await client.list_devices():
                print(device.short())
    """

    def __init__(self, session: Session) -> None:
        """Initialize client.

        Args:
            session: An open, authenticated transport session
        """
        self._session = session

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_device(self, device_id: int) -> Device:
        """Fetch one device.

        Raises:
            ResourceNotFound: If the gateway has no such device
            TransportFailure: On channel errors or timeout
            MalformedPayload: If the reply cannot be decoded
        """
        path = resource_path(Root.DEVICES, device_id)
        return codec.decode_device(path, await self._get(path))

    async def get_group(self, group_id: int) -> Group:
        """Fetch one group.

        Raises:
            ResourceNotFound: If the gateway has no such group
            TransportFailure: On channel errors or timeout
            MalformedPayload: If the reply cannot be decoded
        """
        path = resource_path(Root.GROUPS, group_id)
        return codec.decode_group(path, await self._get(path))

    async def list_device_ids(self) -> list[int]:
        """Return device IDs in listing order."""
        return await self._list_ids(Root.DEVICES)

    async def list_group_ids(self) -> list[int]:
        """Return group IDs in listing order."""
        return await self._list_ids(Root.GROUPS)

    async def list_devices(self) -> list[Device]:
        """Fetch every device, one request per ID, in listing order.

        Fails as a whole if any single fetch fails.
        """
        return await self._fetch_each(await self.list_device_ids(), self.get_device)

    async def list_groups(self) -> list[Group]:
        """Fetch every group, one request per ID, in listing order.

        Fails as a whole if any single fetch fails.
        """
        return await self._fetch_each(await self.list_group_ids(), self.get_group)

    async def get_raw(self, path: str) -> bytes:
        """Fetch the undecoded payload at path."""
        return await self._get(path)

    # =========================================================================
    # Writes
    # =========================================================================

    async def set_light_state(self, root: int, resource_id: int, on: bool) -> None:
        """Turn a device or group light on or off.

        Args:
            root: Root.DEVICES or Root.GROUPS
            resource_id: Device or group ID
            on: Target state
        """
        await self.update_light_control(
            root, resource_id, LightControlUpdate(state=Setting.of(on))
        )

    async def set_light_dimmer(
        self,
        root: int,
        resource_id: int,
        dimmer: int,
        transition: timedelta = timedelta(0),
    ) -> None:
        """Set the dimmer of a device or group light.

        Args:
            root: Root.DEVICES or Root.GROUPS
            resource_id: Device or group ID
            dimmer: Level 0-255
            transition: Fade duration, truncated to tenths of a second
        """
        await self.update_light_control(
            root,
            resource_id,
            LightControlUpdate(
                dimmer=Setting.of(dimmer),
                transition=Setting.of(codec.transition_tenths(transition)),
            ),
        )

    async def set_light_color_temperature(
        self,
        root: int,
        resource_id: int,
        mireds: int,
        transition: timedelta = timedelta(0),
    ) -> None:
        """Set the white spectrum color temperature of a device or group light.

        Args:
            root: Root.DEVICES or Root.GROUPS
            resource_id: Device or group ID
            mireds: Color temperature 250-454
            transition: Fade duration, truncated to tenths of a second
        """
        await self.update_light_control(
            root,
            resource_id,
            LightControlUpdate(
                mireds=Setting.of(mireds),
                transition=Setting.of(codec.transition_tenths(transition)),
            ),
        )

    async def update_light_control(
        self, root: int, resource_id: int, update: LightControlUpdate
    ) -> None:
        """PUT a partial light control update.

        Raises:
            WriteRejected: If the gateway answers with a failure code
            TransportFailure: On channel errors or timeout
        """
        path = resource_path(root, resource_id)
        response = await self._session.put(
            path, CONTENT_FORMAT_JSON, codec.encode_update(update)
        )
        if is_failure(response.code):
            raise WriteRejected(path, response.code)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _get(self, path: str) -> bytes:
        response = await self._session.get(path)
        if response.code == CODE_NOT_FOUND:
            raise ResourceNotFound(path, response.code)
        if is_failure(response.code):
            raise RequestFailed(path, response.code)
        return response.payload

    async def _list_ids(self, root: int) -> list[int]:
        path = resource_path(root)
        return codec.decode_id_list(path, await self._get(path))

    @staticmethod
    async def _fetch_each(
        ids: list[int], fetch: Callable[[int], Awaitable[R]]
    ) -> list[R]:
        # One in-flight request at a time, in listing order
        results = []
        for resource_id in ids:
            results.append(await fetch(resource_id))
        return results
