"""Typed resource records for the gateway.

Every record here is an immutable snapshot built fresh from a GET
response. Nothing is cached between requests.

Percentage-like fields stay on the gateway's native integer scale
(dimmer 0-255, battery 0-100); only the commands module converts user
percentages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Generic, TypeVar

from .const import DIMMER_MAX

T = TypeVar("T")


class PowerSource(IntEnum):
    """Power source reported in the device info block."""

    INTERNAL_BATTERY = 1
    EXTERNAL_BATTERY = 2
    BATTERY = 3
    POWER_OVER_ETHERNET = 4
    USB = 5
    MAINS = 6
    SOLAR = 7


POWER_SOURCE_LABELS = {
    PowerSource.INTERNAL_BATTERY: "internal battery",
    PowerSource.EXTERNAL_BATTERY: "external battery",
    PowerSource.BATTERY: "battery",
    PowerSource.POWER_OVER_ETHERNET: "power over ethernet",
    PowerSource.USB: "USB",
    PowerSource.MAINS: "mains",
    PowerSource.SOLAR: "solar",
}


@dataclass(frozen=True)
class Setting(Generic[T]):
    """A writable field that is either explicitly set or left untouched.

    Distinguishes "not provided" from "provided with a zero value" so a
    partial update only carries the fields the caller asked for.

    Example:
        Setting.of(0)   # set, value 0 -> encoded
        Setting()       # not set      -> omitted
    """

    is_set: bool = False
    value: T | None = None

    @classmethod
    def of(cls, value: T) -> "Setting[T]":
        """Create a set field holding value."""
        return cls(is_set=True, value=value)

    def get(self) -> T:
        """Return the value, raising ValueError if the field is not set."""
        if not self.is_set:
            raise ValueError("Setting has no value")
        return self.value  # type: ignore[return-value]


@dataclass(frozen=True)
class Credentials:
    """Username/pre-shared-key pair issued by the gateway during bootstrap."""

    username: str
    psk: str


@dataclass(frozen=True)
class Resource:
    """Header shared by devices and groups."""

    name: str = ""
    created_at: int = 0  # Unix seconds
    id: int = 0


@dataclass(frozen=True)
class DeviceInfo:
    """Nested device info block."""

    manufacturer: str = ""
    model: str = ""
    serial: str = ""
    firmware: str = ""
    power_source: int = 0
    battery_level: int = 0  # 0-100

    @property
    def power_source_label(self) -> str:
        """Return a human readable power source."""
        return describe_power_source(self.power_source)


@dataclass(frozen=True)
class LightControl:
    """One controllable light channel of a device."""

    state: bool = False
    dimmer: int = 0  # 0-255
    color_hex: str = ""
    color_x: int = 0
    color_y: int = 0
    mireds: int = 0  # 250-454
    reserved: int = 0  # round-tripped, not interpreted


@dataclass(frozen=True)
class Device(Resource):
    """A device snapshot, with zero or more light channels."""

    device_info: DeviceInfo = field(default_factory=DeviceInfo)
    last_seen: int = 0  # Unix seconds
    reachable: bool = False
    light_controls: tuple[LightControl, ...] = ()

    def short(self) -> str:
        """Return a one-line summary."""
        return f"{self.id}: {self.name} ({self.device_info.model})"

    def describe(self, now: datetime | None = None) -> str:
        """Return a multi-line description."""
        info = self.device_info
        lines = [
            f"Name: {self.name}",
            f"Created at: {format_timestamp(self.created_at, now)}",
            f"ID: {self.id}",
            f"Manufacturer: {info.manufacturer}",
            f"Model: {info.model}",
            f"Serial: {info.serial}",
            f"Firmware: {info.firmware}",
            f"Power source: {info.power_source_label}",
            f"Battery level: {info.battery_level}%",
            f"Last seen: {format_timestamp(self.last_seen, now)}",
            f"Reachable: {format_yes_no(self.reachable)}",
            f"Light control count: {len(self.light_controls)}",
        ]
        for i, control in enumerate(self.light_controls, start=1):
            prefix = f"Light control {i}:"
            lines.extend(
                [
                    f"{prefix} State: {format_on_off(control.state)}",
                    f"{prefix} Dimmer: {format_dimmer(control.dimmer)}",
                    f"{prefix} Light color (hex): {control.color_hex}",
                    f"{prefix} Light color (X): {control.color_x}",
                    f"{prefix} Light color (Y): {control.color_y}",
                    f"{prefix} Light mireds: {control.mireds}",
                ]
            )
        return "\n".join(lines)


@dataclass(frozen=True)
class Group(Resource):
    """A group snapshot with aggregate light state and member IDs."""

    state: bool = False
    dimmer: int = 0  # 0-255
    color_hex: str = ""
    mood_id: int = 0
    member_ids: tuple[int, ...] = ()  # order preserved as read

    def short(self) -> str:
        """Return a one-line summary."""
        count = len(self.member_ids)
        plural = "" if count == 1 else "s"
        return (
            f"{self.id}: {self.name} ({format_on_off(self.state)})"
            f" - {count} member{plural}"
        )

    def describe(self, now: datetime | None = None) -> str:
        """Return a multi-line description."""
        lines = [
            f"Name: {self.name}",
            f"Created at: {format_timestamp(self.created_at, now)}",
            f"ID: {self.id}",
            f"State: {format_on_off(self.state)}",
            f"Dimmer: {format_dimmer(self.dimmer)}",
            f"Light color: {self.color_hex}",
            f"Mood ID: {self.mood_id}",
            f"Member count: {len(self.member_ids)}",
        ]
        lines.extend(
            f"Member {i}: {member}"
            for i, member in enumerate(self.member_ids, start=1)
        )
        return "\n".join(lines)


@dataclass(frozen=True)
class LightControlUpdate:
    """Partial light control write.

    Only fields wrapped with Setting.of() are sent to the gateway.
    transition is in tenths of a second.
    """

    state: Setting[bool] = field(default_factory=Setting)
    dimmer: Setting[int] = field(default_factory=Setting)
    color_hex: Setting[str] = field(default_factory=Setting)
    color_x: Setting[int] = field(default_factory=Setting)
    color_y: Setting[int] = field(default_factory=Setting)
    mireds: Setting[int] = field(default_factory=Setting)
    transition: Setting[int] = field(default_factory=Setting)


@dataclass(frozen=True)
class AuthResponse:
    """Gateway reply to the bootstrap write."""

    psk: str = ""
    firmware_version: str = ""


# =============================================================================
# Display helpers
# =============================================================================


def describe_power_source(value: int) -> str:
    """Return a label for a raw power source value."""
    try:
        return POWER_SOURCE_LABELS[PowerSource(value)]
    except ValueError:
        return f"unknown power source ({value})"


def format_on_off(state: bool) -> str:
    return "on" if state else "off"


def format_yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def format_dimmer(dimmer: int) -> str:
    """Render a 0-255 dimmer as a truncated percentage."""
    return f"{100 * dimmer // DIMMER_MAX}%"


def format_elapsed(seconds: float) -> str:
    """Render elapsed seconds as a coarse duration.

    Examples:
        90000 -> "1d"
        7200 -> "2h"
        150 -> "2m"
        42.7 -> "42s"
    """
    seconds = int(seconds)
    if seconds > 86400:
        return f"{seconds // 86400}d"
    if seconds > 3600:
        return f"{seconds // 3600}h"
    if seconds > 60:
        return f"{seconds // 60}m"
    return f"{seconds}s"


def format_timestamp(timestamp: int, now: datetime | None = None) -> str:
    """Render a Unix timestamp with how long ago it was.

    Timestamps outside the platform's datetime range are shown as raw numbers.
    """
    try:
        moment = datetime.fromtimestamp(timestamp).astimezone()
    except (OverflowError, OSError, ValueError):
        return str(timestamp)
    now = now or datetime.now()
    elapsed = now.timestamp() - timestamp
    return f"{moment.strftime('%a %b %d %H:%M:%S %z %Y')} ({format_elapsed(elapsed)} ago)"
