"""User-facing light commands.

This module maps user intents onto single wire writes:
- on/off -> state write
- brightness 0-100 percent -> dimmer 0-255
- warmth 0-100 (0 = warm/red, 100 = cool/white) -> mireds 454-250

Out-of-range percentages are clamped to 0-100, not rejected. A caller
passing 150 gets 100 silently, which can hide a bug upstream.

Each intent is exactly one write. Setting brightness and warmth together
takes two calls; there is no atomic multi-field update.
"""

from __future__ import annotations

import math
from datetime import timedelta

from .client import ResourceClient
from .const import DIMMER_MAX, MIREDS_MAX, MIREDS_MIN

MIREDS_SPAN = MIREDS_MAX - MIREDS_MIN


def clamp_percent(value: float) -> float:
    """Clamp value into 0-100.

    Raises:
        ValueError: If value is NaN
    """
    if math.isnan(value):
        raise ValueError("percentage is not a number")
    return min(max(value, 0), 100)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


# =============================================================================
# Unit conversion
# =============================================================================


def percent_to_dimmer(level: float) -> int:
    """Convert a brightness percentage to a dimmer byte.

    Examples:
        0 -> 0
        50 -> 128
        100 -> 255
        -5 -> 0 (clamped)
    """
    return _round_half_up(clamp_percent(level) * DIMMER_MAX / 100)


def warmth_to_mireds(warmth: float) -> int:
    """Convert a warmth percentage to mireds.

    Examples:
        0 -> 454 (warmest)
        50 -> 352
        100 -> 250 (coolest)
    """
    red = 100 - clamp_percent(warmth)
    return MIREDS_MIN + _round_half_up(red * MIREDS_SPAN / 100)


# =============================================================================
# Light commands
# =============================================================================


async def set_state(client: ResourceClient, root: int, resource_id: int, on: bool) -> None:
    """Turn a device or group light on or off."""
    await client.set_light_state(root, resource_id, on)


async def set_level(
    client: ResourceClient,
    root: int,
    resource_id: int,
    level: float,
    transition: timedelta = timedelta(0),
) -> None:
    """Set brightness of a device or group light.

    Args:
        client: Resource client on an open session
        root: Root.DEVICES or Root.GROUPS
        resource_id: Device or group ID
        level: Brightness 0-100 percent, clamped
        transition: Fade duration
    """
    await client.set_light_dimmer(
        root, resource_id, percent_to_dimmer(level), transition
    )


async def set_warmth(
    client: ResourceClient,
    root: int,
    resource_id: int,
    warmth: float,
    transition: timedelta = timedelta(0),
) -> None:
    """Set white spectrum warmth of a device or group light.

    Args:
        client: Resource client on an open session
        root: Root.DEVICES or Root.GROUPS
        resource_id: Device or group ID
        warmth: 0 (warm/red) to 100 (cool/white), clamped
        transition: Fade duration
    """
    await client.set_light_color_temperature(
        root, resource_id, warmth_to_mireds(warmth), transition
    )
