"""Numeric-key codec for gateway payloads.

The gateway speaks JSON objects keyed by decimal-string identifiers
("9001" is a name, "5850" an on/off state). This module maps those keys
to typed records through declarative field tables:

    FieldSpec(key, attr, decode, encode)

Decoding is lenient: unknown keys are ignored and missing keys keep the
record's zero value. A value of the wrong shape fails the whole decode
with MalformedPayload; nothing is partially applied.

Encoding emits only the fields of a LightControlUpdate that are set.
"""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Any, Callable, NamedTuple, TypeVar

from . import const
from .exceptions import MalformedPayload
from .models import (
    AuthResponse,
    Device,
    DeviceInfo,
    Group,
    LightControl,
    LightControlUpdate,
)

R = TypeVar("R")

TRANSITION_UNIT = timedelta(milliseconds=100)


class _ShapeError(ValueError):
    """A value did not have the expected JSON shape."""

    def __init__(self, expected: str, observed: str) -> None:
        super().__init__(expected, observed)
        self.expected = expected
        self.observed = observed


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


# =============================================================================
# Value parsers
# =============================================================================


def _p_str(arg: Any) -> str:
    if not isinstance(arg, str):
        raise _ShapeError("string", _json_type(arg))
    return arg


def _p_int(arg: Any) -> int:
    if isinstance(arg, bool) or not isinstance(arg, (int, float)):
        raise _ShapeError("integer", _json_type(arg))
    if isinstance(arg, float) and not arg.is_integer():
        raise _ShapeError("integer", f"number {arg}")
    return int(arg)


def _p_flag(arg: Any) -> bool:
    if isinstance(arg, bool):
        return arg
    return _p_int(arg) != 0


def _p_int_list(arg: Any) -> tuple[int, ...]:
    if not isinstance(arg, list):
        raise _ShapeError("array of integers", _json_type(arg))
    return tuple(_p_int(item) for item in arg)


def _e_flag(value: bool) -> int:
    return 1 if value else 0


def _e_same(value: Any) -> Any:
    return value


class FieldSpec(NamedTuple):
    """One row of a field table."""

    key: str
    attr: str
    decode: Callable[[Any], Any]
    encode: Callable[[Any], Any] = _e_same


def _decode_fields(fields: tuple[FieldSpec, ...], data: Any) -> dict[str, Any]:
    """Decode an object into constructor keyword arguments."""
    if not isinstance(data, dict):
        raise _ShapeError("object", _json_type(data))

    values: dict[str, Any] = {}
    for spec in fields:
        raw = data.get(spec.key)
        if raw is None:
            continue
        try:
            values[spec.attr] = spec.decode(raw)
        except _ShapeError as err:
            raise _ShapeError(f"{err.expected} at key {spec.key}", err.observed) from err
    return values


def _p_record(fields: tuple[FieldSpec, ...], cls: type[R]) -> Callable[[Any], R]:
    def parse(arg: Any) -> R:
        return cls(**_decode_fields(fields, arg))

    return parse


def _p_records(
    fields: tuple[FieldSpec, ...], cls: type[R]
) -> Callable[[Any], tuple[R, ...]]:
    parse_one = _p_record(fields, cls)

    def parse(arg: Any) -> tuple[R, ...]:
        if not isinstance(arg, list):
            raise _ShapeError("array of objects", _json_type(arg))
        return tuple(parse_one(item) for item in arg)

    return parse


def _p_members(arg: Any) -> tuple[int, ...]:
    """Parse {"15002": {"9003": [ids...]}} into the member ID list."""
    if not isinstance(arg, dict):
        raise _ShapeError("object", _json_type(arg))
    link = arg.get(const.KEY_HS_LINK)
    if link is None:
        return ()
    if not isinstance(link, dict):
        raise _ShapeError(f"object at key {const.KEY_HS_LINK}", _json_type(link))
    ids = link.get(const.KEY_ID)
    if ids is None:
        return ()
    return _p_int_list(ids)


# =============================================================================
# Field tables
# =============================================================================

RESOURCE_FIELDS = (
    FieldSpec(const.KEY_NAME, "name", _p_str),
    FieldSpec(const.KEY_CREATED_AT, "created_at", _p_int),
    FieldSpec(const.KEY_ID, "id", _p_int),
)

DEVICE_INFO_FIELDS = (
    FieldSpec(const.KEY_MANUFACTURER, "manufacturer", _p_str),
    FieldSpec(const.KEY_MODEL, "model", _p_str),
    FieldSpec(const.KEY_SERIAL, "serial", _p_str),
    FieldSpec(const.KEY_FIRMWARE, "firmware", _p_str),
    FieldSpec(const.KEY_POWER_SOURCE, "power_source", _p_int),
    FieldSpec(const.KEY_BATTERY_LEVEL, "battery_level", _p_int),
)

LIGHT_CONTROL_FIELDS = (
    FieldSpec(const.KEY_STATE, "state", _p_flag, _e_flag),
    FieldSpec(const.KEY_DIMMER, "dimmer", _p_int),
    FieldSpec(const.KEY_COLOR_HEX, "color_hex", _p_str),
    FieldSpec(const.KEY_COLOR_X, "color_x", _p_int),
    FieldSpec(const.KEY_COLOR_Y, "color_y", _p_int),
    FieldSpec(const.KEY_MIREDS, "mireds", _p_int),
    FieldSpec(const.KEY_RESERVED, "reserved", _p_int),
)

DEVICE_FIELDS = RESOURCE_FIELDS + (
    FieldSpec(const.KEY_DEVICE_INFO, "device_info", _p_record(DEVICE_INFO_FIELDS, DeviceInfo)),
    FieldSpec(const.KEY_LAST_SEEN, "last_seen", _p_int),
    FieldSpec(const.KEY_REACHABLE, "reachable", _p_flag),
    FieldSpec(
        const.KEY_LIGHT_CONTROL,
        "light_controls",
        _p_records(LIGHT_CONTROL_FIELDS, LightControl),
    ),
)

GROUP_FIELDS = RESOURCE_FIELDS + (
    FieldSpec(const.KEY_STATE, "state", _p_flag),
    FieldSpec(const.KEY_DIMMER, "dimmer", _p_int),
    FieldSpec(const.KEY_COLOR_HEX, "color_hex", _p_str),
    FieldSpec(const.KEY_MOOD_ID, "mood_id", _p_int),
    FieldSpec(const.KEY_GROUP_MEMBERS, "member_ids", _p_members),
)

UPDATE_FIELDS = (
    FieldSpec(const.KEY_STATE, "state", _p_flag, _e_flag),
    FieldSpec(const.KEY_DIMMER, "dimmer", _p_int),
    FieldSpec(const.KEY_COLOR_HEX, "color_hex", _p_str),
    FieldSpec(const.KEY_COLOR_X, "color_x", _p_int),
    FieldSpec(const.KEY_COLOR_Y, "color_y", _p_int),
    FieldSpec(const.KEY_MIREDS, "mireds", _p_int),
    FieldSpec(const.KEY_TRANSITION, "transition", _p_int),
)

AUTH_RESPONSE_FIELDS = (
    FieldSpec(const.KEY_PSK, "psk", _p_str),
    FieldSpec(const.KEY_GATEWAY_FIRMWARE, "firmware_version", _p_str),
)

RECORD_FIELDS: dict[type, tuple[FieldSpec, ...]] = {
    Device: DEVICE_FIELDS,
    DeviceInfo: DEVICE_INFO_FIELDS,
    Group: GROUP_FIELDS,
    LightControl: LIGHT_CONTROL_FIELDS,
    AuthResponse: AUTH_RESPONSE_FIELDS,
}


# =============================================================================
# Decoding
# =============================================================================


def decode_json(path: str, raw: bytes) -> Any:
    """Parse raw payload bytes as JSON.

    Raises:
        MalformedPayload: If the payload is not valid UTF-8 JSON
    """
    try:
        return json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as err:
        raise MalformedPayload(path, "UTF-8 JSON", f"undecodable bytes ({err.reason})") from err
    except json.JSONDecodeError as err:
        raise MalformedPayload(path, "JSON", f"invalid JSON ({err.msg})") from err


def decode(path: str, raw: bytes, record_type: type[R]) -> R:
    """Decode raw payload bytes into a record of record_type.

    Args:
        path: Request path, carried in errors for diagnosis
        raw: Payload bytes from the gateway
        record_type: Device, Group, LightControl, DeviceInfo or AuthResponse

    Returns:
        A fresh record instance

    Raises:
        MalformedPayload: If the payload does not match the record's shape
    """
    fields = RECORD_FIELDS[record_type]
    data = decode_json(path, raw)
    try:
        return record_type(**_decode_fields(fields, data))
    except _ShapeError as err:
        raise MalformedPayload(path, err.expected, err.observed) from err


def decode_device(path: str, raw: bytes) -> Device:
    return decode(path, raw, Device)


def decode_group(path: str, raw: bytes) -> Group:
    return decode(path, raw, Group)


def decode_auth_response(path: str, raw: bytes) -> AuthResponse:
    return decode(path, raw, AuthResponse)


def decode_id_list(path: str, raw: bytes) -> list[int]:
    """Decode a collection listing (a JSON array of integer IDs)."""
    data = decode_json(path, raw)
    try:
        return list(_p_int_list(data))
    except _ShapeError as err:
        raise MalformedPayload(path, "array of integers", err.observed) from err


# =============================================================================
# Encoding
# =============================================================================


def encode_fields(update: LightControlUpdate) -> dict[str, Any]:
    """Return the wire object for a partial update, set fields only."""
    payload: dict[str, Any] = {}
    for spec in UPDATE_FIELDS:
        setting = getattr(update, spec.attr)
        if setting.is_set:
            payload[spec.key] = spec.encode(setting.value)
    return payload


def encode_update(update: LightControlUpdate) -> bytes:
    """Encode a partial light control update to payload bytes."""
    return _dump(encode_fields(update))


def encode_auth_request(username: str) -> bytes:
    """Encode the bootstrap request carrying the chosen username."""
    return _dump({const.KEY_USERNAME: username})


def transition_tenths(transition: timedelta) -> int:
    """Convert a transition duration to tenths of a second.

    Truncates, never rounds up: 450ms -> 4, 50ms -> 0.
    Negative durations encode as 0.
    """
    if transition <= timedelta(0):
        return 0
    return transition // TRANSITION_UNIT


def _dump(data: dict[str, Any]) -> bytes:
    return json.dumps(data, separators=(",", ":")).encode("utf-8")
