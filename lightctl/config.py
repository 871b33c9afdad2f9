"""Persisted credentials and gateway settings.

The credentials file is a small JSON object:

    {"username": "lightctl", "psk": "..."}

It is written once by `lightctl auth` and read before every other
command. The client core never touches it; it only receives the
resulting Credentials value.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import voluptuous as vol

from .const import DEFAULT_GATEWAY
from .exceptions import ConfigError
from .models import Credentials

CONF_USERNAME = "username"
CONF_PSK = "psk"

ENV_GATEWAY = "LIGHTCTL_GATEWAY"
ENV_GATEWAY_FALLBACK = "GATEWAY"

CREDENTIALS_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_USERNAME): vol.All(str, vol.Length(min=1)),
        vol.Required(CONF_PSK): vol.All(str, vol.Length(min=1)),
    },
    extra=vol.REMOVE_EXTRA,
)


def config_dir() -> Path:
    """Return the lightctl directory under the user config directory."""
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(
        os.path.expanduser("~"), ".config"
    )
    return Path(base) / "lightctl"


def credentials_path() -> Path:
    """Return the default credentials file location."""
    return config_dir() / "lightctl.conf"


def default_gateway() -> str:
    """Return the gateway address from the environment, or the default."""
    return (
        os.environ.get(ENV_GATEWAY)
        or os.environ.get(ENV_GATEWAY_FALLBACK)
        or DEFAULT_GATEWAY
    )


def parse_credentials(data: object) -> Credentials:
    """Validate a decoded credentials object.

    Raises:
        ConfigError: If required keys are missing or not strings
    """
    try:
        valid = CREDENTIALS_SCHEMA(data)
    except vol.Invalid as err:
        raise ConfigError(f"invalid credentials: {err}") from err
    return Credentials(username=valid[CONF_USERNAME], psk=valid[CONF_PSK])


def load_credentials(path: Path | None = None) -> Credentials:
    """Read credentials from path (default: credentials_path()).

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    path = path or credentials_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as err:
        raise ConfigError(
            f"no credentials at {path}; run `lightctl auth` first"
        ) from err
    except (OSError, ValueError) as err:
        raise ConfigError(f"cannot read credentials at {path}: {err}") from err
    return parse_credentials(data)


def save_credentials(credentials: Credentials, path: Path | None = None) -> Path:
    """Write credentials to path (default: credentials_path()).

    The directory is created 0700 and the file written 0600.

    Returns:
        The path written

    Raises:
        ConfigError: If the credentials are invalid or cannot be written
    """
    path = path or credentials_path()
    data = {CONF_USERNAME: credentials.username, CONF_PSK: credentials.psk}
    parse_credentials(data)
    try:
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f)
    except OSError as err:
        raise ConfigError(f"cannot write credentials at {path}: {err}") from err
    return path
