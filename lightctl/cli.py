"""Command line interface for lightctl.

    lightctl auth --username NAME --code SECURITYCODE
    lightctl device list
    lightctl device get --id 65537
    lightctl device set light level --id 65537 --level 40 --transition 2s
    lightctl group set light white --id 131073 --white 80
    lightctl raw /15001
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import math
import re
import sys
from datetime import timedelta
from pathlib import Path
from typing import Any, Awaitable, Callable

from rich.console import Console

from . import commands
from .auth import bootstrap
from .client import ResourceClient
from .config import default_gateway, load_credentials, save_credentials
from .const import DEFAULT_TIMEOUT, Root
from .exceptions import LightctlException
from .models import Credentials
from .transport import dial

_LOGGER = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
_DURATION_UNITS = {
    "ms": "milliseconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    None: "seconds",
}


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "450ms", "2s", "1.5s", "1m" or "3".

    Raises:
        argparse.ArgumentTypeError: If the text is not a duration
    """
    match = _DURATION_RE.match(text)
    if not match:
        raise argparse.ArgumentTypeError(f"invalid duration: {text!r}")
    value, unit = match.groups()
    try:
        return timedelta(**{_DURATION_UNITS[unit]: float(value)})
    except OverflowError as err:
        raise argparse.ArgumentTypeError(f"duration too long: {text!r}") from err


def parse_percent(text: str) -> float:
    """Parse a 0-100 percentage. Out-of-range values are clamped later.

    Raises:
        argparse.ArgumentTypeError: If the text is not a finite number
    """
    try:
        value = float(text)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid percentage: {text!r}") from err
    if not math.isfinite(value):
        raise argparse.ArgumentTypeError(f"invalid percentage: {text!r}")
    return value


def parse_state(text: str) -> bool:
    """Parse "on"/"off"."""
    lowered = text.lower()
    if lowered not in ("on", "off"):
        raise argparse.ArgumentTypeError(f"state must be on or off, not {text!r}")
    return lowered == "on"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lightctl", description="Control a TRÅDFRI-style lighting gateway."
    )
    parser.add_argument(
        "--gateway",
        default=default_gateway(),
        help="gateway address (env LIGHTCTL_GATEWAY, default %(default)s)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="per-request timeout in seconds (default %(default)s)",
    )
    parser.add_argument(
        "--credentials",
        type=Path,
        default=None,
        help="credentials file (default: user config dir)",
    )
    parser.add_argument("--debug", action="store_true", help="log requests")
    sub = parser.add_subparsers(dest="command", required=True)

    auth = sub.add_parser("auth", help="authenticate with the gateway")
    auth.add_argument("--username", required=True, help="username of your choice")
    auth.add_argument(
        "--code",
        required=True,
        help="16-character security code on the bottom of the gateway",
    )
    auth.set_defaults(handler=_cmd_auth)

    raw = sub.add_parser("raw", help="print the raw payload at a path")
    raw.add_argument("path", help="resource path, e.g. /15001")
    raw.set_defaults(handler=_cmd_raw)

    for name, root in (("device", Root.DEVICES), ("group", Root.GROUPS)):
        _add_collection(sub, name, root)

    return parser


def _add_collection(sub: Any, name: str, root: Root) -> None:
    collection = sub.add_parser(name, help=f"interact with {name}s")
    collection.set_defaults(root=root, kind=name)
    actions = collection.add_subparsers(dest="action", required=True)

    actions.add_parser("list", help=f"list known {name}s").set_defaults(
        handler=_cmd_list
    )

    get = actions.add_parser("get", help=f"show details of a {name}")
    get.add_argument("--id", type=int, required=True, help=f"{name} ID")
    get.set_defaults(handler=_cmd_get)

    set_ = actions.add_parser("set", help=f"set properties of a {name}")
    targets = set_.add_subparsers(dest="target", required=True)
    light = targets.add_parser("light", help=f"set light control of a {name}")
    props = light.add_subparsers(dest="property", required=True)

    state = props.add_parser("state", help="turn on or off")
    state.add_argument("--id", type=int, required=True, help=f"{name} ID")
    state.add_argument("--state", type=parse_state, required=True, help="on, off")
    state.set_defaults(handler=_cmd_set_state)

    level = props.add_parser("level", help="set brightness")
    level.add_argument("--id", type=int, required=True, help=f"{name} ID")
    level.add_argument("--level", type=parse_percent, required=True, help="0..100")
    level.add_argument(
        "--transition", type=parse_duration, default=timedelta(0), help="e.g. 500ms, 2s"
    )
    level.set_defaults(handler=_cmd_set_level)

    white = props.add_parser("white", help="set white spectrum warmth")
    white.add_argument("--id", type=int, required=True, help=f"{name} ID")
    white.add_argument(
        "--white",
        type=parse_percent,
        required=True,
        help="0..100 (0=red, 100=white)",
    )
    white.add_argument(
        "--transition", type=parse_duration, default=timedelta(0), help="e.g. 500ms, 2s"
    )
    white.set_defaults(handler=_cmd_set_white)


# =============================================================================
# Handlers
# =============================================================================


class Runtime:
    """Collaborators a command runs against."""

    def __init__(
        self,
        console: Console,
        error_console: Console | None = None,
        dialer: Callable[..., Awaitable[Any]] = dial,
        credentials_loader: Callable[[Path | None], Credentials] = load_credentials,
        credentials_saver: Callable[[Credentials, Path | None], Path] = save_credentials,
    ) -> None:
        self.console = console
        self.error_console = error_console or Console(stderr=True)
        self.dialer = dialer
        self.load_credentials = credentials_loader
        self.save_credentials = credentials_saver

    async def with_client(
        self, args: argparse.Namespace, action: Callable[[ResourceClient], Awaitable[Any]]
    ) -> Any:
        """Open a session with stored credentials and run one action on it."""
        creds = self.load_credentials(args.credentials)
        session = await self.dialer(args.gateway, creds.username, creds.psk, args.timeout)
        try:
            return await action(ResourceClient(session))
        finally:
            await session.close()

    def print(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False)


async def _cmd_auth(args: argparse.Namespace, rt: Runtime) -> None:
    psk = await bootstrap(
        args.gateway, args.username, args.code, args.timeout, dialer=rt.dialer
    )
    path = rt.save_credentials(Credentials(args.username, psk), args.credentials)
    rt.print(f"Credentials for {args.username} saved to {path}")


async def _cmd_raw(args: argparse.Namespace, rt: Runtime) -> None:
    payload = await rt.with_client(args, lambda client: client.get_raw(args.path))
    rt.print(payload.decode("utf-8", errors="replace"))


async def _cmd_list(args: argparse.Namespace, rt: Runtime) -> None:
    if args.root == Root.DEVICES:
        resources = await rt.with_client(args, ResourceClient.list_devices)
    else:
        resources = await rt.with_client(args, ResourceClient.list_groups)
    for resource in resources:
        rt.print(resource.short())


async def _cmd_get(args: argparse.Namespace, rt: Runtime) -> None:
    if args.root == Root.DEVICES:
        resource = await rt.with_client(args, lambda c: c.get_device(args.id))
    else:
        resource = await rt.with_client(args, lambda c: c.get_group(args.id))
    rt.print(resource.describe())


async def _cmd_set_state(args: argparse.Namespace, rt: Runtime) -> None:
    await rt.with_client(
        args, lambda c: commands.set_state(c, args.root, args.id, args.state)
    )


async def _cmd_set_level(args: argparse.Namespace, rt: Runtime) -> None:
    await rt.with_client(
        args,
        lambda c: commands.set_level(c, args.root, args.id, args.level, args.transition),
    )


async def _cmd_set_white(args: argparse.Namespace, rt: Runtime) -> None:
    await rt.with_client(
        args,
        lambda c: commands.set_warmth(c, args.root, args.id, args.white, args.transition),
    )


# =============================================================================
# Entry point
# =============================================================================


def run(argv: list[str], runtime: Runtime) -> int:
    """Parse argv and run one command. Returns the exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(args.handler(args, runtime))
    except LightctlException as err:
        _LOGGER.debug("Command failed", exc_info=True)
        runtime.error_console.print(f"error: {err}", style="red", markup=False, highlight=False)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Console script entry point."""
    return run(sys.argv[1:] if argv is None else argv, Runtime(Console()))
