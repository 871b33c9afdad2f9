"""Exceptions raised by the lightctl client."""

from __future__ import annotations

from .const import format_code


class LightctlException(Exception):
    """Base class for lightctl errors."""


class TransportFailure(LightctlException):
    """The secured channel could not be dialed, or a request on it failed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class TransportTimeout(TransportFailure):
    """A request did not complete within its timeout."""


class AuthenticationRejected(LightctlException):
    """The gateway refused the bootstrap exchange.

    Not retryable: the user must run bootstrap again with a fresh setup code.
    """

    def __init__(self, path: str, code: int) -> None:
        self.path = path
        self.code = code
        super().__init__(f"{path}: authentication rejected ({format_code(code)})")


class ResourceNotFound(LightctlException):
    """An addressed GET named a resource the gateway does not have."""

    def __init__(self, path: str, code: int) -> None:
        self.path = path
        self.code = code
        super().__init__(f"{path}: resource not found ({format_code(code)})")


class RequestFailed(LightctlException):
    """A GET returned a failure code other than not-found."""

    def __init__(self, path: str, code: int) -> None:
        self.path = path
        self.code = code
        super().__init__(f"{path}: request failed ({format_code(code)})")


class WriteRejected(LightctlException):
    """An addressed PUT returned a failure code."""

    def __init__(self, path: str, code: int) -> None:
        self.path = path
        self.code = code
        super().__init__(f"{path}: write rejected ({format_code(code)})")


class MalformedPayload(LightctlException):
    """A payload did not match the shape expected for its path."""

    def __init__(self, path: str, expected: str, observed: str) -> None:
        self.path = path
        self.expected = expected
        self.observed = observed
        super().__init__(f"{path}: expected {expected}, got {observed}")


class ConfigError(LightctlException):
    """The persisted credentials could not be read or written."""
