"""Safe error types and constructors.

Every failure a caller can observe is a SafeError. Messages must be non-secret and stable:
they are rendered verbatim into Failure envelopes.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SafeError(Exception):
    """An error safe to expose to agents.

    This must never include secrets (access tokens, authorization headers).
    """

    code: str
    message: str
    hint: str | None = None
    status_code: int | None = None

    def __str__(self) -> str:
        return self.message


def missing_parameter(name: str) -> SafeError:
    """A required parameter was absent from the argument map."""
    return SafeError(code="MissingParameter", message=f"Missing required parameter '{name}'")


def invalid_parameter_type(name: str, expected_kind: str) -> SafeError:
    """A parameter was present with the wrong representation."""
    return SafeError(
        code="InvalidParameterType",
        message=f"Parameter '{name}' must be of kind {expected_kind}",
    )


def invalid_parameter_value(name: str, allowed: Iterable[str] | None = None, *, reason: str | None = None) -> SafeError:
    """A parameter had the right type but a disallowed value."""
    if allowed is not None:
        return SafeError(
            code="InvalidParameterValue",
            message=f"Parameter '{name}' must be one of: {', '.join(allowed)}",
        )
    return SafeError(
        code="InvalidParameterValue",
        message=f"Parameter '{name}' is invalid: {reason or 'value not allowed'}",
    )


def invalid_array_element(name: str, index: int, expected_kind: str) -> SafeError:
    """An array parameter contained an element that failed coercion."""
    return SafeError(
        code="InvalidArrayElement",
        message=f"Element {index} of parameter '{name}' is not a valid {expected_kind}",
    )


def unknown_tool(name: str) -> SafeError:
    """The caller referenced a tool that is not registered."""
    return SafeError(code="UnknownTool", message=f"Unknown tool: {name}")


def forbidden_tool(name: str) -> SafeError:
    """A write tool was requested while restricted (read-only) mode is active."""
    return SafeError(
        code="Forbidden",
        message=f"Tool '{name}' modifies repository state and the server is running in read-only mode",
        hint="Restart the server without --read-only / GITEA_READONLY to enable write tools",
    )


def external_service_error(message: str, *, hint: str | None = None, status_code: int | None = None) -> SafeError:
    """The Gitea API call failed (network, auth, not found, conflict...)."""
    return SafeError(code="ExternalService", message=message, hint=hint, status_code=status_code)


def cancelled(name: str) -> SafeError:
    """The invocation was cancelled while waiting on the remote service."""
    return SafeError(code="Cancelled", message=f"Tool '{name}' was cancelled before it completed")


def internal(message: str = "Internal error") -> SafeError:
    """An unexpected failure inside a handler."""
    return SafeError(code="Internal", message=message)
