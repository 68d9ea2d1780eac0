"""Safety helpers: payload size limits and redaction of remote-service text."""

from __future__ import annotations

import re

from .errors import SafeError

_AUTH_HEADER_RE = re.compile(r"(?i)\b(authorization:\s*(?:token|bearer|basic)\s+)[^\s,;]+")
_BARE_TOKEN_RE = re.compile(r"(?i)\b(token|bearer|basic)\s+[A-Za-z0-9+/_.-]{20,}={0,2}")
_GITEA_TOKEN_PARAM_RE = re.compile(r"(?i)(access_token|token)=([^&\s]+)")

_MAX_HINT_CHARS = 300


def enforce_max_bytes(*, data: bytes, max_bytes: int, what: str) -> None:
    """Enforce an upper bound on byte payloads."""
    if len(data) > max_bytes:
        raise SafeError(
            code="InvalidParameterValue",
            message=f"{what} exceeds size limit of {max_bytes} bytes",
        )


def redact_text(text: object) -> str:
    """Return a single-line, length-bounded representation safe for logs and envelopes."""
    if not isinstance(text, str):
        return "<non-string>"
    out = _AUTH_HEADER_RE.sub(lambda m: f"{m.group(1)}<redacted>", text)
    out = _BARE_TOKEN_RE.sub(lambda m: f"{m.group(1)} <redacted>", out)
    out = _GITEA_TOKEN_PARAM_RE.sub(lambda m: f"{m.group(1)}=<redacted>", out)
    out = " ".join(out.split())
    if len(out) > _MAX_HINT_CHARS:
        out = out[: _MAX_HINT_CHARS - 3] + "..."
    return out
