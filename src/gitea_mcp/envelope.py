"""Uniform result envelope returned from every tool invocation.

This is the single place where internal error kinds become user-facing text. A Failure
carries only a one-line message; it must never be treated as structured data.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .errors import SafeError


@dataclass(frozen=True, slots=True)
class ResultEnvelope:
    """Success{payload} or Failure{message}; exactly one case is populated."""

    ok: bool
    payload: Any = None
    message: str | None = None

    def to_text(self) -> str:
        """Render the envelope into the protocol's text content form."""
        if self.ok:
            return json.dumps(self.payload, indent=2, default=str)
        return self.message or ""


def success(payload: Any) -> ResultEnvelope:
    return ResultEnvelope(ok=True, payload=payload)


def _single_line(text: str) -> str:
    return " ".join(text.split())


def failure(err: SafeError) -> ResultEnvelope:
    """Format a SafeError as a human-readable single-line Failure."""
    text = f"{err.code}: {err.message}"
    if err.hint:
        text = f"{text} ({err.hint})"
    return ResultEnvelope(ok=False, message=_single_line(text))
