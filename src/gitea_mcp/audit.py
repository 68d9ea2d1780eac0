"""Structured audit trail.

Exactly one event is written per tool invocation, whatever its outcome. Events never contain
argument values beyond the owner/repo target, and never contain secrets.
"""

from __future__ import annotations

import json
import sys
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

OUTCOMES = ("succeeded", "denied", "failed", "cancelled")


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def _now_rfc3339() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """A single audit event."""

    timestamp: str
    correlation_id: str
    tool: str
    mutation: str | None
    target_repo: str
    outcome: str
    reason: str | None
    duration_ms: int | None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "timestamp": self.timestamp,
            "correlation_id": self.correlation_id,
            "tool": self.tool,
            "target_repo": self.target_repo,
            "outcome": self.outcome,
        }
        if self.mutation is not None:
            payload["mutation"] = self.mutation
        if self.reason is not None:
            payload["reason"] = self.reason
        if self.duration_ms is not None:
            payload["duration_ms"] = self.duration_ms
        return payload


def target_repo_from_args(arguments: object) -> str:
    """Best-effort "owner/repo" label for an invocation."""
    if not isinstance(arguments, dict):
        return "<none>"
    owner = arguments.get("owner")
    repo = arguments.get("repo")
    if isinstance(owner, str) and isinstance(repo, str) and owner and repo:
        return f"{owner}/{repo}"
    return "<none>"


class AuditLogger:
    """Writes audit events as JSON lines to stderr and optionally to a file."""

    def __init__(
        self,
        *,
        sink_path: Path | None = None,
        max_bytes: int = 5 * 1024 * 1024,
        max_backups: int = 2,
    ) -> None:
        """Create an audit logger.

        Failures writing the optional file sink never break tool execution.
        """
        self._sink_path = sink_path
        self._max_bytes = max_bytes
        self._max_backups = max_backups

    def _rotate_if_needed(self) -> None:
        path = self._sink_path
        if path is None or not path.exists() or path.stat().st_size < self._max_bytes:
            return
        if self._max_backups <= 0:
            path.write_text("", encoding="utf-8")
            return
        # audit.jsonl -> .1 -> .2 ..., dropping the oldest.
        Path(f"{path}.{self._max_backups}").unlink(missing_ok=True)
        for i in range(self._max_backups, 1, -1):
            src = Path(f"{path}.{i - 1}")
            if src.exists():
                src.replace(Path(f"{path}.{i}"))
        path.replace(Path(f"{path}.1"))

    def write_event(self, event: AuditEvent) -> None:
        line = json.dumps(event.to_dict(), sort_keys=True, separators=(",", ":"))
        print(line, file=sys.stderr)
        if self._sink_path is None:
            return
        try:
            self._sink_path.parent.mkdir(parents=True, exist_ok=True)
            self._rotate_if_needed()
            with self._sink_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError:  # pragma: no cover
            return

    def measure_start(self) -> float:
        return time.monotonic()

    def measure_duration_ms(self, start: float) -> int:
        return int((time.monotonic() - start) * 1000)


def build_event(
    *,
    correlation_id: str,
    tool: str,
    target_repo: str,
    outcome: str,
    mutation: str | None = None,
    reason: str | None = None,
    duration_ms: int | None = None,
) -> AuditEvent:
    """Construct an audit event stamped with the current time."""
    if outcome not in OUTCOMES:
        raise ValueError(f"Unknown audit outcome: {outcome}")
    return AuditEvent(
        timestamp=_now_rfc3339(),
        correlation_id=correlation_id,
        tool=tool,
        mutation=mutation,
        target_repo=target_repo,
        outcome=outcome,
        reason=reason,
        duration_ms=duration_ms,
    )
