"""Configuration loading for gitea-mcp.

Configuration is supplied by the host environment (e.g., MCP client config), not by the agent.
The access token is a secret and must never be emitted to agents, logs, or audit reasons.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from .errors import SafeError

DEFAULT_HOST = "https://gitea.com"


@dataclass(frozen=True, slots=True)
class LimitsConfig:
    """Non-functional safety limits."""

    # Network
    total_timeout_s: float = 60.0
    connect_timeout_s: float = 5.0
    read_timeout_s: float = 30.0

    # Retries
    max_attempts: int = 3
    max_backoff_s: float = 5.0

    # Payload limits
    file_write_max_bytes: int = 1024 * 1024


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Server configuration."""

    host: str
    access_token: str = ""
    read_only: bool = False
    insecure: bool = False
    debug: bool = False
    audit_log_path: Path | None = None
    audit_max_bytes: int = 5 * 1024 * 1024
    audit_max_backups: int = 2
    limits: LimitsConfig = LimitsConfig()

    @property
    def api_base_url(self) -> str:
        return f"{self.host}/api/v1"

    def __repr__(self) -> str:
        # Keep the token out of tracebacks and debug output.
        return f"AppConfig(host={self.host!r}, read_only={self.read_only}, insecure={self.insecure})"


def parse_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def normalize_host(raw: str) -> str:
    """Validate a Gitea base URL and strip trailing slashes / a trailing /api/v1."""
    host = raw.strip().rstrip("/")
    if host.endswith("/api/v1"):
        host = host[: -len("/api/v1")]
    parts = urlsplit(host)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise SafeError(code="Config", message="GITEA_HOST must be an absolute http(s) URL")
    if parts.query or parts.fragment:
        raise SafeError(code="Config", message="GITEA_HOST must not contain a query or fragment")
    return host


def read_only_from_env() -> bool:
    """Return whether restricted (read-only) mode is requested by the environment."""
    return parse_bool(os.getenv("GITEA_READONLY"))


def load_config_from_env() -> AppConfig:
    """Load and validate configuration from environment variables.

    Raises:
        SafeError: If configuration is missing/invalid.
    """
    token = (os.getenv("GITEA_ACCESS_TOKEN") or "").strip()
    if not token:
        raise SafeError(code="Config", message="Missing required configuration (GITEA_ACCESS_TOKEN)")

    host = normalize_host(os.getenv("GITEA_HOST") or DEFAULT_HOST)

    audit_path_raw = os.getenv("GITEA_MCP_AUDIT_LOG_PATH")
    audit_path: Path | None = None
    if audit_path_raw:
        p = Path(audit_path_raw)
        if not p.is_absolute():
            raise SafeError(code="Config", message="GITEA_MCP_AUDIT_LOG_PATH must be an absolute path when set")
        audit_path = p

    return AppConfig(
        host=host,
        access_token=token,
        read_only=read_only_from_env(),
        insecure=parse_bool(os.getenv("GITEA_INSECURE")),
        debug=parse_bool(os.getenv("GITEA_DEBUG")),
        audit_log_path=audit_path,
        limits=LimitsConfig(),
    )
