"""Tool registry wiring and dispatch entry point.

This module:
- builds the registry from the declarative tool tables
- builds a per-server runtime from host-provided config
- exposes dispatch_tool(), the single operation the transport layer depends on
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .audit import AuditLogger
from .config import AppConfig, load_config_from_env
from .dispatch import Dispatcher
from .envelope import ResultEnvelope, failure
from .errors import SafeError
from .gitea_client import GiteaClient
from .operations import all_entries
from .registry import Registry


@dataclass(frozen=True, slots=True)
class Runtime:
    """Per-server dependencies shared across tool calls."""

    config: AppConfig
    audit: AuditLogger
    gitea: GiteaClient


_RUNTIME: Runtime | None = None
_REGISTRY: Registry | None = None


def build_registry() -> Registry:
    """Build a fresh registry holding every declared tool.

    Raises:
        RegistrationError: If two tools share a name.
    """
    registry = Registry()
    registry.register(all_entries())
    return registry


def default_registry() -> Registry:
    """Return the process-wide registry, building it on first use."""
    global _REGISTRY  # pylint: disable=global-statement
    if _REGISTRY is None:
        _REGISTRY = build_registry()
    return _REGISTRY


def build_runtime(config: AppConfig) -> Runtime:
    audit = AuditLogger(
        sink_path=config.audit_log_path,
        max_bytes=config.audit_max_bytes,
        max_backups=config.audit_max_backups,
    )
    gitea = GiteaClient(
        api_base_url=config.api_base_url,
        token=config.access_token,
        limits=config.limits,
        verify=not config.insecure,
    )
    return Runtime(config=config, audit=audit, gitea=gitea)


def initialize_runtime_from_env() -> Runtime:
    """Initialize and cache runtime from environment.

    Called at server startup (fail-fast), and can also be used lazily.
    """
    global _RUNTIME  # pylint: disable=global-statement
    if _RUNTIME is not None:
        return _RUNTIME
    _RUNTIME = build_runtime(load_config_from_env())
    return _RUNTIME


async def dispatch_tool(name: str, arguments: dict[str, Any], *, restricted: bool | None = None) -> ResultEnvelope:
    """Invoke a tool against the configured Gitea instance.

    restricted defaults to the configured read-only mode.
    """
    try:
        runtime = initialize_runtime_from_env()
    except SafeError as err:
        return failure(err)
    if restricted is None:
        restricted = runtime.config.read_only
    dispatcher = Dispatcher(default_registry(), runtime, audit=runtime.audit)
    return await dispatcher.invoke(name, arguments, restricted)
