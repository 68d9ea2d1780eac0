"""MCP server wiring for gitea-mcp.

Adapts the registry and dispatcher to the MCP stdio transport: tool listing honors
restricted (read-only) mode, and Failure envelopes surface as MCP tool errors.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

try:
    from mcp.server import Server
    from mcp.types import Resource, TextContent, Tool
except ImportError as exc:  # pragma: no cover
    raise ImportError("MCP library not installed. Install with: pip install mcp") from exc

from . import __version__
from .config import read_only_from_env
from .errors import SafeError
from .registry import MutationClass
from .tools import default_registry, dispatch_tool, initialize_runtime_from_env

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

server = Server("gitea-mcp")

_READ_ONLY_OVERRIDE: bool | None = None

_RESOURCES = (
    ("gitea-mcp://server-status", "Server Status", "Non-secret server configuration and limits"),
    ("gitea-mcp://capabilities", "Capabilities", "Advertised tools and restricted-mode status"),
)


class ToolFailure(Exception):
    """Raised to make the MCP SDK report a Failure envelope as a tool error (isError)."""


def restricted_mode() -> bool:
    """Return True when write tools must be hidden and refused."""
    if _READ_ONLY_OVERRIDE is not None:
        return _READ_ONLY_OVERRIDE
    return read_only_from_env()


def _tool_objects() -> list[Tool]:
    registry = default_registry()
    return [
        Tool(name=schema.name, description=schema.description, inputSchema=schema.input_schema())
        for schema in registry.all_tools(include_write=not restricted_mode())
    ]


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List the tools available in the current mode."""
    tools = _tool_objects()
    logger.info("Listed %s tools", len(tools))
    return tools


# Arguments are validated by the dispatcher, not against the advertised inputSchema.
@server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Execute a tool and return MCP-compliant TextContent."""
    if not isinstance(arguments, dict):
        arguments = {}

    logger.info("Tool called: %s", name)
    envelope = await dispatch_tool(name, arguments, restricted=restricted_mode())
    if not envelope.ok:
        raise ToolFailure(envelope.to_text())
    return [TextContent(type="text", text=envelope.to_text())]


@server.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return [Resource(uri=uri, name=name, description=desc) for uri, name, desc in _RESOURCES]


@server.read_resource()
async def read_resource(uri: Any) -> str:
    """Read resource content."""
    uri_s = uri if isinstance(uri, str) else str(uri)
    registry = default_registry()
    restricted = restricted_mode()

    if uri_s == "gitea-mcp://capabilities":
        caps = {
            "server": "gitea-mcp",
            "version": __version__,
            "restricted": restricted,
            "read_tools": registry.names(MutationClass.READ),
            "write_tools": [] if restricted else registry.names(MutationClass.WRITE),
        }
        return json.dumps(caps, indent=2)

    if uri_s == "gitea-mcp://server-status":
        status: dict[str, Any] = {
            "server": "gitea-mcp",
            "version": __version__,
            "restricted": restricted,
            "tools_available": len(registry.all_tools(include_write=not restricted)),
            "configured": False,
        }
        try:
            runtime = initialize_runtime_from_env()
            status["configured"] = True
            status["host"] = runtime.config.host
            status["tls_verify"] = not runtime.config.insecure
            status["limits"] = {
                "total_timeout_s": runtime.config.limits.total_timeout_s,
                "max_attempts": runtime.config.limits.max_attempts,
                "file_write_max_bytes": runtime.config.limits.file_write_max_bytes,
            }
            status["audit"] = {"file_sink_enabled": runtime.config.audit_log_path is not None}
        except SafeError:
            status["configured"] = False
        return json.dumps(status, indent=2)

    return json.dumps({"ok": False, "message": "Unknown resource"}, indent=2)


async def run_server(*, read_only: bool | None = None) -> None:
    """Run the server over stdio."""
    global _READ_ONLY_OVERRIDE  # pylint: disable=global-statement
    if read_only:
        _READ_ONLY_OVERRIDE = True

    # Fail fast on invalid/missing host configuration and on duplicate tool names.
    try:
        runtime = initialize_runtime_from_env()
    except SafeError as exc:
        logger.error("Startup configuration error: %s", exc.message)
        raise
    if runtime.config.debug:
        logging.getLogger("gitea_mcp").setLevel(logging.DEBUG)
    registry = default_registry()

    logger.info(
        "Serving %s tools for %s (read-only=%s)",
        len(registry.all_tools(include_write=not restricted_mode())),
        runtime.config.host,
        restricted_mode(),
    )

    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def test_server() -> None:
    """Lightweight self-test to ensure tool/resource listing works."""
    tools = [
        Tool(name=schema.name, description=schema.description, inputSchema=schema.input_schema())
        for schema in default_registry().all_tools(include_write=True)
    ]
    resources = await list_resources()
    logger.info("Self-test ok: %s tools, %s resources", len(tools), len(resources))
