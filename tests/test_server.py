from __future__ import annotations

import json

import pytest
from gitea_mcp import server, tools
from mcp import types


@pytest.fixture(autouse=True)
def _reset_state(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tools, "_RUNTIME", None)
    monkeypatch.setattr(server, "_READ_ONLY_OVERRIDE", None)
    monkeypatch.delenv("GITEA_ACCESS_TOKEN", raising=False)
    monkeypatch.delenv("GITEA_READONLY", raising=False)
    monkeypatch.delenv("GITEA_MCP_AUDIT_LOG_PATH", raising=False)


@pytest.mark.asyncio
async def test_list_tools_hides_write_tools_in_read_only_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    full = {t.name for t in await server.list_tools()}

    monkeypatch.setattr(server, "_READ_ONLY_OVERRIDE", True)
    restricted = {t.name for t in await server.list_tools()}

    assert "delete_branch" in full
    assert "delete_branch" not in restricted
    assert "list_branches" in restricted
    assert restricted < full


def test_readonly_env_restricts(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITEA_READONLY", "1")
    assert server.restricted_mode() is True


@pytest.mark.asyncio
async def test_call_tool_without_config_raises_tool_failure() -> None:
    with pytest.raises(server.ToolFailure) as exc:
        await server.call_tool("list_branches", {"owner": "acme", "repo": "widgets"})
    assert str(exc.value).startswith("Config:")


@pytest.mark.asyncio
async def test_dispatch_tool_without_token_returns_failure_envelope() -> None:
    env = await tools.dispatch_tool("get_my_user_info", {})
    assert env.ok is False
    assert env.message == "Config: Missing required configuration (GITEA_ACCESS_TOKEN)"


@pytest.mark.asyncio
async def test_call_tool_forbidden_in_read_only_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITEA_ACCESS_TOKEN", "t")
    monkeypatch.setattr(server, "_READ_ONLY_OVERRIDE", True)

    with pytest.raises(server.ToolFailure) as exc:
        await server.call_tool("delete_branch", {"owner": "acme", "repo": "widgets", "branch": "feat"})
    assert str(exc.value).startswith("Forbidden:")


@pytest.mark.asyncio
async def test_resources() -> None:
    resources = await server.list_resources()
    uris = {str(r.uri).rstrip("/") for r in resources}
    assert uris == {"gitea-mcp://server-status", "gitea-mcp://capabilities"}

    status = json.loads(await server.read_resource("gitea-mcp://server-status"))
    assert status["configured"] is False

    caps = json.loads(await server.read_resource("gitea-mcp://capabilities"))
    assert "list_repo_labels" in caps["read_tools"]
    assert "create_file" in caps["write_tools"]

    unknown = json.loads(await server.read_resource("gitea-mcp://nope"))
    assert unknown["ok"] is False


@pytest.mark.asyncio
async def test_capabilities_in_read_only_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(server, "_READ_ONLY_OVERRIDE", True)
    caps = json.loads(await server.read_resource("gitea-mcp://capabilities"))
    assert caps["restricted"] is True
    assert caps["write_tools"] == []


@pytest.mark.asyncio
async def test_self_test_runs() -> None:
    await server.test_server()


async def _call_over_mcp(name: str, arguments: dict) -> types.CallToolResult:  # type: ignore[type-arg]
    handler = server.server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )
    result = await handler(request)
    return result.root  # type: ignore[return-value]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("name", "arguments", "prefix"),
    [
        ("list_repo_labels", {"owner": "acme"}, "MissingParameter:"),
        ("add_issue_labels", {"owner": "acme", "repo": "widgets", "index": 1, "labels": [1, "x"]}, "InvalidArrayElement:"),
        ("list_repo_pull_requests", {"owner": "acme", "repo": "widgets", "state": "bogus"}, "InvalidParameterValue:"),
    ],
)
async def test_mcp_transport_reports_dispatcher_error_kinds_and_audits(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    name: str,
    arguments: dict,  # type: ignore[type-arg]
    prefix: str,
) -> None:
    monkeypatch.setenv("GITEA_ACCESS_TOKEN", "t")

    result = await _call_over_mcp(name, arguments)

    assert result.isError is True
    text = result.content[0].text  # type: ignore[union-attr]
    assert text.startswith(prefix)
    audit_lines = [line for line in capsys.readouterr().err.splitlines() if '"correlation_id"' in line]
    assert len(audit_lines) == 1
    assert json.loads(audit_lines[0])["outcome"] == "denied"
