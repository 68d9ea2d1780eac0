from __future__ import annotations

import json

import pytest
from gitea_mcp import errors
from gitea_mcp.envelope import failure, success
from gitea_mcp.safety import enforce_max_bytes, redact_text


def test_success_renders_payload_as_json() -> None:
    env = success({"id": 1, "name": "bug"})
    assert env.ok is True
    assert json.loads(env.to_text()) == {"id": 1, "name": "bug"}
    assert success("Branch Deleted").to_text() == '"Branch Deleted"'


def test_failure_is_single_line_with_code_and_hint() -> None:
    env = failure(errors.forbidden_tool("delete_branch"))
    assert env.ok is False
    assert env.payload is None
    assert env.message is not None
    assert env.message.startswith("Forbidden: Tool 'delete_branch'")
    assert "(Restart the server" in env.message

    multi = failure(errors.internal("line one\n  line two"))
    assert multi.to_text() == "Internal: line one line two"


def test_error_helpers_codes() -> None:
    assert errors.missing_parameter("owner").code == "MissingParameter"
    assert errors.invalid_parameter_type("page", "number").code == "InvalidParameterType"
    assert errors.invalid_parameter_value("state", ["open", "closed"]).message == (
        "Parameter 'state' must be one of: open, closed"
    )
    assert errors.invalid_parameter_value("page", reason="must be >= 1").message == (
        "Parameter 'page' is invalid: must be >= 1"
    )
    assert errors.invalid_array_element("labels", 2, "integer").code == "InvalidArrayElement"
    assert errors.unknown_tool("nope").message == "Unknown tool: nope"
    assert errors.cancelled("list_branches").code == "Cancelled"
    err = errors.external_service_error("boom", status_code=500)
    assert str(err) == "boom"
    assert err.status_code == 500


def test_redact_text() -> None:
    assert redact_text("Authorization: token abcdefgh12345") == "Authorization: token <redacted>"
    assert redact_text("GET /x?access_token=s3cr3t&page=1") == "GET /x?access_token=<redacted>&page=1"
    assert redact_text(42) == "<non-string>"
    assert len(redact_text("x" * 1000)) == 300


def test_enforce_max_bytes() -> None:
    enforce_max_bytes(data=b"abc", max_bytes=3, what="file content")
    with pytest.raises(errors.SafeError) as exc:
        enforce_max_bytes(data=b"abcd", max_bytes=3, what="file content")
    assert exc.value.code == "InvalidParameterValue"
    assert "file content" in exc.value.message


def test_redact_text_leaves_prose_about_tokens_alone() -> None:
    assert redact_text("token required") == "token required"
    assert redact_text("The token is expired or invalid") == "The token is expired or invalid"
    assert redact_text("bad token 0123456789abcdef0123456789abcdef01234567") == "bad token <redacted>"
    assert redact_text("authorization: Bearer short") == "authorization: Bearer <redacted>"
