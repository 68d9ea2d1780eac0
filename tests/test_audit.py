from __future__ import annotations

import json
from pathlib import Path

import pytest
from gitea_mcp.audit import (AuditLogger, build_event, new_correlation_id,
                             target_repo_from_args)


def test_event_dict_omits_unset_fields() -> None:
    event = build_event(correlation_id="c1", tool="get_my_user_info", target_repo="<none>", outcome="succeeded")
    payload = event.to_dict()

    assert payload["tool"] == "get_my_user_info"
    assert "reason" not in payload
    assert "mutation" not in payload
    assert payload["timestamp"].endswith("Z")


def test_unknown_outcome_rejected() -> None:
    with pytest.raises(ValueError):
        build_event(correlation_id="c1", tool="t", target_repo="<none>", outcome="exploded")


def test_target_repo_from_args() -> None:
    assert target_repo_from_args({"owner": "acme", "repo": "widgets"}) == "acme/widgets"
    assert target_repo_from_args({"owner": "acme"}) == "<none>"
    assert target_repo_from_args(None) == "<none>"


def test_write_event_to_stderr_and_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    sink = tmp_path / "audit.jsonl"
    audit = AuditLogger(sink_path=sink)
    event = build_event(
        correlation_id=new_correlation_id(),
        tool="delete_branch",
        mutation="write",
        target_repo="acme/widgets",
        outcome="denied",
        reason="read-only",
        duration_ms=0,
    )

    audit.write_event(event)

    err = capsys.readouterr().err.strip()
    assert json.loads(err)["outcome"] == "denied"
    lines = sink.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["target_repo"] == "acme/widgets"


def test_rotation_keeps_bounded_backups(tmp_path: Path) -> None:
    sink = tmp_path / "audit.jsonl"
    audit = AuditLogger(sink_path=sink, max_bytes=10, max_backups=2)
    event = build_event(correlation_id="c", tool="list_branches", target_repo="a/b", outcome="succeeded")

    for _ in range(5):
        audit.write_event(event)

    assert sink.exists()
    assert Path(f"{sink}.1").exists()
    assert Path(f"{sink}.2").exists()
    assert not Path(f"{sink}.3").exists()
