from __future__ import annotations

from pathlib import Path

import pytest
from gitea_mcp.config import (DEFAULT_HOST, load_config_from_env,
                              normalize_host, parse_bool)
from gitea_mcp.errors import SafeError

_ENV = (
    "GITEA_ACCESS_TOKEN",
    "GITEA_HOST",
    "GITEA_READONLY",
    "GITEA_INSECURE",
    "GITEA_DEBUG",
    "GITEA_MCP_AUDIT_LOG_PATH",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def test_missing_token_is_config_error() -> None:
    with pytest.raises(SafeError) as exc:
        load_config_from_env()
    assert exc.value.code == "Config"
    assert "GITEA_ACCESS_TOKEN" in exc.value.message


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITEA_ACCESS_TOKEN", "secret-token")

    cfg = load_config_from_env()

    assert cfg.host == DEFAULT_HOST
    assert cfg.api_base_url == "https://gitea.com/api/v1"
    assert cfg.read_only is False
    assert cfg.insecure is False
    assert cfg.audit_log_path is None
    assert "secret-token" not in repr(cfg)


def test_flags_and_host(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GITEA_ACCESS_TOKEN", "t")
    monkeypatch.setenv("GITEA_HOST", "https://git.example.com/api/v1/")
    monkeypatch.setenv("GITEA_READONLY", "true")
    monkeypatch.setenv("GITEA_INSECURE", "1")
    monkeypatch.setenv("GITEA_DEBUG", "yes")
    monkeypatch.setenv("GITEA_MCP_AUDIT_LOG_PATH", str(tmp_path / "audit.jsonl"))

    cfg = load_config_from_env()

    assert cfg.host == "https://git.example.com"
    assert cfg.read_only is True
    assert cfg.insecure is True
    assert cfg.debug is True
    assert cfg.audit_log_path == tmp_path / "audit.jsonl"


def test_relative_audit_path_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITEA_ACCESS_TOKEN", "t")
    monkeypatch.setenv("GITEA_MCP_AUDIT_LOG_PATH", "audit.jsonl")

    with pytest.raises(SafeError) as exc:
        load_config_from_env()
    assert exc.value.code == "Config"


@pytest.mark.parametrize("raw", ["gitea.example.com", "ftp://gitea.example.com", "https://g.example.com/?x=1"])
def test_normalize_host_rejects_bad_urls(raw: str) -> None:
    with pytest.raises(SafeError):
        normalize_host(raw)


def test_parse_bool() -> None:
    assert parse_bool("ON") is True
    assert parse_bool("0") is False
    assert parse_bool(None) is False
