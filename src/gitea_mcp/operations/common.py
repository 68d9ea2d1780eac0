"""Shared parameter declarations and request helpers for the tool tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from ..gitea_client import RequestBudget
from ..schema import number, string

if TYPE_CHECKING:
    from ..tools import Runtime

OWNER = string("owner", "repository owner", required=True)
REPO = string("repo", "repository name", required=True)
PAGE = number("page", "page number", default=1, integral=True, minimum=1)
PAGE_SIZE = number("pageSize", "page size", default=100, integral=True, minimum=1)


def budget(runtime: Runtime) -> RequestBudget:
    return RequestBudget(total_timeout_s=runtime.config.limits.total_timeout_s)


def repo_path(params: dict[str, Any]) -> str:
    """Return /repos/{owner}/{repo} with both segments escaped."""
    return f"/repos/{quote(params['owner'], safe='')}/{quote(params['repo'], safe='')}"


def page_params(params: dict[str, Any]) -> dict[str, Any]:
    """Translate page/pageSize into Gitea's page/limit query parameters."""
    return {"page": params["page"], "limit": params["pageSize"]}
