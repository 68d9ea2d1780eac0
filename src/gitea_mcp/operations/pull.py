"""Pull request tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..registry import read_tool, write_tool
from ..schema import ToolSchema, number, string
from .common import OWNER, PAGE, PAGE_SIZE, REPO, budget, page_params, repo_path

if TYPE_CHECKING:
    from ..tools import Runtime

PR_STATES = ("open", "closed", "all")
PR_SORTS = ("oldest", "recentupdate", "leastupdate", "mostcomment", "leastcomment", "priority")

GET_PULL_REQUEST_BY_INDEX = ToolSchema(
    name="get_pull_request_by_index",
    description="get pull request by index",
    parameters=(
        OWNER,
        REPO,
        number("index", "repository pull request index", required=True, integral=True, minimum=1),
    ),
)

LIST_REPO_PULL_REQUESTS = ToolSchema(
    name="list_repo_pull_requests",
    description="List repository pull requests",
    parameters=(
        OWNER,
        REPO,
        string("state", "state", enum=PR_STATES, default="all"),
        string("sort", "sort", enum=PR_SORTS, default="recentupdate"),
        number("milestone", "milestone", integral=True, minimum=1, keep_absent=True),
        PAGE,
        PAGE_SIZE,
    ),
)

CREATE_PULL_REQUEST = ToolSchema(
    name="create_pull_request",
    description="create pull request",
    parameters=(
        OWNER,
        REPO,
        string("title", "pull request title", required=True),
        string("body", "pull request body", required=True),
        string("head", "pull request head", required=True),
        string("base", "pull request base", required=True),
    ),
)


async def _get_pull_request_by_index(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(
        method="GET",
        path=f"{repo_path(params)}/pulls/{params['index']}",
        budget=budget(runtime),
    )


async def _list_repo_pull_requests(runtime: Runtime, params: dict[str, Any]) -> Any:
    query = {"state": params["state"], "sort": params["sort"], **page_params(params)}
    if params["milestone"] is not None:
        query["milestone"] = params["milestone"]
    return await runtime.gitea.request_json(
        method="GET",
        path=f"{repo_path(params)}/pulls",
        params=query,
        budget=budget(runtime),
    )


async def _create_pull_request(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(
        method="POST",
        path=f"{repo_path(params)}/pulls",
        json_body={
            "title": params["title"],
            "body": params["body"],
            "head": params["head"],
            "base": params["base"],
        },
        budget=budget(runtime),
    )


TOOLS = (
    read_tool(GET_PULL_REQUEST_BY_INDEX, _get_pull_request_by_index),
    read_tool(LIST_REPO_PULL_REQUESTS, _list_repo_pull_requests),
    write_tool(CREATE_PULL_REQUEST, _create_pull_request),
)
