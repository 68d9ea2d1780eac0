"""Authenticated-user tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..registry import read_tool
from ..schema import ToolSchema
from .common import PAGE, PAGE_SIZE, budget, page_params

if TYPE_CHECKING:
    from ..tools import Runtime

GET_MY_USER_INFO = ToolSchema(
    name="get_my_user_info",
    description="Get my user info",
)

GET_USER_ORGS = ToolSchema(
    name="get_user_orgs",
    description="Get organizations associated with the authenticated user",
    parameters=(PAGE, PAGE_SIZE),
)


async def _get_my_user_info(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(method="GET", path="/user", budget=budget(runtime))


async def _get_user_orgs(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(
        method="GET",
        path="/user/orgs",
        params=page_params(params),
        budget=budget(runtime),
    )


TOOLS = (
    read_tool(GET_MY_USER_INFO, _get_my_user_info),
    read_tool(GET_USER_ORGS, _get_user_orgs),
)
