"""Repository and issue label tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..registry import read_tool, write_tool
from ..schema import ToolSchema, number, number_array, string
from .common import OWNER, PAGE, PAGE_SIZE, REPO, budget, page_params, repo_path

if TYPE_CHECKING:
    from ..tools import Runtime

LABEL_ID = number("id", "label ID", required=True, integral=True, minimum=1)
ISSUE_INDEX = number("index", "issue index", required=True, integral=True, minimum=1)

LIST_REPO_LABELS = ToolSchema(
    name="list_repo_labels",
    description="Lists all labels for a given repository",
    parameters=(OWNER, REPO, PAGE, PAGE_SIZE),
)

GET_REPO_LABEL = ToolSchema(
    name="get_repo_label",
    description="Gets a single label by its ID for a repository",
    parameters=(OWNER, REPO, LABEL_ID),
)

CREATE_REPO_LABEL = ToolSchema(
    name="create_repo_label",
    description="Creates a new label for a repository",
    parameters=(
        OWNER,
        REPO,
        string("name", "label name", required=True),
        string("color", "label color (hex code, e.g., #RRGGBB)", required=True),
        string("description", "label description"),
    ),
)

EDIT_REPO_LABEL = ToolSchema(
    name="edit_repo_label",
    description="Edits an existing label in a repository",
    parameters=(
        OWNER,
        REPO,
        LABEL_ID,
        string("name", "new label name", keep_absent=True),
        string("color", "new label color (hex code, e.g., #RRGGBB)", keep_absent=True),
        string("description", "new label description", keep_absent=True),
    ),
)

DELETE_REPO_LABEL = ToolSchema(
    name="delete_repo_label",
    description="Deletes a label from a repository",
    parameters=(OWNER, REPO, LABEL_ID),
)

ADD_ISSUE_LABELS = ToolSchema(
    name="add_issue_labels",
    description="Adds one or more labels to an issue",
    parameters=(
        OWNER,
        REPO,
        ISSUE_INDEX,
        number_array("labels", "array of label IDs to add", required=True, integral=True, minimum=1),
    ),
)

REPLACE_ISSUE_LABELS = ToolSchema(
    name="replace_issue_labels",
    description="Replaces all labels on an issue",
    parameters=(
        OWNER,
        REPO,
        ISSUE_INDEX,
        number_array("labels", "array of label IDs to replace with", required=True, integral=True, minimum=1),
    ),
)

CLEAR_ISSUE_LABELS = ToolSchema(
    name="clear_issue_labels",
    description="Removes all labels from an issue",
    parameters=(OWNER, REPO, ISSUE_INDEX),
)

REMOVE_ISSUE_LABEL = ToolSchema(
    name="remove_issue_label",
    description="Removes a single label from an issue",
    parameters=(
        OWNER,
        REPO,
        ISSUE_INDEX,
        number("label_id", "label ID to remove", required=True, integral=True, minimum=1),
    ),
)


async def _list_repo_labels(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(
        method="GET",
        path=f"{repo_path(params)}/labels",
        params=page_params(params),
        budget=budget(runtime),
    )


async def _get_repo_label(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(
        method="GET",
        path=f"{repo_path(params)}/labels/{params['id']}",
        budget=budget(runtime),
    )


async def _create_repo_label(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(
        method="POST",
        path=f"{repo_path(params)}/labels",
        json_body={
            "name": params["name"],
            "color": params["color"],
            "description": params["description"],
        },
        budget=budget(runtime),
    )


async def _edit_repo_label(runtime: Runtime, params: dict[str, Any]) -> Any:
    # Only fields the caller supplied are sent; omitted ones stay unchanged on the server.
    body = {k: params[k] for k in ("name", "color", "description") if params[k] is not None}
    return await runtime.gitea.request_json(
        method="PATCH",
        path=f"{repo_path(params)}/labels/{params['id']}",
        json_body=body,
        budget=budget(runtime),
    )


async def _delete_repo_label(runtime: Runtime, params: dict[str, Any]) -> str:
    await runtime.gitea.request_json(
        method="DELETE",
        path=f"{repo_path(params)}/labels/{params['id']}",
        budget=budget(runtime),
    )
    return "Label deleted successfully"


async def _add_issue_labels(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(
        method="POST",
        path=f"{repo_path(params)}/issues/{params['index']}/labels",
        json_body={"labels": params["labels"]},
        budget=budget(runtime),
    )


async def _replace_issue_labels(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(
        method="PUT",
        path=f"{repo_path(params)}/issues/{params['index']}/labels",
        json_body={"labels": params["labels"]},
        budget=budget(runtime),
    )


async def _clear_issue_labels(runtime: Runtime, params: dict[str, Any]) -> str:
    await runtime.gitea.request_json(
        method="DELETE",
        path=f"{repo_path(params)}/issues/{params['index']}/labels",
        budget=budget(runtime),
    )
    return "Labels cleared successfully"


async def _remove_issue_label(runtime: Runtime, params: dict[str, Any]) -> str:
    await runtime.gitea.request_json(
        method="DELETE",
        path=f"{repo_path(params)}/issues/{params['index']}/labels/{params['label_id']}",
        budget=budget(runtime),
    )
    return "Label removed successfully"


TOOLS = (
    read_tool(LIST_REPO_LABELS, _list_repo_labels),
    read_tool(GET_REPO_LABEL, _get_repo_label),
    write_tool(CREATE_REPO_LABEL, _create_repo_label),
    write_tool(EDIT_REPO_LABEL, _edit_repo_label),
    write_tool(DELETE_REPO_LABEL, _delete_repo_label),
    write_tool(ADD_ISSUE_LABELS, _add_issue_labels),
    write_tool(REPLACE_ISSUE_LABELS, _replace_issue_labels),
    write_tool(CLEAR_ISSUE_LABELS, _clear_issue_labels),
    write_tool(REMOVE_ISSUE_LABEL, _remove_issue_label),
)
