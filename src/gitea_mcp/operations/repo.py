"""Branch and repository file tools."""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from ..errors import external_service_error
from ..registry import read_tool, write_tool
from ..safety import enforce_max_bytes
from ..schema import ToolSchema, boolean, string
from .common import OWNER, REPO, budget, repo_path

if TYPE_CHECKING:
    from ..tools import Runtime

FILE_PATH = string("filePath", "file path", required=True)
REF = string("ref", "ref can be branch/tag/commit", required=True)
MESSAGE = string("message", "commit message", required=True)
BRANCH_NAME = string("branch_name", "branch name", required=True)

CREATE_BRANCH = ToolSchema(
    name="create_branch",
    description="Create branch",
    parameters=(
        OWNER,
        REPO,
        string("branch", "Name of the branch to create", required=True),
        string("old_branch", "Name of the old branch to create from", required=True),
    ),
)

DELETE_BRANCH = ToolSchema(
    name="delete_branch",
    description="Delete branch",
    parameters=(OWNER, REPO, string("branch", "Name of the branch to delete", required=True)),
)

LIST_BRANCHES = ToolSchema(
    name="list_branches",
    description="List branches",
    parameters=(OWNER, REPO),
)

GET_FILE_CONTENT = ToolSchema(
    name="get_file_content",
    description="Get file Content and Metadata",
    parameters=(
        OWNER,
        REPO,
        REF,
        FILE_PATH,
        boolean("withLines", "whether to return file content with lines"),
    ),
)

GET_DIR_CONTENT = ToolSchema(
    name="get_dir_content",
    description="Get a list of entries in a directory",
    parameters=(OWNER, REPO, REF, string("filePath", "directory path", required=True)),
)

CREATE_FILE = ToolSchema(
    name="create_file",
    description="Create file",
    parameters=(
        OWNER,
        REPO,
        FILE_PATH,
        string("content", "file content", required=True),
        MESSAGE,
        BRANCH_NAME,
        string("new_branch_name", "new branch name"),
    ),
)

UPDATE_FILE = ToolSchema(
    name="update_file",
    description="Update file",
    parameters=(
        OWNER,
        REPO,
        FILE_PATH,
        string("sha", "sha is the SHA for the file that already exists", required=True),
        string("content", "file content", required=True),
        MESSAGE,
        BRANCH_NAME,
    ),
)

DELETE_FILE = ToolSchema(
    name="delete_file",
    description="Delete file",
    parameters=(
        OWNER,
        REPO,
        FILE_PATH,
        MESSAGE,
        BRANCH_NAME,
        string("sha", "sha", required=True),
    ),
)


def _contents_path(params: dict[str, Any]) -> str:
    return f"{repo_path(params)}/contents/{quote(params['filePath'].lstrip('/'), safe='/')}"


def _encode_content(runtime: Runtime, content: str) -> str:
    raw = content.encode("utf-8")
    enforce_max_bytes(data=raw, max_bytes=runtime.config.limits.file_write_max_bytes, what="file content")
    return base64.b64encode(raw).decode("ascii")


def content_lines(raw: bytes) -> list[dict[str, Any]]:
    """Split file content into numbered lines.

    A trailing newline does not produce an extra empty line.
    """
    text = raw.decode("utf-8", errors="replace")
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return [{"line": i, "content": line} for i, line in enumerate(lines, start=1)]


async def _create_branch(runtime: Runtime, params: dict[str, Any]) -> str:
    await runtime.gitea.request_json(
        method="POST",
        path=f"{repo_path(params)}/branches",
        json_body={"new_branch_name": params["branch"], "old_branch_name": params["old_branch"]},
        budget=budget(runtime),
    )
    return "Branch Created"


async def _delete_branch(runtime: Runtime, params: dict[str, Any]) -> str:
    await runtime.gitea.request_json(
        method="DELETE",
        path=f"{repo_path(params)}/branches/{quote(params['branch'], safe='')}",
        budget=budget(runtime),
    )
    return "Branch Deleted"


async def _list_branches(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(
        method="GET",
        path=f"{repo_path(params)}/branches",
        params={"page": 1, "limit": 100},
        budget=budget(runtime),
    )


async def _get_file_content(runtime: Runtime, params: dict[str, Any]) -> Any:
    data = await runtime.gitea.request_json(
        method="GET",
        path=_contents_path(params),
        params={"ref": params["ref"]},
        budget=budget(runtime),
    )
    if not params["withLines"]:
        return data

    if not isinstance(data, dict) or not isinstance(data.get("content"), str):
        raise external_service_error("Unexpected file content response")
    try:
        raw = base64.b64decode(data["content"])
    except (binascii.Error, ValueError) as exc:
        raise external_service_error("File content is not valid base64") from exc

    out = dict(data)
    out["content"] = content_lines(raw)
    return out


async def _get_dir_content(runtime: Runtime, params: dict[str, Any]) -> Any:
    return await runtime.gitea.request_json(
        method="GET",
        path=_contents_path(params),
        params={"ref": params["ref"]},
        budget=budget(runtime),
    )


async def _create_file(runtime: Runtime, params: dict[str, Any]) -> str:
    body: dict[str, Any] = {
        "content": _encode_content(runtime, params["content"]),
        "message": params["message"],
        "branch": params["branch_name"],
    }
    if params["new_branch_name"]:
        body["new_branch"] = params["new_branch_name"]
    await runtime.gitea.request_json(
        method="POST",
        path=_contents_path(params),
        json_body=body,
        budget=budget(runtime),
    )
    return "Create file success"


async def _update_file(runtime: Runtime, params: dict[str, Any]) -> str:
    await runtime.gitea.request_json(
        method="PUT",
        path=_contents_path(params),
        json_body={
            "sha": params["sha"],
            "content": _encode_content(runtime, params["content"]),
            "message": params["message"],
            "branch": params["branch_name"],
        },
        budget=budget(runtime),
    )
    return "Update file success"


async def _delete_file(runtime: Runtime, params: dict[str, Any]) -> str:
    await runtime.gitea.request_json(
        method="DELETE",
        path=_contents_path(params),
        json_body={
            "sha": params["sha"],
            "message": params["message"],
            "branch": params["branch_name"],
        },
        budget=budget(runtime),
    )
    return "Delete file success"


TOOLS = (
    write_tool(CREATE_BRANCH, _create_branch),
    write_tool(DELETE_BRANCH, _delete_branch),
    read_tool(LIST_BRANCHES, _list_branches),
    read_tool(GET_FILE_CONTENT, _get_file_content),
    read_tool(GET_DIR_CONTENT, _get_dir_content),
    write_tool(CREATE_FILE, _create_file),
    write_tool(UPDATE_FILE, _update_file),
    write_tool(DELETE_FILE, _delete_file),
)
