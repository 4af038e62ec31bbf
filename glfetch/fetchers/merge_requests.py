"""Merge request fetchers for GitLab projects."""

import asyncio
from typing import TYPE_CHECKING

from glfetch.gitlab_client import RequestBuildError, project_path
from glfetch.models import MergeRequest, MergeRequestStateFilter

if TYPE_CHECKING:
    from glfetch.gitlab_client import GitLabClient


async def fetch_merge_requests(
    client: "GitLabClient",
    project: str,
    *,
    state: MergeRequestStateFilter | str = MergeRequestStateFilter.MERGED,
    deadline: float | None = None,
    cancel: asyncio.Event | None = None,
) -> list[MergeRequest]:
    """Return the project's merge requests in the requested state."""
    try:
        state_filter = MergeRequestStateFilter(state)
    except ValueError as exc:
        msg = f"Unsupported merge request state filter {state!r}"
        raise RequestBuildError(msg) from exc
    return await client.fetch_records(
        project_path(project, "merge_requests"),
        MergeRequest,
        params={"state": state_filter.value},
        deadline=deadline,
        cancel=cancel,
    )
