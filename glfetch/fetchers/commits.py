"""Commit fetchers for GitLab repositories."""

import asyncio
from typing import TYPE_CHECKING

from glfetch.gitlab_client import project_path
from glfetch.models import Commit

if TYPE_CHECKING:
    from glfetch.gitlab_client import GitLabClient


async def fetch_commits(
    client: "GitLabClient",
    project: str,
    ref: str,
    *,
    deadline: float | None = None,
    cancel: asyncio.Event | None = None,
) -> list[Commit]:
    """Return the commits reachable from a branch or tag name."""
    return await client.fetch_records(
        project_path(project, "repository/commits"),
        Commit,
        params={"ref_name": ref},
        deadline=deadline,
        cancel=cancel,
    )
