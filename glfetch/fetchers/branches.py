"""Branch fetchers for GitLab repositories."""

import asyncio
from typing import TYPE_CHECKING

from glfetch.gitlab_client import project_path
from glfetch.models import Branch

if TYPE_CHECKING:
    from glfetch.gitlab_client import GitLabClient


async def fetch_branches(
    client: "GitLabClient",
    project: str,
    *,
    deadline: float | None = None,
    cancel: asyncio.Event | None = None,
) -> list[Branch]:
    """Return the repository branches of a project in server order."""
    return await client.fetch_records(
        project_path(project, "repository/branches"),
        Branch,
        deadline=deadline,
        cancel=cancel,
    )
