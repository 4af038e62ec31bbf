"""Console rendering of fetched GitLab records."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import orjson
import pendulum

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from glfetch.models import Branch, Commit, GitLabRecord, MergeRequest

_MISSING = "-"


def format_timestamp(value: datetime | None) -> str:
    """Render a timestamp in UTC, or a dash when GitLab did not send one."""
    if value is None:
        return _MISSING
    return pendulum.instance(value).in_timezone("UTC").to_datetime_string()


def merge_request_lines(merge_requests: Iterable[MergeRequest]) -> Iterator[str]:
    """Yield a short summary block for each merge request."""
    for merge_request in merge_requests:
        state = str(merge_request.state) if merge_request.state else _MISSING
        yield f"!{merge_request.iid} {merge_request.title}"
        yield f"    state         = {state}"
        yield f"    author        = {merge_request.author.username or _MISSING}"
        yield f"    created at    = {format_timestamp(merge_request.created_at)}"
        yield f"    source branch = {merge_request.source_branch}"
        yield f"    target branch = {merge_request.target_branch}"


def branch_lines(branches: Iterable[Branch]) -> Iterator[str]:
    """Yield one line per branch with its head commit and flags."""
    for branch in branches:
        flags = [
            label
            for label, enabled in (("protected", branch.protected), ("merged", branch.merged))
            if enabled
        ]
        head = branch.commit.id[:8] or _MISSING
        suffix = f" [{', '.join(flags)}]" if flags else ""
        yield f"{branch.name}  {head}{suffix}"


def commit_lines(commits: Iterable[Commit]) -> Iterator[str]:
    """Yield one line per commit: date, short SHA and title."""
    for commit in commits:
        short_id = commit.short_id or commit.id[:8] or _MISSING
        yield f"{format_timestamp(commit.created_at)}  {short_id}  {commit.title}"


def json_lines(records: Iterable[GitLabRecord]) -> Iterator[str]:
    """Yield each record as a compact JSON document."""
    for record in records:
        yield orjson.dumps(record.model_dump(mode="json")).decode()
