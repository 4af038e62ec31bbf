"""Pydantic models describing the GitLab records returned by the fetchers."""

from datetime import datetime
from enum import StrEnum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, JsonValue, model_validator

# Fields whose payload shape GitLab does not fix: absent, null, scalar, list or object.
OpaqueValue: TypeAlias = JsonValue


class MergeRequestState(StrEnum):
    """Lifecycle state reported for a merge request."""

    OPENED = "opened"
    CLOSED = "closed"
    MERGED = "merged"
    LOCKED = "locked"
    REOPENED = "reopened"


class MergeRequestStateFilter(StrEnum):
    """Values accepted by the ``state`` query parameter of the merge request listing."""

    OPENED = "opened"
    MERGED = "merged"
    CLOSED = "closed"
    ALL = "all"


class GitLabRecord(BaseModel):
    """Immutable snapshot of a GitLab API object.

    Unknown keys are ignored and JSON ``null`` falls back to the field default.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Author(GitLabRecord):
    """User summary embedded in a merge request."""

    id: int = 0
    name: str = ""
    username: str = ""
    state: str = ""
    avatar_url: str = ""
    web_url: str = ""


class MergeRequest(GitLabRecord):
    """Merge request payload returned by the project merge request listing."""

    id: int = 0
    iid: int = 0
    project_id: int = 0
    title: str = ""
    description: str = ""
    # Unrecognised states are kept as plain strings.
    state: MergeRequestState | str | None = Field(default=None, union_mode="left_to_right")
    created_at: datetime | None = None
    updated_at: datetime | None = None
    target_branch: str = ""
    source_branch: str = ""
    upvotes: int = 0
    downvotes: int = 0
    author: Author = Field(default_factory=Author)
    assignee: OpaqueValue = None
    source_project_id: int = 0
    target_project_id: int = 0
    labels: OpaqueValue = None
    work_in_progress: bool = False
    milestone: OpaqueValue = None
    merge_when_build_succeeds: bool = False
    merge_status: str = ""
    sha: str = ""
    merge_commit_sha: str = ""
    subscribed: bool = False
    user_notes_count: int = 0
    approvals_before_merge: OpaqueValue = None
    should_remove_source_branch: OpaqueValue = None
    force_remove_source_branch: bool = False
    web_url: str = ""


class CommitSummary(GitLabRecord):
    """Head commit embedded in a branch listing."""

    id: str = ""
    message: str = ""
    parent_ids: tuple[str, ...] = ()
    authored_date: datetime | None = None
    author_name: str = ""
    author_email: str = ""
    committed_date: datetime | None = None
    committer_name: str = ""
    committer_email: str = ""


class Branch(GitLabRecord):
    """Repository branch with its head commit and protection flags."""

    name: str = ""
    commit: CommitSummary = Field(default_factory=CommitSummary)
    merged: bool = False
    protected: bool = False
    developers_can_push: bool = False
    developers_can_merge: bool = False


class Commit(GitLabRecord):
    """Commit returned by the repository commit listing."""

    id: str = ""
    short_id: str = ""
    title: str = ""
    message: str = ""
    author_name: str = ""
    author_email: str = ""
    created_at: datetime | None = None
