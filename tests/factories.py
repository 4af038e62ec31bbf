"""Factories for constructing GitLab API payloads and records in tests."""

from __future__ import annotations

from typing import Any

import pendulum

from glfetch.models import Branch, Commit, MergeRequest

REFERENCE = pendulum.datetime(2024, 1, 5, 12, tz="UTC")


def merge_request_payload(iid: int = 42, **overrides: Any) -> dict[str, Any]:
    """Return a v3 merge request payload as GitLab would send it."""
    payload: dict[str, Any] = {
        "id": 500 + iid,
        "iid": iid,
        "project_id": 1,
        "title": f"Refactor service module #{iid}",
        "description": None,
        "state": "merged",
        "created_at": REFERENCE.subtract(days=3).to_iso8601_string(),
        "updated_at": REFERENCE.subtract(days=1).to_iso8601_string(),
        "target_branch": "master",
        "source_branch": f"feature/{iid}",
        "upvotes": 2,
        "downvotes": 0,
        "author": {
            "name": "Alice",
            "username": "alice",
            "id": 10,
            "state": "active",
            "avatar_url": "https://gitlab.example.com/uploads/alice.png",
            "web_url": "https://gitlab.example.com/alice",
        },
        "assignee": None,
        "source_project_id": 1,
        "target_project_id": 1,
        "labels": ["backend", "refactor"],
        "work_in_progress": False,
        "milestone": {"id": 3, "title": "v1.2", "due_date": None},
        "merge_when_build_succeeds": False,
        "merge_status": "can_be_merged",
        "sha": "8888888888888888888888888888888888888888",
        "merge_commit_sha": None,
        "subscribed": True,
        "user_notes_count": 3,
        "approvals_before_merge": None,
        "should_remove_source_branch": True,
        "force_remove_source_branch": False,
        "web_url": f"https://gitlab.example.com/example/repo/merge_requests/{iid}",
        "time_stats": {"time_estimate": 0},
    }
    payload.update(overrides)
    return payload


def branch_payload(name: str = "master", **overrides: Any) -> dict[str, Any]:
    """Return a branch payload with an embedded head commit."""
    payload: dict[str, Any] = {
        "name": name,
        "commit": {
            "id": "7b5c3cc8be40ee161ae89a06bba6229da1032a0c",
            "message": "add projects API",
            "parent_ids": ["4ad91d3c1144c406e50c7b33bae684bd6837faf8"],
            "authored_date": "2012-06-27T05:51:39-07:00",
            "author_name": "John Smith",
            "author_email": "john@example.com",
            "committed_date": "2012-06-28T03:44:20-07:00",
            "committer_name": "John Smith",
            "committer_email": "john@example.com",
        },
        "merged": False,
        "protected": True,
        "developers_can_push": False,
        "developers_can_merge": False,
    }
    payload.update(overrides)
    return payload


def commit_payload(short_id: str = "ed899a2f", title: str = "Replace sanitize with escape once") -> dict[str, Any]:
    """Return a commit listing payload."""
    return {
        "id": f"{short_id}4a6fb2d9b2fd0f6b1d1c9c7bd8c5a6b3e7",
        "short_id": short_id,
        "title": title,
        "author_name": "Dmitriy Zaporozhets",
        "author_email": "dzaporozhets@sphereconsultinginc.com",
        "created_at": "2012-09-20T11:50:22+03:00",
        "message": f"{title}\n",
    }


def build_merge_request(iid: int = 42, **overrides: Any) -> MergeRequest:
    """Decode a merge request record from the default payload."""
    return MergeRequest.model_validate(merge_request_payload(iid, **overrides))


def build_branch(name: str = "master", **overrides: Any) -> Branch:
    """Decode a branch record from the default payload."""
    return Branch.model_validate(branch_payload(name, **overrides))


def build_commit(short_id: str = "ed899a2f", title: str = "Replace sanitize with escape once") -> Commit:
    """Construct a commit record anchored to the reference time."""
    return Commit(
        id=f"{short_id}00000000",
        short_id=short_id,
        title=title,
        message=title,
        author_name="Alice",
        author_email="alice@example.com",
        created_at=REFERENCE,
    )
