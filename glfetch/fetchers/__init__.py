"""Fetchers for the GitLab project listings exposed by the CLI."""

from . import branches, commits, merge_requests

__all__ = [
    "branches",
    "commits",
    "merge_requests",
]
