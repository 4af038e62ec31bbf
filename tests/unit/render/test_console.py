"""Tests for console rendering of fetched records."""

from __future__ import annotations

import orjson

from glfetch.models import Branch, Commit
from glfetch.render import console
from tests import factories


def test_merge_request_lines_include_branches_and_state() -> None:
    """Each merge request should render as a header line plus detail lines."""
    merge_request = factories.build_merge_request(42)

    lines = list(console.merge_request_lines([merge_request]))

    assert lines[0] == "!42 Refactor service module #42"
    assert "    state         = merged" in lines
    assert "    author        = alice" in lines
    assert "    created at    = 2024-01-02 12:00:00" in lines
    assert "    source branch = feature/42" in lines
    assert "    target branch = master" in lines


def test_merge_request_lines_show_unrecognised_state() -> None:
    """States outside the known set should be printed as sent by the server."""
    merge_request = factories.build_merge_request(7, state="under_review")

    lines = list(console.merge_request_lines([merge_request]))

    assert "    state         = under_review" in lines


def test_branch_lines_flag_protected_branches() -> None:
    """Protected branches should be marked and bare branches rendered with a dash."""
    lines = list(console.branch_lines([factories.build_branch("master"), Branch(name="scratch")]))

    assert lines == ["master  7b5c3cc8 [protected]", "scratch  -"]


def test_commit_lines_show_date_short_id_and_title() -> None:
    """Commit lines should start with the UTC creation time."""
    lines = list(console.commit_lines([factories.build_commit("ed899a2f", "Fix typo"), Commit(id="abcdef1234567")]))

    assert lines == ["2024-01-05 12:00:00  ed899a2f  Fix typo", "-  abcdef12  "]


def test_json_lines_emit_one_document_per_record() -> None:
    """JSON output should round-trip through orjson with every field present."""
    branch = factories.build_branch("master")

    (line,) = console.json_lines([branch])
    document = orjson.loads(line)

    assert document["name"] == "master"
    assert document["commit"]["parent_ids"] == ["4ad91d3c1144c406e50c7b33bae684bd6837faf8"]
    assert document["developers_can_merge"] is False


def test_format_timestamp_handles_missing_values() -> None:
    """Absent timestamps should render as a dash."""
    assert console.format_timestamp(None) == "-"
