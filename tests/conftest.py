"""Shared pytest fixtures for the glfetch test suite."""

from __future__ import annotations

import pytest

from glfetch.config import AppSettings

pytest_plugins = ("respx",)

API_BASE = "https://gitlab.example.com/api/v3"


@pytest.fixture
def settings() -> AppSettings:
    """Provide application settings with deterministic defaults for tests."""
    return AppSettings.model_validate(
        {
            "gitlab": {
                "url": "https://gitlab.example.com",
                "token": "token",  # pragma: allowlist secret
            },
            "project": {"name": "example/repo"},
        },
    )
