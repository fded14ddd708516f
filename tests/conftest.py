"""Shared fixtures."""

import pytest

from rollover.config import RepoRef


@pytest.fixture
def repo():
    return RepoRef(owner="octo", name="widgets")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove GitHub Actions variables that would leak into config resolution."""
    for key in (
        "GITHUB_TOKEN",
        "GITHUB_REPOSITORY",
        "GITHUB_EVENT_PATH",
        "GITHUB_API_URL",
        "GITHUB_ACTIONS",
        "INPUT_GITHUB-TOKEN",
        "INPUT_MILESTONE",
        "INPUT_ISSUES-COUNT",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
