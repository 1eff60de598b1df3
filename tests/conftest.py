"""
Pytest configuration and fixtures for combined status check tests.
"""

import os
from typing import Any
from unittest.mock import patch

import pytest

from combined_status_check.config import Settings
from combined_status_check.models import CheckRunRecord, StatusRecord


class FakeChecksClient:
    """
    In-memory stand-in for GitHubClient.

    Each entry of ``status_ticks`` / ``check_run_ticks`` is the list of pages
    served on one tick; the last entry is repeated once the list runs out. A
    page given as an exception instance is raised instead of yielded.
    """

    def __init__(
        self,
        status_ticks: list[list[Any]] | None = None,
        check_run_ticks: list[list[Any]] | None = None,
    ):
        self.status_ticks = status_ticks or [[[]]]
        self.check_run_ticks = check_run_ticks or [[[]]]
        self.status_calls: list[str] = []
        self.check_run_calls: list[str] = []
        self.closed = False

    async def _serve(self, ticks: list[list[Any]], calls: list[str], sha: str):
        pages = ticks[min(len(calls), len(ticks) - 1)]
        calls.append(sha)
        for page in pages:
            if isinstance(page, BaseException):
                raise page
            yield page

    def iter_status_pages(self, sha: str):
        return self._serve(self.status_ticks, self.status_calls, sha)

    def iter_check_run_pages(self, sha: str):
        return self._serve(self.check_run_ticks, self.check_run_calls, sha)

    async def aclose(self) -> None:
        self.closed = True


class RecordingSleep:
    """Async sleep replacement that records requested durations."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def status(context: str, state: str) -> StatusRecord:
    return StatusRecord(context=context, state=state)


def check_run(
    name: str, status: str = "completed", conclusion: str | None = "success"
) -> CheckRunRecord:
    return CheckRunRecord(name=name, status=status, conclusion=conclusion)


@pytest.fixture
def clean_env():
    """Run a test with an empty environment."""
    with patch.dict(os.environ, {}, clear=True):
        yield


@pytest.fixture
def settings_kwargs() -> dict[str, Any]:
    """Keyword arguments for a complete Settings object."""
    return {
        "github_token": "test-token",
        "initial_delay_seconds": 5,
        "interval_seconds": 10,
        "timeout_seconds": 25,
        "status_regex": "^ci/",
        "check_run_regex": ".*",
        "github_repository": "test-org/test-repo",
        "github_sha": "abc123",
        "github_event_name": "push",
    }


@pytest.fixture
def mock_settings(clean_env, settings_kwargs) -> Settings:
    """Settings for testing."""
    return Settings(_env_file=None, **settings_kwargs)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def sample_pull_request_event() -> dict[str, Any]:
    """Sample pull_request event payload for testing."""
    return {
        "action": "synchronize",
        "number": 123,
        "pull_request": {
            "number": 123,
            "title": "Update dependency example to v1.2.3",
            "state": "open",
            "head": {"ref": "feature/example", "sha": "head456"},
            "base": {"ref": "main", "repo": {"full_name": "test-org/test-repo"}},
        },
        "repository": {"full_name": "test-org/test-repo"},
    }
