"""
Tests for resolving the commit SHA from the trigger context.
"""

import json

import pytest

from combined_status_check.context import load_event_payload, resolve_commit_sha
from combined_status_check.exceptions import ConfigurationError


class TestResolveCommitSha:
    """Test commit SHA resolution."""

    def test_push_uses_github_sha(self):
        """Test that non pull request events use GITHUB_SHA."""
        assert resolve_commit_sha("push", "", "abc123") == "abc123"

    @pytest.mark.parametrize("event_name", ["pull_request", "pull_request_target"])
    def test_pull_request_uses_head_sha(
        self, tmp_path, sample_pull_request_event, event_name
    ):
        """Test that pull request events use the head SHA from the payload."""
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps(sample_pull_request_event))

        sha = resolve_commit_sha(event_name, str(event_path), "merge789")

        assert sha == "head456"

    def test_pull_request_without_event_path(self):
        """Test that a pull request event needs an event payload."""
        with pytest.raises(ConfigurationError, match="GITHUB_EVENT_PATH"):
            resolve_commit_sha("pull_request", "", "merge789")

    def test_pull_request_without_head_sha(self, tmp_path):
        """Test that a payload without a head SHA is rejected."""
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps({"pull_request": {"head": {}}}))

        with pytest.raises(ConfigurationError, match="pull_request.head.sha"):
            resolve_commit_sha("pull_request", str(event_path), "merge789")

    @pytest.mark.parametrize(
        "payload",
        [
            {"pull_request": None},
            {"pull_request": {"head": None}},
            {"pull_request": "not an object"},
            {"pull_request": {"head": ["abc"]}},
        ],
    )
    def test_pull_request_with_null_or_malformed_fields(self, tmp_path, payload):
        """Test that null or non-object pull_request fields are rejected."""
        event_path = tmp_path / "event.json"
        event_path.write_text(json.dumps(payload))

        with pytest.raises(ConfigurationError, match="pull_request.head.sha"):
            resolve_commit_sha("pull_request", str(event_path), "merge789")

    def test_missing_github_sha(self):
        """Test that other events need GITHUB_SHA."""
        with pytest.raises(ConfigurationError, match="GITHUB_SHA"):
            resolve_commit_sha("workflow_dispatch", "", "")


class TestLoadEventPayload:
    """Test reading the event payload file."""

    def test_missing_file(self, tmp_path):
        """Test that a missing payload file raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Failed to read"):
            load_event_payload(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        """Test that a malformed payload raises ConfigurationError."""
        event_path = tmp_path / "event.json"
        event_path.write_text("{not json")

        with pytest.raises(ConfigurationError, match="Failed to read"):
            load_event_payload(str(event_path))

    def test_non_object_payload(self, tmp_path):
        """Test that a payload that is not an object is rejected."""
        event_path = tmp_path / "event.json"
        event_path.write_text("[]")

        with pytest.raises(ConfigurationError, match="not a JSON object"):
            load_event_payload(str(event_path))
