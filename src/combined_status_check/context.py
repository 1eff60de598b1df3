"""
Trigger context helpers.

Resolves which commit to watch from the GitHub Actions event that started the
workflow run.
"""

import json
from pathlib import Path
from typing import Any

import structlog

from .exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

PULL_REQUEST_EVENTS = frozenset({"pull_request", "pull_request_target"})


def load_event_payload(event_path: str) -> dict[str, Any]:
    """
    Load the event payload written by the Actions runner.

    Args:
        event_path: Path from ``GITHUB_EVENT_PATH``

    Returns:
        Parsed event payload
    """
    path = Path(event_path)
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Failed to read event payload {path}: {e}",
            context={"event_path": event_path},
        ) from e

    if not isinstance(payload, dict):
        raise ConfigurationError(
            f"Event payload {path} is not a JSON object",
            context={"event_path": event_path},
        )
    return payload


def resolve_commit_sha(event_name: str, event_path: str, default_sha: str) -> str:
    """
    Resolve the commit SHA to watch.

    For pull request events the runner's ``GITHUB_SHA`` is the merge commit, so
    the pull request head SHA is read from the event payload instead.

    Args:
        event_name: Value of ``GITHUB_EVENT_NAME``
        event_path: Value of ``GITHUB_EVENT_PATH``
        default_sha: Value of ``GITHUB_SHA``

    Returns:
        Commit SHA
    """
    if event_name in PULL_REQUEST_EVENTS:
        if not event_path:
            raise ConfigurationError(
                f"GITHUB_EVENT_PATH is required for {event_name} events"
            )
        payload = load_event_payload(event_path)
        sha = None
        pull_request = payload.get("pull_request")
        if isinstance(pull_request, dict):
            head = pull_request.get("head")
            if isinstance(head, dict):
                sha = head.get("sha")
        if not sha:
            raise ConfigurationError(
                "Event payload has no pull_request.head.sha",
                context={"event_name": event_name, "event_path": event_path},
            )
        logger.debug("Using pull request head SHA", event_name=event_name, sha=sha)
        return str(sha)

    if not default_sha:
        raise ConfigurationError(
            "GITHUB_SHA is required", context={"event_name": event_name}
        )
    return default_sha
