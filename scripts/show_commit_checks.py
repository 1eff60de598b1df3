#!/usr/bin/env python3
"""
Show the current checks of a commit for local debugging.

Runs a single polling tick against a commit and prints how its statuses and
check-runs are classified.

Usage:
    GITHUB_TOKEN=... python scripts/show_commit_checks.py owner/repo <sha> [regex]
"""

import asyncio
import os
import re
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from combined_status_check.classifier import classify_check_run, classify_status
from combined_status_check.exceptions import CombinedStatusCheckError
from combined_status_check.github_client import GitHubClient
from combined_status_check.polling import CombinedStatusPoller


async def show_commit_checks(repository: str, sha: str, pattern: str) -> bool:
    """Fetch one snapshot of the commit's checks and print it."""
    token = os.environ.get("GITHUB_TOKEN", "")
    if not token:
        print("❌ GITHUB_TOKEN is not set")
        return False

    regex = re.compile(pattern)

    async with GitHubClient(token=token, repository=repository) as client:
        poller = CombinedStatusPoller(
            client=client,
            sha=sha,
            status_pattern=regex,
            check_run_pattern=regex,
            interval_seconds=1,
            timeout_seconds=0,
        )
        try:
            snapshot = await poller.poll_once()
        except CombinedStatusCheckError as e:
            print(f"❌ Failed to fetch checks: {e}")
            return False

    print(f"📋 {repository}@{sha} (pattern {pattern!r})")
    print(
        f"   Statuses: {snapshot.statuses.kept} of "
        f"{snapshot.statuses.total_seen} kept"
    )
    for status in snapshot.statuses.pending + snapshot.statuses.completed:
        print(f"   - {status.context}: {classify_status(status).value}")

    print(
        f"   Check runs: {snapshot.check_runs.kept} of "
        f"{snapshot.check_runs.total_seen} kept"
    )
    for run in snapshot.check_runs.pending + snapshot.check_runs.completed:
        print(f"   - {run.name}: {classify_check_run(run).value}")

    if client.rate_limit_remaining is not None:
        print(f"   Rate limit remaining: {client.rate_limit_remaining}")

    return True


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(2)

    pattern = sys.argv[3] if len(sys.argv) > 3 else ".*"
    success = asyncio.run(show_commit_checks(sys.argv[1], sys.argv[2], pattern))
    sys.exit(0 if success else 1)
