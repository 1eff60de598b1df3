"""
Source fetchers for the polling loop.

Each fetcher drains every page of one source for a commit, drops records whose
name does not match the configured pattern and splits the rest into pending
and completed.
"""

import re
from collections.abc import AsyncIterator
from typing import Protocol

import structlog

from ..classifier import classify_check_run, classify_status
from ..models import (
    CheckRunPartition,
    CheckRunRecord,
    CheckState,
    StatusPartition,
    StatusRecord,
)

logger = structlog.get_logger(__name__)


class ChecksSource(Protocol):
    """Paginated source of the statuses and check-runs of a commit."""

    def iter_status_pages(self, sha: str) -> AsyncIterator[list[StatusRecord]]: ...

    def iter_check_run_pages(
        self, sha: str
    ) -> AsyncIterator[list[CheckRunRecord]]: ...


async def fetch_statuses(
    client: ChecksSource, sha: str, pattern: re.Pattern[str]
) -> StatusPartition:
    """
    Fetch and partition the commit statuses matching ``pattern``.

    Args:
        client: Source of status pages (``iter_status_pages``)
        sha: Commit SHA
        pattern: Compiled pattern tested against each status context

    Returns:
        Pending and completed statuses that matched the pattern
    """
    total = 0
    pending: list[StatusRecord] = []
    completed: list[StatusRecord] = []

    async for page in client.iter_status_pages(sha):
        total += len(page)
        for status in page:
            if not pattern.search(status.context):
                continue

            if classify_status(status) is CheckState.PENDING:
                pending.append(status)
            else:
                completed.append(status)

    partition = StatusPartition(
        pending=tuple(pending), completed=tuple(completed), total_seen=total
    )
    logger.info(
        "Fetched statuses",
        sha=sha,
        total=total,
        kept=partition.kept,
    )
    return partition


async def fetch_check_runs(
    client: ChecksSource, sha: str, pattern: re.Pattern[str]
) -> CheckRunPartition:
    """
    Fetch and partition the check-runs matching ``pattern``.

    Args:
        client: Source of check-run pages (``iter_check_run_pages``)
        sha: Commit SHA
        pattern: Compiled pattern tested against each check-run name

    Returns:
        Pending and completed check-runs that matched the pattern
    """
    total = 0
    pending: list[CheckRunRecord] = []
    completed: list[CheckRunRecord] = []

    async for page in client.iter_check_run_pages(sha):
        total += len(page)
        for run in page:
            if not pattern.search(run.name):
                continue

            if classify_check_run(run) is CheckState.PENDING:
                pending.append(run)
            else:
                completed.append(run)

    partition = CheckRunPartition(
        pending=tuple(pending), completed=tuple(completed), total_seen=total
    )
    logger.info(
        "Fetched check runs",
        sha=sha,
        total=total,
        kept=partition.kept,
    )
    return partition
