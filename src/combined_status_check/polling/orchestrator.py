"""
Polling orchestrator for the combined status check.

This module drives the tick loop: both sources are fetched concurrently, the
results are aggregated and the loop either waits, fails, succeeds or times out.
"""

import asyncio
import re
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from ..classifier import classify_check_run, classify_status
from ..models import (
    CheckRunPartition,
    CheckState,
    PollOutcome,
    PollResult,
    StatusPartition,
    TickSnapshot,
)
from .fetchers import ChecksSource, fetch_check_runs, fetch_statuses

logger = structlog.get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


def failed_status_names(partition: StatusPartition) -> tuple[str, ...]:
    """Contexts of completed statuses that failed."""
    return tuple(
        status.context
        for status in partition.completed
        if classify_status(status) is CheckState.FAILED
    )


def failed_check_run_names(partition: CheckRunPartition) -> tuple[str, ...]:
    """Names of completed check-runs that failed."""
    return tuple(
        run.name
        for run in partition.completed
        if classify_check_run(run) is CheckState.FAILED
    )


class CombinedStatusPoller:
    """
    Polls the statuses and check-runs of one commit until they settle.

    Elapsed time is tracked as the sum of the intervals waited, so the loop
    can be driven by a fake ``sleep`` without real time passing. The timeout
    is only checked after waiting; a tick that settles on success or failure
    reports that outcome regardless of the elapsed time.
    """

    def __init__(
        self,
        client: ChecksSource,
        sha: str,
        status_pattern: re.Pattern[str],
        check_run_pattern: re.Pattern[str],
        interval_seconds: int,
        timeout_seconds: int,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """
        Initialize the poller.

        Args:
            client: Paginated source of statuses and check-runs
            sha: Commit SHA to watch
            status_pattern: Filter applied to status contexts
            check_run_pattern: Filter applied to check-run names
            interval_seconds: Wait between ticks while checks are pending
            timeout_seconds: Stop waiting once this much time was spent waiting
            sleep: Coroutine function used to wait between ticks
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if timeout_seconds < 0:
            raise ValueError("timeout_seconds must not be negative")

        self.client = client
        self.sha = sha
        self.status_pattern = status_pattern
        self.check_run_pattern = check_run_pattern
        self.interval_seconds = interval_seconds
        self.timeout_seconds = timeout_seconds
        self._sleep = sleep

        self.elapsed_seconds = 0
        self.ticks = 0

    async def poll_once(self) -> TickSnapshot:
        """
        Fetch both sources concurrently and return the combined snapshot.

        Both fetches must finish before the snapshot is built. If either one
        raises, the other is cancelled and the error propagates.
        """
        status_task = asyncio.create_task(
            fetch_statuses(self.client, self.sha, self.status_pattern)
        )
        check_run_task = asyncio.create_task(
            fetch_check_runs(self.client, self.sha, self.check_run_pattern)
        )
        tasks = (status_task, check_run_task)

        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return TickSnapshot(
            statuses=status_task.result(), check_runs=check_run_task.result()
        )

    async def run(self) -> PollResult:
        """
        Run the polling loop until it reaches a terminal outcome.

        Returns:
            Success, failure with the failed names per source, or timeout
        """
        self.elapsed_seconds = 0
        self.ticks = 0

        logger.info(
            "Starting combined status check loop",
            sha=self.sha,
            interval_seconds=self.interval_seconds,
            timeout_seconds=self.timeout_seconds,
        )

        while True:
            snapshot = await self.poll_once()
            self.ticks += 1

            if snapshot.has_pending:
                logger.info(
                    "Waiting for checks to complete",
                    pending_statuses=len(snapshot.statuses.pending),
                    pending_check_runs=len(snapshot.check_runs.pending),
                    next_check_in_seconds=self.interval_seconds,
                )

                await self._sleep(self.interval_seconds)
                self.elapsed_seconds += self.interval_seconds

                if self.elapsed_seconds >= self.timeout_seconds:
                    logger.error(
                        "Timed out waiting for checks",
                        timeout_seconds=self.timeout_seconds,
                        elapsed_seconds=self.elapsed_seconds,
                        ticks=self.ticks,
                    )
                    return self._result(PollOutcome.TIMEOUT)
                continue

            failed_statuses = failed_status_names(snapshot.statuses)
            failed_check_runs = failed_check_run_names(snapshot.check_runs)

            if failed_statuses or failed_check_runs:
                logger.error(
                    "The following statuses have failed",
                    statuses=", ".join(failed_statuses) or "none",
                )
                logger.error(
                    "The following check runs have failed",
                    check_runs=", ".join(failed_check_runs) or "none",
                )
                return self._result(
                    PollOutcome.FAILURE, failed_statuses, failed_check_runs
                )

            logger.info(
                "All statuses and check runs have completed successfully",
                statuses=snapshot.statuses.kept,
                check_runs=snapshot.check_runs.kept,
                ticks=self.ticks,
            )
            return self._result(PollOutcome.SUCCESS)

    def _result(
        self,
        outcome: PollOutcome,
        failed_statuses: tuple[str, ...] = (),
        failed_check_runs: tuple[str, ...] = (),
    ) -> PollResult:
        return PollResult(
            outcome=outcome,
            failed_statuses=failed_statuses,
            failed_check_runs=failed_check_runs,
            elapsed_seconds=self.elapsed_seconds,
            ticks=self.ticks,
        )
