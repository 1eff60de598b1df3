"""
Main application entry point for the combined status check.

This module configures logging, resolves the commit to watch, waits for checks
to start and runs the polling loop, translating its outcome into step outputs
and a process exit code.
"""

import asyncio
import logging
import sys
from typing import Any

import structlog

from .config import Settings, get_settings
from .context import resolve_commit_sha
from .exceptions import CombinedStatusCheckError, ConfigurationError
from .github_client import GitHubClient
from .models import PollOutcome, PollResult
from .polling.orchestrator import CombinedStatusPoller, SleepFunc

logger = structlog.get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_CHECKS_FAILED = 1
EXIT_ERROR = 2


class GitHubActionsRenderer:
    """
    Render log entries as GitHub Actions workflow commands.

    Errors, warnings and debug entries become ``::error::``, ``::warning::``
    and ``::debug::`` commands so the runner turns them into annotations.
    Info entries are printed as plain lines.
    """

    COMMANDS = {
        "debug": "debug",
        "warning": "warning",
        "error": "error",
        "critical": "error",
        "exception": "error",
    }

    def __call__(self, logger: Any, method_name: str, event_dict: Any) -> str:
        level = event_dict.pop("level", method_name)
        event = str(event_dict.pop("event", ""))
        event_dict.pop("timestamp", None)
        event_dict.pop("logger", None)

        details = " ".join(f"{key}={value}" for key, value in event_dict.items())
        message = f"{event}: {details}" if details else event

        command = self.COMMANDS.get(level)
        if command is None:
            return message
        return f"::{command}::{self._escape(message)}"

    @staticmethod
    def _escape(message: str) -> str:
        return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def setup_logging(log_level: str = "INFO", log_format: str = "actions") -> None:
    """Configure structured logging."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(message)s",
        stream=sys.stdout,
        force=True,
    )

    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    elif log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = GitHubActionsRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def write_outputs(output_path: str, result: PollResult) -> None:
    """
    Append the poll result to the step outputs file.

    Args:
        output_path: Value of ``GITHUB_OUTPUT``; nothing is written when empty
        result: Terminal poll result
    """
    if not output_path:
        return

    with open(output_path, "a", encoding="utf-8") as f:
        f.write(f"outcome={result.outcome.value}\n")
        f.write(f"failed-statuses={','.join(result.failed_statuses)}\n")
        f.write(f"failed-check-runs={','.join(result.failed_check_runs)}\n")


def exit_code_for(result: PollResult) -> int:
    """Map a poll outcome to a process exit code."""
    if result.outcome is PollOutcome.SUCCESS:
        return EXIT_SUCCESS
    return EXIT_CHECKS_FAILED


async def run(
    settings: Settings,
    client: GitHubClient | None = None,
    sleep: SleepFunc = asyncio.sleep,
) -> PollResult:
    """
    Wait for the checks of the triggering commit to settle.

    Args:
        settings: Application settings
        client: GitHub client; one is created from settings when omitted
        sleep: Coroutine function used for the initial delay and intervals

    Returns:
        Terminal poll result
    """
    sha = resolve_commit_sha(
        settings.github_event_name, settings.github_event_path, settings.github_sha
    )

    logger.info(
        "Executing combined status check",
        repository=settings.github_repository,
        sha=sha,
    )

    owns_client = client is None
    if client is None:
        client = GitHubClient.from_settings(settings)

    try:
        logger.info(
            "Waiting for checks to start",
            initial_delay_seconds=settings.initial_delay_seconds,
        )
        await sleep(settings.initial_delay_seconds)

        poller = CombinedStatusPoller(
            client=client,
            sha=sha,
            status_pattern=settings.status_regex,
            check_run_pattern=settings.check_run_regex,
            interval_seconds=settings.interval_seconds,
            timeout_seconds=settings.timeout_seconds,
            sleep=sleep,
        )
        result = await poller.run()
    finally:
        if owns_client:
            await client.aclose()

    write_outputs(settings.github_output, result)
    return result


def main() -> None:
    """Main entry point."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.error("Failed to load configuration", error=str(e), **e.context)
        sys.exit(EXIT_ERROR)

    setup_logging(settings.log_level, settings.log_format)

    try:
        result = asyncio.run(run(settings))
    except CombinedStatusCheckError as e:
        logger.error("Combined status check aborted", error=str(e), code=e.code)
        sys.exit(EXIT_ERROR)

    sys.exit(exit_code_for(result))


if __name__ == "__main__":
    main()
