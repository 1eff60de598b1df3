"""
Custom exceptions for the combined status check.

Fetch and configuration problems are raised as these exceptions and terminate
the run. Pending, failed and timed out checks are normal outcomes and never
raise.
"""

from typing import Any


class CombinedStatusCheckError(Exception):
    """Base exception for combined status check errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code or "COMBINED_STATUS_CHECK_ERROR"
        self.context = context or {}


class GitHubAPIError(CombinedStatusCheckError):
    """Exception for GitHub API related errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "GITHUB_API_ERROR", context)
        self.status_code = status_code


class AuthenticationError(GitHubAPIError):
    """Exception for a token rejected by GitHub."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, 401, context)
        self.code = "AUTHENTICATION_ERROR"


class ConfigurationError(CombinedStatusCheckError):
    """Exception for configuration related errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "CONFIGURATION_ERROR", context)
