"""
Configuration management for the combined status check.

This module reads the action inputs and the GitHub Actions runtime environment
using Pydantic Settings for type safety and validation. Inputs are accepted in
the form the Actions runner exports them (``INPUT_INITIAL-DELAY-SECONDS``) as
well as plain environment variables (``INITIAL_DELAY_SECONDS``).
"""

import re

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Action inputs
    github_token: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("INPUT_TOKEN", "GITHUB_TOKEN"),
        description="Token used to read statuses and check-runs",
    )
    initial_delay_seconds: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices(
            "INPUT_INITIAL-DELAY-SECONDS", "INITIAL_DELAY_SECONDS"
        ),
        description="Seconds to wait before the first poll",
    )
    interval_seconds: int = Field(
        ...,
        gt=0,
        validation_alias=AliasChoices("INPUT_INTERVAL-SECONDS", "INTERVAL_SECONDS"),
        description="Seconds between polls while checks are pending",
    )
    timeout_seconds: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("INPUT_TIMEOUT-SECONDS", "TIMEOUT_SECONDS"),
        description="Give up after waiting this many seconds",
    )
    status_regex: re.Pattern[str] = Field(
        ...,
        validation_alias=AliasChoices("INPUT_STATUS-REGEX", "STATUS_REGEX"),
        description="Only statuses whose context matches are considered",
    )
    check_run_regex: re.Pattern[str] = Field(
        ...,
        validation_alias=AliasChoices("INPUT_CHECK-RUN-REGEX", "CHECK_RUN_REGEX"),
        description="Only check-runs whose name matches are considered",
    )

    # GitHub Actions runtime
    github_repository: str = Field(..., description="Repository as owner/repo")
    github_sha: str = Field(default="", description="Commit that triggered the run")
    github_event_name: str = Field(default="", description="Triggering event name")
    github_event_path: str = Field(
        default="", description="Path to the triggering event payload"
    )
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub API URL"
    )
    github_output: str = Field(
        default="", description="Path of the step outputs file"
    )
    request_timeout_seconds: float = Field(
        default=30.0, gt=0, description="HTTP request timeout in seconds"
    )

    # Logging configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="actions", description="Log format")

    @field_validator("github_repository")
    @classmethod
    def validate_github_repository(cls, v: str) -> str:
        """Validate repository is in owner/repo form."""
        owner, _, repo = v.partition("/")
        if not owner or not repo or "/" in repo:
            raise ValueError(f"Invalid repository, expected owner/repo: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed_formats = {"actions", "json", "console"}
        if v.lower() not in allowed_formats:
            raise ValueError(f"Invalid log format: {v}")
        return v.lower()


# Global settings instance - initialized lazily to avoid import-time errors
_settings_instance = None


def get_settings() -> Settings:
    """
    Get the global settings instance, creating it if necessary.

    Raises:
        ConfigurationError: If a required input is missing or invalid
    """
    global _settings_instance
    if _settings_instance is None:
        try:
            _settings_instance = Settings()  # type: ignore[call-arg,unused-ignore]
        except ValidationError as e:
            fields = [".".join(str(loc) for loc in err["loc"]) for err in e.errors()]
            raise ConfigurationError(
                f"Invalid configuration: {e}", context={"fields": fields}
            ) from e
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings instance."""
    global _settings_instance
    _settings_instance = None
