"""
Combined Status Check

Waits until every matching commit status and check-run of a commit has
finished, then reports success or the checks that failed.
"""

__version__ = "0.1.0"

from .classifier import classify_check_run, classify_status
from .config import Settings
from .exceptions import CombinedStatusCheckError
from .github_client import GitHubClient
from .models import CheckState, PollOutcome, PollResult, TickSnapshot
from .polling import CombinedStatusPoller

__all__ = [
    "Settings",
    "GitHubClient",
    "CombinedStatusPoller",
    "CombinedStatusCheckError",
    "CheckState",
    "PollOutcome",
    "PollResult",
    "TickSnapshot",
    "classify_status",
    "classify_check_run",
]
