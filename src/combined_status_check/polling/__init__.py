"""
Polling system for the combined status check.

This package contains the source fetchers and the orchestrator that drives
the polling loop.
"""

from .fetchers import ChecksSource, fetch_check_runs, fetch_statuses
from .orchestrator import CombinedStatusPoller

__all__ = [
    "ChecksSource",
    "CombinedStatusPoller",
    "fetch_check_runs",
    "fetch_statuses",
]
