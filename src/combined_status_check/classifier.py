"""
Classification of commit statuses and check-runs.

Statuses and check-runs use different field names and different terminal
vocabularies, so each source gets its own function. Both are total: any value
that is neither pending nor a known failure counts as succeeded.
"""

from .models import CheckRunRecord, CheckState, StatusRecord

STATUS_PENDING_STATE = "pending"
STATUS_FAILURE_STATES = frozenset({"error", "failure"})

CHECK_RUN_COMPLETED_STATUS = "completed"
CHECK_RUN_FAILURE_CONCLUSIONS = frozenset({"cancelled", "failure", "timed_out"})


def classify_status(status: StatusRecord) -> CheckState:
    """
    Classify a commit status.

    Args:
        status: Status record from the combined status endpoint

    Returns:
        PENDING for "pending", FAILED for "error" or "failure",
        SUCCEEDED otherwise
    """
    if status.state == STATUS_PENDING_STATE:
        return CheckState.PENDING
    if status.state in STATUS_FAILURE_STATES:
        return CheckState.FAILED
    return CheckState.SUCCEEDED


def classify_check_run(run: CheckRunRecord) -> CheckState:
    """
    Classify a check-run.

    Args:
        run: Check-run record from the checks endpoint

    Returns:
        PENDING until the run is completed, then FAILED for a cancelled,
        failed or timed out conclusion and SUCCEEDED otherwise
    """
    if run.status != CHECK_RUN_COMPLETED_STATUS:
        return CheckState.PENDING
    if run.conclusion in CHECK_RUN_FAILURE_CONCLUSIONS:
        return CheckState.FAILED
    return CheckState.SUCCEEDED
