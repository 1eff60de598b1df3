"""
Tests for status and check-run classification.
"""

import pytest
from conftest import check_run, status

from combined_status_check.classifier import classify_check_run, classify_status
from combined_status_check.models import CheckState


class TestClassifyStatus:
    """Test classification of commit statuses."""

    def test_pending_status(self):
        """Test that the pending state is pending."""
        assert classify_status(status("ci/build", "pending")) is CheckState.PENDING

    @pytest.mark.parametrize("state", ["error", "failure"])
    def test_failed_status(self, state):
        """Test that error and failure states are failed."""
        assert classify_status(status("ci/build", state)) is CheckState.FAILED

    def test_success_status(self):
        """Test that the success state is succeeded."""
        assert classify_status(status("ci/build", "success")) is CheckState.SUCCEEDED

    def test_unknown_state_counts_as_succeeded(self):
        """Test that unrecognised terminal states fall through to succeeded."""
        assert classify_status(status("ci/build", "skipped")) is CheckState.SUCCEEDED

    def test_state_match_is_case_sensitive(self):
        """Test that only the exact lowercase sentinels are recognised."""
        assert classify_status(status("ci/build", "PENDING")) is CheckState.SUCCEEDED


class TestClassifyCheckRun:
    """Test classification of check-runs."""

    @pytest.mark.parametrize("run_status", ["queued", "in_progress", "waiting"])
    def test_incomplete_run_is_pending(self, run_status):
        """Test that any status other than completed is pending."""
        run = check_run("lint", status=run_status, conclusion=None)
        assert classify_check_run(run) is CheckState.PENDING

    def test_incomplete_run_ignores_conclusion(self):
        """Test that a conclusion does not matter before completion."""
        run = check_run("lint", status="in_progress", conclusion="failure")
        assert classify_check_run(run) is CheckState.PENDING

    @pytest.mark.parametrize("conclusion", ["cancelled", "failure", "timed_out"])
    def test_failed_conclusions(self, conclusion):
        """Test that cancelled, failure and timed_out are failed."""
        run = check_run("lint", conclusion=conclusion)
        assert classify_check_run(run) is CheckState.FAILED

    @pytest.mark.parametrize(
        "conclusion", ["success", "neutral", "skipped", "action_required", None]
    )
    def test_other_conclusions_succeed(self, conclusion):
        """Test that every other conclusion counts as succeeded."""
        run = check_run("lint", conclusion=conclusion)
        assert classify_check_run(run) is CheckState.SUCCEEDED
