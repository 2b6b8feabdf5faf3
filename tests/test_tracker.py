"""Tests for the per-report job state machine."""

from ledger_reports.jobs import JobTracker
from ledger_reports.models import JobState, ReportName


class TestJobTracker:
    """Tests for JobTracker transitions and queries."""

    def test_all_jobs_start_idle(self):
        """Test every report is idle before any run."""
        tracker = JobTracker()
        for report in ReportName:
            assert tracker.describe(report) == "idle"
        assert not tracker.is_running()

    def test_running_then_succeeded(self):
        """Test a successful run reports its duration."""
        tracker = JobTracker()
        handle = tracker.mark_running(ReportName.ACCOUNTS)
        assert tracker.status(ReportName.ACCOUNTS).state == JobState.RUNNING
        assert tracker.is_running(ReportName.ACCOUNTS)

        status = tracker.mark_succeeded(handle)

        assert status.state == JobState.SUCCEEDED
        assert status.duration_ms >= 0
        assert status.started_at <= status.finished_at
        assert "finished in" in tracker.describe(ReportName.ACCOUNTS)

    def test_failed_is_observable(self):
        """Test a failed run is distinguishable from idle and running."""
        tracker = JobTracker()
        handle = tracker.mark_running(ReportName.FS)
        tracker.mark_failed(handle, OSError("Directory not found"))

        status = tracker.status(ReportName.FS)
        assert status.state == JobState.FAILED
        assert status.error == "Directory not found"
        assert tracker.describe(ReportName.FS) == "failed: Directory not found"

    def test_failure_without_message_uses_type(self):
        """Test an exception with no message still gives a reason."""
        tracker = JobTracker()
        handle = tracker.mark_running(ReportName.FS)
        tracker.mark_failed(handle, TimeoutError())
        assert tracker.status(ReportName.FS).error == "TimeoutError"

    def test_rerun_goes_straight_to_running(self):
        """Test a terminal job re-enters running on a new run."""
        tracker = JobTracker()
        tracker.mark_failed(tracker.mark_running(ReportName.YEARLY), ValueError("boom"))

        tracker.mark_running(ReportName.YEARLY)

        status = tracker.status(ReportName.YEARLY)
        assert status.state == JobState.RUNNING
        assert status.error is None

    def test_slots_are_independent(self):
        """Test one job's transitions never touch another's slot."""
        tracker = JobTracker()
        handle = tracker.mark_running(ReportName.ACCOUNTS)
        tracker.mark_succeeded(handle)

        assert tracker.describe(ReportName.YEARLY) == "idle"
        assert tracker.describe(ReportName.FS) == "idle"

    def test_snapshot_keyed_by_filename(self):
        """Test the status snapshot uses output file names."""
        tracker = JobTracker()
        tracker.mark_running("fs")
        assert tracker.snapshot() == {
            "accounts.csv": "idle",
            "yearly.csv": "idle",
            "fs.csv": "running",
        }
