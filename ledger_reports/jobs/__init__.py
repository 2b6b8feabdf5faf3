"""Job tracking package."""

from ledger_reports.jobs.tracker import JobSlot, JobTracker, RunHandle

__all__ = ["JobSlot", "JobTracker", "RunHandle"]
