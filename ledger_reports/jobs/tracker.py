"""
Job Tracker

Holds the observable state of the three report jobs.

DESIGN DECISION: One slot per job instead of one shared dict.
Each slot is written only by the run that owns the job and holds an
immutable JobStatus, so a write is a single reference swap. Status
queries never take a lock and never wait for a running job.
"""

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from ledger_reports.models.job import JobState, JobStatus
from ledger_reports.models.report import ReportName


@dataclass
class RunHandle:
    """Start marker returned by mark_running and passed back on completion."""

    report: ReportName
    started_at: datetime
    started_monotonic: float

    def elapsed_ms(self) -> int:
        return int(round((time.perf_counter() - self.started_monotonic) * 1000))


class JobSlot:
    """State cell for one named job."""

    __slots__ = ("_status",)

    def __init__(self, report: ReportName):
        self._status = JobStatus(report=report)

    @property
    def status(self) -> JobStatus:
        return self._status

    def set(self, status: JobStatus) -> None:
        self._status = status


class JobTracker:
    """
    Per-report job state: idle -> running -> succeeded | failed.

    Usage:
        handle = tracker.mark_running(ReportName.FS)
        ...
        tracker.mark_succeeded(handle)
    """

    def __init__(self):
        self._slots = {report: JobSlot(report) for report in ReportName}

    def _slot(self, report: ReportName) -> JobSlot:
        return self._slots[ReportName(report)]

    def mark_running(self, report: ReportName) -> RunHandle:
        """Enter `running` immediately, from whatever state the job was in."""
        report = ReportName(report)
        handle = RunHandle(
            report=report,
            started_at=datetime.now(timezone.utc),
            started_monotonic=time.perf_counter(),
        )
        self._slot(report).set(JobStatus(
            report=report,
            state=JobState.RUNNING,
            started_at=handle.started_at,
        ))
        return handle

    def mark_succeeded(self, handle: RunHandle) -> JobStatus:
        status = JobStatus(
            report=handle.report,
            state=JobState.SUCCEEDED,
            duration_ms=handle.elapsed_ms(),
            started_at=handle.started_at,
            finished_at=datetime.now(timezone.utc),
        )
        self._slot(handle.report).set(status)
        return status

    def mark_failed(self, handle: RunHandle, error: BaseException) -> JobStatus:
        status = JobStatus(
            report=handle.report,
            state=JobState.FAILED,
            duration_ms=handle.elapsed_ms(),
            error=str(error) or type(error).__name__,
            started_at=handle.started_at,
            finished_at=datetime.now(timezone.utc),
        )
        self._slot(handle.report).set(status)
        return status

    def status(self, report: ReportName) -> JobStatus:
        """Current status snapshot. Never blocks."""
        return self._slot(report).status

    def describe(self, report: ReportName) -> str:
        """Current status as a short string, e.g. 'idle' or 'finished in 12ms'."""
        return self.status(report).describe()

    def snapshot(self) -> dict[str, str]:
        """Status of every job keyed by its output file name."""
        return {report.filename: self.describe(report) for report in ReportName}

    def is_running(self, report: Optional[ReportName] = None) -> bool:
        """Whether a given job (or any job when None) is currently running."""
        reports = [ReportName(report)] if report is not None else list(ReportName)
        return any(self.status(r).state == JobState.RUNNING for r in reports)
