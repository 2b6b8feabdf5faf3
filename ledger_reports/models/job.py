"""
Job Status Models

Each report job moves through:

    idle -> running -> succeeded(duration) | failed(reason)

and a new run goes straight back to running from any state.

DESIGN DECISION: A failed run is visible through the status query.
Callers can tell "never ran" from "ran and failed" from "succeeded"
without having to watch the triggering call.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ledger_reports.models.report import ReportName


class JobState(str, Enum):
    """Lifecycle state of a report job."""
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class JobStatus(BaseModel):
    """
    Immutable snapshot of one job's state.

    The tracker swaps in a new snapshot on every transition instead of
    mutating this one, so a reader never sees a half-updated status.
    """
    model_config = ConfigDict(frozen=True)

    report: ReportName
    state: JobState = JobState.IDLE
    duration_ms: Optional[int] = Field(default=None, ge=0)
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (JobState.SUCCEEDED, JobState.FAILED)

    def describe(self) -> str:
        """Short human-readable status, e.g. 'finished in 12ms'."""
        if self.state == JobState.SUCCEEDED:
            return f"finished in {self.duration_ms}ms"
        if self.state == JobState.FAILED:
            return f"failed: {self.error}"
        return self.state.value
