"""
Audit Models for Ledger Reports

Every generation request and every job run leaves an audit trail:
1. When a run was requested and by which correlation
2. Which ledger files a job actually read
3. How long each job took, or why it failed

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ledger_reports.models.report import ReportName


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Generation request (all three jobs)
    GENERATION_REQUESTED = "generation_requested"
    GENERATION_COMPLETED = "generation_completed"
    GENERATION_FAILED = "generation_failed"

    # Single job lifecycle
    REPORT_STARTED = "report_started"
    LEDGERS_DISCOVERED = "ledgers_discovered"
    REPORT_WRITTEN = "report_written"
    REPORT_SUCCEEDED = "report_succeeded"
    REPORT_FAILED = "report_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    One step in the life of a generation request or report job.

    Every significant step of report generation creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    report: Optional[ReportName] = Field(
        default=None,
        description="Report job this event belongs to (None for whole-generation events)"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Ties the three job runs of one generation request together"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Flatten the event into keyword arguments for structlog.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "report": self.report.value if self.report else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Factories for the events the engine emits, one per job transition.

    Usage:
        event = AuditEventBuilder.report_started(ReportName.FS, correlation_id)
        event = AuditEventBuilder.report_succeeded(ReportName.FS, 12, correlation_id)
    """

    @staticmethod
    def generation_requested(
        reports: list[ReportName],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GENERATION_REQUESTED,
            correlation_id=correlation_id,
            description=f"Report generation requested for {len(reports)} reports",
            details={
                "reports": [report.value for report in reports],
            },
        )

    @staticmethod
    def generation_completed(
        duration_ms: int,
        failed: list[ReportName],
        correlation_id: UUID,
    ) -> AuditEvent:
        if failed:
            return AuditEvent(
                event_type=AuditEventType.GENERATION_FAILED,
                severity=AuditSeverity.ERROR,
                correlation_id=correlation_id,
                description=f"Report generation finished in {duration_ms}ms with {len(failed)} failed reports",
                details={
                    "duration_ms": duration_ms,
                    "failed_reports": [report.value for report in failed],
                },
            )
        return AuditEvent(
            event_type=AuditEventType.GENERATION_COMPLETED,
            correlation_id=correlation_id,
            description=f"Report generation finished in {duration_ms}ms",
            details={
                "duration_ms": duration_ms,
            },
        )

    @staticmethod
    def report_started(
        report: ReportName,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_STARTED,
            report=report,
            correlation_id=correlation_id,
            description=f"Report '{report.value}' started",
        )

    @staticmethod
    def ledgers_discovered(
        report: ReportName,
        files: list[str],
        excluded: list[str],
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGERS_DISCOVERED,
            severity=AuditSeverity.DEBUG,
            report=report,
            correlation_id=correlation_id,
            description=f"Report '{report.value}' found {len(files)} ledger files",
            details={
                "files": files,
                "excluded": excluded,
            },
        )

    @staticmethod
    def report_written(
        report: ReportName,
        path: str,
        row_count: int,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_WRITTEN,
            severity=AuditSeverity.DEBUG,
            report=report,
            correlation_id=correlation_id,
            description=f"Report '{report.value}' written with {row_count} rows",
            details={
                "path": path,
                "row_count": row_count,
            },
        )

    @staticmethod
    def report_succeeded(
        report: ReportName,
        duration_ms: int,
        transaction_count: int,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_SUCCEEDED,
            report=report,
            correlation_id=correlation_id,
            description=f"Report '{report.value}' finished in {duration_ms}ms",
            details={
                "duration_ms": duration_ms,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def report_failed(
        report: ReportName,
        error: BaseException,
        correlation_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_FAILED,
            severity=AuditSeverity.ERROR,
            report=report,
            correlation_id=correlation_id,
            description=f"Report '{report.value}' failed",
            error_message=str(error),
            details={
                "error_type": type(error).__name__,
            },
        )
