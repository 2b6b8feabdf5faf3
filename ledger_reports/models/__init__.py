"""
Data Models Package

This package contains all Pydantic models used by the report engine.
All data flowing through the engine must conform to these schemas.
"""

from ledger_reports.models.transaction import (
    AMOUNT_CONTEXT,
    AccountCategory,
    TransactionRecord,
    parse_amount,
    parse_date,
)
from ledger_reports.models.report import (
    REPORT_FILENAMES,
    ReportName,
    ReportResult,
    ReportRow,
)
from ledger_reports.models.job import (
    JobState,
    JobStatus,
)
from ledger_reports.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "AMOUNT_CONTEXT",
    "AccountCategory",
    "TransactionRecord",
    "parse_amount",
    "parse_date",
    # Report models
    "REPORT_FILENAMES",
    "ReportName",
    "ReportResult",
    "ReportRow",
    # Job models
    "JobState",
    "JobStatus",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
