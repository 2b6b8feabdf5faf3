"""Audit logging package."""

from ledger_reports.audit.logger import AuditLogger, configure_logging, create_correlation_id
from ledger_reports.audit.sinks import AuditSink, InMemoryAuditSink

__all__ = [
    "AuditLogger",
    "AuditSink",
    "InMemoryAuditSink",
    "configure_logging",
    "create_correlation_id",
]
