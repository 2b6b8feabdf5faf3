"""Report output package."""

from ledger_reports.reports.writer import ReportWriteError, ReportWriter

__all__ = ["ReportWriteError", "ReportWriter"]
