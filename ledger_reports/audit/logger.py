"""
Audit Logger

DESIGN DECISION: Every job run is logged.
That gives us:
1. Traceability of which ledgers fed which report
2. Timing for every job
3. The full error for every failed job

AuditLogger:
- Is async so it fits inside the job coroutines
- Gracefully handles sink failures (never fails a report because
  the audit trail could not be stored)
- Supports correlation IDs to tie the three jobs of one request together
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ledger_reports.audit.sinks import AuditSink
from ledger_reports.models.audit import AuditEvent, AuditSeverity


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of stdlib logging.

    Call once at process start (engine factory, console app).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Writes audit events to the structured log and, optionally, a sink.

    Events go to:
    1. The structlog logger (always)
    2. An optional AuditSink (for querying history)
    """

    def __init__(self, sink: Optional[AuditSink] = None):
        """
        Create an audit logger.

        Args:
            sink: Where events are stored. If None, only logs locally.
        """
        self._sink = sink
        self._logger = structlog.get_logger("ledger_reports.audit")

    @property
    def sink(self) -> Optional[AuditSink]:
        return self._sink

    async def log(self, event: AuditEvent) -> bool:
        """
        Record one audit event.

        Always logs locally. Stores in the sink if one is configured.

        Returns True if the sink write succeeded (or no sink configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._sink is not None:
            try:
                return await self._sink.append_event(event)
            except Exception as e:
                # A lost audit event must not fail the report
                self._logger.error(
                    "audit_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for one generation request.

    Pass it to every job run started by that request.
    """
    return uuid4()
