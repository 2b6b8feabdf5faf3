"""
Audit Sinks

DESIGN DECISION: Audit persistence sits behind an abstract interface.
The engine only knows about AuditSink, so the in-memory sink used by
the console and tests can be swapped for a file or database sink
without touching the engine.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Optional
from uuid import UUID

from ledger_reports.models.audit import AuditEvent
from ledger_reports.models.report import ReportName


class AuditSink(ABC):
    """
    Abstract destination for audit events.

    Audit logs are append-only - we never delete or modify events.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event.

        Returns:
            True if stored successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        """All events for one generation request, oldest first."""
        pass

    @abstractmethod
    async def get_events_by_report(self, report: ReportName) -> list[AuditEvent]:
        """All events for one report job, oldest first."""
        pass

    @abstractmethod
    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        pass


class InMemoryAuditSink(AuditSink):
    """
    Keeps the most recent events in process memory.

    Bounded: once `max_events` is reached the oldest events are dropped.
    """

    def __init__(self, max_events: int = 1000):
        if max_events < 1:
            raise ValueError("max_events must be at least 1")
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def __len__(self) -> int:
        return len(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_events_by_report(self, report: ReportName) -> list[AuditEvent]:
        report = ReportName(report)
        return [e for e in self._events if e.report == report]

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

    def latest(self) -> Optional[AuditEvent]:
        return self._events[-1] if self._events else None
