"""
Report Generation Engine

This module ties the components together and defines the flows for:
1. One report job (read ledgers -> aggregate -> write -> record state)
2. A generation request (all three jobs, concurrently)
3. The fire-and-forget trigger and the status query used by callers

DESIGN DECISION: The engine enforces the job boundaries:
- A job marks itself running before any I/O
- A job's failure is recorded on its own status slot and re-raised
- One job's failure never stops the other two
- Every job run is audited
"""

import asyncio
import threading
import time
from typing import Optional, Union
from uuid import UUID

import structlog

from ledger_reports.aggregation import get_aggregator
from ledger_reports.audit import (
    AuditLogger,
    AuditSink,
    InMemoryAuditSink,
    configure_logging,
    create_correlation_id,
)
from ledger_reports.config import Settings, get_settings
from ledger_reports.errors import ReportGenerationError
from ledger_reports.jobs import JobTracker
from ledger_reports.ledger import LedgerReader
from ledger_reports.models.audit import AuditEventBuilder
from ledger_reports.models.report import REPORT_FILENAMES, ReportName, ReportResult
from ledger_reports.reports import ReportWriter


class ReportTimeoutError(ReportGenerationError):
    """A report job ran longer than the configured timeout."""
    pass


class ReportEngine:
    """
    Runs report jobs and exposes their status.

    Jobs share nothing mutable except their own tracker slot. Each job
    does its own directory listing and reads, so the three can start,
    interleave and finish in any order.
    """

    def __init__(
        self,
        reader: LedgerReader,
        writer: ReportWriter,
        tracker: Optional[JobTracker] = None,
        audit_logger: Optional[AuditLogger] = None,
        job_timeout_seconds: Optional[float] = None,
    ):
        self._reader = reader
        self._writer = writer
        self._tracker = tracker or JobTracker()
        self._audit_logger = audit_logger or AuditLogger()
        self._job_timeout_seconds = job_timeout_seconds
        self._logger = structlog.get_logger(__name__)
        # Strong references so scheduled generations are not garbage collected
        self._background: set[Union[asyncio.Task, threading.Thread]] = set()

    @property
    def tracker(self) -> JobTracker:
        return self._tracker

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def writer(self) -> ReportWriter:
        return self._writer

    async def _collect_report(
        self,
        report: ReportName,
        correlation_id: Optional[UUID],
    ) -> ReportResult:
        aggregator = get_aggregator(report)

        batch = await self._reader.read_transactions(exclude=REPORT_FILENAMES)
        await self._audit_logger.log(AuditEventBuilder.ledgers_discovered(
            report=report,
            files=[path.name for path in batch.files],
            excluded=batch.excluded,
            correlation_id=correlation_id,
        ))

        return ReportResult(
            report=report,
            header=aggregator.header,
            rows=aggregator.aggregate(batch.transactions),
            transaction_count=len(batch.transactions),
            file_count=len(batch.files),
        )

    async def _publish_report(
        self,
        result: ReportResult,
        correlation_id: Optional[UUID],
    ) -> None:
        path = await self._writer.write(result.report, self._writer.render(result))
        await self._audit_logger.log(AuditEventBuilder.report_written(
            report=result.report,
            path=str(path),
            row_count=len(result.rows),
            correlation_id=correlation_id,
        ))

    async def run_report(
        self,
        report: Union[ReportName, str],
        correlation_id: Optional[UUID] = None,
    ) -> ReportResult:
        """
        Run one report job to completion.

        The job is marked running before anything else happens and
        marked succeeded only after the report file has been written.

        The timeout covers reading and aggregation. Once the write has
        started it runs to completion, so a timed-out job never replaces
        its report file.

        Raises:
            Whatever aborted the job (discovery, read, write or timeout
            failure). The job's status is `failed` by then.
        """
        report = ReportName(report)
        handle = self._tracker.mark_running(report)

        try:
            await self._audit_logger.log(AuditEventBuilder.report_started(report, correlation_id))
            collect = self._collect_report(report, correlation_id)
            if self._job_timeout_seconds is not None:
                try:
                    result = await asyncio.wait_for(collect, timeout=self._job_timeout_seconds)
                except asyncio.TimeoutError as e:
                    raise ReportTimeoutError(
                        f"Report '{report.value}' timed out after {self._job_timeout_seconds}s"
                    ) from e
            else:
                result = await collect
            await self._publish_report(result, correlation_id)
        except BaseException as e:
            self._tracker.mark_failed(handle, e)
            await self._audit_logger.log(AuditEventBuilder.report_failed(report, e, correlation_id))
            raise

        status = self._tracker.mark_succeeded(handle)
        await self._audit_logger.log(AuditEventBuilder.report_succeeded(
            report=report,
            duration_ms=status.duration_ms,
            transaction_count=result.transaction_count,
            correlation_id=correlation_id,
        ))
        return result

    async def accounts(self, correlation_id: Optional[UUID] = None) -> ReportResult:
        return await self.run_report(ReportName.ACCOUNTS, correlation_id)

    async def yearly(self, correlation_id: Optional[UUID] = None) -> ReportResult:
        return await self.run_report(ReportName.YEARLY, correlation_id)

    async def fs(self, correlation_id: Optional[UUID] = None) -> ReportResult:
        return await self.run_report(ReportName.FS, correlation_id)

    async def generate_all(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> dict[ReportName, Union[ReportResult, BaseException]]:
        """
        Run all three jobs concurrently.

        Never raises for a job failure: each outcome is either the
        ReportResult or the exception that failed that job. Failures are
        logged here, once, for the whole request.
        """
        correlation_id = correlation_id or create_correlation_id()
        reports = list(ReportName)
        start = time.perf_counter()

        await self._audit_logger.log(AuditEventBuilder.generation_requested(reports, correlation_id))

        outcomes = await asyncio.gather(
            *(self.run_report(report, correlation_id) for report in reports),
            return_exceptions=True,
        )
        results = dict(zip(reports, outcomes))

        failed = [report for report, outcome in results.items() if isinstance(outcome, BaseException)]
        for report in failed:
            self._logger.error(
                "report_generation_failed",
                report=report.value,
                error=str(results[report]),
                correlation_id=str(correlation_id),
            )

        duration_ms = int(round((time.perf_counter() - start) * 1000))
        self._logger.info(
            "report_generation_finished",
            duration_ms=duration_ms,
            failed=[report.value for report in failed],
            correlation_id=str(correlation_id),
        )
        await self._audit_logger.log(AuditEventBuilder.generation_completed(
            duration_ms=duration_ms,
            failed=failed,
            correlation_id=correlation_id,
        ))
        return results

    def start_generation(self, correlation_id: Optional[UUID] = None) -> dict[str, str]:
        """
        Kick off all three jobs and return immediately.

        Inside a running event loop the generation is scheduled as a
        task on that loop; otherwise it runs on a daemon thread with its
        own loop. Poll `status()` for progress.
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(self.generate_all(correlation_id))
            self._background.add(task)
            task.add_done_callback(self._background.discard)
        else:
            thread = threading.Thread(
                target=self._run_in_thread,
                args=(correlation_id,),
                name=f"report-generation-{correlation_id}",
                daemon=True,
            )
            self._background.add(thread)
            thread.start()

        return {"message": "processing started", "correlation_id": str(correlation_id)}

    def _run_in_thread(self, correlation_id: UUID) -> None:
        try:
            asyncio.run(self.generate_all(correlation_id))
        except Exception:
            self._logger.exception("report_generation_crashed", correlation_id=str(correlation_id))
        finally:
            self._background.discard(threading.current_thread())

    def wait_for_background(self, timeout: Optional[float] = None) -> None:
        """Join generation threads started from outside an event loop."""
        for item in list(self._background):
            if isinstance(item, threading.Thread):
                item.join(timeout)

    def status(self) -> dict[str, str]:
        """Status string of every report, keyed by output file name."""
        return self._tracker.snapshot()


def create_engine(
    settings: Optional[Settings] = None,
    audit_sink: Optional[AuditSink] = None,
) -> ReportEngine:
    """
    Factory function to create a fully wired engine from settings.

    Args:
        settings: Settings to use (defaults to the cached app settings)
        audit_sink: Where audit events are kept. A fresh in-memory sink
                    is created when None.
    """
    settings = settings or get_settings()
    report_settings = settings.reports
    log_settings = settings.logging

    configure_logging(level=log_settings.level, json_output=log_settings.json_output)

    reader = LedgerReader(
        input_dir=report_settings.input_dir,
        max_concurrent_reads=report_settings.max_concurrent_reads,
        encoding=report_settings.encoding,
    )
    writer = ReportWriter(
        output_dir=report_settings.output_dir,
        precision=report_settings.amount_precision,
        encoding=report_settings.encoding,
    )
    audit_logger = AuditLogger(audit_sink if audit_sink is not None else InMemoryAuditSink())

    return ReportEngine(
        reader=reader,
        writer=writer,
        tracker=JobTracker(),
        audit_logger=audit_logger,
        job_timeout_seconds=report_settings.job_timeout_seconds,
    )
