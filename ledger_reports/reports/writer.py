"""
Report Writer

Renders a ReportResult as CSV text and persists it as
`<output_dir>/<report>.csv`.

Output format:

    account,balance
    Accounts Receivable,50.00
    Cash,150.00

DESIGN DECISION: The file is written to a temporary name in the same
directory and then renamed over the target, so a reader never sees a
half-written report. A crash mid-write can still leave a stray temp
file behind; we accept that.
"""

import asyncio
import os
import tempfile
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

import structlog

from ledger_reports.errors import ReportGenerationError
from ledger_reports.models.report import ReportName, ReportResult
from ledger_reports.models.transaction import AMOUNT_CONTEXT


class ReportWriteError(ReportGenerationError):
    """A report could not be written to the output directory."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class ReportWriter:
    """Serializes and persists reports into one output directory."""

    def __init__(
        self,
        output_dir: Path,
        precision: int = 2,
        encoding: str = "utf-8",
    ):
        if precision < 0:
            raise ValueError("precision must not be negative")
        self._output_dir = Path(output_dir)
        self._quantum = Decimal(1).scaleb(-precision)
        self._encoding = encoding
        self._logger = structlog.get_logger(__name__)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def path_for(self, report: ReportName) -> Path:
        return self._output_dir / ReportName(report).filename

    def format_value(self, value: Decimal) -> str:
        """Fixed-precision rendering, half-up. Never prints '-0.00'."""
        quantized = value.quantize(self._quantum, rounding=ROUND_HALF_UP, context=AMOUNT_CONTEXT)
        if quantized.is_zero():
            quantized = abs(quantized)
        return f"{quantized:f}"

    def render(self, result: ReportResult) -> str:
        """Header line plus one `key,value` line per row, newline-terminated."""
        lines = [",".join(result.header)]
        for row in result.rows:
            lines.append(f"{row.key},{self.format_value(row.value)}")
        return "\n".join(lines) + "\n"

    def _write_atomic(self, target: Path, text: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent,
            prefix=f".{target.stem}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding=self._encoding, newline="") as handle:
                handle.write(text)
            os.replace(tmp_name, target)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    async def write(self, report: ReportName, text: str) -> Path:
        """
        Persist rendered report text.

        Returns:
            Path of the written report

        Raises:
            ReportWriteError: If the directory or file cannot be written
        """
        target = self.path_for(report)
        try:
            await asyncio.to_thread(self._write_atomic, target, text)
        except OSError as e:
            raise ReportWriteError(target, f"Failed to write report {target.name}: {e}") from e

        self._logger.debug("report_file_written", path=str(target), bytes=len(text))
        return target
