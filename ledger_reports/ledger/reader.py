"""
Ledger Reader

Discovers ledger files in the input directory and parses them into
TransactionRecords.

Line format (no header, no quoting):

    date,account,category,debit,credit

DESIGN DECISION: Discovery and read failures are FATAL for the job.
We never skip an unreadable file and carry on, because a report built
from a silently truncated input set looks correct and is not.
Malformed fields inside a readable file are NOT fatal (see
TransactionRecord).
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import structlog

from ledger_reports.errors import ReportGenerationError
from ledger_reports.models.transaction import TransactionRecord


# Positional columns of a ledger line
LEDGER_COLUMNS = ("date", "account", "category", "debit", "credit")


class LedgerError(ReportGenerationError):
    """Base exception for ledger input failures."""
    pass


class LedgerDiscoveryError(LedgerError):
    """The input directory could not be listed."""
    pass


class LedgerReadError(LedgerError):
    """A ledger file could not be read."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


@dataclass
class LedgerBatch:
    """Everything one job read from the input directory."""

    transactions: list[TransactionRecord] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    excluded: list[str] = field(default_factory=list)


def parse_line(line: str) -> Optional[TransactionRecord]:
    """
    Parse one ledger line.

    Returns None for blank lines. Missing trailing columns default to
    empty, so `2023-01-01,Cash` is a valid zero-amount record.
    """
    if not line.strip():
        return None

    fields = [part.strip() for part in line.split(",")]
    fields += [""] * (len(LEDGER_COLUMNS) - len(fields))
    date_text, account, category, debit, credit = fields[:len(LEDGER_COLUMNS)]

    return TransactionRecord(
        date=date_text,
        raw_date=date_text,
        account=account,
        category=category,
        debit=debit,
        credit=credit,
    )


def parse_ledger_text(text: str) -> list[TransactionRecord]:
    """Parse a whole ledger file. Empty text yields no records."""
    records = []
    for line in text.splitlines():
        record = parse_line(line)
        if record is not None:
            records.append(record)
    return records


class LedgerReader:
    """
    Reads every ledger in one input directory.

    The reader never writes to the input directory, so concurrent jobs
    can share it safely.
    """

    def __init__(
        self,
        input_dir: Path,
        max_concurrent_reads: int = 8,
        encoding: str = "utf-8",
    ):
        if max_concurrent_reads < 1:
            raise ValueError("max_concurrent_reads must be at least 1")
        self._input_dir = Path(input_dir)
        self._max_concurrent_reads = max_concurrent_reads
        self._encoding = encoding
        self._logger = structlog.get_logger(__name__)

    @property
    def input_dir(self) -> Path:
        return self._input_dir

    def list_ledger_files(self, exclude: Iterable[str] = ()) -> list[Path]:
        """
        List ledger files, skipping any name in `exclude`.

        Sub-directories and hidden files (the writer's in-flight temp
        files) are skipped. The result is sorted by name so reruns read
        files in the same order.

        Raises:
            LedgerDiscoveryError: If the directory is missing or unreadable
        """
        excluded = set(exclude)
        try:
            entries = list(self._input_dir.iterdir())
        except OSError as e:
            raise LedgerDiscoveryError(
                f"Failed to list ledger directory {self._input_dir}: {e}"
            ) from e

        files = []
        for entry in entries:
            if entry.name in excluded or entry.name.startswith("."):
                continue
            if not entry.is_file():
                continue
            files.append(entry)
        return sorted(files, key=lambda p: p.name)

    async def read_file(self, path: Path) -> list[TransactionRecord]:
        """
        Read and parse one ledger file off the event loop.

        Raises:
            LedgerReadError: If the file cannot be read or decoded
        """
        try:
            text = await asyncio.to_thread(path.read_text, encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise LedgerReadError(path, f"Failed to read ledger {path.name}: {e}") from e

        records = parse_ledger_text(text)
        self._logger.debug(
            "ledger_parsed",
            file=path.name,
            records=len(records),
        )
        return records

    async def read_transactions(self, exclude: Iterable[str] = ()) -> LedgerBatch:
        """
        Read every ledger file except the excluded names.

        Listing and reads run off the event loop. Files are read
        concurrently (bounded by max_concurrent_reads).
        Records are concatenated in listing order regardless of which
        read finishes first. The first failure aborts the whole batch.
        """
        excluded = sorted(set(exclude))
        files = await asyncio.to_thread(self.list_ledger_files, excluded)
        semaphore = asyncio.Semaphore(self._max_concurrent_reads)

        async def _bounded_read(path: Path) -> list[TransactionRecord]:
            async with semaphore:
                return await self.read_file(path)

        tasks = [asyncio.ensure_future(_bounded_read(path)) for path in files]
        try:
            per_file = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        transactions = [record for records in per_file for record in records]
        return LedgerBatch(transactions=transactions, files=files, excluded=excluded)
