"""Ledger input package."""

from ledger_reports.ledger.reader import (
    LEDGER_COLUMNS,
    LedgerBatch,
    LedgerDiscoveryError,
    LedgerError,
    LedgerReader,
    LedgerReadError,
    parse_ledger_text,
    parse_line,
)

__all__ = [
    "LEDGER_COLUMNS",
    "LedgerBatch",
    "LedgerDiscoveryError",
    "LedgerError",
    "LedgerReader",
    "LedgerReadError",
    "parse_ledger_text",
    "parse_line",
]
