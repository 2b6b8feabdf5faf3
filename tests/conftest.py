"""
Shared fixtures.

Every test gets its own input and output directories under tmp_path,
so report runs never see each other's files.
"""

from pathlib import Path

import pytest

from ledger_reports.audit import AuditLogger, InMemoryAuditSink
from ledger_reports.config import get_settings
from ledger_reports.engine import ReportEngine
from ledger_reports.jobs import JobTracker
from ledger_reports.ledger import LedgerReader
from ledger_reports.reports import ReportWriter


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Keep a developer's .env and LEDGER_REPORTS_* variables out of tests."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "LEDGER_REPORTS_INPUT_DIR",
        "LEDGER_REPORTS_OUTPUT_DIR",
        "LEDGER_REPORTS_AMOUNT_PRECISION",
        "LEDGER_REPORTS_MAX_CONCURRENT_READS",
        "LEDGER_REPORTS_JOB_TIMEOUT_SECONDS",
        "LEDGER_REPORTS_ENCODING",
        "LOG_LEVEL",
        "LOG_JSON_OUTPUT",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ledger_dir(tmp_path: Path) -> Path:
    path = tmp_path / "ledgers"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def write_ledger(ledger_dir: Path):
    """Write a ledger file: write_ledger("file1.csv", "2023-01-01,Cash,,100,0", ...)."""

    def _write(name: str, *lines: str) -> Path:
        path = ledger_dir / name
        path.write_text("\n".join(lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def audit_sink() -> InMemoryAuditSink:
    return InMemoryAuditSink()


@pytest.fixture
def engine(ledger_dir: Path, output_dir: Path, audit_sink: InMemoryAuditSink) -> ReportEngine:
    return ReportEngine(
        reader=LedgerReader(ledger_dir),
        writer=ReportWriter(output_dir),
        tracker=JobTracker(),
        audit_logger=AuditLogger(audit_sink),
    )


@pytest.fixture
def report_lines(output_dir: Path):
    """Lines of a written report: report_lines("accounts.csv")."""

    def _read(name: str) -> list[str]:
        return (output_dir / name).read_text(encoding="utf-8").splitlines()

    return _read
