"""
Report Models

The three report jobs are fixed. Each produces an ordered list of
`key,value` rows under a two-column header.
"""

from decimal import Decimal, localcontext
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ledger_reports.models.transaction import AMOUNT_CONTEXT


class ReportName(str, Enum):
    """The report jobs the engine knows how to run."""
    ACCOUNTS = "accounts"
    YEARLY = "yearly"
    FS = "fs"

    @property
    def filename(self) -> str:
        """Output file name for this report."""
        return f"{self.value}.csv"


# Every report output name, so no job ever ingests a previous report
REPORT_FILENAMES = frozenset(report.filename for report in ReportName)


class ReportRow(BaseModel):
    """A single aggregated line of a report."""
    model_config = ConfigDict(frozen=True)

    key: str
    value: Decimal


class ReportResult(BaseModel):
    """Outcome of one report run, as handed to the writer."""

    report: ReportName
    header: tuple[str, str]
    rows: list[ReportRow] = Field(default_factory=list)
    transaction_count: int = Field(default=0, ge=0)
    file_count: int = Field(default=0, ge=0)

    @property
    def total(self) -> Decimal:
        """Sum of all row values."""
        with localcontext(AMOUNT_CONTEXT):
            return sum((row.value for row in self.rows), Decimal("0"))
