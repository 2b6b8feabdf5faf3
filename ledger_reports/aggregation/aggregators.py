"""
Report Aggregators

All three reports are the same fold over the transaction stream:

    accumulator[group_key(txn)] += signed_value(txn, key)

They differ only in the grouping key, the sign convention and how the
final rows are ordered.

DESIGN DECISION: Rows are always re-sorted before they leave the
aggregator. Input order (directory listing, read completion) never
leaks into the output, so unchanged input gives byte-identical reports.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from decimal import Decimal, localcontext
from typing import Any, Iterable

from ledger_reports.classification import classify
from ledger_reports.models.report import ReportName, ReportRow
from ledger_reports.models.transaction import AMOUNT_CONTEXT, AccountCategory, TransactionRecord


UNKNOWN_YEAR = "unknown"


class Aggregator(ABC):
    """
    Base class for a report's reduction over transactions.

    Subclasses define the grouping key, the signed contribution of a
    transaction and the row ordering.
    """

    report: ReportName
    header: tuple[str, str]

    @abstractmethod
    def group_key(self, txn: TransactionRecord) -> str:
        """Bucket a transaction belongs to."""
        pass

    def signed_value(self, txn: TransactionRecord, key: str) -> Decimal:
        """Contribution of `txn` to its bucket. Debit-normal by default."""
        return txn.net_debit

    def sort_key(self, key: str) -> Any:
        return key

    def fold(self, transactions: Iterable[TransactionRecord]) -> dict[str, Decimal]:
        """Reduce transactions into {group key: net value}."""
        accumulator: dict[str, Decimal] = defaultdict(Decimal)
        with localcontext(AMOUNT_CONTEXT):
            for txn in transactions:
                key = self.group_key(txn)
                accumulator[key] += self.signed_value(txn, key)
        return dict(accumulator)

    def rows(self, accumulator: dict[str, Decimal]) -> list[ReportRow]:
        """Turn an accumulator into deterministically ordered rows."""
        return [
            ReportRow(key=key, value=accumulator[key])
            for key in sorted(accumulator, key=self.sort_key)
        ]

    def aggregate(self, transactions: Iterable[TransactionRecord]) -> list[ReportRow]:
        return self.rows(self.fold(transactions))


class AccountsAggregator(Aggregator):
    """Net balance (debit - credit) per account across every ledger."""

    report = ReportName.ACCOUNTS
    header = ("account", "balance")

    def group_key(self, txn: TransactionRecord) -> str:
        return txn.account


class YearlyAggregator(Aggregator):
    """
    Net balance (debit - credit) per calendar year, across all accounts.

    Lines whose date could not be parsed are kept under "unknown",
    which sorts after every real year.
    """

    report = ReportName.YEARLY
    header = ("year", "balance")

    def group_key(self, txn: TransactionRecord) -> str:
        if txn.year is None:
            return UNKNOWN_YEAR
        return f"{txn.year:04d}"

    def sort_key(self, key: str) -> Any:
        if key == UNKNOWN_YEAR:
            return (1, 0)
        return (0, int(key))


class FinancialStatementAggregator(Aggregator):
    """
    Net balance per taxonomy category.

    Sign convention follows the category's normal balance:
    - Asset, Expense: debit - credit
    - Liability, Equity, Income: credit - debit
    - Unclassified: debit - credit, kept as its own bucket so that
      every transaction seen is accounted for
    """

    report = ReportName.FS
    header = ("category", "balance")

    def group_key(self, txn: TransactionRecord) -> str:
        return classify(txn.account).value

    def signed_value(self, txn: TransactionRecord, key: str) -> Decimal:
        if AccountCategory(key).is_debit_normal:
            return txn.debit - txn.credit
        return txn.credit - txn.debit


AGGREGATORS: dict[ReportName, Aggregator] = {
    ReportName.ACCOUNTS: AccountsAggregator(),
    ReportName.YEARLY: YearlyAggregator(),
    ReportName.FS: FinancialStatementAggregator(),
}


def get_aggregator(report: ReportName) -> Aggregator:
    """Aggregator for a report name."""
    return AGGREGATORS[ReportName(report)]
