"""Report aggregation package."""

from ledger_reports.aggregation.aggregators import (
    AGGREGATORS,
    UNKNOWN_YEAR,
    AccountsAggregator,
    Aggregator,
    FinancialStatementAggregator,
    YearlyAggregator,
    get_aggregator,
)

__all__ = [
    "AGGREGATORS",
    "UNKNOWN_YEAR",
    "AccountsAggregator",
    "Aggregator",
    "FinancialStatementAggregator",
    "YearlyAggregator",
    "get_aggregator",
]
