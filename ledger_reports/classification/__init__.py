"""Account classification package."""

from ledger_reports.classification.taxonomy import (
    ACCOUNT_TAXONOMY,
    accounts_in,
    classify,
)

__all__ = ["ACCOUNT_TAXONOMY", "accounts_in", "classify"]
