"""
Account Taxonomy

Maps account names to financial-statement categories.

DESIGN DECISION: The table is exact-match and read-only at runtime.
We do not guess from partial names ("Rent" is not "Rent Expense").
Anything we do not know lands in UNCLASSIFIED, where it stays visible
on the statement instead of being dropped or mis-filed.
"""

from types import MappingProxyType
from typing import Mapping

from ledger_reports.models.transaction import AccountCategory


_TAXONOMY: dict[str, AccountCategory] = {
    # Assets
    "Cash": AccountCategory.ASSET,
    "Accounts Receivable": AccountCategory.ASSET,
    "Inventory": AccountCategory.ASSET,
    "Prepaid Expenses": AccountCategory.ASSET,
    "Equipment": AccountCategory.ASSET,
    "Buildings": AccountCategory.ASSET,
    "Land": AccountCategory.ASSET,
    # Liabilities
    "Accounts Payable": AccountCategory.LIABILITY,
    "Notes Payable": AccountCategory.LIABILITY,
    "Accrued Liabilities": AccountCategory.LIABILITY,
    "Unearned Revenue": AccountCategory.LIABILITY,
    "Loans Payable": AccountCategory.LIABILITY,
    # Equity
    "Common Stock": AccountCategory.EQUITY,
    "Retained Earnings": AccountCategory.EQUITY,
    "Owner's Capital": AccountCategory.EQUITY,
    "Dividends": AccountCategory.EQUITY,
    # Income
    "Sales Revenue": AccountCategory.INCOME,
    "Service Revenue": AccountCategory.INCOME,
    "Interest Income": AccountCategory.INCOME,
    "Other Income": AccountCategory.INCOME,
    # Expenses
    "Rent Expense": AccountCategory.EXPENSE,
    "Utilities Expense": AccountCategory.EXPENSE,
    "Salaries Expense": AccountCategory.EXPENSE,
    "Wages Expense": AccountCategory.EXPENSE,
    "Depreciation Expense": AccountCategory.EXPENSE,
    "Cost of Goods Sold": AccountCategory.EXPENSE,
    "Insurance Expense": AccountCategory.EXPENSE,
    "Interest Expense": AccountCategory.EXPENSE,
}

ACCOUNT_TAXONOMY: Mapping[str, AccountCategory] = MappingProxyType(_TAXONOMY)


def classify(account_name: str) -> AccountCategory:
    """
    Return the category for an account name.

    Never raises; unknown or blank names are UNCLASSIFIED.
    """
    return ACCOUNT_TAXONOMY.get(account_name, AccountCategory.UNCLASSIFIED)


def accounts_in(category: AccountCategory) -> list[str]:
    """Known account names filed under `category`, sorted."""
    return sorted(name for name, cat in ACCOUNT_TAXONOMY.items() if cat == category)
