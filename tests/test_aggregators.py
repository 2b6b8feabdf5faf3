"""Tests for account classification and the three aggregators."""

import random
from decimal import Decimal

import pytest

from ledger_reports.aggregation import (
    UNKNOWN_YEAR,
    AccountsAggregator,
    FinancialStatementAggregator,
    YearlyAggregator,
    get_aggregator,
)
from ledger_reports.classification import ACCOUNT_TAXONOMY, accounts_in, classify
from ledger_reports.ledger import parse_ledger_text
from ledger_reports.models import AccountCategory, ReportName, TransactionRecord


def txn(date: str, account: str, debit: str = "0", credit: str = "0") -> TransactionRecord:
    return TransactionRecord(date=date, raw_date=date, account=account, debit=debit, credit=credit)


MIXED_LEDGER = parse_ledger_text("\n".join([
    "2022-03-01,Cash,,1000,0",
    "2022-03-01,Common Stock,,0,1000",
    "2022-06-15,Rent Expense,,200,0",
    "2022-06-15,Cash,,0,200",
    "2023-01-10,Accounts Receivable,,500,0",
    "2023-01-10,Sales Revenue,,0,500",
    "2023-02-01,Accounts Payable,,0,75.25",
    "2023-02-01,Utilities Expense,,75.25,0",
    "2023-05-05,Mystery Account,,30,12",
    "not-a-date,Cash,,5,0",
]))


class TestClassifier:
    """Tests for the account taxonomy."""

    @pytest.mark.parametrize("account,expected", [
        ("Cash", AccountCategory.ASSET),
        ("Accounts Receivable", AccountCategory.ASSET),
        ("Accounts Payable", AccountCategory.LIABILITY),
        ("Common Stock", AccountCategory.EQUITY),
        ("Retained Earnings", AccountCategory.EQUITY),
        ("Sales Revenue", AccountCategory.INCOME),
        ("Rent Expense", AccountCategory.EXPENSE),
        ("Utilities Expense", AccountCategory.EXPENSE),
        ("Salaries Expense", AccountCategory.EXPENSE),
    ])
    def test_known_accounts(self, account, expected):
        """Test well-known accounts land in their category."""
        assert classify(account) == expected

    @pytest.mark.parametrize("account", ["Unknown Account", "cash", "", "Cash "])
    def test_unknown_accounts_are_unclassified(self, account):
        """Test lookup is exact-match and falls back to Unclassified."""
        assert classify(account) == AccountCategory.UNCLASSIFIED

    def test_taxonomy_is_read_only(self):
        """Test the table cannot be modified at runtime."""
        with pytest.raises(TypeError):
            ACCOUNT_TAXONOMY["Cash"] = AccountCategory.EXPENSE

    def test_accounts_in_category(self):
        """Test listing the known accounts of a category."""
        equity = accounts_in(AccountCategory.EQUITY)
        assert "Common Stock" in equity
        assert equity == sorted(equity)
        assert accounts_in(AccountCategory.UNCLASSIFIED) == []


class TestAccountsAggregator:
    """Tests for per-account balances."""

    def test_two_accounts(self):
        """Test one row per account with its net balance."""
        rows = AccountsAggregator().aggregate([
            txn("2023-01-01", "Cash", "100"),
            txn("2023-01-02", "Accounts Receivable", "50"),
        ])
        assert [(r.key, r.value) for r in rows] == [
            ("Accounts Receivable", Decimal("50")),
            ("Cash", Decimal("100")),
        ]

    def test_same_account_accumulates(self):
        """Test debits against one account are summed."""
        rows = AccountsAggregator().aggregate([
            txn("2023-01-01", "Cash", "100"),
            txn("2023-02-01", "Cash", "50"),
        ])
        assert [(r.key, r.value) for r in rows] == [("Cash", Decimal("150"))]

    def test_credits_reduce_balance(self):
        """Test debit minus credit."""
        rows = AccountsAggregator().aggregate([
            txn("2023-01-01", "Cash", "100"),
            txn("2023-01-02", "Cash", credit="130"),
        ])
        assert rows[0].value == Decimal("-30")

    def test_total_equals_debits_minus_credits(self):
        """Test all account balances sum to total debits minus total credits."""
        rows = AccountsAggregator().aggregate(MIXED_LEDGER)
        expected = sum(t.debit for t in MIXED_LEDGER) - sum(t.credit for t in MIXED_LEDGER)
        assert sum(r.value for r in rows) == expected

    def test_empty_input(self):
        """Test no transactions produce no rows."""
        assert AccountsAggregator().aggregate([]) == []

    def test_large_balances_are_exact(self):
        """Test sums past 28 significant digits keep every digit."""
        rows = AccountsAggregator().aggregate([
            txn("2023-01-01", "Cash", "1000000000000000000000000000000"),
            txn("2023-01-02", "Cash", "0.01"),
            txn("2023-01-03", "Cash", credit="0.001"),
        ])
        assert rows[0].value == Decimal("1000000000000000000000000000000.009")


class TestYearlyAggregator:
    """Tests for per-year balances."""

    def test_groups_by_year_in_chronological_order(self):
        """Test rows are ordered by year, not by input order."""
        rows = YearlyAggregator().aggregate([
            txn("2024-01-01", "Cash", "1"),
            txn("2022-12-31", "Cash", "2"),
            txn("2023-06-30", "Cash", "3", "1"),
            txn("2022-01-01", "Accounts Payable", credit="5"),
        ])
        assert [(r.key, r.value) for r in rows] == [
            ("2022", Decimal("-3")),
            ("2023", Decimal("2")),
            ("2024", Decimal("1")),
        ]

    def test_unparseable_dates_sort_last(self):
        """Test undated lines are kept under 'unknown' after every year."""
        rows = YearlyAggregator().aggregate(MIXED_LEDGER)
        assert [r.key for r in rows] == ["2022", "2023", UNKNOWN_YEAR]
        assert rows[-1].value == Decimal("5")

    def test_total_equals_debits_minus_credits(self):
        """Test no transaction is lost across years."""
        rows = YearlyAggregator().aggregate(MIXED_LEDGER)
        expected = sum(t.net_debit for t in MIXED_LEDGER)
        assert sum(r.value for r in rows) == expected


class TestFinancialStatementAggregator:
    """Tests for per-category balances."""

    def test_income_is_credit_normal(self):
        """Test a 50 credit to Sales Revenue shows as +50 Income."""
        rows = FinancialStatementAggregator().aggregate([
            txn("2023-01-02", "Sales Revenue", "0", "50"),
        ])
        assert [(r.key, r.value) for r in rows] == [("Income", Decimal("50"))]

    def test_sign_conventions(self):
        """Test each category uses its normal balance."""
        rows = dict(
            (r.key, r.value)
            for r in FinancialStatementAggregator().aggregate(MIXED_LEDGER)
        )
        assert rows["Asset"] == Decimal("1000") - Decimal("200") + Decimal("500") + Decimal("5")
        assert rows["Equity"] == Decimal("1000")
        assert rows["Expense"] == Decimal("275.25")
        assert rows["Income"] == Decimal("500")
        assert rows["Liability"] == Decimal("75.25")
        assert rows["Unclassified"] == Decimal("18")

    def test_credit_normal_sign_flip_is_exact(self):
        """Test flipping the sign of a large credit balance loses no digits."""
        rows = FinancialStatementAggregator().aggregate([
            txn("2023-01-01", "Sales Revenue", "0.01", "123456789012345678901234567890.5"),
        ])
        assert rows[0].value == Decimal("123456789012345678901234567890.49")

    def test_rows_sorted_by_category(self):
        """Test categories are emitted in lexical order."""
        rows = FinancialStatementAggregator().aggregate(MIXED_LEDGER)
        assert [r.key for r in rows] == [
            "Asset", "Equity", "Expense", "Income", "Liability", "Unclassified",
        ]

    def test_unclassified_only_when_present(self):
        """Test the Unclassified bucket appears only for unknown accounts."""
        rows = FinancialStatementAggregator().aggregate([txn("2023-01-01", "Cash", "10")])
        assert [r.key for r in rows] == ["Asset"]

    def test_no_transaction_is_dropped(self):
        """Test the statement total matches each line's signed contribution."""
        rows = FinancialStatementAggregator().aggregate(MIXED_LEDGER)
        expected = Decimal("0")
        for t in MIXED_LEDGER:
            if classify(t.account).is_debit_normal:
                expected += t.debit - t.credit
            else:
                expected += t.credit - t.debit
        assert sum(r.value for r in rows) == expected


class TestDeterminism:
    """Tests that input order never changes the output."""

    @pytest.mark.parametrize("report", list(ReportName))
    def test_shuffled_input_gives_same_rows(self, report):
        """Test every aggregator is order-independent."""
        aggregator = get_aggregator(report)
        expected = aggregator.aggregate(MIXED_LEDGER)

        shuffled = list(MIXED_LEDGER)
        random.Random(42).shuffle(shuffled)

        assert aggregator.aggregate(shuffled) == expected

    def test_registry_lookup_by_string(self):
        """Test aggregators can be looked up by report name string."""
        assert isinstance(get_aggregator("yearly"), YearlyAggregator)
