"""
Transaction Models for Ledger Reports

A ledger line is parsed into a TransactionRecord and folded into a
report immediately; records are never stored.

DESIGN DECISION: Parsing is best-effort. A malformed amount becomes zero
and an unparseable date becomes None instead of failing the whole run.
Dirty ledgers still produce a report.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


ZERO = Decimal("0")

# Amounts larger than 10**100 or with digits finer than 10**-100 are not
# ledger values; they parse as malformed.
AMOUNT_EXPONENT_LIMIT = 100

# Arithmetic on in-range amounts is exact in this context
AMOUNT_CONTEXT = Context(prec=2 * AMOUNT_EXPONENT_LIMIT + 64, rounding=ROUND_HALF_UP)

# Tried in order; the first format that parses wins
DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y", "%m/%d/%y")


class AccountCategory(str, Enum):
    """
    Financial-statement buckets an account can fall into.

    UNCLASSIFIED collects accounts missing from the taxonomy so that
    nothing is silently dropped from the statement.
    """
    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    INCOME = "Income"
    EXPENSE = "Expense"
    UNCLASSIFIED = "Unclassified"

    @property
    def is_debit_normal(self) -> bool:
        """Debits increase Asset and Expense balances (and unknown accounts)."""
        return self not in (
            AccountCategory.LIABILITY,
            AccountCategory.EQUITY,
            AccountCategory.INCOME,
        )


def parse_amount(value: Any) -> Decimal:
    """
    Convert ledger text to a non-negative Decimal.

    Blank, non-numeric, non-finite and negative values all become zero,
    as do magnitudes outside AMOUNT_EXPONENT_LIMIT.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip()
        if not text:
            return ZERO
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return ZERO
    if not amount.is_finite() or amount <= 0:
        return ZERO
    if abs(amount.adjusted()) > AMOUNT_EXPONENT_LIMIT:
        return ZERO
    if amount.normalize(AMOUNT_CONTEXT).as_tuple().exponent < -AMOUNT_EXPONENT_LIMIT:
        return ZERO
    return amount


def parse_date(value: Any) -> Optional[dt.date]:
    """Parse a ledger date, returning None when no known format matches."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    if not text:
        return None
    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


class TransactionRecord(BaseModel):
    """
    One parsed ledger line: `date,account,category,debit,credit`.

    Amount fields always hold a valid non-negative Decimal after
    construction, whatever text was on the line.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    date: Optional[dt.date] = Field(
        default=None,
        description="Transaction date (None when the text could not be parsed)"
    )
    raw_date: str = Field(
        default="",
        description="Date text exactly as it appeared in the ledger"
    )
    account: str = Field(
        default="",
        description="Free-text account name"
    )
    category: Optional[str] = Field(
        default=None,
        description="Pre-supplied category column, usually blank"
    )
    debit: Decimal = Field(default=ZERO, ge=0)
    credit: Decimal = Field(default=ZERO, ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Optional[dt.date]:
        return parse_date(v)

    @field_validator("category", mode="before")
    @classmethod
    def blank_category_is_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("debit", "credit", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return parse_amount(v)

    @property
    def net_debit(self) -> Decimal:
        """Debit minus credit for this line."""
        return AMOUNT_CONTEXT.subtract(self.debit, self.credit)

    @property
    def year(self) -> Optional[int]:
        return self.date.year if self.date else None
