"""
Core Data Models for the Finance Tracker

These models define the schemas for every transaction flowing through
the ledger. They are designed to:
1. Validate caller input before it reaches the store
2. Keep persisted records loadable even when old data is a bit odd
3. Serialize to the plain JSON layout kept in the storage slot

DESIGN DECISION: Input and storage use different models.
TransactionCreate / TransactionUpdate are strict (they describe what a
caller may submit). Transaction is the persisted record and stays lenient
about `type` and `date`, because aggregation must classify whatever was
stored rather than reject it.
"""

import math
from datetime import date as Date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)


def _coerce_amount(value: Any) -> Any:
    """Build Decimals from the float's shortest repr, not its binary value."""
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("Amount must be a finite number")
        return Decimal(repr(value))
    return value


def _amount_to_json(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Decimal in memory, plain JSON number on disk
Amount = Annotated[
    Decimal,
    BeforeValidator(_coerce_amount),
    PlainSerializer(_amount_to_json, when_used="json"),
]

ZERO = Decimal("0")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a transaction.

    The amount is always a magnitude; the type carries the sign.
    """
    INCOME = "income"
    EXPENSE = "expense"


class SortOrder(str, Enum):
    """Orderings supported by the transaction list."""
    DATE_ASC = "date-asc"
    DATE_DESC = "date-desc"
    AMOUNT_DESC = "amount-desc"
    AMOUNT_ASC = "amount-asc"

    @classmethod
    def parse(cls, value: "SortOrder | str | None") -> "SortOrder":
        """Unknown or empty keys fall back to newest-first."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.DATE_DESC


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class TransactionCreate(BaseModel):
    """
    A new transaction as submitted by the caller.

    Everything except the id is supplied here; the store assigns the id.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(
        ...,
        description="Free-text label"
    )
    amount: Annotated[
        Amount,
        Field(ge=0, description="Non-negative magnitude")
    ]
    category: str = Field(
        ...,
        description="Category label (no fixed registry)"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    date: Date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    notes: Optional[str] = Field(
        default=None,
        description="Optional free-text notes"
    )


class TransactionUpdate(BaseModel):
    """
    Partial update for an existing transaction.

    Only the fields that were explicitly supplied are merged into the
    stored record. Use `changes()` to get exactly those fields in their
    persisted form.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: Optional[str] = None
    amount: Optional[Annotated[Amount, Field(ge=0)]] = None
    category: Optional[str] = None
    type: Optional[TransactionType] = None
    date: Optional[Date] = None
    notes: Optional[str] = None

    def changes(self) -> dict[str, Any]:
        """Supplied fields only, with enums and dates in stored form."""
        data = self.model_dump(exclude_unset=True)
        if isinstance(data.get("type"), TransactionType):
            data["type"] = data["type"].value
        if isinstance(data.get("date"), Date):
            data["date"] = data["date"].isoformat()
        return data


class Transaction(BaseModel):
    """
    A stored ledger record.

    `type` and `date` are kept as the strings that were persisted.
    Anything other than "income" counts as an expense, and grouping by
    month uses the first seven characters of `date` whatever they are.
    """
    model_config = ConfigDict(extra="ignore")

    id: int
    description: str = ""
    amount: Amount
    category: str = ""
    type: str
    date: str
    notes: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def type_as_text(cls, v: Any) -> Any:
        if isinstance(v, TransactionType):
            return v.value
        return v

    @field_validator("date", mode="before")
    @classmethod
    def date_as_text(cls, v: Any) -> Any:
        if isinstance(v, Date):
            return v.isoformat()
        return v

    @classmethod
    def from_create(cls, transaction_id: int, data: TransactionCreate) -> "Transaction":
        return cls(
            id=transaction_id,
            description=data.description,
            amount=data.amount,
            category=data.category,
            type=data.type.value,
            date=data.date.isoformat(),
            notes=data.notes,
        )

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME.value

    @property
    def is_expense(self) -> bool:
        """True only for records typed exactly "expense"."""
        return self.type == TransactionType.EXPENSE.value

    @property
    def month(self) -> str:
        """Year-month prefix used as the monthly grouping key."""
        return self.date[:7]

    def merged(self, update: TransactionUpdate) -> "Transaction":
        """
        Return a new record with the update applied.

        The merged data is validated against the full record type, so an
        update can never leave a record that would fail to load.
        """
        data = self.model_dump()
        data.update(update.changes())
        data["id"] = self.id
        return Transaction.model_validate(data)


class TransactionFilter(BaseModel):
    """
    Criteria for narrowing the transaction list.

    Empty strings impose no constraint. `month` is a "YYYY-MM" prefix.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    type: str = ""
    category: str = ""
    month: str = ""

    @field_validator("type", "category", "month", mode="before")
    @classmethod
    def none_means_any(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, TransactionType):
            return v.value
        return v

    @property
    def is_empty(self) -> bool:
        return not (self.type or self.category or self.month)


# =============================================================================
# AGGREGATE MODELS
# =============================================================================

class Totals(BaseModel):
    """Ledger-wide sums."""

    income: Amount = ZERO
    expense: Amount = ZERO
    balance: Amount = ZERO


class MonthSummary(BaseModel):
    """Income and expense for one year-month."""

    month: str = Field(
        ...,
        description="Year-month prefix, e.g. 2024-01"
    )
    income: Amount = ZERO
    expense: Amount = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


class LedgerSnapshot(BaseModel):
    """
    Everything a dashboard needs, computed in one pass over the ledger.

    Totals, savings, the category breakdown and the monthly summary are
    always computed over the whole ledger; only `transactions` follows
    the filter and sort order.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)
    savings: Amount = ZERO
    expense_by_category: dict[str, Amount] = Field(default_factory=dict)
    monthly_summary: list[MonthSummary] = Field(default_factory=list)
    available_categories: list[str] = Field(default_factory=list)
    available_months: list[str] = Field(default_factory=list)
