"""
Query & Aggregation Engine

DESIGN DECISION: Every view is a pure function of a transaction list.
Nothing here holds state or caches results; callers pass the store's
current contents and get a fresh projection back.

Classification rule used throughout: a record is income only when its
type is exactly "income". Everything else counts as an expense.

Grouping rule used throughout: the month of a record is the first seven
characters of its date string, whether or not that is a valid "YYYY-MM".
"""

from decimal import Decimal
from typing import Iterable, Optional

from finance_tracker.models.transaction import (
    ZERO,
    MonthSummary,
    SortOrder,
    Totals,
    Transaction,
    TransactionFilter,
)

DEFAULT_SUMMARY_MONTHS = 12


def filter_transactions(
    transactions: Iterable[Transaction],
    criteria: Optional[TransactionFilter] = None,
) -> list[Transaction]:
    """Keep records matching every non-empty criterion, in input order."""
    if criteria is None or criteria.is_empty:
        return list(transactions)

    results = []
    for tx in transactions:
        if criteria.type and tx.type != criteria.type:
            continue
        if criteria.category and tx.category != criteria.category:
            continue
        if criteria.month and tx.month != criteria.month:
            continue
        results.append(tx)
    return results


def sort_transactions(
    transactions: Iterable[Transaction],
    order: SortOrder | str | None = SortOrder.DATE_DESC,
) -> list[Transaction]:
    """
    Return a new, stably sorted list.

    Dates are compared as ISO strings. Unknown orders sort newest first.
    """
    order = SortOrder.parse(order)
    items = list(transactions)

    if order == SortOrder.DATE_ASC:
        return sorted(items, key=lambda t: t.date)
    if order == SortOrder.AMOUNT_DESC:
        return sorted(items, key=lambda t: t.amount, reverse=True)
    if order == SortOrder.AMOUNT_ASC:
        return sorted(items, key=lambda t: t.amount)
    return sorted(items, key=lambda t: t.date, reverse=True)


def calculate_totals(transactions: Iterable[Transaction]) -> Totals:
    """Income, expense and balance over the given records."""
    income = ZERO
    expense = ZERO
    for tx in transactions:
        if tx.is_income:
            income += tx.amount
        else:
            expense += tx.amount
    return Totals(income=income, expense=expense, balance=income - expense)


def _group_by_month(transactions: Iterable[Transaction]) -> dict[str, MonthSummary]:
    groups: dict[str, MonthSummary] = {}
    for tx in transactions:
        key = tx.month
        if key not in groups:
            groups[key] = MonthSummary(month=key)
        group = groups[key]
        if tx.is_income:
            group.income += tx.amount
        else:
            group.expense += tx.amount
    return groups


def calculate_savings(transactions: Iterable[Transaction]) -> Decimal:
    """
    Sum of (income - expense) over every month.

    This is always equal to calculate_totals(...).balance.
    """
    return sum(
        (month.net for month in _group_by_month(transactions).values()),
        ZERO,
    )


def expense_by_category(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """
    Expense totals per category; categories without expenses are absent.

    Only records typed exactly "expense" are counted, unlike the totals.
    """
    categories: dict[str, Decimal] = {}
    for tx in transactions:
        if not tx.is_expense:
            continue
        categories[tx.category] = categories.get(tx.category, ZERO) + tx.amount
    return categories


def monthly_summary(
    transactions: Iterable[Transaction],
    months: int = DEFAULT_SUMMARY_MONTHS,
) -> list[MonthSummary]:
    """Per-month income and expense, newest month first, at most `months` entries."""
    groups = _group_by_month(transactions)
    keys = sorted(groups, reverse=True)[:months]
    return [groups[key] for key in keys]


def available_categories(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct non-empty categories, in first-seen order."""
    seen: dict[str, None] = {}
    for tx in transactions:
        if tx.category:
            seen.setdefault(tx.category, None)
    return list(seen)


def available_months(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct year-month prefixes, newest first."""
    return sorted({tx.month for tx in transactions}, reverse=True)
