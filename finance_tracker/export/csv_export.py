"""
CSV Export

Renders the ledger as the comma-separated document users download.

Format:
- Header: Date,Description,Category,Type,Amount,Notes
- One row per transaction, oldest first
- Every field wrapped in double quotes

Known limitation: quotes inside a field are written as-is, not doubled,
so a description containing '"' produces a row other tools may misread.
The format is kept byte-compatible with exports made by earlier versions.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from finance_tracker.models.transaction import SortOrder, Transaction
from finance_tracker.queries.aggregations import sort_transactions

CSV_HEADER = ["Date", "Description", "Category", "Type", "Amount", "Notes"]
DEFAULT_FILENAME_PREFIX = "finance-tracker"


def format_plain_amount(amount: Decimal) -> str:
    """Shortest plain form of a number: 100, 40.5, 0.01 (never 1E+2)."""
    return format(amount.normalize(), "f")


def format_money(amount: Decimal) -> str:
    """Fixed two-decimal display text, e.g. $1234.50 or -$10.00."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):.2f}"


def _quote(value: str) -> str:
    return f'"{value}"'


def transaction_to_row(tx: Transaction) -> list[str]:
    return [
        tx.date,
        tx.description,
        tx.category,
        tx.type,
        format_plain_amount(tx.amount),
        tx.notes or "",
    ]


def export_csv(transactions: Iterable[Transaction]) -> str:
    """Build the export document for the given records."""
    lines = [",".join(CSV_HEADER)]
    for tx in sort_transactions(transactions, SortOrder.DATE_ASC):
        lines.append(",".join(_quote(field) for field in transaction_to_row(tx)))
    return "\n".join(lines) + "\n"


def export_filename(
    on: Optional[date] = None,
    prefix: str = DEFAULT_FILENAME_PREFIX,
) -> str:
    """Suggested download name, e.g. finance-tracker-2024-03-01.csv."""
    on = on or date.today()
    return f"{prefix}-{on.isoformat()}.csv"
