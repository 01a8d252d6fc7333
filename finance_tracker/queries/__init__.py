"""Query and aggregation package."""

from finance_tracker.queries.aggregations import (
    DEFAULT_SUMMARY_MONTHS,
    available_categories,
    available_months,
    calculate_savings,
    calculate_totals,
    expense_by_category,
    filter_transactions,
    monthly_summary,
    sort_transactions,
)

__all__ = [
    "DEFAULT_SUMMARY_MONTHS",
    "available_categories",
    "available_months",
    "calculate_savings",
    "calculate_totals",
    "expense_by_category",
    "filter_transactions",
    "monthly_summary",
    "sort_transactions",
]
