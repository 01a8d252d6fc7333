"""
Tests for the query and aggregation engine.

All functions are pure, so these tests build plain Transaction lists.
"""

import random
from decimal import Decimal

import pytest

from finance_tracker.models.transaction import (
    SortOrder,
    Transaction,
    TransactionFilter,
)
from finance_tracker.queries import (
    available_categories,
    available_months,
    calculate_savings,
    calculate_totals,
    expense_by_category,
    filter_transactions,
    monthly_summary,
    sort_transactions,
)


def tx(id_, type_, date, amount, category="Other", description=""):
    return Transaction(
        id=id_,
        type=type_,
        date=date,
        amount=Decimal(str(amount)),
        category=category,
        description=description,
    )


@pytest.fixture
def scenario():
    """Income of 100 and expense of 40 in January, expense of 10 in February."""
    return [
        tx(1, "income", "2024-01-05", 100, "Salary"),
        tx(2, "expense", "2024-01-20", 40, "Food"),
        tx(3, "expense", "2024-02-02", 10, "Transport"),
    ]


@pytest.fixture
def mixed():
    return [
        tx(1, "income", "2024-03-01", "1200.10", "Salary"),
        tx(2, "expense", "2024-03-03", "0.1", "Food"),
        tx(3, "expense", "2024-02-28", "0.2", "Food"),
        tx(4, "income", "2023-12-31", "15.55", "Bonus"),
        tx(5, "transfer", "2024-03-10", "7.35", "Savings"),
        tx(6, "expense", "bad-date", "3.30", "Food"),
        tx(7, "expense", "2024-02-28", "19.99", "Rent"),
    ]


class TestScenario:
    """The three-record ledger used throughout the documentation."""

    def test_totals(self, scenario):
        totals = calculate_totals(scenario)
        assert totals.income == 100
        assert totals.expense == 50
        assert totals.balance == 50

    def test_savings(self, scenario):
        assert calculate_savings(scenario) == 50

    def test_monthly_summary(self, scenario):
        summary = monthly_summary(scenario)
        assert [(m.month, m.income, m.expense) for m in summary] == [
            ("2024-02", 0, 10),
            ("2024-01", 100, 40),
        ]

    def test_expense_by_category(self, scenario):
        assert expense_by_category(scenario) == {
            "Food": Decimal("40"),
            "Transport": Decimal("10"),
        }


class TestFilter:
    """Tests for filter_transactions."""

    def test_empty_criteria_returns_input_unchanged(self, mixed):
        """Test that no criteria keeps every record in order."""
        assert filter_transactions(mixed, TransactionFilter()) == mixed
        assert filter_transactions(mixed) == mixed

    def test_returns_new_list(self, mixed):
        result = filter_transactions(mixed)
        assert result is not mixed

    def test_type_filters_partition_the_ledger(self, mixed):
        """Test that income and expense filters never overlap.

        Records with an unrecognised type are only reachable with no
        type filter, so coverage is checked over income/expense records.
        """
        income = filter_transactions(mixed, TransactionFilter(type="income"))
        expense = filter_transactions(mixed, TransactionFilter(type="expense"))
        income_ids = {t.id for t in income}
        expense_ids = {t.id for t in expense}
        assert income_ids.isdisjoint(expense_ids)
        assert income_ids | expense_ids == {
            t.id for t in mixed if t.type in ("income", "expense")
        }

    def test_category(self, mixed):
        result = filter_transactions(mixed, TransactionFilter(category="Food"))
        assert [t.id for t in result] == [2, 3, 6]

    def test_month_matches_date_prefix(self, mixed):
        result = filter_transactions(mixed, TransactionFilter(month="2024-02"))
        assert [t.id for t in result] == [3, 7]

    def test_all_criteria_combined(self, mixed):
        criteria = TransactionFilter(type="expense", category="Food", month="2024-03")
        assert [t.id for t in filter_transactions(mixed, criteria)] == [2]

    def test_no_match(self, mixed):
        criteria = TransactionFilter(category="Holidays")
        assert filter_transactions(mixed, criteria) == []


class TestSort:
    """Tests for sort_transactions."""

    def test_default_is_newest_first(self, mixed):
        result = sort_transactions(mixed)
        assert [t.date for t in result][:3] == ["bad-date", "2024-03-10", "2024-03-03"]

    def test_date_ascending(self, scenario):
        shuffled = [scenario[2], scenario[0], scenario[1]]
        result = sort_transactions(shuffled, SortOrder.DATE_ASC)
        assert [t.id for t in result] == [1, 2, 3]

    def test_amount_orders(self, scenario):
        assert [t.id for t in sort_transactions(scenario, "amount-desc")] == [1, 2, 3]
        assert [t.id for t in sort_transactions(scenario, "amount-asc")] == [3, 2, 1]

    def test_ties_keep_input_order(self):
        """Test that the sort is stable in both directions."""
        same_day = [tx(i, "expense", "2024-01-01", 5) for i in range(1, 6)]
        assert [t.id for t in sort_transactions(same_day, "date-desc")] == [1, 2, 3, 4, 5]
        assert [t.id for t in sort_transactions(same_day, "date-asc")] == [1, 2, 3, 4, 5]
        assert [t.id for t in sort_transactions(same_day, "amount-desc")] == [1, 2, 3, 4, 5]

    def test_unknown_key_falls_back_to_newest_first(self, scenario):
        assert sort_transactions(scenario, "nonsense") == sort_transactions(scenario)

    def test_does_not_mutate_input(self, scenario):
        before = list(scenario)
        sort_transactions(scenario, SortOrder.AMOUNT_ASC)
        assert scenario == before


class TestTotalsAndSavings:
    """Tests for calculate_totals and calculate_savings."""

    def test_empty_ledger(self):
        totals = calculate_totals([])
        assert (totals.income, totals.expense, totals.balance) == (0, 0, 0)
        assert calculate_savings([]) == 0

    def test_unknown_type_counts_as_expense(self, mixed):
        totals = calculate_totals(mixed)
        assert totals.income == Decimal("1215.65")
        assert totals.expense == Decimal("30.94")

    def test_balance_is_income_minus_expense(self, mixed):
        totals = calculate_totals(mixed)
        assert totals.balance == totals.income - totals.expense

    def test_permutation_invariance(self, mixed):
        expected = calculate_totals(mixed)
        rng = random.Random(7)
        for _ in range(10):
            shuffled = list(mixed)
            rng.shuffle(shuffled)
            assert calculate_totals(shuffled) == expected

    def test_savings_equals_balance(self, mixed, scenario):
        for ledger in (mixed, scenario, []):
            assert calculate_savings(ledger) == calculate_totals(ledger).balance


class TestCategoryBreakdown:
    """Tests for expense_by_category."""

    def test_income_only_categories_are_absent(self, mixed):
        result = expense_by_category(mixed)
        assert "Salary" not in result
        assert "Bonus" not in result

    def test_sums_per_category(self, mixed):
        result = expense_by_category(mixed)
        assert result == {
            "Food": Decimal("3.6"),
            "Rent": Decimal("19.99"),
        }

    def test_unknown_types_are_excluded(self, mixed):
        """Test that only "expense" records count, though totals treat others as expense."""
        assert "Savings" not in expense_by_category(mixed)
        assert calculate_totals(mixed).expense == Decimal("30.94")

    def test_empty_ledger(self):
        assert expense_by_category([]) == {}


class TestMonthlySummary:
    """Tests for monthly_summary."""

    def test_empty_ledger(self):
        assert monthly_summary([]) == []

    def test_keeps_twelve_most_recent_months(self):
        ledger = [
            tx(i, "expense", f"{2023 + (i - 1) // 12}-{(i - 1) % 12 + 1:02d}-15", i)
            for i in range(1, 16)
        ]
        summary = monthly_summary(ledger)
        months = [m.month for m in summary]
        assert len(summary) == 12
        assert months == sorted(months, reverse=True)
        assert months[0] == "2024-03"
        assert months[-1] == "2023-04"

    def test_covers_every_month_when_fewer_than_cap(self, mixed):
        months = [m.month for m in monthly_summary(mixed)]
        assert set(months) == {t.date[:7] for t in mixed}

    def test_malformed_date_groups_by_prefix(self, mixed):
        summary = {m.month: m for m in monthly_summary(mixed)}
        assert summary["bad-dat"].expense == Decimal("3.30")

    def test_custom_cap(self, mixed):
        assert len(monthly_summary(mixed, months=2)) == 2


class TestFilterOptions:
    """Tests for the category and month option lists."""

    def test_available_categories_first_seen_order(self, mixed):
        assert available_categories(mixed) == ["Salary", "Food", "Bonus", "Savings", "Rent"]

    def test_available_categories_skip_empty(self):
        assert available_categories([tx(1, "expense", "2024-01-01", 1, category="")]) == []

    def test_available_months_newest_first(self, scenario):
        assert available_months(scenario) == ["2024-02", "2024-01"]
