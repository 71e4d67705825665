"""
Tests for the aggregation engine.

The engine is pure, so these tests build records directly and check
the derived views.
"""

import pytest
from datetime import date
from decimal import Decimal

from rupeewise.aggregation import (
    budget_limits,
    budget_overview,
    budget_progress,
    category_breakdown,
    current_month,
    debt_totals,
    expenses_by_category,
    filter_by_date_range,
    filter_by_month,
    global_summary,
    month_label,
    month_scoped_view,
    person_key,
    person_netting,
    recent_first,
    shift_month,
)
from rupeewise.models import (
    EXPENSE_CATEGORIES,
    Budget,
    DebtType,
    TransactionType,
)

from tests.conftest import make_debt, make_transaction


INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


@pytest.fixture
def march_transactions():
    return [
        make_transaction(50000, type=INCOME, category="Salary", on=date(2024, 3, 1)),
        make_transaction(15000, category="Rent", on=date(2024, 3, 2)),
        make_transaction(2000, category="Food", on=date(2024, 3, 10)),
        make_transaction(500, category="Transport", on=date(2024, 3, 12)),
        make_transaction(1500, category="Food", on=date(2024, 3, 20)),
    ]


class TestGlobalSummary:
    """Tests for totals over all transactions."""

    def test_totals(self, march_transactions):
        summary = global_summary(march_transactions)
        assert summary.total_income == Decimal("50000")
        assert summary.total_expense == Decimal("19000")
        assert summary.balance == summary.total_income - summary.total_expense
        assert summary.savings_rate == Decimal("62")

    def test_empty(self):
        summary = global_summary([])
        assert summary.total_income == 0
        assert summary.total_expense == 0
        assert summary.balance == 0
        assert summary.savings_rate == 0

    def test_no_income_means_zero_rate(self):
        summary = global_summary([make_transaction(300)])
        assert summary.balance == Decimal("-300")
        assert summary.savings_rate == 0

    def test_negative_rate_when_overspending(self):
        summary = global_summary([
            make_transaction(1000, type=INCOME, category="Salary"),
            make_transaction(1500),
        ])
        assert summary.savings_rate == Decimal("-50")

    def test_decimal_amounts_add_exactly(self):
        summary = global_summary([make_transaction("0.1"), make_transaction("0.2")])
        assert summary.total_expense == Decimal("0.3")


class TestCategoryBreakdown:
    """Tests for per-category expense totals."""

    def test_sums_per_category(self, march_transactions):
        totals = expenses_by_category(march_transactions)
        assert totals == {
            "Rent": Decimal("15000"),
            "Food": Decimal("3500"),
            "Transport": Decimal("500"),
        }

    def test_ignores_income(self, march_transactions):
        assert "Salary" not in expenses_by_category(march_transactions)

    def test_first_occurrence_order(self, march_transactions):
        breakdown = category_breakdown(march_transactions)
        assert [c.category for c in breakdown] == ["Rent", "Food", "Transport"]

    def test_totals_match_total_expense(self, march_transactions):
        breakdown = category_breakdown(march_transactions)
        assert all(c.total_amount > 0 for c in breakdown)
        assert sum(c.total_amount for c in breakdown) == global_summary(march_transactions).total_expense

    def test_empty(self):
        assert category_breakdown([]) == []


class TestFilters:

    def test_month_partition(self):
        txn = make_transaction(10, on=date(2024, 3, 15))
        assert filter_by_month([txn], "2024-03") == [txn]
        assert filter_by_month([txn], "2024-02") == []
        assert filter_by_month([txn], "2024-04") == []

    def test_month_boundaries(self):
        first = make_transaction(10, on=date(2024, 3, 1))
        last = make_transaction(10, on=date(2024, 3, 31))
        april = make_transaction(10, on=date(2024, 4, 1))
        assert filter_by_month([first, last, april], "2024-03") == [first, last]

    def test_date_range_inclusive(self, march_transactions):
        result = filter_by_date_range(
            march_transactions, start=date(2024, 3, 2), end=date(2024, 3, 12)
        )
        assert [t.date.day for t in result] == [2, 10, 12]

    def test_date_range_open_ended(self, march_transactions):
        assert len(filter_by_date_range(march_transactions, start=date(2024, 3, 11))) == 2
        assert len(filter_by_date_range(march_transactions, end=date(2024, 3, 1))) == 1
        assert filter_by_date_range(march_transactions) == march_transactions

    def test_recent_first(self, march_transactions):
        result = recent_first(march_transactions)
        assert result[0] is march_transactions[-1]
        assert result[-1] is march_transactions[0]


class TestDebts:
    """Tests for debt totals and per-person netting."""

    def test_totals_ignore_paid(self):
        debts = [
            make_debt(500, type=DebtType.I_OWE),
            make_debt(300, type=DebtType.OWE_ME, person_name="Asha"),
            make_debt(1000, type=DebtType.I_OWE, is_paid=True),
        ]
        totals = debt_totals(debts)
        assert totals.total_i_owe == Decimal("500")
        assert totals.total_owed_to_me == Decimal("300")

    def test_person_netting(self):
        debts = [
            make_debt(500, type=DebtType.I_OWE, person_name="Ravi"),
            make_debt(300, type=DebtType.OWE_ME, person_name="Ravi"),
        ]
        [ravi] = person_netting(debts)
        assert ravi.person_name == "Ravi"
        assert ravi.i_owe == Decimal("500")
        assert ravi.owes_me == Decimal("300")
        assert ravi.net == Decimal("-200")
        assert ravi.is_settled is False
        assert len(ravi.debts) == 2

    def test_person_all_paid_is_settled(self):
        debts = [
            make_debt(500, type=DebtType.I_OWE, is_paid=True),
            make_debt(300, type=DebtType.OWE_ME, is_paid=True),
        ]
        [ravi] = person_netting(debts)
        assert ravi.i_owe == 0
        assert ravi.owes_me == 0
        assert ravi.is_settled is True

    def test_grouping_trims_but_keeps_case(self):
        debts = [
            make_debt(100, person_name="Ravi"),
            make_debt(100, person_name=" Ravi "),
            make_debt(100, person_name="ravi"),
        ]
        balances = person_netting(debts)
        assert [b.person_name for b in balances] == ["Ravi", "ravi"]
        assert balances[0].i_owe == Decimal("200")
        assert person_key("  Asha ") == "Asha"

    def test_netting_sorted_by_name(self):
        debts = [make_debt(1, person_name=n) for n in ("Zoya", "Amit", "Meera")]
        assert [b.person_name for b in person_netting(debts)] == ["Amit", "Meera", "Zoya"]

    def test_empty(self):
        assert person_netting([]) == []
        assert debt_totals([]).total_i_owe == 0


class TestMonthlyView:

    def test_month_scoped_view(self, march_transactions):
        february = make_transaction(999, on=date(2024, 2, 28))
        debts = [make_debt(700), make_debt(200, type=DebtType.OWE_ME)]
        view = month_scoped_view(march_transactions + [february], debts, "2024-03")

        assert view.month == "2024-03"
        assert view.income == Decimal("50000")
        assert view.expense == Decimal("19000")
        assert view.savings == Decimal("31000")
        assert view.savings_rate == Decimal("62")
        assert view.expenses_by_category["Food"] == Decimal("3500")
        # Debt totals are not month-filtered
        assert view.total_i_owe == Decimal("700")
        assert view.total_owed_to_me == Decimal("200")

    def test_empty_month(self, march_transactions):
        view = month_scoped_view(march_transactions, [], "2023-01")
        assert view.income == 0
        assert view.savings_rate == 0
        assert view.expenses_by_category == {}


class TestBudgetProgress:
    """Tests for spending against budget limits."""

    def test_over_budget_is_capped(self):
        progress = budget_progress("Food", {"Food": Decimal("1000")}, {"Food": Decimal("1500")})
        assert progress.percentage == Decimal("100")
        assert progress.is_over_budget is True
        assert progress.is_near_limit is False

    def test_zero_limit(self):
        progress = budget_progress("Food", {"Food": Decimal("0")}, {"Food": Decimal("500")})
        assert progress.percentage == 0
        assert progress.is_over_budget is False

    def test_missing_budget_reads_as_zero(self):
        progress = budget_progress("Food", {}, {"Food": Decimal("500")})
        assert progress.limit == 0
        assert progress.spent == Decimal("500")
        assert progress.is_over_budget is False

    def test_partial_spend(self):
        progress = budget_progress("Food", {"Food": Decimal("1000")}, {"Food": Decimal("250")})
        assert progress.percentage == Decimal("25")
        assert progress.is_over_budget is False
        assert progress.is_near_limit is False
        assert progress.remaining == Decimal("750")

    def test_near_limit(self):
        progress = budget_progress("Food", {"Food": Decimal("1000")}, {"Food": Decimal("850")})
        assert progress.is_near_limit is True
        assert progress.is_over_budget is False

    def test_exactly_at_limit_is_not_over(self):
        progress = budget_progress("Food", {"Food": Decimal("1000")}, {"Food": Decimal("1000")})
        assert progress.percentage == Decimal("100")
        assert progress.is_over_budget is False

    def test_accepts_budget_records(self):
        budgets = [Budget(category="Rent", limit=Decimal("15000"))]
        assert budget_limits(budgets) == {"Rent": Decimal("15000")}
        progress = budget_progress("Rent", budgets, {"Rent": Decimal("15000")})
        assert progress.limit == Decimal("15000")

    def test_overview_covers_expense_categories(self, march_transactions):
        spent = expenses_by_category(march_transactions)
        overview = budget_overview({"Food": Decimal("3000")}, spent)
        assert [p.category for p in overview] == list(EXPENSE_CATEGORIES)
        food = next(p for p in overview if p.category == "Food")
        assert food.is_over_budget is True


class TestMonthNavigation:

    def test_current_month(self):
        assert current_month(date(2024, 3, 15)) == "2024-03"

    def test_shift_month(self):
        assert shift_month("2024-03", 1) == "2024-04"
        assert shift_month("2024-01", -1) == "2023-12"
        assert shift_month("2024-12", 1) == "2025-01"
        assert shift_month("2024-03", 0) == "2024-03"
        assert shift_month("2024-03", -15) == "2022-12"

    def test_shift_month_rejects_bad_input(self):
        with pytest.raises(ValueError):
            shift_month("March", 1)
        with pytest.raises(ValueError):
            shift_month("2024-13", 1)

    def test_month_label(self):
        assert month_label("2024-03") == "March 2024"
