"""
Aggregation Engine

DESIGN DECISION: Every function here is a pure function of its input.
No hidden state, no I/O, no mutation of the records passed in.
Given the same snapshot the output is always the same.

The engine never raises on well-formed records: empty input gives
zero totals and empty groupings. Rejecting bad records is the job of
the record store's validator, not of this module.

Money is Decimal throughout so totals add up exactly.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence, Union

from rupeewise.models.records import (
    EXPENSE_CATEGORIES,
    Budget,
    Debt,
    DebtType,
    Transaction,
    TransactionType,
)
from rupeewise.models.summaries import (
    ZERO,
    BudgetProgress,
    CategoryTotal,
    DebtTotals,
    FinancialSummary,
    MonthlyView,
    PersonBalance,
)


HUNDRED = Decimal("100")
DEFAULT_WARNING_RATIO = Decimal("0.8")

BudgetsLike = Union[Mapping[str, Decimal], Iterable[Budget]]


def _total(transactions: Iterable[Transaction], kind: TransactionType) -> Decimal:
    return sum((t.amount for t in transactions if t.type == kind), ZERO)


def _savings_rate(income: Decimal, balance: Decimal) -> Decimal:
    # No income means no rate, not a division error
    if income > 0:
        return balance / income * HUNDRED
    return ZERO


# =============================================================================
# TRANSACTION SUMMARIES
# =============================================================================

def global_summary(transactions: Iterable[Transaction]) -> FinancialSummary:
    """Income, expense, balance and savings rate over all transactions."""
    transactions = list(transactions)

    total_income = _total(transactions, TransactionType.INCOME)
    total_expense = _total(transactions, TransactionType.EXPENSE)
    balance = total_income - total_expense

    return FinancialSummary(
        total_income=total_income,
        total_expense=total_expense,
        balance=balance,
        savings_rate=_savings_rate(total_income, balance),
    )


def expenses_by_category(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """
    Sum expense amounts per category.

    Only categories with at least one expense appear. Keys keep the
    order in which each category first occurs.
    """
    totals: dict[str, Decimal] = {}
    for t in transactions:
        if t.type != TransactionType.EXPENSE:
            continue
        totals[t.category] = totals.get(t.category, ZERO) + t.amount
    return totals


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """Expense totals as an ordered list, one entry per category present."""
    return [
        CategoryTotal(category=category, total_amount=amount)
        for category, amount in expenses_by_category(transactions).items()
    ]


# =============================================================================
# FILTERS
# =============================================================================

def filter_by_month(transactions: Iterable[Transaction], month: str) -> list[Transaction]:
    """
    Keep transactions whose ISO date starts with `month` (YYYY-MM).

    The day is ignored: "2024-03-15" belongs to "2024-03" only.
    """
    return [t for t in transactions if t.date.isoformat()[:7] == month]


def filter_by_date_range(
    transactions: Iterable[Transaction],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[Transaction]:
    """Keep transactions with start <= date <= end. Either bound may be omitted."""
    result = []
    for t in transactions:
        if start and t.date < start:
            continue
        if end and t.date > end:
            continue
        result.append(t)
    return result


def recent_first(transactions: Sequence[Transaction]) -> list[Transaction]:
    """Latest-added first, the order the transaction list is shown in."""
    return list(reversed(transactions))


# =============================================================================
# DEBTS
# =============================================================================

def _outstanding(debts: Iterable[Debt], kind: DebtType) -> Decimal:
    return sum((d.amount for d in debts if d.type == kind and not d.is_paid), ZERO)


def debt_totals(debts: Iterable[Debt]) -> DebtTotals:
    """Unpaid totals in both directions. Paid debts count for nothing."""
    debts = list(debts)
    return DebtTotals(
        total_i_owe=_outstanding(debts, DebtType.I_OWE),
        total_owed_to_me=_outstanding(debts, DebtType.OWE_ME),
    )


def person_key(person_name: str) -> str:
    """
    Grouping key for a debt's person.

    Trimmed, but case-sensitive: "Ravi" and "ravi" are two people.
    """
    return person_name.strip()


def person_netting(debts: Iterable[Debt]) -> list[PersonBalance]:
    """
    Net outstanding position with each person, ordered by name.

    A person with only paid debts is listed as settled.
    """
    groups: dict[str, list[Debt]] = {}
    for debt in debts:
        groups.setdefault(person_key(debt.person_name), []).append(debt)

    balances = []
    for name in sorted(groups):
        person_debts = groups[name]
        i_owe = _outstanding(person_debts, DebtType.I_OWE)
        owes_me = _outstanding(person_debts, DebtType.OWE_ME)
        balances.append(PersonBalance(
            person_name=name,
            i_owe=i_owe,
            owes_me=owes_me,
            net=owes_me - i_owe,
            is_settled=i_owe == 0 and owes_me == 0,
            debts=person_debts,
        ))
    return balances


# =============================================================================
# MONTHLY VIEW AND BUDGETS
# =============================================================================

def month_scoped_view(
    transactions: Iterable[Transaction],
    debts: Iterable[Debt],
    month: str,
) -> MonthlyView:
    """
    Figures for the budget planner's selected month.

    Transactions are filtered to `month`; debt totals are not, since
    debts are a running ledger with no period.
    """
    month_transactions = filter_by_month(transactions, month)

    income = _total(month_transactions, TransactionType.INCOME)
    expense = _total(month_transactions, TransactionType.EXPENSE)
    savings = income - expense
    totals = debt_totals(debts)

    return MonthlyView(
        month=month,
        income=income,
        expense=expense,
        savings=savings,
        savings_rate=_savings_rate(income, savings),
        expenses_by_category=expenses_by_category(month_transactions),
        total_i_owe=totals.total_i_owe,
        total_owed_to_me=totals.total_owed_to_me,
    )


def budget_limits(budgets: BudgetsLike) -> dict[str, Decimal]:
    """Normalize budgets (mapping or Budget records) to category -> limit."""
    if isinstance(budgets, Mapping):
        return dict(budgets)
    return {b.category: b.limit for b in budgets}


def budget_progress(
    category: str,
    budgets: BudgetsLike,
    expenses_by_category: Mapping[str, Decimal],
    warning_ratio: Decimal = DEFAULT_WARNING_RATIO,
) -> BudgetProgress:
    """
    Spending against one category's limit.

    `percentage` is capped at 100 for display, so `is_over_budget` is
    the only reliable overspend signal. An unset limit reads as 0 and
    never counts as over budget.
    """
    limit = budget_limits(budgets).get(category, ZERO)
    spent = expenses_by_category.get(category, ZERO)

    if limit > 0:
        percentage = min(HUNDRED, spent / limit * HUNDRED)
        is_over_budget = spent > limit
        is_near_limit = not is_over_budget and spent > limit * Decimal(str(warning_ratio))
    else:
        percentage = ZERO
        is_over_budget = False
        is_near_limit = False

    return BudgetProgress(
        category=category,
        limit=limit,
        spent=spent,
        percentage=percentage,
        is_over_budget=is_over_budget,
        is_near_limit=is_near_limit,
    )


def budget_overview(
    budgets: BudgetsLike,
    expenses_by_category: Mapping[str, Decimal],
    categories: Sequence[str] = EXPENSE_CATEGORIES,
    warning_ratio: Decimal = DEFAULT_WARNING_RATIO,
) -> list[BudgetProgress]:
    """Budget progress for every planning category, in category order."""
    limits = budget_limits(budgets)
    return [
        budget_progress(category, limits, expenses_by_category, warning_ratio)
        for category in categories
    ]


# =============================================================================
# MONTH NAVIGATION
# =============================================================================

def current_month(today: Optional[date] = None) -> str:
    """The month containing `today` as YYYY-MM."""
    return (today or date.today()).isoformat()[:7]


def shift_month(month: str, offset: int) -> str:
    """
    Move a YYYY-MM month by `offset` months ("2024-01", -1 -> "2023-12").

    Raises:
        ValueError: If `month` is not YYYY-MM
    """
    year_str, _, month_str = month.partition("-")
    if not (year_str.isdigit() and month_str.isdigit() and len(month_str) == 2
            and 1 <= int(month_str) <= 12):
        raise ValueError(f"Month must be YYYY-MM, got {month!r}")

    index = int(year_str) * 12 + (int(month_str) - 1) + offset
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def month_label(month: str) -> str:
    """Display label for a YYYY-MM month ("2024-03" -> "March 2024")."""
    year, _, month_num = month.partition("-")
    return date(int(year), int(month_num), 1).strftime("%B %Y")
