"""
Derived View Models

Outputs of the aggregation engine. These are computed on demand
from a store snapshot and are never persisted.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from rupeewise.models.records import Debt


ZERO = Decimal("0")


class FinancialSummary(BaseModel):
    """Totals over a set of transactions."""

    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    balance: Decimal = ZERO
    savings_rate: Decimal = Field(
        default=ZERO,
        description="Balance as a percentage of income (0 when there is no income)"
    )


class CategoryTotal(BaseModel):
    """Summed expense for one category."""

    category: str
    total_amount: Decimal


class DebtTotals(BaseModel):
    """Outstanding (unpaid) debt totals in both directions."""

    total_i_owe: Decimal = ZERO
    total_owed_to_me: Decimal = ZERO


class MonthlyView(BaseModel):
    """
    Figures for one calendar month.

    Income, expense and savings only count the month's transactions.
    Debt totals are the full outstanding set: debts have no period.
    """

    month: str = Field(
        ...,
        description="Selected month as YYYY-MM"
    )
    income: Decimal = ZERO
    expense: Decimal = ZERO
    savings: Decimal = ZERO
    savings_rate: Decimal = ZERO
    expenses_by_category: dict[str, Decimal] = Field(default_factory=dict)
    total_i_owe: Decimal = ZERO
    total_owed_to_me: Decimal = ZERO


class PersonBalance(BaseModel):
    """Net position with one person across all their debts."""

    person_name: str
    i_owe: Decimal = ZERO
    owes_me: Decimal = ZERO
    net: Decimal = Field(
        default=ZERO,
        description="owes_me - i_owe; negative means I owe them overall"
    )
    is_settled: bool = True
    debts: list[Debt] = Field(
        default_factory=list,
        description="Every debt with this person, paid ones included"
    )


class BudgetProgress(BaseModel):
    """Spending against one category's budget."""

    category: str
    limit: Decimal = ZERO
    spent: Decimal = ZERO
    percentage: Decimal = Field(
        default=ZERO,
        ge=0,
        le=100,
        description="Share of the limit used, capped at 100 for display"
    )
    is_over_budget: bool = False
    is_near_limit: bool = False

    @property
    def remaining(self) -> Decimal:
        """What is left of the limit (0 once over budget)."""
        return max(ZERO, self.limit - self.spent)
