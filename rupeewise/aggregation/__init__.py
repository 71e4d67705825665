"""Aggregation engine: pure derived views over store snapshots."""

from rupeewise.aggregation.engine import (
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

__all__ = [
    "budget_limits",
    "budget_overview",
    "budget_progress",
    "category_breakdown",
    "current_month",
    "debt_totals",
    "expenses_by_category",
    "filter_by_date_range",
    "filter_by_month",
    "global_summary",
    "month_label",
    "month_scoped_view",
    "person_key",
    "person_netting",
    "recent_first",
    "shift_month",
]
