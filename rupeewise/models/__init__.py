"""
Data Models Package

This package contains all Pydantic models used in RupeeWise.
All data flowing through the system must conform to these schemas.
"""

from rupeewise.models.records import (
    EXPENSE_CATEGORIES,
    INCOME_ONLY_CATEGORIES,
    TRANSACTION_CATEGORIES,
    Budget,
    Debt,
    DebtType,
    DebtUpdate,
    ExportDocument,
    NewDebt,
    NewTransaction,
    RecordCollection,
    StoreSnapshot,
    Transaction,
    TransactionType,
    new_record_id,
)
from rupeewise.models.summaries import (
    BudgetProgress,
    CategoryTotal,
    DebtTotals,
    FinancialSummary,
    MonthlyView,
    PersonBalance,
)
from rupeewise.models.events import (
    ChangeEvent,
    ChangeEventBuilder,
    ChangeEventType,
)
from rupeewise.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Record models
    "EXPENSE_CATEGORIES",
    "INCOME_ONLY_CATEGORIES",
    "TRANSACTION_CATEGORIES",
    "Budget",
    "Debt",
    "DebtType",
    "DebtUpdate",
    "ExportDocument",
    "NewDebt",
    "NewTransaction",
    "RecordCollection",
    "StoreSnapshot",
    "Transaction",
    "TransactionType",
    "new_record_id",
    # Derived views
    "BudgetProgress",
    "CategoryTotal",
    "DebtTotals",
    "FinancialSummary",
    "MonthlyView",
    "PersonBalance",
    # Change events
    "ChangeEvent",
    "ChangeEventBuilder",
    "ChangeEventType",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
