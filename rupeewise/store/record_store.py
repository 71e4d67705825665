"""
Record Store

The in-memory owner of the three entity collections.

DESIGN DECISION: The store knows nothing about persistence.
Every effective mutation emits one ChangeEvent to subscribers;
the persistence adapter and the activity logger subscribe.
Mutations that change nothing (unknown id, empty edit) emit nothing.

Entities are never modified in place. Updates swap in a copy, so a
snapshot handed to the aggregation engine stays exactly as it was.
"""

from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, Optional, Union

import structlog

from rupeewise.models.events import ChangeEvent, ChangeEventBuilder
from rupeewise.models.records import (
    Budget,
    Debt,
    DebtUpdate,
    NewDebt,
    NewTransaction,
    RecordCollection,
    StoreSnapshot,
    Transaction,
)
from rupeewise.models.validation import ValidationIssue, ValidationResult
from rupeewise.validation import RecordValidationError, RecordValidator


ChangeHandler = Callable[[ChangeEvent], None]

logger = structlog.get_logger(__name__)


class RecordStore:
    """
    Holds transactions, debts and budgets in insertion order.

    Usage:
        store = RecordStore()
        store.subscribe(handler)
        txn = store.add_transaction(NewTransaction(...))
        store.delete_transaction(txn.id)
    """

    def __init__(self, validator: Optional[RecordValidator] = None):
        self._validator = validator or RecordValidator()
        self._transactions: list[Transaction] = []
        self._debts: list[Debt] = []
        self._budgets: list[Budget] = []
        self._subscribers: list[ChangeHandler] = []

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, handler: ChangeHandler) -> None:
        """Register a handler called after every effective mutation."""
        if handler not in self._subscribers:
            self._subscribers.append(handler)

    def unsubscribe(self, handler: ChangeHandler) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    def _emit(self, event: ChangeEvent) -> None:
        for handler in list(self._subscribers):
            handler(event)

    def _check(self, result: ValidationResult) -> None:
        """Raise on errors, log warnings."""
        if result.has_errors:
            raise RecordValidationError(result)
        for warning in result.warnings:
            logger.warning(
                "record_validation_warning",
                record_type=result.record_type,
                warning=warning,
            )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    @property
    def debts(self) -> list[Debt]:
        return list(self._debts)

    @property
    def budgets(self) -> list[Budget]:
        return list(self._budgets)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return next((t for t in self._transactions if t.id == transaction_id), None)

    def get_debt(self, debt_id: str) -> Optional[Debt]:
        return next((d for d in self._debts if d.id == debt_id), None)

    def get_budget(self, category: str) -> Optional[Budget]:
        return next((b for b in self._budgets if b.category == category), None)

    def budget_limits(self) -> dict[str, Decimal]:
        """Budgets as a category -> limit mapping."""
        return {b.category: b.limit for b in self._budgets}

    def snapshot(self) -> StoreSnapshot:
        """Copy of all three collections for the aggregation engine."""
        return StoreSnapshot(
            transactions=list(self._transactions),
            debts=list(self._debts),
            budgets=list(self._budgets),
        )

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def add_transaction(self, data: Union[NewTransaction, dict]) -> Transaction:
        """
        Validate and append a new transaction with a fresh id.

        Raises:
            RecordValidationError: If the input has error-level issues
        """
        if not isinstance(data, NewTransaction):
            data = NewTransaction.model_validate(data)

        self._check(self._validator.validate_transaction(data))

        transaction = Transaction(**data.model_dump())
        self._transactions.append(transaction)

        self._emit(ChangeEventBuilder.transaction_added(transaction))
        return transaction

    def delete_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Remove a transaction. Unknown ids are a silent no-op."""
        transaction = self.get_transaction(transaction_id)
        if transaction is None:
            return None

        self._transactions = [t for t in self._transactions if t.id != transaction_id]

        self._emit(ChangeEventBuilder.transaction_deleted(transaction))
        return transaction

    # ------------------------------------------------------------------
    # Debts
    # ------------------------------------------------------------------

    def add_debt(self, data: Union[NewDebt, dict]) -> Debt:
        """
        Validate and append a new, unpaid debt with a fresh id.

        Raises:
            RecordValidationError: If the input has error-level issues
        """
        if not isinstance(data, NewDebt):
            data = NewDebt.model_validate(data)

        self._check(self._validator.validate_debt(data))

        debt = Debt(**data.model_dump(), is_paid=False)
        self._debts.append(debt)

        self._emit(ChangeEventBuilder.debt_added(debt))
        return debt

    def _replace_debt(self, updated: Debt) -> None:
        self._debts = [updated if d.id == updated.id else d for d in self._debts]

    def toggle_debt_paid(self, debt_id: str) -> Optional[Debt]:
        """Flip the paid flag. Unknown ids are a silent no-op."""
        debt = self.get_debt(debt_id)
        if debt is None:
            return None

        updated = debt.model_copy(update={"is_paid": not debt.is_paid})
        self._replace_debt(updated)

        self._emit(ChangeEventBuilder.debt_paid_toggled(updated))
        return updated

    def edit_debt(self, debt_id: str, update: Union[DebtUpdate, dict]) -> Optional[Debt]:
        """
        Merge the explicitly set slots of `update` into a debt.

        Unspecified fields are left untouched. Unknown ids and empty
        updates are a silent no-op.

        Raises:
            RecordValidationError: If a set slot is invalid
        """
        if not isinstance(update, DebtUpdate):
            update = DebtUpdate.model_validate(update)

        debt = self.get_debt(debt_id)
        if debt is None or update.is_empty:
            return None

        self._check(self._validator.validate_debt_update(update))

        changes = update.changes()
        updated = debt.model_copy(update=changes)
        self._replace_debt(updated)

        self._emit(ChangeEventBuilder.debt_edited(updated, sorted(changes)))
        return updated

    def delete_debt(self, debt_id: str) -> Optional[Debt]:
        """Remove a debt. Unknown ids are a silent no-op."""
        debt = self.get_debt(debt_id)
        if debt is None:
            return None

        self._debts = [d for d in self._debts if d.id != debt_id]

        self._emit(ChangeEventBuilder.debt_deleted(debt))
        return debt

    # ------------------------------------------------------------------
    # Budgets
    # ------------------------------------------------------------------

    def upsert_budget(self, category: str, limit: Union[Decimal, int, float, str]) -> Budget:
        """
        Set the limit for a category.

        An existing budget is replaced in place (keeping its position);
        otherwise a new one is appended.

        Raises:
            RecordValidationError: If the category is empty or the limit negative
        """
        try:
            limit = Decimal(str(limit))
        except InvalidOperation:
            limit = None
        if limit is None or not limit.is_finite():
            raise RecordValidationError(ValidationResult(
                record_type="budget",
                issues=[ValidationIssue(
                    field="limit",
                    issue_type="invalid_value",
                    message="Budget limit must be a number",
                    severity="error",
                )],
            ))
        self._check(self._validator.validate_budget(category, limit))

        budget = Budget(category=category, limit=limit)
        replaced = self.get_budget(category) is not None
        if replaced:
            self._budgets = [
                budget if b.category == category else b for b in self._budgets
            ]
        else:
            self._budgets.append(budget)

        self._emit(ChangeEventBuilder.budget_set(budget, replaced=replaced))
        return budget

    # ------------------------------------------------------------------
    # Bulk replacement (load / import)
    # ------------------------------------------------------------------

    def replace_collections(
        self,
        transactions: Optional[Iterable[Transaction]] = None,
        debts: Optional[Iterable[Debt]] = None,
        budgets: Optional[Iterable[Budget]] = None,
    ) -> list[RecordCollection]:
        """
        Replace whole collections. A collection passed as None is kept.

        Records are taken as already validated (they are entity models).

        Returns:
            The collections that were replaced
        """
        replaced = []
        counts = {}

        if transactions is not None:
            self._transactions = list(transactions)
            replaced.append(RecordCollection.TRANSACTIONS)
            counts[RecordCollection.TRANSACTIONS.value] = len(self._transactions)

        if debts is not None:
            self._debts = list(debts)
            replaced.append(RecordCollection.DEBTS)
            counts[RecordCollection.DEBTS.value] = len(self._debts)

        if budgets is not None:
            self._budgets = list(budgets)
            replaced.append(RecordCollection.BUDGETS)
            counts[RecordCollection.BUDGETS.value] = len(self._budgets)

        if replaced:
            self._emit(ChangeEventBuilder.collections_replaced(replaced, counts))
        return replaced
