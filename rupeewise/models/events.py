"""
Change Event Models for RupeeWise

Every effective mutation of the record store produces exactly one
change event. Subscribers (persistence, activity logging) react to
events instead of the store calling them directly.

DESIGN DECISION: Events describe WHAT changed and WHICH collections
are affected. They do not carry the new state; subscribers read the
store when they need it.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from rupeewise.models.records import (
    Budget,
    Debt,
    RecordCollection,
    Transaction,
)


class ChangeEventType(str, Enum):
    """Kinds of store mutation."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"

    # Debts
    DEBT_ADDED = "debt_added"
    DEBT_PAID_TOGGLED = "debt_paid_toggled"
    DEBT_EDITED = "debt_edited"
    DEBT_DELETED = "debt_deleted"

    # Budgets
    BUDGET_SET = "budget_set"

    # Bulk
    COLLECTIONS_REPLACED = "collections_replaced"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChangeEvent(BaseModel):
    """A single store mutation."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the mutation happened (UTC)"
    )
    event_type: ChangeEventType
    collections: list[RecordCollection] = Field(
        ...,
        min_length=1,
        description="Collections whose contents changed"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Id (or budget category) of the affected record"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    @field_validator('description', mode='before')
    @classmethod
    def truncate_description(cls, v):
        # Descriptions embed free-form user text
        if isinstance(v, str) and len(v) > 500:
            return v[:497] + "..."
        return v

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "collections": [c.value for c in self.collections],
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
        }


class ChangeEventBuilder:
    """
    Helper class to build change events with common patterns.

    Usage:
        event = ChangeEventBuilder.transaction_added(transaction)
        event = ChangeEventBuilder.debt_deleted(debt)
    """

    @staticmethod
    def transaction_added(transaction: Transaction) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.TRANSACTION_ADDED,
            collections=[RecordCollection.TRANSACTIONS],
            entity_id=transaction.id,
            description=f"Transaction added: {transaction.description}",
            details={
                "type": transaction.type.value,
                "category": transaction.category,
                "amount": str(transaction.amount),
                "date": transaction.date.isoformat(),
            },
        )

    @staticmethod
    def transaction_deleted(transaction: Transaction) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.TRANSACTION_DELETED,
            collections=[RecordCollection.TRANSACTIONS],
            entity_id=transaction.id,
            description=f"Transaction deleted: {transaction.description}",
        )

    @staticmethod
    def debt_added(debt: Debt) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.DEBT_ADDED,
            collections=[RecordCollection.DEBTS],
            entity_id=debt.id,
            description=f"Debt added with {debt.person_name}",
            details={
                "type": debt.type.value,
                "amount": str(debt.amount),
            },
        )

    @staticmethod
    def debt_paid_toggled(debt: Debt) -> ChangeEvent:
        state = "paid" if debt.is_paid else "unpaid"
        return ChangeEvent(
            event_type=ChangeEventType.DEBT_PAID_TOGGLED,
            collections=[RecordCollection.DEBTS],
            entity_id=debt.id,
            description=f"Debt with {debt.person_name} marked {state}",
            details={"is_paid": debt.is_paid},
        )

    @staticmethod
    def debt_edited(debt: Debt, changed_fields: list[str]) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.DEBT_EDITED,
            collections=[RecordCollection.DEBTS],
            entity_id=debt.id,
            description=f"Debt with {debt.person_name} edited",
            details={"changed_fields": changed_fields},
        )

    @staticmethod
    def debt_deleted(debt: Debt) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.DEBT_DELETED,
            collections=[RecordCollection.DEBTS],
            entity_id=debt.id,
            description=f"Debt with {debt.person_name} deleted",
        )

    @staticmethod
    def budget_set(budget: Budget, replaced: bool) -> ChangeEvent:
        return ChangeEvent(
            event_type=ChangeEventType.BUDGET_SET,
            collections=[RecordCollection.BUDGETS],
            entity_id=budget.category,
            description=f"Budget for {budget.category} set to {budget.limit}",
            details={
                "limit": str(budget.limit),
                "replaced": replaced,
            },
        )

    @staticmethod
    def collections_replaced(
        collections: list[RecordCollection],
        counts: dict[str, int],
    ) -> ChangeEvent:
        names = ", ".join(c.value for c in collections)
        return ChangeEvent(
            event_type=ChangeEventType.COLLECTIONS_REPLACED,
            collections=collections,
            description=f"Collections replaced: {names}",
            details={"counts": counts},
        )
