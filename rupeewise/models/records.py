"""
Core Record Models for RupeeWise

These models define the schemas for the three entity collections
(transactions, debts, budgets) and for the inputs that create or
change them.

DESIGN DECISION: Python attributes are snake_case, but the JSON form
uses the camelCase names of the original browser app (personName,
isPaid, dueDate, exportDate). Backups written by that app import
as-is, and both spellings are accepted on input.

Amounts are Decimal and never negative. Direction is carried by the
`type` field, never by the sign. In JSON they are written as plain
numbers, as the browser app wrote them.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS AND CATEGORY CONSTANTS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class DebtType(str, Enum):
    """
    Direction of a debt.

    I_OWE: I need to pay the other person back.
    OWE_ME: the other person needs to pay me back (I lent the money).
    """
    I_OWE = "i_owe"
    OWE_ME = "owe_me"


class RecordCollection(str, Enum):
    """The three independently stored entity collections."""
    TRANSACTIONS = "transactions"
    DEBTS = "debts"
    BUDGETS = "budgets"


TRANSACTION_CATEGORIES: tuple[str, ...] = (
    "Food",
    "Transport",
    "Rent",
    "Utilities",
    "Entertainment",
    "Shopping",
    "Healthcare",
    "Education",
    "Salary",
    "Freelance",
    "Other",
)

# Never planned against in budgets
INCOME_ONLY_CATEGORIES: tuple[str, ...] = ("Salary", "Freelance")

EXPENSE_CATEGORIES: tuple[str, ...] = tuple(
    c for c in TRANSACTION_CATEGORIES if c not in INCOME_ONLY_CATEGORIES
)


def new_record_id() -> str:
    """Collision-resistant opaque identifier for a new record."""
    return str(uuid4())


class RecordModel(BaseModel):
    """Base for every record-shaped model: camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _blank_to_none(v):
    # The browser app stores "" for a cleared date input
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _json_number(v: Decimal):
    if v.is_finite() and v == v.to_integral_value():
        return int(v)
    return float(v)


# Decimal in Python, a JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(_json_number, when_used='json')]


# =============================================================================
# ENTITIES
# =============================================================================

class Transaction(RecordModel):
    """
    A single dated income or expense event.

    Transactions are immutable once created; they can only be deleted.
    """

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    date: datetime.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    description: str = Field(
        ...,
        description="What the money was for"
    )
    amount: Money = Field(
        ...,
        ge=0,
        description="Amount in INR (never negative)"
    )
    type: TransactionType
    category: str = Field(
        ...,
        description="One of TRANSACTION_CATEGORIES by convention"
    )

    @property
    def month(self) -> str:
        """Calendar month of the transaction as YYYY-MM."""
        return self.date.isoformat()[:7]


class Debt(RecordModel):
    """
    An obligation between the user and a named person.

    Several debts may share a person; they are grouped by the trimmed name.
    """

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    person_name: str = Field(
        ...,
        description="Who the debt is with (free-form)"
    )
    description: Optional[str] = None
    amount: Money = Field(
        ...,
        ge=0,
        description="Amount in INR (never negative)"
    )
    type: DebtType
    due_date: Optional[datetime.date] = None
    is_paid: bool = False

    @field_validator('due_date', mode='before')
    @classmethod
    def blank_due_date_is_none(cls, v):
        return _blank_to_none(v)


class Budget(RecordModel):
    """A monthly spending limit for one category."""

    category: str = Field(
        ...,
        min_length=1,
        description="Category the limit applies to (unique key)"
    )
    limit: Money = Field(
        ...,
        ge=0,
        description="Monthly limit in INR"
    )


# =============================================================================
# INPUTS
# =============================================================================

class NewTransaction(RecordModel):
    """
    Fields for creating a transaction (everything except the id).

    DESIGN DECISION: No range constraints here. The record validator
    checks content and reports every problem at once instead of
    pydantic stopping at construction time.
    """

    date: datetime.date = Field(default_factory=datetime.date.today)
    description: str
    amount: Decimal
    type: TransactionType
    category: str


class NewDebt(RecordModel):
    """Fields for creating a debt (everything except id and is_paid)."""

    person_name: str
    description: Optional[str] = None
    amount: Decimal
    type: DebtType
    due_date: Optional[datetime.date] = None

    @field_validator('due_date', mode='before')
    @classmethod
    def blank_due_date_is_none(cls, v):
        return _blank_to_none(v)


class DebtUpdate(RecordModel):
    """
    Partial update of a debt.

    One optional slot per editable attribute. Only slots that were
    explicitly set are applied, so `DebtUpdate(due_date=None)` clears
    the due date while `DebtUpdate()` changes nothing.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    amount: Optional[Decimal] = None
    type: Optional[DebtType] = None
    description: Optional[str] = None
    due_date: Optional[datetime.date] = None

    @field_validator('due_date', mode='before')
    @classmethod
    def blank_due_date_is_none(cls, v):
        return _blank_to_none(v)

    def changes(self) -> dict:
        """The explicitly set slots, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)

    @property
    def is_empty(self) -> bool:
        return not self.model_fields_set


# =============================================================================
# SNAPSHOTS AND DOCUMENTS
# =============================================================================

class StoreSnapshot(BaseModel):
    """Point-in-time copy of all three collections."""

    transactions: list[Transaction] = Field(default_factory=list)
    debts: list[Debt] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)


class ExportDocument(RecordModel):
    """
    Whole-state backup document.

    On import every key is optional: a missing key means "leave that
    collection alone", which enables selective restore.
    """

    transactions: Optional[list[Transaction]] = None
    debts: Optional[list[Debt]] = None
    budgets: Optional[list[Budget]] = None
    export_date: Optional[datetime.datetime] = None

    @model_validator(mode='after')
    def validate_unique_keys(self) -> 'ExportDocument':
        """Reject documents that would break identity invariants."""
        if self.transactions is not None:
            ids = [t.id for t in self.transactions]
            if len(ids) != len(set(ids)):
                raise ValueError("Duplicate transaction ids in document")

        if self.debts is not None:
            ids = [d.id for d in self.debts]
            if len(ids) != len(set(ids)):
                raise ValueError("Duplicate debt ids in document")

        if self.budgets is not None:
            categories = [b.category for b in self.budgets]
            if len(categories) != len(set(categories)):
                raise ValueError("Duplicate budget categories in document")

        return self

    @property
    def present_collections(self) -> list[RecordCollection]:
        """Collections this document carries, in canonical order."""
        present = []
        if self.transactions is not None:
            present.append(RecordCollection.TRANSACTIONS)
        if self.debts is not None:
            present.append(RecordCollection.DEBTS)
        if self.budgets is not None:
            present.append(RecordCollection.BUDGETS)
        return present
