"""Shared fixtures for RupeeWise tests."""

from datetime import date
from decimal import Decimal

import pytest

from rupeewise.config import get_settings
from rupeewise.models import (
    Debt,
    DebtType,
    Transaction,
    TransactionType,
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep tests away from the real data directory and any local .env."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("RUPEEWISE_STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("RUPEEWISE_STORAGE_KEY_PREFIX", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_transaction(
    amount,
    type=TransactionType.EXPENSE,
    category="Food",
    on=date(2024, 3, 15),
    description="Test",
    **kwargs,
) -> Transaction:
    return Transaction(
        date=on,
        description=description,
        amount=Decimal(str(amount)),
        type=type,
        category=category,
        **kwargs,
    )


def make_debt(
    amount,
    type=DebtType.I_OWE,
    person_name="Ravi",
    is_paid=False,
    **kwargs,
) -> Debt:
    return Debt(
        person_name=person_name,
        amount=Decimal(str(amount)),
        type=type,
        is_paid=is_paid,
        **kwargs,
    )
