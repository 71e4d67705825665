"""Tests for record validation."""

from datetime import date, timedelta
from decimal import Decimal

from rupeewise.config import AppSettings
from rupeewise.models import (
    DebtType,
    DebtUpdate,
    NewDebt,
    NewTransaction,
    TransactionType,
)
from rupeewise.validation import RecordValidationError, RecordValidator


def new_transaction(**overrides) -> NewTransaction:
    data = {
        "date": date(2024, 3, 15),
        "description": "Groceries",
        "amount": Decimal("450"),
        "type": TransactionType.EXPENSE,
        "category": "Food",
    }
    data.update(overrides)
    return NewTransaction(**data)


class TestTransactionValidation:
    """Tests for transaction input checks."""

    def test_valid_transaction(self):
        result = RecordValidator().validate_transaction(new_transaction())
        assert result.is_valid
        assert result.issues == []

    def test_empty_description_is_error(self):
        result = RecordValidator().validate_transaction(new_transaction(description="   "))
        assert result.has_errors
        assert "Description is required" in result.errors

    def test_negative_amount_is_error(self):
        result = RecordValidator().validate_transaction(new_transaction(amount=Decimal("-5")))
        assert result.error_count == 1
        assert "Amount cannot be negative" in result.errors

    def test_zero_amount_is_warning(self):
        result = RecordValidator().validate_transaction(new_transaction(amount=Decimal("0")))
        assert result.is_valid
        assert "Amount is zero" in result.warnings

    def test_unknown_category_is_error(self):
        result = RecordValidator().validate_transaction(new_transaction(category="Gadgets"))
        assert result.has_errors
        assert result.issues[0].issue_type == "unknown_category"

    def test_income_category_on_expense_is_warning(self):
        result = RecordValidator().validate_transaction(new_transaction(category="Salary"))
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_income_category_on_income_is_fine(self):
        result = RecordValidator().validate_transaction(
            new_transaction(category="Salary", type=TransactionType.INCOME)
        )
        assert result.issues == []

    def test_future_date_is_warning(self):
        far = date.today() + timedelta(days=30)
        result = RecordValidator().validate_transaction(new_transaction(date=far))
        assert result.is_valid
        assert any(i.issue_type == "future_date" for i in result.issues)

    def test_large_amount_uses_settings(self):
        validator = RecordValidator(AppSettings(max_reasonable_amount=1000))
        result = validator.validate_transaction(new_transaction(amount=Decimal("5000")))
        assert result.is_valid
        assert any(i.issue_type == "suspicious_value" for i in result.issues)


class TestDebtValidation:

    def test_empty_person_is_error(self):
        result = RecordValidator().validate_debt(
            NewDebt(person_name="", amount=Decimal("10"), type=DebtType.I_OWE)
        )
        assert "Person name is required" in result.errors

    def test_valid_debt(self):
        result = RecordValidator().validate_debt(
            NewDebt(person_name="Ravi", amount=Decimal("10"), type=DebtType.OWE_ME)
        )
        assert result.is_valid

    def test_update_cannot_clear_amount(self):
        result = RecordValidator().validate_debt_update(DebtUpdate(amount=None))
        assert result.has_errors

    def test_update_cannot_clear_type(self):
        result = RecordValidator().validate_debt_update(DebtUpdate(type=None))
        assert result.has_errors

    def test_update_can_clear_due_date(self):
        result = RecordValidator().validate_debt_update(DebtUpdate(due_date=None))
        assert result.is_valid


class TestBudgetValidation:

    def test_zero_limit_is_fine(self):
        result = RecordValidator().validate_budget("Food", Decimal("0"))
        assert result.issues == []

    def test_negative_limit_is_error(self):
        result = RecordValidator().validate_budget("Food", Decimal("-1"))
        assert result.has_errors

    def test_income_category_budget_is_warning(self):
        result = RecordValidator().validate_budget("Salary", Decimal("100"))
        assert result.is_valid
        assert result.warnings


class TestValidationError:

    def test_error_message_lists_errors(self):
        result = RecordValidator().validate_transaction(
            new_transaction(description="", amount=Decimal("-1"))
        )
        error = RecordValidationError(result)
        assert error.result is result
        assert "Invalid transaction" in str(error)
        assert "Description is required" in str(error)

    def test_user_friendly_summary(self):
        result = RecordValidator().validate_transaction(new_transaction(amount=Decimal("0")))
        summary = RecordValidator.get_user_friendly_summary(result)
        assert "Amount is zero" in summary
