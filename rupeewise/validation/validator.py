"""
Record Validation

DESIGN DECISION: The record store validates every mutator input
before touching state. The browser app this replaces left these
checks to its forms; here they sit next to the data they protect.

Two severities:

ERRORS (block the mutation):
- Empty description / person name / budget category
- Negative amounts
- Transaction category outside the fixed category set

WARNINGS (accepted, but logged and shown):
- Zero amounts
- Amounts above the configured sanity maximum
- Transaction dates too far in the future
- Income-only categories used for expenses or budgets

IMPORTANT: Validation NEVER silently fixes input.
It reports problems for the caller to show.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from rupeewise.config import AppSettings, get_settings
from rupeewise.models.records import (
    INCOME_ONLY_CATEGORIES,
    TRANSACTION_CATEGORIES,
    DebtUpdate,
    NewDebt,
    NewTransaction,
    TransactionType,
)
from rupeewise.models.validation import ValidationIssue, ValidationResult


class RecordValidationError(ValueError):
    """A mutator input was rejected. Carries the full validation result."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(
            f"Invalid {result.record_type}: " + "; ".join(result.errors)
        )


class RecordValidator:
    """
    Validates inputs for the record store's mutators.

    Each validate_* method returns a ValidationResult; the store
    raises RecordValidationError when it has errors.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    # ------------------------------------------------------------------
    # Shared checks
    # ------------------------------------------------------------------

    def _check_amount(self, amount: Decimal, field: str = "amount") -> list[ValidationIssue]:
        issues = []

        if amount < 0:
            issues.append(ValidationIssue(
                field=field,
                issue_type="negative_amount",
                message="Amount cannot be negative",
                severity="error",
                suggested_fix="Enter the amount without a sign and pick the type instead",
            ))
        elif amount == 0:
            issues.append(ValidationIssue(
                field=field,
                issue_type="zero_amount",
                message="Amount is zero",
                severity="warning",
            ))

        max_amount = Decimal(str(self._settings.max_reasonable_amount))
        if amount > max_amount:
            issues.append(ValidationIssue(
                field=field,
                issue_type="suspicious_value",
                message=f"Amount (₹{amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        return issues

    @staticmethod
    def _check_text(value: Optional[str], field: str, label: str) -> list[ValidationIssue]:
        if value is None or not value.strip():
            return [ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} is required",
                severity="error",
            )]
        return []

    # ------------------------------------------------------------------
    # Per-record validation
    # ------------------------------------------------------------------

    def validate_transaction(self, data: NewTransaction) -> ValidationResult:
        """Validate the fields of a transaction about to be added."""
        issues = []

        issues.extend(self._check_text(data.description, "description", "Description"))
        issues.extend(self._check_amount(data.amount))

        if data.category not in TRANSACTION_CATEGORIES:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"Unknown category: {data.category!r}",
                severity="error",
                suggested_fix=f"Use one of: {', '.join(TRANSACTION_CATEGORIES)}",
            ))
        elif (
            data.type == TransactionType.EXPENSE
            and data.category in INCOME_ONLY_CATEGORIES
        ):
            issues.append(ValidationIssue(
                field="category",
                issue_type="inconsistent",
                message=f"{data.category} is an income category but the transaction is an expense",
                severity="warning",
                suggested_fix="Check the transaction type",
            ))

        max_future_date = date.today() + timedelta(
            days=self._settings.future_date_tolerance_days
        )
        if data.date > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({data.date}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        return ValidationResult(record_type="transaction", issues=issues)

    def validate_debt(self, data: NewDebt) -> ValidationResult:
        """Validate the fields of a debt about to be added."""
        issues = []

        issues.extend(self._check_text(data.person_name, "person_name", "Person name"))
        issues.extend(self._check_amount(data.amount))

        return ValidationResult(record_type="debt", issues=issues)

    def validate_debt_update(self, update: DebtUpdate) -> ValidationResult:
        """Validate the explicitly set slots of a debt edit."""
        issues = []
        changes = update.changes()

        if "amount" in changes:
            if changes["amount"] is None:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="missing",
                    message="Amount cannot be cleared",
                    severity="error",
                ))
            else:
                issues.extend(self._check_amount(changes["amount"]))

        if "type" in changes and changes["type"] is None:
            issues.append(ValidationIssue(
                field="type",
                issue_type="missing",
                message="Debt type cannot be cleared",
                severity="error",
            ))

        return ValidationResult(record_type="debt_update", issues=issues)

    def validate_budget(self, category: str, limit: Decimal) -> ValidationResult:
        """Validate a budget about to be set."""
        issues = []

        issues.extend(self._check_text(category, "category", "Budget category"))
        issues.extend(
            i for i in self._check_amount(limit, field="limit")
            if i.issue_type != "zero_amount"  # a zero limit means "no budget"
        )

        if category in INCOME_ONLY_CATEGORIES:
            issues.append(ValidationIssue(
                field="category",
                issue_type="inconsistent",
                message=f"{category} is an income category; budgets track spending",
                severity="warning",
            ))

        return ValidationResult(record_type="budget", issues=issues)

    @staticmethod
    def get_user_friendly_summary(result: ValidationResult) -> str:
        """
        Generate a short summary of validation results for the UI.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed."

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
