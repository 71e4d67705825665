"""Record validation package."""

from rupeewise.validation.validator import RecordValidationError, RecordValidator

__all__ = ["RecordValidationError", "RecordValidator"]
