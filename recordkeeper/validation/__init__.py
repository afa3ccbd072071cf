"""Form validation package."""

from recordkeeper.validation.validator import RecordValidator, parse_amount

__all__ = ["RecordValidator", "parse_amount"]
