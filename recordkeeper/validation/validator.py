"""
Form Validation

Turns raw form fields (all strings at the UI boundary) into a candidate
record for one domain:
- trims every string field
- splits tag input on commas, trims, drops empties
- parses amounts and dates
- checks the domain's required fields

IMPORTANT: Validation NEVER silently fixes bad input. A blank required
field, a non-numeric amount or a malformed date is reported, and no
candidate record is built.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from recordkeeper.config import get_settings
from recordkeeper.models.records import (
    ValidationIssue,
    ValidationResult,
    normalize_tags,
)
from recordkeeper.models.schema import RecordSchema


def _label(field_name: str) -> str:
    return field_name.replace("_", " ").capitalize()


def parse_amount(text: str) -> Decimal:
    """
    Parse a user-typed amount.

    Accepts "5.50", "5,50", "1,200.50" and "1.200,50".

    Raises:
        ValueError: if the text is not a finite number
    """
    cleaned = text.replace(" ", "")
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        cleaned = cleaned.replace(",", ".")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Not a number: {text}")
    if not amount.is_finite():
        raise ValueError(f"Not a number: {text}")
    return amount


class RecordValidator:
    """Validates raw form fields for one record domain."""

    def __init__(
        self,
        schema: RecordSchema,
        uncategorized_label: Optional[str] = None,
    ):
        self._schema = schema
        self._uncategorized_label = (
            uncategorized_label or get_settings().app.uncategorized_label
        )

    @property
    def schema(self) -> RecordSchema:
        return self._schema

    def _parse_amount(self, text: str, issues: list[ValidationIssue]) -> Optional[Decimal]:
        if not text:
            return None
        try:
            amount = parse_amount(text)
        except ValueError:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount must be a number (got '{text}')",
            ))
            return None

        if amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
            ))
            return None
        if amount.as_tuple().exponent < -2:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount can have at most two decimal places",
            ))
            return None
        return amount

    def _parse_date(self, text: str, issues: list[ValidationIssue]) -> Optional[date]:
        if not text:
            return None
        try:
            return date.fromisoformat(text)
        except ValueError:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date must look like YYYY-MM-DD (got '{text}')",
            ))
            return None

    def validate(self, raw_fields: Mapping[str, Any]) -> ValidationResult:
        """
        Validate one submission.

        Returns:
            ValidationResult whose `draft` is set only when there are no errors
        """
        schema = self._schema
        issues: list[ValidationIssue] = []
        values: dict[str, Any] = {}

        for name in schema.form_fields:
            raw_value = raw_fields.get(name)
            text = "" if raw_value is None else str(raw_value).strip()

            if name in schema.list_fields:
                values[name] = normalize_tags(text)
            elif name == "amount":
                values[name] = self._parse_amount(text, issues)
            elif name == "date":
                values[name] = self._parse_date(text, issues)
            else:
                values[name] = text or None

        already_reported = {issue.field for issue in issues}
        for name in schema.required_fields:
            if values.get(name) is None and name not in already_reported:
                issues.append(ValidationIssue(
                    field=name,
                    issue_type="missing",
                    message=f"{_label(name)} is required",
                ))

        # An optional category left blank becomes the uncategorized label
        category_field = schema.category_field
        if category_field not in schema.required_fields and not values.get(category_field):
            values[category_field] = self._uncategorized_label

        result = ValidationResult(domain=schema.name, issues=issues)
        if result.has_errors:
            return result

        try:
            result.draft = schema.draft_model.model_validate(values)
        except ValidationError as e:
            for error in e.errors():
                loc = error.get("loc") or ("form",)
                result.issues.append(ValidationIssue(
                    field=str(loc[0]),
                    issue_type="invalid_value",
                    message=f"{_label(str(loc[0]))}: {error.get('msg', 'invalid value')}",
                ))
        return result

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One message listing everything the user has to fix."""
        if not result.has_errors:
            return "All fields look good."

        missing = [i.field for i in result.issues if i.issue_type == "missing"]
        lines = []
        if missing:
            lines.append(
                "Please fill in: " + ", ".join(_label(f).lower() for f in missing) + "."
            )
        for issue in result.issues:
            if issue.issue_type != "missing" and issue.severity == "error":
                lines.append(issue.message)
        return "\n".join(lines)
