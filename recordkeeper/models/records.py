"""
Core Data Models for Record Keeper

These models define the schemas for the three record domains:
1. Notes (free-form text with category and tags)
2. Expenses (description, amount, date)
3. Wiki commands (reference CLI commands per vendor/device)

Each domain has a *draft* model (the candidate record produced by a form,
before the backend assigns an id and timestamps) and a full record model.

DESIGN DECISION: Attribute names are snake_case and double as the remote
column names. The local JSON blob uses camelCase keys (createdAt, deviceType),
produced through pydantic aliases, so the field mapping lives in one place.
"""

import datetime as dt
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


UNCATEGORIZED_LABEL = "Sem categoria"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def normalize_tags(value: Any) -> list[str]:
    """
    Normalize tag input into an ordered list of non-empty strings.

    Accepts either a comma-separated string or an iterable of strings.
    Order follows user input order; empty entries are dropped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(tag).strip() for tag in value if str(tag).strip()]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class RecordDraft(BaseModel):
    """Base for all record shapes."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TimestampedMixin(RecordDraft):
    """Identity and timestamps for notes and wiki commands."""

    id: str = Field(..., min_length=1, description="Opaque record identifier")
    created_at: datetime = Field(..., description="Set once at creation")
    updated_at: datetime = Field(..., description="Set on every mutation")

    @field_validator('created_at', 'updated_at')
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Timestamps typed by hand without an offset are read as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode='after')
    def validate_timestamps(self) -> 'TimestampedMixin':
        """updated_at can never precede created_at."""
        if self.updated_at < self.created_at:
            raise ValueError("updated_at cannot be before created_at")
        return self


# =============================================================================
# NOTES
# =============================================================================

class NoteDraft(RecordDraft):
    """A note as entered in the form, before it is persisted."""

    title: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    content: str = Field(..., min_length=1)

    @field_validator('tags', mode='before')
    @classmethod
    def clean_tags(cls, v: Any) -> list[str]:
        return normalize_tags(v)


class Note(TimestampedMixin, NoteDraft):
    """A persisted note."""


# =============================================================================
# EXPENSES
# =============================================================================

class ExpenseDraft(RecordDraft):
    """
    An expense as entered in the form.

    Category is optional; a missing or blank category is normalized to
    the uncategorized label so filters always have a value to match.
    """

    description: str = Field(..., min_length=1)
    category: str = Field(default=UNCATEGORIZED_LABEL)
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    date: dt.date = Field(..., description="Calendar date of the expense")

    @field_validator('category', mode='before')
    @classmethod
    def default_category(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNCATEGORIZED_LABEL
        return v


class Expense(ExpenseDraft):
    """A persisted expense."""

    id: str = Field(..., min_length=1)


# =============================================================================
# WIKI COMMANDS
# =============================================================================

class WikiCommandDraft(RecordDraft):
    """A reference command entry as entered in the form."""

    title: str = Field(..., min_length=1)
    vendor: str = Field(..., min_length=1)
    device_type: str = Field(..., min_length=1)
    model: Optional[str] = None
    context: Optional[str] = None
    command: str = Field(..., min_length=1)
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    @field_validator('model', 'context', 'description', mode='before')
    @classmethod
    def blank_optional(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator('tags', mode='before')
    @classmethod
    def clean_tags(cls, v: Any) -> list[str]:
        return normalize_tags(v)


class WikiCommand(TimestampedMixin, WikiCommandDraft):
    """A persisted wiki command."""


Record = Union[Note, Expense, WikiCommand]
Draft = Union[NoteDraft, ExpenseDraft, WikiCommandDraft]


# =============================================================================
# VIEW MODELS
# =============================================================================

class SortMode(str, Enum):
    """Sort orders offered by the list views."""
    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE = "title"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortMode":
        """Unknown or missing values fall back to newest-first."""
        try:
            return cls(value)
        except ValueError:
            return cls.NEWEST


class ViewQuery(BaseModel):
    """User inputs that drive the list projection."""

    search_text: str = ""
    category_filter: str = ""
    sort_mode: str = SortMode.NEWEST.value


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in submitted form fields."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
    )


class ValidationResult(BaseModel):
    """
    Result of validating one form submission.

    When valid, `draft` holds the candidate record ready for the backend.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    domain: str
    validated_at: datetime = Field(default_factory=utc_now)
    issues: list[ValidationIssue] = Field(default_factory=list)
    draft: Optional[Any] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return not self.has_errors and self.draft is not None


# =============================================================================
# FORM RESULTS
# =============================================================================

class FormOutcome(str, Enum):
    """What happened to a form action."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    INVALID = "invalid"
    FAILED = "failed"
    NOT_FOUND = "not_found"
    DECLINED = "declined"


class FormResult(BaseModel):
    """Outcome of a submit or delete request."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    outcome: FormOutcome
    record: Optional[Any] = None
    issues: list[ValidationIssue] = Field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome in (
            FormOutcome.CREATED,
            FormOutcome.UPDATED,
            FormOutcome.DELETED,
        )
