"""
Data Models Package

This package contains all Pydantic models used by Record Keeper,
plus the per-domain schemas that drive storage and views.
"""

from recordkeeper.models.records import (
    UNCATEGORIZED_LABEL,
    Draft,
    Expense,
    ExpenseDraft,
    FormOutcome,
    FormResult,
    Note,
    NoteDraft,
    Record,
    SortMode,
    ValidationIssue,
    ValidationResult,
    ViewQuery,
    WikiCommand,
    WikiCommandDraft,
    normalize_tags,
    utc_now,
)
from recordkeeper.models.schema import (
    EXPENSE_SCHEMA,
    NOTE_SCHEMA,
    SCHEMAS,
    WIKI_SCHEMA,
    RecordSchema,
)
from recordkeeper.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "UNCATEGORIZED_LABEL",
    "Draft",
    "Expense",
    "ExpenseDraft",
    "FormOutcome",
    "FormResult",
    "Note",
    "NoteDraft",
    "Record",
    "SortMode",
    "ValidationIssue",
    "ValidationResult",
    "ViewQuery",
    "WikiCommand",
    "WikiCommandDraft",
    "normalize_tags",
    "utc_now",
    # Schemas
    "EXPENSE_SCHEMA",
    "NOTE_SCHEMA",
    "SCHEMAS",
    "WIKI_SCHEMA",
    "RecordSchema",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
