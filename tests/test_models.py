"""
Tests for Record Keeper models

Test strategy:
1. Unit tests for individual components (models, schemas, validators)
2. Workflow tests for store/adapter/controller (with in-memory backends)
3. No real API calls in tests (fake worksheets and temp directories)
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from recordkeeper.models.records import (
    ExpenseDraft,
    FormOutcome,
    FormResult,
    Note,
    NoteDraft,
    SortMode,
    UNCATEGORIZED_LABEL,
    ValidationIssue,
    ValidationResult,
    WikiCommandDraft,
    normalize_tags,
)
from recordkeeper.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from recordkeeper.models.schema import EXPENSE_SCHEMA, NOTE_SCHEMA, WIKI_SCHEMA

from tests.factories import BASE_TIME, make_expense, make_note, make_wiki


class TestRecordModels:
    """Tests for the record Pydantic models."""

    def test_note_draft_creation(self):
        """Test NoteDraft model creation."""
        draft = NoteDraft(title="A", category="Work", tags=["x"], content="hello")
        assert draft.title == "A"
        assert draft.tags == ["x"]

    def test_note_draft_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        draft = NoteDraft(title="  A  ", category=" Work ", content=" hello ")
        assert draft.title == "A"
        assert draft.category == "Work"

    def test_note_draft_rejects_blank_title(self):
        """Test that a blank required field is rejected."""
        with pytest.raises(ValueError):
            NoteDraft(title="   ", category="Work", content="hello")

    def test_tags_from_comma_separated_text(self):
        """Test that tags are split, trimmed and filtered in input order."""
        draft = NoteDraft(title="A", category="Work", tags=" b, a ,, c ", content="x")
        assert draft.tags == ["b", "a", "c"]

    def test_normalize_tags_handles_none_and_lists(self):
        assert normalize_tags(None) == []
        assert normalize_tags(["x", " ", " y "]) == ["x", "y"]

    def test_note_timestamps_validation(self):
        """Test that updated_at cannot precede created_at."""
        with pytest.raises(ValueError):
            Note(
                id="n1",
                title="A",
                category="Work",
                content="hello",
                created_at=BASE_TIME,
                updated_at=BASE_TIME - timedelta(seconds=1),
            )

    def test_expense_blank_category_gets_label(self):
        """Test that a missing or blank category becomes the uncategorized label."""
        draft = ExpenseDraft(description="Coffee", category="  ", amount="5.50", date="2024-01-10")
        assert draft.category == UNCATEGORIZED_LABEL
        draft = ExpenseDraft(description="Coffee", amount="5.50", date="2024-01-10")
        assert draft.category == UNCATEGORIZED_LABEL

    def test_expense_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        with pytest.raises(ValueError):
            ExpenseDraft(description="Coffee", amount=Decimal("0"), date=date(2024, 1, 10))
        with pytest.raises(ValueError):
            ExpenseDraft(description="Coffee", amount=Decimal("-1"), date=date(2024, 1, 10))

    def test_expense_date_has_no_time(self):
        expense = make_expense(on="2024-01-10")
        assert expense.date == date(2024, 1, 10)

    def test_wiki_blank_optionals_become_none(self):
        """Test that blank optional wiki fields are stored as absent."""
        draft = WikiCommandDraft(
            title="Save config",
            vendor="Cisco",
            device_type="Router",
            model="  ",
            context="",
            command="write memory",
        )
        assert draft.model is None
        assert draft.context is None
        assert draft.description is None

    def test_local_blob_uses_camel_case_keys(self):
        """Test the by-alias dump used by the local blob."""
        record = make_wiki(model="C9300")
        dumped = record.model_dump(mode="json", by_alias=True)
        assert "deviceType" in dumped
        assert "createdAt" in dumped
        assert "device_type" not in dumped

    def test_records_accept_camel_case_input(self):
        note = Note.model_validate({
            "id": "n1",
            "title": "A",
            "category": "Work",
            "content": "hello",
            "createdAt": "2024-01-01T12:00:00Z",
            "updatedAt": "2024-01-01T12:00:00Z",
        })
        assert note.created_at == BASE_TIME


class TestRecordSchemas:
    """Tests for per-domain schema mapping."""

    def test_note_row_round_trip(self):
        """Test that a note survives the spreadsheet row shape."""
        note = make_note(tags=["x", "y"])
        row = NOTE_SCHEMA.to_row(note)
        assert row[0] == "n1"
        assert row[NOTE_SCHEMA.columns.index("tags")] == '["x", "y"]'
        assert NOTE_SCHEMA.from_row(row) == note

    def test_expense_row_keeps_decimal_and_date(self):
        expense = make_expense(amount="1205.50")
        row = EXPENSE_SCHEMA.to_row(expense)
        restored = EXPENSE_SCHEMA.from_row(row)
        assert restored.amount == Decimal("1205.50")
        assert restored.date == date(2024, 1, 10)

    def test_wiki_row_with_missing_optionals(self):
        """Test that empty cells come back as absent optionals."""
        record = make_wiki()
        row = WIKI_SCHEMA.to_row(record)
        assert row[WIKI_SCHEMA.columns.index("model")] == ""
        assert WIKI_SCHEMA.from_row(row).model is None

    def test_from_row_rejects_malformed_rows(self):
        with pytest.raises(ValueError):
            EXPENSE_SCHEMA.from_row(["e1", "Coffee", "Food", "not-a-number", "2024-01-10"])

    def test_materialize_sets_identity_and_timestamps(self):
        draft = NoteDraft(title="A", category="Work", content="hello")
        note = NOTE_SCHEMA.materialize(draft, "n9", BASE_TIME)
        assert note.id == "n9"
        assert note.created_at == note.updated_at == BASE_TIME

    def test_searchable_values_join_tags_with_commas(self):
        note = make_note(tags=["x", "y"])
        assert "x,y" in NOTE_SCHEMA.searchable_values(note)

    def test_wiki_category_is_vendor(self):
        assert WIKI_SCHEMA.category_of(make_wiki(vendor="Huawei")) == "Huawei"


class TestViewModels:
    """Tests for sort modes and results."""

    def test_sort_mode_parse_falls_back_to_newest(self):
        assert SortMode.parse("title") == SortMode.TITLE
        assert SortMode.parse("bogus") == SortMode.NEWEST
        assert SortMode.parse(None) == SortMode.NEWEST

    def test_form_result_ok(self):
        assert FormResult(outcome=FormOutcome.CREATED).ok
        assert not FormResult(outcome=FormOutcome.DECLINED).ok
        assert not FormResult(outcome=FormOutcome.FAILED).ok


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.RECORD_INSERTED,
            domain="notes",
            description="Test event",
        )
        assert event.event_type == AuditEventType.RECORD_INSERTED
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            domain="expenses",
            entity_id="e1",
            description="Test",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "record_deleted"
        assert log_dict["domain"] == "expenses"
        assert log_dict["entity_id"] == "e1"

    def test_audit_event_builder_write_failed(self):
        """Test AuditEventBuilder for failed writes."""
        event = AuditEventBuilder.write_failed("notes", "update", "quota exceeded", "n1")
        assert event.event_type == AuditEventType.WRITE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.entity_id == "n1"
        assert event.error_message == "quota exceeded"

    def test_audit_event_builder_delete_declined(self):
        event = AuditEventBuilder.delete_declined("wiki", "w1")
        assert event.event_type == AuditEventType.DELETE_DECLINED
        assert event.entity_id == "w1"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            domain="notes",
            issues=[
                ValidationIssue(
                    field="title",
                    issue_type="missing",
                    message="Title is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors
        assert result.error_count == 1
        assert not result.is_valid

    def test_validation_result_needs_a_draft(self):
        """Test that a result without issues is only valid with a draft."""
        assert not ValidationResult(domain="notes").is_valid
        draft = NoteDraft(title="A", category="Work", content="hello")
        assert ValidationResult(domain="notes", draft=draft).is_valid
