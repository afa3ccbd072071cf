"""
Form Controller

One controller per domain drives the add/edit form and the delete action.

States:
    Creating       - editing_id is None, submit inserts a new record
    Editing(id)    - submit merges the form over record `id` and updates it

DESIGN DECISION: The controller never touches the store before the
persistence adapter confirms a write. On a failed insert the form keeps
what the user typed; on a failed update it stays in Editing so the user
can retry.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

from recordkeeper.audit import AuditLogger
from recordkeeper.models.records import FormOutcome, FormResult, Record
from recordkeeper.models.schema import RecordSchema
from recordkeeper.services.persistence import Notifier, PersistenceAdapter
from recordkeeper.store import RecordStore
from recordkeeper.validation import RecordValidator


Confirm = Callable[[str], bool]


def _ignore(message: str) -> None:
    return None


def _field_text(value: Any) -> str:
    """Render a stored value the way the form shows it."""
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class FormController:
    """Create/edit/delete workflow for one record domain."""

    def __init__(
        self,
        store: RecordStore,
        adapter: PersistenceAdapter,
        validator: Optional[RecordValidator] = None,
        notify: Optional[Notifier] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._adapter = adapter
        self._validator = validator or RecordValidator(store.schema)
        self._notify = notify or _ignore
        self._audit_logger = audit_logger or AuditLogger()
        self.busy = False
        self.fields: dict[str, str] = self.blank_fields()

    @property
    def schema(self) -> RecordSchema:
        return self._store.schema

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def editing_id(self) -> Optional[str]:
        return self._store.editing_id

    @property
    def is_editing(self) -> bool:
        return self._store.editing_id is not None

    def set_notifier(self, notify: Optional[Notifier]) -> None:
        self._notify = notify or _ignore

    def blank_fields(self) -> dict[str, str]:
        return {name: "" for name in self.schema.form_fields}

    # =========================================================================
    # STATE TRANSITIONS
    # =========================================================================

    def load_for_edit(self, record_id: str) -> bool:
        """Enter Editing(record_id) with the record's values in the form."""
        record = self._store.get(record_id)
        if record is None:
            return False

        self.fields = {
            name: _field_text(getattr(record, name, None))
            for name in self.schema.form_fields
        }
        self._store.editing_id = record_id
        return True

    def clear(self) -> None:
        """Back to Creating with a blank form."""
        self.fields = self.blank_fields()
        self._store.editing_id = None

    # =========================================================================
    # SUBMIT
    # =========================================================================

    async def submit(self, raw_fields: Optional[Mapping[str, Any]] = None) -> FormResult:
        """
        Validate the form and create or update a record.

        Args:
            raw_fields: Field values as typed; defaults to the current form

        Returns:
            FormResult describing what happened
        """
        if raw_fields is not None:
            self.fields = {
                name: _field_text(raw_fields.get(name))
                for name in self.schema.form_fields
            }

        if self.busy:
            return FormResult(
                outcome=FormOutcome.FAILED,
                message="Still saving, please wait.",
            )

        validation = self._validator.validate(self.fields)
        if not validation.is_valid:
            message = self._validator.get_user_friendly_summary(validation)
            self._audit_logger.log_validation_failed(
                self.schema.name,
                [issue.model_dump() for issue in validation.issues],
            )
            self._notify(message)
            return FormResult(
                outcome=FormOutcome.INVALID,
                issues=validation.issues,
                message=message,
            )

        self.busy = True
        try:
            if self.is_editing:
                return await self._submit_update(validation.draft)
            return await self._submit_insert(validation.draft)
        finally:
            self.busy = False

    async def _submit_insert(self, draft) -> FormResult:
        record = await self._adapter.insert(draft)
        if record is None:
            return FormResult(
                outcome=FormOutcome.FAILED,
                message=f"Could not save the {self.schema.label}.",
            )

        self._store.apply_insert(record)
        self.clear()
        return FormResult(
            outcome=FormOutcome.CREATED,
            record=record,
            message=f"{self.schema.label.capitalize()} saved.",
        )

    async def _submit_update(self, draft) -> FormResult:
        record_id = self._store.editing_id
        existing = self._store.get(record_id)
        if existing is None:
            return FormResult(
                outcome=FormOutcome.NOT_FOUND,
                message=f"The {self.schema.label} being edited no longer exists.",
            )

        merged = self.schema.record_model.model_validate(
            {**existing.model_dump(), **draft.model_dump()}
        )
        saved = await self._adapter.update(merged)
        if saved is None:
            return FormResult(
                outcome=FormOutcome.FAILED,
                record=existing,
                message=f"Could not update the {self.schema.label}.",
            )

        self._store.apply_update(saved)
        self.clear()
        return FormResult(
            outcome=FormOutcome.UPDATED,
            record=saved,
            message=f"{self.schema.label.capitalize()} updated.",
        )

    # =========================================================================
    # DELETE
    # =========================================================================

    def confirmation_prompt(self, record_id: str) -> str:
        record = self._store.get(record_id)
        title = self.schema.title_of(record) if record is not None else record_id
        return f'Are you sure you want to delete the {self.schema.label} "{title}"?'

    async def request_delete(self, record_id: str, confirm: Confirm) -> FormResult:
        """
        Delete a record after the user confirms.

        Declining issues no backend call and changes nothing.
        """
        record = self._store.get(record_id)
        if record is None:
            return FormResult(
                outcome=FormOutcome.NOT_FOUND,
                message=f"The {self.schema.label} no longer exists.",
            )

        if not confirm(self.confirmation_prompt(record_id)):
            self._audit_logger.log_delete_declined(self.schema.name, record_id)
            return FormResult(outcome=FormOutcome.DECLINED, record=record)

        self.busy = True
        try:
            deleted = await self._adapter.delete(record_id)
        finally:
            self.busy = False

        if not deleted:
            return FormResult(
                outcome=FormOutcome.FAILED,
                record=record,
                message=f"Could not delete the {self.schema.label}.",
            )

        self._store.apply_delete(record_id)
        if self._store.editing_id == record_id:
            self.clear()
        return FormResult(
            outcome=FormOutcome.DELETED,
            record=record,
            message=f"{self.schema.label.capitalize()} deleted.",
        )
