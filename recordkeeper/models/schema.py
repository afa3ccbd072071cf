"""
Per-domain Record Schemas

DESIGN DECISION: Notes, expenses and wiki commands share one store, one
adapter and one projector. Everything that differs between the domains is
captured here: storage table, column order, order key, which field acts as
title/category, which fields are searchable and which are required.

The schema also owns the two storage shapes:
- remote rows: one string cell per column, list values JSON-encoded
- local blob entries: camelCase JSON objects
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from recordkeeper.models.records import (
    Draft,
    Expense,
    ExpenseDraft,
    Note,
    NoteDraft,
    Record,
    WikiCommand,
    WikiCommandDraft,
)


@dataclass(frozen=True)
class RecordSchema:
    """Field schema for one record domain."""

    name: str
    label: str
    table: str
    record_model: type
    draft_model: type
    columns: tuple[str, ...]
    order_key: str
    title_field: str
    category_field: str
    search_fields: tuple[str, ...]
    required_fields: tuple[str, ...]
    form_fields: tuple[str, ...]
    list_fields: frozenset[str] = field(default_factory=frozenset)
    timestamped: bool = True

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def title_of(self, record: Record) -> str:
        return getattr(record, self.title_field) or ""

    def category_of(self, record: Record) -> str:
        return getattr(record, self.category_field) or ""

    def order_value_of(self, record: Record) -> Any:
        return getattr(record, self.order_key)

    def searchable_values(self, record: Record) -> list[str]:
        """Field values used by text search, lists joined by commas."""
        values = []
        for name in self.search_fields:
            value = getattr(record, name, None)
            if value is None:
                continue
            if isinstance(value, list):
                values.append(",".join(value))
            else:
                values.append(str(value))
        return values

    def materialize(
        self,
        draft: Draft,
        record_id: str,
        now: Optional[datetime] = None,
    ) -> Record:
        """Turn a draft into a full record with the given id and timestamps."""
        data = draft.model_dump()
        data["id"] = record_id
        if self.timestamped:
            data["created_at"] = now
            data["updated_at"] = now
        return self.record_model.model_validate(data)

    # ------------------------------------------------------------------
    # Remote row shape
    # ------------------------------------------------------------------

    def to_row(self, record: Record) -> list[str]:
        """Convert a record to a spreadsheet row in column order."""
        data = record.model_dump(mode="json")
        row = []
        for column in self.columns:
            value = data.get(column)
            if value is None:
                row.append("")
            elif column in self.list_fields:
                row.append(json.dumps(value, ensure_ascii=False))
            else:
                row.append(str(value))
        return row

    def from_row(self, row: list[str]) -> Record:
        """
        Convert a spreadsheet row to a record.

        Raises:
            ValueError: if the row is malformed (pydantic errors included)
        """
        data: dict[str, Any] = {}
        for index, column in enumerate(self.columns):
            cell = row[index] if index < len(row) else ""
            if cell == "":
                continue
            if column in self.list_fields:
                data[column] = json.loads(cell)
            else:
                data[column] = cell
        return self.record_model.model_validate(data)

    # ------------------------------------------------------------------
    # Local blob shape
    # ------------------------------------------------------------------

    def to_blob_entry(self, record: Record) -> dict:
        return record.model_dump(mode="json", by_alias=True)

    def from_blob_entry(self, entry: dict) -> Record:
        return self.record_model.model_validate(entry)


NOTE_SCHEMA = RecordSchema(
    name="notes",
    label="note",
    table="notes",
    record_model=Note,
    draft_model=NoteDraft,
    columns=(
        "id",
        "title",
        "category",
        "tags",
        "content",
        "created_at",
        "updated_at",
    ),
    order_key="created_at",
    title_field="title",
    category_field="category",
    search_fields=("title", "content", "category", "tags"),
    required_fields=("title", "category", "content"),
    form_fields=("title", "category", "tags", "content"),
    list_fields=frozenset({"tags"}),
)

EXPENSE_SCHEMA = RecordSchema(
    name="expenses",
    label="expense",
    table="expenses",
    record_model=Expense,
    draft_model=ExpenseDraft,
    columns=(
        "id",
        "description",
        "category",
        "amount",
        "date",
    ),
    order_key="date",
    title_field="description",
    category_field="category",
    search_fields=("description", "category"),
    required_fields=("description", "amount", "date"),
    form_fields=("description", "category", "amount", "date"),
    timestamped=False,
)

WIKI_SCHEMA = RecordSchema(
    name="wiki",
    label="wiki command",
    table="wiki_commands",
    record_model=WikiCommand,
    draft_model=WikiCommandDraft,
    columns=(
        "id",
        "title",
        "vendor",
        "device_type",
        "model",
        "context",
        "command",
        "description",
        "tags",
        "created_at",
        "updated_at",
    ),
    order_key="created_at",
    title_field="title",
    category_field="vendor",
    search_fields=(
        "title",
        "command",
        "description",
        "vendor",
        "device_type",
        "model",
        "context",
        "tags",
    ),
    required_fields=("title", "vendor", "device_type", "command"),
    form_fields=(
        "title",
        "vendor",
        "device_type",
        "model",
        "context",
        "command",
        "description",
        "tags",
    ),
    list_fields=frozenset({"tags"}),
)

SCHEMAS: dict[str, RecordSchema] = {
    schema.name: schema
    for schema in (NOTE_SCHEMA, EXPENSE_SCHEMA, WIKI_SCHEMA)
}
