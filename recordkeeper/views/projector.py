"""
View Projection

DESIGN DECISION: Everything the list views show is derived from the store's
collection by PURE functions. They never mutate their input and return the
same output for the same arguments, so the UI can simply re-project on
every keystroke, filter change or confirmed write.

Filtering:
- category filter: exact match on the domain's category field
- search text: case-insensitive substring of ANY searchable field

Sorting (stable, ties keep collection order):
- newest / oldest: by the domain's order key
- title: case- and accent-insensitive on the domain's title field
"""

import unicodedata
from collections import OrderedDict
from decimal import Decimal
from typing import Iterable, Optional

from recordkeeper.models.records import Expense, Record, SortMode, ViewQuery
from recordkeeper.models.schema import RecordSchema


def collation_key(text: str) -> str:
    """
    Sort key comparing strings by base letters only.

    "Ação", "acao" and "ACAO" collate equal, as a pt-BR locale compare
    with base sensitivity would.
    """
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def matches_search(record: Record, schema: RecordSchema, search_text: str) -> bool:
    needle = (search_text or "").strip().casefold()
    if not needle:
        return True
    return any(
        needle in value.casefold()
        for value in schema.searchable_values(record)
    )


def matches_category(record: Record, schema: RecordSchema, category_filter: str) -> bool:
    if not category_filter:
        return True
    return schema.category_of(record) == category_filter


def project(
    records: Iterable[Record],
    schema: RecordSchema,
    query: Optional[ViewQuery] = None,
) -> list[Record]:
    """
    Filter and sort a collection for display.

    An empty result is valid: the presentation shows its empty-state
    message for it.
    """
    query = query or ViewQuery()

    filtered = [
        record
        for record in records
        if matches_category(record, schema, query.category_filter)
        and matches_search(record, schema, query.search_text)
    ]

    sort_mode = SortMode.parse(query.sort_mode)
    if sort_mode == SortMode.TITLE:
        return sorted(filtered, key=lambda r: collation_key(schema.title_of(r)))
    if sort_mode == SortMode.OLDEST:
        return sorted(filtered, key=schema.order_value_of)
    return sorted(filtered, key=schema.order_value_of, reverse=True)


def category_options(records: Iterable[Record], schema: RecordSchema) -> list[str]:
    """Distinct non-empty category values, sorted, for the filter dropdown."""
    categories = {
        schema.category_of(record).strip()
        for record in records
        if schema.category_of(record).strip()
    }
    return sorted(categories, key=lambda c: (collation_key(c), c))


def resolve_category_filter(
    records: Iterable[Record],
    schema: RecordSchema,
    current: str,
) -> str:
    """Keep the current filter if it still has records, else reset to all."""
    if current and current in category_options(records, schema):
        return current
    return ""


def was_edited(record: Record) -> bool:
    """True once a timestamped record has been updated after creation."""
    created_at = getattr(record, "created_at", None)
    updated_at = getattr(record, "updated_at", None)
    if created_at is None or updated_at is None:
        return False
    return updated_at != created_at


def total_amount(expenses: Iterable[Expense]) -> Decimal:
    """Sum of amounts, e.g. over a projected expense list."""
    return sum((expense.amount for expense in expenses), Decimal("0"))


def totals_by_category(expenses: Iterable[Expense]) -> "OrderedDict[str, Decimal]":
    """Amount per category, largest first, for the expense chart."""
    totals: dict[str, Decimal] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, Decimal("0")) + expense.amount
    ordered = sorted(totals.items(), key=lambda item: (-item[1], collation_key(item[0])))
    return OrderedDict(ordered)
