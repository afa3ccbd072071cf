"""View projection package."""

from recordkeeper.views.projector import (
    category_options,
    collation_key,
    project,
    resolve_category_filter,
    total_amount,
    totals_by_category,
    was_edited,
)

__all__ = [
    "category_options",
    "collation_key",
    "project",
    "resolve_category_filter",
    "total_amount",
    "totals_by_category",
    "was_edited",
]
