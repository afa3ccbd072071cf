"""
Tests for the form workflow.

Covers the create/edit state machine, the confirmation-gated delete and
the guarantee that the store only changes after the backend confirmed.
"""

from decimal import Decimal

import pytest

from recordkeeper.models.records import FormOutcome, ViewQuery
from recordkeeper.models.schema import NOTE_SCHEMA
from recordkeeper.views import project, total_amount

from tests.factories import make_note


NOTE_FIELDS = {"title": "A", "category": "Work", "tags": "x", "content": "hello"}


def _always(answer):
    prompts = []

    def confirm(prompt):
        prompts.append(prompt)
        return answer

    confirm.prompts = prompts
    return confirm


class TestCreating:
    """Submitting in the Creating state."""

    @pytest.mark.asyncio
    async def test_insert_note_then_filter_by_category(self, notes):
        result = await notes.controller.submit(NOTE_FIELDS)

        assert result.outcome == FormOutcome.CREATED
        records = notes.store.records
        assert [r.title for r in records] == ["A"]
        assert records[0].tags == ["x"]
        assert project(records, NOTE_SCHEMA, ViewQuery(category_filter="Work")) == records
        assert project(records, NOTE_SCHEMA, ViewQuery(category_filter="Home")) == []

    @pytest.mark.asyncio
    async def test_new_records_go_first(self, notes):
        await notes.controller.submit(NOTE_FIELDS)
        await notes.controller.submit({**NOTE_FIELDS, "title": "B"})
        assert [r.title for r in notes.store.records] == ["B", "A"]

    @pytest.mark.asyncio
    async def test_insert_expenses_newest_first_and_total(self, expenses):
        await expenses.controller.submit(
            {"description": "Coffee", "amount": "5.50", "date": "2024-01-10"}
        )
        await expenses.controller.submit(
            {"description": "Rent", "amount": "1200", "date": "2024-01-01"}
        )

        visible = project(expenses.store.records, expenses.schema, ViewQuery(sort_mode="newest"))

        assert [e.description for e in visible] == ["Coffee", "Rent"]
        assert total_amount(visible) == Decimal("1205.50")
        assert {e.category for e in visible} == {"Sem categoria"}

    @pytest.mark.asyncio
    async def test_successful_insert_clears_form(self, notes):
        await notes.controller.submit(NOTE_FIELDS)
        assert notes.controller.fields == {
            "title": "", "category": "", "tags": "", "content": "",
        }
        assert not notes.controller.is_editing

    @pytest.mark.asyncio
    async def test_invalid_submit_makes_no_backend_call(self, notes, messages):
        result = await notes.controller.submit({**NOTE_FIELDS, "content": "   "})

        assert result.outcome == FormOutcome.INVALID
        assert notes.adapter.storage.calls == []
        assert notes.store.records == []
        assert messages == ["Please fill in: content."]

    @pytest.mark.asyncio
    async def test_failed_insert_keeps_fields(self, notes, messages):
        notes.adapter.storage.fail_on.add("insert")

        result = await notes.controller.submit(NOTE_FIELDS)

        assert result.outcome == FormOutcome.FAILED
        assert notes.store.records == []
        assert notes.controller.fields["title"] == "A"
        assert messages == ["Could not save the note. Please try again."]
        assert not notes.controller.busy

    @pytest.mark.asyncio
    async def test_submit_while_busy_is_refused(self, notes):
        notes.controller.busy = True
        result = await notes.controller.submit(NOTE_FIELDS)
        assert result.outcome == FormOutcome.FAILED
        assert notes.adapter.storage.calls == []


class TestEditing:
    """Loading a record into the form and submitting changes."""

    @pytest.mark.asyncio
    async def test_load_for_edit_fills_form(self, workspace_factory):
        notes = workspace_factory(NOTE_SCHEMA, [make_note("n1", tags=["x", "y"])])
        await notes.load()

        assert notes.controller.load_for_edit("n1")
        assert notes.controller.editing_id == "n1"
        assert notes.controller.fields["tags"] == "x, y"

    def test_load_for_edit_unknown_id_is_noop(self, notes):
        assert not notes.controller.load_for_edit("ghost")
        assert not notes.controller.is_editing

    @pytest.mark.asyncio
    async def test_update_keeps_identity_and_stamps_updated_at(self, workspace_factory):
        original = make_note("n1")
        notes = workspace_factory(NOTE_SCHEMA, [original])
        await notes.load()
        notes.controller.load_for_edit("n1")

        result = await notes.controller.submit({**NOTE_FIELDS, "title": "Renamed"})

        assert result.outcome == FormOutcome.UPDATED
        updated = notes.store.get("n1")
        assert updated.title == "Renamed"
        assert updated.created_at == original.created_at
        assert updated.updated_at > original.created_at
        assert len(notes.store) == 1
        assert not notes.controller.is_editing

    @pytest.mark.asyncio
    async def test_expense_update_round_trip(self, expenses):
        await expenses.controller.submit(
            {"description": "Coffee", "amount": "5.50", "date": "2024-01-10"}
        )
        record_id = expenses.store.ids[0]
        expenses.controller.load_for_edit(record_id)
        assert expenses.controller.fields["amount"] == "5.50"
        assert expenses.controller.fields["date"] == "2024-01-10"

        result = await expenses.controller.submit(
            {**expenses.controller.fields, "amount": "6,00"}
        )

        assert result.outcome == FormOutcome.UPDATED
        assert expenses.store.get(record_id).amount == Decimal("6.00")

    @pytest.mark.asyncio
    async def test_failed_update_leaves_collection_unchanged(self, workspace_factory, messages):
        notes = workspace_factory(
            NOTE_SCHEMA, [make_note("n1"), make_note("n2", title="B", minutes=1)]
        )
        await notes.load()
        before = [r.model_dump_json() for r in notes.store.records]
        notes.controller.load_for_edit("n1")
        notes.adapter.storage.fail_on.add("update")

        result = await notes.controller.submit({**NOTE_FIELDS, "title": "Renamed"})

        assert result.outcome == FormOutcome.FAILED
        assert [r.model_dump_json() for r in notes.store.records] == before
        assert notes.controller.editing_id == "n1"
        assert messages == ["Could not update the note. Please try again."]

    @pytest.mark.asyncio
    async def test_editing_target_gone_is_not_found(self, workspace_factory):
        notes = workspace_factory(NOTE_SCHEMA, [make_note("n1")])
        await notes.load()
        notes.controller.load_for_edit("n1")
        notes.store.apply_delete("n1")

        result = await notes.controller.submit(NOTE_FIELDS)

        assert result.outcome == FormOutcome.NOT_FOUND
        assert "update" not in notes.adapter.storage.calls

    @pytest.mark.asyncio
    async def test_clear_returns_to_creating(self, workspace_factory):
        notes = workspace_factory(NOTE_SCHEMA, [make_note("n1")])
        await notes.load()
        notes.controller.load_for_edit("n1")

        notes.controller.clear()

        assert not notes.controller.is_editing
        assert notes.controller.fields["title"] == ""


class TestDelete:
    """Confirmation-gated delete."""

    @pytest.mark.asyncio
    async def test_declined_delete_makes_no_backend_call(self, workspace_factory):
        notes = workspace_factory(NOTE_SCHEMA, [make_note("n1")])
        await notes.load()
        before = notes.store.records
        calls_before = list(notes.adapter.storage.calls)
        confirm = _always(False)

        result = await notes.controller.request_delete("n1", confirm)

        assert result.outcome == FormOutcome.DECLINED
        assert notes.store.records == before
        assert notes.adapter.storage.calls == calls_before
        assert confirm.prompts == ['Are you sure you want to delete the note "A"?']

    @pytest.mark.asyncio
    async def test_confirmed_delete_removes_record(self, workspace_factory):
        notes = workspace_factory(NOTE_SCHEMA, [make_note("n1"), make_note("n2", minutes=1)])
        await notes.load()

        result = await notes.controller.request_delete("n1", _always(True))

        assert result.outcome == FormOutcome.DELETED
        assert notes.store.ids == ["n2"]

    @pytest.mark.asyncio
    async def test_deleting_the_edited_record_resets_form(self, workspace_factory):
        notes = workspace_factory(NOTE_SCHEMA, [make_note("n1")])
        await notes.load()
        notes.controller.load_for_edit("n1")

        await notes.controller.request_delete("n1", _always(True))

        assert not notes.controller.is_editing
        assert notes.controller.fields["title"] == ""

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_record(self, workspace_factory, messages):
        notes = workspace_factory(NOTE_SCHEMA, [make_note("n1")])
        await notes.load()
        notes.adapter.storage.fail_on.add("delete")

        result = await notes.controller.request_delete("n1", _always(True))

        assert result.outcome == FormOutcome.FAILED
        assert notes.store.ids == ["n1"]
        assert messages == ["Could not delete the note. Please try again."]

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, notes):
        result = await notes.controller.request_delete("ghost", _always(True))
        assert result.outcome == FormOutcome.NOT_FOUND
        assert notes.adapter.storage.calls == []
