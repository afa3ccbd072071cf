"""
Streamlit Frontend for Record Keeper

Three pages, one per record domain (notes, expenses, wiki commands),
each with the same layout:
1. Add/edit form
2. Search, category filter and sort controls
3. The filtered list with edit and delete actions

The UI only renders what the workspace holds:
- Nothing appears in a list before the backend confirmed it
- Deletes always go through an explicit confirmation step
- Failures show up as error messages, the list stays as it was
"""

import asyncio

import streamlit as st

from recordkeeper.audit import configure_logging
from recordkeeper.config import get_settings, validate_all_settings
from recordkeeper.models.records import FormOutcome, SortMode, ViewQuery
from recordkeeper.orchestrator import DomainWorkspace, Workspace, create_workspace
from recordkeeper.views import (
    category_options,
    project,
    resolve_category_filter,
    total_amount,
    totals_by_category,
    was_edited,
)


# Page configuration
st.set_page_config(
    page_title="Record Keeper",
    page_icon="🗂️",
    layout="wide",
    initial_sidebar_state="expanded",
)

SORT_LABELS = {
    SortMode.NEWEST.value: "Newest first",
    SortMode.OLDEST.value: "Oldest first",
    SortMode.TITLE.value: "Title (A-Z)",
}

FIELD_LABELS = {
    "device_type": "Device type",
    "tags": "Tags (comma separated)",
    "amount": "Amount",
    "date": "Date (YYYY-MM-DD)",
}

MULTILINE_FIELDS = {"content", "command", "description"}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_workspace() -> Workspace:
    """Get or create this session's workspace, loaded once."""
    if "workspace" not in st.session_state:
        configure_logging(get_settings().app.log_level)
        workspace = create_workspace()
        run_async(workspace.load_all())
        st.session_state.workspace = workspace

    workspace = st.session_state.workspace
    workspace.set_notifier(st.error)
    return workspace


def main():
    """Main application entry point."""
    workspace = get_workspace()

    # Sidebar navigation
    st.sidebar.title("🗂️ Record Keeper")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📝 Notes", "💸 Expenses", "🖥️ Wiki", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("🔄 Reload from storage"):
        run_async(workspace.load_all())
        st.rerun()

    # Route to appropriate page
    if page == "📝 Notes":
        render_domain_page(workspace.notes, "📝 Notes")
    elif page == "💸 Expenses":
        render_domain_page(workspace.expenses, "💸 Expenses")
        render_expense_summary(workspace.expenses)
    elif page == "🖥️ Wiki":
        render_domain_page(workspace.wiki, "🖥️ Command Wiki")
    elif page == "⚙️ Settings":
        render_settings_page()


def _state_key(domain: DomainWorkspace, name: str) -> str:
    return f"{domain.schema.name}_{name}"


def _form_version(domain: DomainWorkspace) -> int:
    return st.session_state.get(_state_key(domain, "form_version"), 0)


def _reset_form_widgets(domain: DomainWorkspace) -> None:
    """New widget keys make Streamlit show the controller's fields again."""
    key = _state_key(domain, "form_version")
    st.session_state[key] = _form_version(domain) + 1


def render_domain_page(domain: DomainWorkspace, title: str):
    """Render one domain: form, controls and list."""
    st.title(title)

    flash = st.session_state.pop(_state_key(domain, "flash"), None)
    if flash:
        st.success(flash)

    render_form(domain)
    st.markdown("---")
    render_list(domain)


def render_form(domain: DomainWorkspace):
    """Render the add/edit form for one domain."""
    controller = domain.controller
    schema = domain.schema
    version = _form_version(domain)

    heading = f"Edit {schema.label}" if controller.is_editing else f"New {schema.label}"
    st.subheader(heading)

    with st.form(key=f"{schema.name}_form_{version}"):
        values = {}
        for name in schema.form_fields:
            label = FIELD_LABELS.get(name, name.replace("_", " ").capitalize())
            widget_key = f"{schema.name}_{name}_{version}"
            if name in MULTILINE_FIELDS:
                values[name] = st.text_area(label, value=controller.fields[name], key=widget_key)
            else:
                values[name] = st.text_input(label, value=controller.fields[name], key=widget_key)

        col1, col2 = st.columns(2)
        with col1:
            submitted = st.form_submit_button(
                "💾 Save changes" if controller.is_editing else "➕ Add",
                type="primary",
                disabled=controller.busy,
            )
        with col2:
            cancelled = st.form_submit_button(
                "✖️ Cancel edit",
                disabled=not controller.is_editing,
            )

    if cancelled:
        controller.clear()
        _reset_form_widgets(domain)
        st.rerun()

    if submitted:
        with st.spinner("Saving..."):
            result = run_async(controller.submit(values))
        if result.ok:
            st.session_state[_state_key(domain, "flash")] = result.message
            _reset_form_widgets(domain)
            st.rerun()
        elif result.message and result.outcome != FormOutcome.INVALID:
            # invalid submissions were already reported through the notifier
            st.warning(result.message)


def render_list(domain: DomainWorkspace):
    """Render the filter controls and the projected list."""
    schema = domain.schema
    records = domain.store.records

    col1, col2, col3 = st.columns(3)
    with col1:
        search_text = st.text_input(
            "Search",
            key=_state_key(domain, "search"),
            placeholder=f"Search {schema.name}...",
        )
    with col2:
        options = category_options(records, schema)
        filter_key = _state_key(domain, "category_filter")
        current = resolve_category_filter(records, schema, st.session_state.get(filter_key, ""))
        category_filter = st.selectbox(
            "Filter by " + schema.category_field.replace("_", " "),
            options=[""] + options,
            index=([""] + options).index(current),
            format_func=lambda c: "All" if c == "" else c,
        )
        st.session_state[filter_key] = category_filter
    with col3:
        sort_mode = st.selectbox(
            "Sort",
            options=list(SORT_LABELS),
            format_func=SORT_LABELS.get,
            key=_state_key(domain, "sort"),
        )

    query = ViewQuery(
        search_text=search_text,
        category_filter=category_filter,
        sort_mode=sort_mode,
    )
    visible = project(records, schema, query)

    if not visible:
        if records:
            st.info("Nothing matches your search.")
        else:
            st.info(f"No {schema.name} yet. Use the form above to add the first one.")
        return

    for record in visible:
        render_record(domain, record)


def render_record(domain: DomainWorkspace, record):
    """Render one record with its actions."""
    schema = domain.schema
    controller = domain.controller
    pending_key = _state_key(domain, "pending_delete")

    with st.container(border=True):
        st.markdown(f"**{schema.title_of(record)}**  ·  {schema.category_of(record)}")

        if schema.name == "notes":
            st.markdown(record.content)
        elif schema.name == "expenses":
            st.markdown(f"R$ {record.amount:.2f}  ·  {record.date.isoformat()}")
        else:
            details = " · ".join(
                v for v in (record.device_type, record.model, record.context) if v
            )
            st.caption(details)
            st.code(record.command)
            if record.description:
                st.markdown(record.description)

        if getattr(record, "tags", None):
            st.caption(" ".join(f"#{tag}" for tag in record.tags))

        if hasattr(record, "created_at"):
            stamp = f"Created {record.created_at:%Y-%m-%d %H:%M}"
            if was_edited(record):
                stamp += f"  ·  updated {record.updated_at:%Y-%m-%d %H:%M}"
            st.caption(stamp)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("✏️ Edit", key=f"edit_{record.id}", disabled=controller.busy):
                controller.load_for_edit(record.id)
                _reset_form_widgets(domain)
                st.rerun()
        with col2:
            if st.button("🗑️ Delete", key=f"delete_{record.id}", disabled=controller.busy):
                st.session_state[pending_key] = record.id
                st.rerun()

        if st.session_state.get(pending_key) == record.id:
            render_delete_confirmation(domain, record.id)


def render_delete_confirmation(domain: DomainWorkspace, record_id: str):
    """Ask before deleting; only 'Yes' reaches the backend."""
    controller = domain.controller
    pending_key = _state_key(domain, "pending_delete")

    st.warning(controller.confirmation_prompt(record_id))
    col1, col2 = st.columns(2)
    with col1:
        confirmed = st.button("Yes, delete", key=f"confirm_{record_id}", type="primary")
    with col2:
        declined = st.button("Cancel", key=f"decline_{record_id}")

    if confirmed or declined:
        was_editing = controller.editing_id == record_id
        result = run_async(
            controller.request_delete(record_id, lambda _prompt: confirmed)
        )
        st.session_state.pop(pending_key, None)
        if result.ok:
            st.session_state[_state_key(domain, "flash")] = result.message
            if was_editing:
                _reset_form_widgets(domain)
        st.rerun()


def render_expense_summary(domain: DomainWorkspace):
    """Total and per-category chart over all expenses."""
    expenses = domain.store.records
    if not expenses:
        return

    st.markdown("---")
    st.subheader("📊 Summary")
    st.metric("Total spent", f"R$ {total_amount(expenses):.2f}")

    totals = totals_by_category(expenses)
    st.bar_chart(
        {
            "category": list(totals),
            "amount": [float(amount) for amount in totals.values()],
        },
        x="category",
        y="amount",
    )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Google Sheets (remote storage)", "google_sheets"),
        ("Local storage", "local_storage"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Storage per domain")
    app_settings = get_settings().app
    for name, active in get_workspace().storage_backends().items():
        st.markdown(
            f"- **{name}**: {active} (configured: {app_settings.backend_for(name)})"
        )

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
