"""
Streamlit Frontend for Khata Tracker

Pages:
1. Persons - everyone the factory deals with, with their balances
2. Person Detail - one person's transactions, filterable by date
3. Add Transaction - record a credit or debit (or add a new person)
4. Factory Summary - totals across the whole ledger, filterable by date
5. Settings - which storage backend is in use, copy local data to remote

Date filters are applied in the browser session only. They never
re-query storage; clearing them restores what was loaded.
"""

import asyncio
from datetime import date

import streamlit as st

from khata.config import get_settings, validate_all_settings
from khata.formatting import balance_tone, format_currency, format_date
from khata.models.ledger import EntryType, ExpenseEntry, Person
from khata.orchestrator import LedgerService, create_app_components
from khata.queries import FilteredLedgerView, describe_date_range
from khata.services.storage import NotFoundError, StorageError
from khata.validation import ValidationError, get_user_friendly_summary


settings = get_settings()

# Page configuration
st.set_page_config(
    page_title=f"Khata Tracker - {settings.app.organization_name}",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="expanded",
)

TONE_COLOURS = {
    "positive": "#16a34a",
    "negative": "#dc2626",
    "neutral": "#2c3e50",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_service() -> LedgerService:
    """Get or create the ledger service (cached)."""
    service = create_app_components()
    try:
        run_async(service.initialize())
    except StorageError as e:
        st.error(f"Storage could not be prepared: {e}")
    return service


def money(amount) -> str:
    return format_currency(amount, symbol=settings.app.currency_symbol)


def main():
    """Main application entry point."""
    service = get_service()

    st.sidebar.title("📒 Khata Tracker")
    st.sidebar.caption(settings.app.organization_name)
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["👥 Persons", "🧾 Person Detail", "➕ Add Transaction", "🏭 Factory Summary", "⚙️ Settings"],
        index=0,
    )

    if page == "👥 Persons":
        render_persons_page(service)
    elif page == "🧾 Person Detail":
        render_person_detail_page(service)
    elif page == "➕ Add Transaction":
        render_add_transaction_page(service)
    elif page == "🏭 Factory Summary":
        render_factory_page(service)
    elif page == "⚙️ Settings":
        render_settings_page(service)


# =============================================================================
# SHARED WIDGETS
# =============================================================================

def render_summary_metrics(summary) -> None:
    """Three metric tiles: credit, debit, balance."""
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Credit", money(summary.total_credit))
    col2.metric("Total Debit", money(summary.total_debit))
    tone = balance_tone(summary.balance)
    col3.markdown(
        f"**Balance**<br><span style='font-size:1.8em;color:{TONE_COLOURS[tone]}'>"
        f"{money(summary.balance)}</span>",
        unsafe_allow_html=True,
    )


def render_transaction_table(entries: list[ExpenseEntry], persons: list[Person]) -> None:
    """Entries newest first, with the person's name resolved."""
    if not entries:
        st.info("No transactions found.")
        return

    names = {p.id: p.name for p in persons}
    rows = [
        {
            "Date": format_date(entry.date),
            "Person": names.get(entry.person_id, f"#{entry.person_id}"),
            "Type": entry.type.value,
            "Amount": money(entry.amount),
            "Description": entry.description or "",
        }
        for entry in sorted(entries, key=lambda e: (e.date, e.id), reverse=True)
    ]
    st.dataframe(rows, use_container_width=True, hide_index=True)


def render_date_filter(view: FilteredLedgerView, key: str) -> None:
    """Start/end inputs with Filter and Clear buttons bound to a loaded view."""
    col1, col2, col3, col4 = st.columns([2, 2, 1, 1])
    with col1:
        start = st.date_input("Start date", value=view.start_date, key=f"{key}_start")
    with col2:
        end = st.date_input("End date", value=view.end_date, key=f"{key}_end")
    with col3:
        st.write("")
        if st.button("🔍 Filter", key=f"{key}_filter"):
            view.apply(start_date=start or None, end_date=end or None)
            st.rerun()
    with col4:
        st.write("")
        if st.button("✖ Clear", key=f"{key}_clear"):
            view.clear()
            st.rerun()

    if view.is_filtered:
        st.caption(f"Showing transactions {describe_date_range(view.start_date, view.end_date)}")


# =============================================================================
# PAGES
# =============================================================================

def render_persons_page(service: LedgerService):
    """Render the persons list with balances."""
    st.title("👥 Persons")

    try:
        summaries = run_async(service.get_person_summaries())
    except StorageError as e:
        st.error(f"Failed to fetch persons: {e}")
        return

    if not summaries:
        st.info("No persons yet. Add one from the Add Transaction page.")
        return

    for summary in summaries:
        with st.container(border=True):
            col1, col2 = st.columns([3, 2])
            col1.markdown(f"**{summary.name}**")
            tone = balance_tone(summary.balance)
            col2.markdown(
                f"<span style='color:{TONE_COLOURS[tone]}'>Balance: {money(summary.balance)}</span>",
                unsafe_allow_html=True,
            )
            st.caption(
                f"Credit {money(summary.total_credit)} · Debit {money(summary.total_debit)}"
            )


def render_person_detail_page(service: LedgerService):
    """Render one person's transactions and summary."""
    st.title("🧾 Person Detail")

    try:
        persons = run_async(service.get_all_persons())
    except StorageError as e:
        st.error(f"Failed to fetch persons: {e}")
        return

    if not persons:
        st.info("No persons yet.")
        return

    person = st.selectbox(
        "Person",
        options=persons,
        format_func=lambda p: p.name,
    )

    # Reload only when a different person is picked
    view_key = f"person_view_{person.id}"
    if view_key not in st.session_state:
        try:
            st.session_state[view_key] = run_async(service.load_person_view(person.id))
        except NotFoundError:
            st.error("This person no longer exists.")
            return
        except StorageError as e:
            st.error(f"Failed to fetch person data: {e}")
            return

    view = st.session_state[view_key]

    st.subheader(view.summary.name)
    render_summary_metrics(view.summary)
    st.markdown("---")
    render_date_filter(view, key=view_key)
    render_transaction_table(view.entries, persons)

    if st.button("🔄 Reload"):
        del st.session_state[view_key]
        st.rerun()


def render_add_transaction_page(service: LedgerService):
    """Render the add transaction form."""
    st.title("➕ Add Transaction")
    st.markdown(
        f"Enter the details of the new transaction for the "
        f"{settings.app.organization_name.lower()}."
    )

    try:
        persons = run_async(service.get_all_persons())
    except StorageError as e:
        st.error(f"Failed to fetch persons: {e}")
        persons = []

    # New person
    with st.expander("Add New Person"):
        new_name = st.text_input("Name", placeholder="Enter new person name")
        if st.button("Add"):
            try:
                person = run_async(service.add_person(new_name))
                st.session_state.selected_person_id = person.id
                st.success(f'Person "{person.name}" added successfully')
                st.rerun()
            except ValidationError as e:
                st.error(str(e))
            except StorageError:
                st.error("Failed to add new person")

    with st.form("transaction_form", clear_on_submit=True):
        ids = [p.id for p in persons]
        selected = st.session_state.get("selected_person_id")
        person = st.selectbox(
            "Person *",
            options=persons,
            index=ids.index(selected) if selected in ids else None,
            format_func=lambda p: p.name,
            placeholder="Select a person",
        )

        col1, col2 = st.columns(2)
        with col1:
            entry_date = st.date_input("Date *", value=date.today())
            amount = st.text_input("Amount (₹) *", placeholder="0.00")
        with col2:
            entry_type = st.radio(
                "Type *",
                options=list(EntryType),
                format_func=lambda t: "Credit (Money In)" if t == EntryType.CREDIT else "Debit (Money Out)",
            )

        description = st.text_area(
            "Description (optional)",
            placeholder="Enter transaction details...",
        )

        submitted = st.form_submit_button("Add Transaction", type="primary")

    if submitted:
        try:
            entry = run_async(service.submit_transaction(
                person_id=person.id if person else None,
                entry_date=entry_date,
                amount=amount,
                entry_type=entry_type,
                description=description,
            ))
            st.success(f"Transaction #{entry.id} added successfully")
            # Loaded views are now stale
            stale = [k for k in st.session_state.keys() if k == "factory_view" or str(k).startswith("person_view_")]
            for key in stale:
                del st.session_state[key]
        except ValidationError as e:
            st.error(get_user_friendly_summary(e))
        except StorageError:
            st.error("Failed to add transaction")


def render_factory_page(service: LedgerService):
    """Render the factory-wide summary."""
    st.title(f"🏭 {settings.app.organization_name} Summary")

    if "factory_view" not in st.session_state:
        try:
            st.session_state.factory_view = run_async(service.load_factory_view())
        except StorageError as e:
            st.error(f"Failed to fetch factory data: {e}")
            return

    view = st.session_state.factory_view

    try:
        persons = run_async(service.get_all_persons())
    except StorageError:
        persons = []

    render_summary_metrics(view.summary)

    st.bar_chart(
        [
            {"Metric": "Credit", "Amount": float(view.summary.total_credit)},
            {"Metric": "Debit", "Amount": float(view.summary.total_debit)},
            {"Metric": "Balance", "Amount": float(view.summary.balance)},
        ],
        x="Metric",
        y="Amount",
    )

    st.markdown("---")
    render_date_filter(view, key="factory")
    render_transaction_table(view.entries, persons)

    if st.button("🔄 Reload"):
        del st.session_state.factory_view
        st.rerun()


def render_settings_page(service: LedgerService):
    """Render storage status and maintenance actions."""
    st.title("⚙️ Settings")

    st.subheader("Configuration")
    results = validate_all_settings()
    for name in ("google_sheets", "local_store", "app"):
        if results.get(name):
            st.markdown(f"✅ **{name}** loaded")
        else:
            st.markdown(f"❌ **{name}**: {results.get(f'{name}_error', 'invalid')}")

    st.subheader("Storage")
    status = service.backend_status()
    st.markdown(f"- Remote store: **{status['remote'] or 'not configured'}**")
    st.markdown(f"- Local store: **{status['local']}** (`{settings.local_store.path}`)")
    if status["last_used"]:
        st.markdown(f"- Last request served by: **{status['last_used']}**")

    if status["remote"]:
        st.markdown(
            "Records written while the remote store was unreachable exist "
            "only locally. Copy them across once it is back."
        )
        if st.button("⬆️ Copy local data to remote"):
            try:
                counts = run_async(service.migrate_to_remote())
                st.success(
                    f"Copied {counts['persons']} persons and "
                    f"{counts['expense_entries']} transactions"
                )
            except StorageError as e:
                st.error(f"Migration failed: {e}")


if __name__ == "__main__":
    main()
