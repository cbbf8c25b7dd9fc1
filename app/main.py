"""
Streamlit Frontend for PocketBalance

DESIGN PRINCIPLES:
1. Balance always visible at the top
2. AI help is optional; every field can be filled by hand
3. Clear, non-technical messages when something fails
4. Destructive actions need an explicit confirmation

The UI enforces the human-in-the-loop principle:
- A scanned receipt only fills the form
- A suggested category only selects a value in the form
- Nothing is recorded without pressing "Add"
"""

import asyncio
from datetime import datetime

import streamlit as st

from pocketbalance.config import get_settings, validate_all_settings
from pocketbalance.export import EXPORT_MEDIA_TYPE, NothingToExportError
from pocketbalance.models.entry import SpendingFormState
from pocketbalance.models.transaction import ScanReceiptInput, SpendingCategory
from pocketbalance.orchestrator import (
    DataManagementFlow,
    RequestInFlightError,
    TransactionEntryFlow,
    create_app_components,
)
from pocketbalance.store import TransactionStore


# Page configuration
st.set_page_config(
    page_title="PocketBalance",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

CATEGORY_ICONS = {
    SpendingCategory.FOOD: "🍽️",
    SpendingCategory.TRANSPORT: "🚗",
    SpendingCategory.BILLS: "🧾",
    SpendingCategory.ENTERTAINMENT: "🎟️",
    SpendingCategory.SHOPPING: "🛍️",
    SpendingCategory.TRAVEL: "✈️",
    SpendingCategory.OTHER: "❔",
}

# Widget keys of the spending form
DESCRIPTION_KEY = "spending_description"
AMOUNT_KEY = "spending_amount"
CATEGORY_KEY = "spending_category"


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def format_currency(amount: float) -> str:
    settings = get_settings().app
    return f"{settings.currency_code} {amount:,.{settings.currency_decimals}f}"


def format_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%d %b %Y")
    except ValueError:
        return value


def get_form_state() -> SpendingFormState:
    """Spending form state, kept in sync with the widget values."""
    if "spending_form" not in st.session_state:
        st.session_state.spending_form = SpendingFormState()
    state = st.session_state.spending_form
    state.description = st.session_state.get(DESCRIPTION_KEY, state.description)
    state.amount = st.session_state.get(AMOUNT_KEY, state.amount)
    state.category = st.session_state.get(CATEGORY_KEY, state.category)
    return state


def push_form_state() -> None:
    """Copy the form state back into the widgets on the next run."""
    st.session_state.push_form = True


def apply_pushed_form_state() -> None:
    # Widget keys can only be written before the widgets are created
    if not st.session_state.pop("push_form", False):
        return
    state = st.session_state.spending_form
    st.session_state[DESCRIPTION_KEY] = state.description
    st.session_state[AMOUNT_KEY] = state.amount
    st.session_state[CATEGORY_KEY] = state.category


def flash(kind: str, message: str) -> None:
    """Show a message after the next rerun."""
    st.session_state.flash = (kind, message)


def render_flash() -> None:
    kind, message = st.session_state.pop("flash", (None, None))
    if kind == "success":
        st.success(message)
    elif kind == "warning":
        st.warning(message)
    elif kind == "error":
        st.error(message)


def main():
    """Main application entry point."""
    entry_flow, data_flow, store, audit_logger = get_components()

    st.sidebar.title("💰 PocketBalance")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Transaction", "📊 Transactions", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Add income or spending
        2. Or scan a receipt to fill the form
        3. Download your data any time
        """
    )

    render_balance(store)
    render_flash()

    if page == "➕ Add Transaction":
        render_entry_page(entry_flow)
    elif page == "📊 Transactions":
        render_transactions_page(store, data_flow)
    elif page == "⚙️ Settings":
        render_settings_page(audit_logger)


def render_balance(store: TransactionStore):
    """Render the three balance cards."""
    totals = store.aggregate()

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", format_currency(totals.total_income))
    col2.metric("Total Spending", format_currency(totals.total_spending))
    col3.metric("Current Balance", format_currency(totals.balance))
    st.markdown("---")


def render_entry_page(entry_flow: TransactionEntryFlow):
    """Render the transaction form and the receipt scanner."""
    st.title("➕ Add Transaction")

    spending_tab, income_tab, scan_tab = st.tabs(["Spending", "Income", "🧾 Scan Receipt"])

    with spending_tab:
        render_spending_form(entry_flow)

    with income_tab:
        render_income_form(entry_flow)

    with scan_tab:
        render_receipt_scanner(entry_flow)


def render_spending_form(entry_flow: TransactionEntryFlow):
    apply_pushed_form_state()
    state = get_form_state()

    st.text_input(
        "Description",
        key=DESCRIPTION_KEY,
        placeholder="e.g., Coffee, Train ticket",
    )
    st.number_input(
        "Amount",
        key=AMOUNT_KEY,
        value=None,
        min_value=0.0,
        step=0.01,
        format="%.2f",
    )

    col1, col2 = st.columns([4, 1])
    with col1:
        st.selectbox(
            "Category",
            options=list(SpendingCategory),
            key=CATEGORY_KEY,
            index=None,
            placeholder="Select a category",
            format_func=lambda c: f"{CATEGORY_ICONS[c]} {c.value}",
        )
    with col2:
        st.write("")
        suggest = st.button(
            "✨ Suggest",
            help="Suggest a category from the description",
            disabled=state.pending_request,
        )

    if suggest:
        state = get_form_state()
        with st.spinner("Asking for a category..."):
            try:
                applied, message = run_async(entry_flow.suggest_category(state))
            except RequestInFlightError:
                applied, message = False, "A suggestion is already running."
        if applied:
            push_form_state()
            flash("success", message)
        else:
            flash("warning", message)
        st.rerun()

    if st.button("Add Spending", type="primary", key="add_spending"):
        state = get_form_state()
        transaction, result = entry_flow.submit_spending(state)
        if transaction is None:
            for issue in result.issues:
                st.error(issue.message)
        else:
            push_form_state()
            flash("success", f"Added spending: {transaction.description}")
            st.rerun()


def render_income_form(entry_flow: TransactionEntryFlow):
    with st.form("income_form", clear_on_submit=True):
        description = st.text_input(
            "Description",
            placeholder="e.g., Salary, Freelance project",
        )
        amount = st.number_input(
            "Amount",
            value=None,
            min_value=0.0,
            step=0.01,
            format="%.2f",
        )
        submitted = st.form_submit_button("Add Income", type="primary")

    if submitted:
        transaction, result = entry_flow.submit_income(description, amount)
        if transaction is None:
            for issue in result.issues:
                st.error(issue.message)
        else:
            flash("success", f"Added income: {transaction.description}")
            st.rerun()


def render_receipt_scanner(entry_flow: TransactionEntryFlow):
    settings = get_settings().app

    uploaded_file = st.file_uploader(
        "Upload a receipt",
        type=settings.supported_formats_list,
        help="PNG, JPG or WEBP",
    )

    if uploaded_file is None:
        st.info("Choose a photo of a receipt to fill the spending form.")
        return

    st.image(uploaded_file, width=240)

    state = get_form_state()
    if st.button("🧾 Scan Receipt & Fill Form", type="primary", disabled=state.pending_request):
        receipt_image = ScanReceiptInput.from_bytes(
            uploaded_file.getvalue(),
            uploaded_file.type,
        ).receipt_image

        with st.spinner("Scanning..."):
            try:
                draft, message = run_async(entry_flow.scan_receipt(receipt_image, state))
            except RequestInFlightError:
                draft, message = None, "A scan is already running."

        if draft is None:
            flash("error", message)
        else:
            push_form_state()
            flash("success", message)
        st.rerun()


def render_transactions_page(store: TransactionStore, data_flow: DataManagementFlow):
    """Render the transaction list and data management."""
    st.title("📊 Recent Transactions")

    transactions = store.list()
    if not transactions:
        st.info("No transactions yet. Add one to get started!")
    else:
        rows = []
        for t in transactions:
            if t.type == "income":
                icon, category, amount = "📈", "", format_currency(t.amount)
            else:
                icon = CATEGORY_ICONS.get(t.category, "❔")
                category = t.category.value
                amount = f"-{format_currency(t.amount)}"
            rows.append({
                "": icon,
                "Description": t.description,
                "Category": category,
                "Amount": amount,
                "Date": format_date(t.date),
            })
        st.dataframe(rows, use_container_width=True, hide_index=True)

    st.markdown("---")
    st.subheader("Data Management")

    col1, col2 = st.columns(2)

    with col1:
        try:
            document = data_flow.export_csv()
        except NothingToExportError as e:
            st.button("⬇️ Download Data (CSV)", disabled=True, help=str(e))
        else:
            st.download_button(
                "⬇️ Download Data (CSV)",
                data=document,
                file_name=get_settings().app.export_filename,
                mime=EXPORT_MEDIA_TYPE,
            )

    with col2:
        confirm = st.checkbox(
            "I understand this permanently deletes all my transaction data"
        )
        if st.button("🗑️ Clear All Data", disabled=not confirm):
            data_flow.clear()
            flash("success", "All your transaction data has been removed.")
            st.rerun()


def render_settings_page(audit_logger):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Gemini (AI suggestions and receipt scans)", "gemini"),
        ("Local storage", "storage"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Recent Activity")

    if audit_logger.storage is None:
        st.info("Activity history is not enabled.")
        return

    events = audit_logger.storage.get_recent_events(limit=20)
    if not events:
        st.info("Nothing has happened yet.")
        return

    for event in events:
        st.markdown(
            f"- `{event.timestamp.strftime('%H:%M:%S')}` "
            f"**{event.event_type.value}** - {event.description}"
        )


if __name__ == "__main__":
    main()
