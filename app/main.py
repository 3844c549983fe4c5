"""
Streamlit Frontend for the Expense Tracker

The presentation layer: it collects already-validated inputs, calls
ExpenseTracker, and renders the results. It holds no ledger logic.

Pages mirror the tracker's menu:
1. Add an expense
2. View all expenses
3. Delete an expense
4. Save / load the ledger
5. Summarize by day, month, year or date range
"""

from datetime import date
from decimal import Decimal

import streamlit as st
from pydantic import ValidationError

from expense_tracker.audit import configure_logging
from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.models.expense import (
    CalendarDate,
    Expense,
    ExpenseQuery,
    QueryPeriod,
    TransactionType,
)
from expense_tracker.orchestrator import ExpenseTracker, create_app_components


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💵",
    layout="wide",
    initial_sidebar_state="expanded",
)


def get_tracker() -> ExpenseTracker:
    """Get or create this session's tracker, loading the ledger once."""
    if "tracker" not in st.session_state:
        settings = get_settings()
        configure_logging(settings.app.log_level)
        tracker = create_app_components(settings)
        result = tracker.load()
        if not result.success:
            st.warning(f"Could not load the ledger: {result.error_message}")
        st.session_state.tracker = tracker
    return st.session_state.tracker


def format_amount(amount: Decimal) -> str:
    symbol = get_settings().app.currency_symbol
    return f"{symbol}{amount:,.2f}"


def expense_rows(expenses: list[Expense]) -> list[dict]:
    """Convert expenses to table rows, indexed by position."""
    return [
        {
            "Idx": idx,
            "Date": expense.date.isoformat(),
            "Description": expense.description,
            "Amount": format_amount(expense.amount),
            "Category": expense.category,
            "Type": expense.transaction_type.value,
        }
        for idx, expense in enumerate(expenses)
    ]


def render_expenses(expenses: list[Expense], header: str) -> None:
    st.subheader(header)
    if not expenses:
        st.info("No expenses found.")
        return
    st.dataframe(expense_rows(expenses), hide_index=True, use_container_width=True)


def main():
    """Main application entry point."""
    tracker = get_tracker()

    # Sidebar navigation
    st.sidebar.title("💵 Expense Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Expense", "📋 View Expenses", "🗑️ Delete Expense",
         "💾 Save / Load", "📊 Summarize", "⚙️ Settings"],
        index=0,
    )

    app_settings = get_settings().app
    st.sidebar.markdown("---")
    st.sidebar.markdown(f"**Expenses in memory:** {len(tracker.store)}")
    st.sidebar.caption(f"Environment: {app_settings.app_environment}")

    if app_settings.debug_mode:
        with st.sidebar.expander("🐞 Audit events"):
            st.json([event.to_log_dict() for event in tracker.audit_logger.events])

    # Route to appropriate page
    if page == "➕ Add Expense":
        render_add_page(tracker)
    elif page == "📋 View Expenses":
        render_expenses(tracker.list_expenses(), "All Expenses")
    elif page == "🗑️ Delete Expense":
        render_delete_page(tracker)
    elif page == "💾 Save / Load":
        render_persistence_page(tracker)
    elif page == "📊 Summarize":
        render_summary_page(tracker)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_add_page(tracker: ExpenseTracker):
    """Render the add-expense form."""
    st.title("➕ Add Expense")

    with st.form("add_expense", clear_on_submit=True):
        col1, col2 = st.columns(2)

        with col1:
            description = st.text_input("Description *")
            amount = st.number_input(
                "Amount *",
                value=0.0,
                step=0.01,
                format="%.2f",
                help="Negative amounts record refunds",
            )
            expense_date = st.date_input("Date *", value=date.today())

        with col2:
            category = st.text_input("Category *")
            transaction_type = st.selectbox(
                "Transaction Type *",
                options=list(TransactionType),
                format_func=lambda t: t.value,
            )

        submitted = st.form_submit_button("Add Expense", type="primary")

    if submitted:
        if not description.strip():
            st.error("Please enter a description")
        elif not category.strip():
            st.error("Please enter a category")
        else:
            try:
                expense = tracker.add_expense(
                    description=description,
                    amount=Decimal(str(amount)),
                    date=CalendarDate.from_date(expense_date),
                    category=category,
                    transaction_type=transaction_type,
                )
            except ValidationError as e:
                tracker.audit_logger.log_error("invalid_expense", str(e))
                st.error(f"Expense not added: {e}")
                return
            st.success(
                f"Expense added: {expense.description} "
                f"({format_amount(expense.amount)} on {expense.date})"
            )


def render_delete_page(tracker: ExpenseTracker):
    """Render the delete page: list with positions, then pick one."""
    st.title("🗑️ Delete Expense")

    expenses = tracker.list_expenses()
    render_expenses(expenses, "Current Expenses")
    if not expenses:
        return

    position = st.number_input(
        "Index of expense to delete",
        min_value=0,
        max_value=len(expenses) - 1,
        step=1,
    )
    if st.button("Delete", type="primary"):
        if tracker.delete_expense(int(position)):
            st.success("Expense deleted.")
            st.rerun()
        else:
            st.error("Invalid index. Expense not found.")


def render_persistence_page(tracker: ExpenseTracker):
    """Render the save/load page."""
    st.title("💾 Save / Load")
    st.markdown(f"Ledger file: `{tracker.storage.location}`")

    col1, col2 = st.columns(2)

    with col1:
        if st.button("Save Expenses to File", type="primary"):
            result = tracker.save()
            if result.success:
                st.success(f"Saved {result.saved_count} expenses to {result.destination}")
            else:
                st.error(f"Failed to save expenses: {result.error_message}")

    with col2:
        if st.button("Load Expenses from File"):
            result = tracker.load()
            if not result.success:
                st.error(f"Failed to load expenses: {result.error_message}")
            elif not result.file_found:
                st.info("No ledger file yet. This is normal on first run.")
            else:
                st.success(f"Loaded {result.loaded_count} expenses from {result.source}")

            if result.issues:
                with st.expander(f"⚠️ {result.skipped_count} rows skipped"):
                    for issue in result.issues:
                        st.markdown(f"- Line {issue.line_number}: {issue.message}")

    with st.expander("📜 Session History"):
        for event in reversed(tracker.audit_logger.events):
            st.markdown(f"- `{event.timestamp:%H:%M:%S}` {event.description}")


def render_summary_page(tracker: ExpenseTracker):
    """Render the summary page."""
    st.title("📊 Summarize Expenses")

    period = st.selectbox(
        "Summarize by",
        options=[QueryPeriod.DAY, QueryPeriod.MONTH, QueryPeriod.YEAR, QueryPeriod.RANGE],
        format_func=lambda p: p.value.title(),
    )
    group_by = st.selectbox(
        "Break down by",
        options=[None, "category", "type", "month"],
        format_func=lambda g: "No breakdown" if g is None else g.title(),
    )

    today = date.today()
    params = {}
    if period == QueryPeriod.DAY:
        params["day"] = CalendarDate.from_date(st.date_input("Day", value=today))
    elif period == QueryPeriod.MONTH:
        col1, col2 = st.columns(2)
        with col1:
            params["month"] = st.number_input("Month", min_value=1, max_value=12, value=today.month)
        with col2:
            params["year"] = st.number_input("Year", min_value=1, max_value=9999, value=today.year)
    elif period == QueryPeriod.YEAR:
        params["year"] = st.number_input("Year", min_value=1, max_value=9999, value=today.year)
    elif period == QueryPeriod.RANGE:
        col1, col2 = st.columns(2)
        with col1:
            params["start"] = CalendarDate.from_date(st.date_input("Start date", value=today))
        with col2:
            params["end"] = CalendarDate.from_date(st.date_input("End date", value=today))
        if params["start"] > params["end"]:
            st.warning("Start date is after end date; no expenses can match.")

    if st.button("🔍 Summarize", type="primary"):
        query = ExpenseQuery(period=period, group_by=group_by, **params)
        result = tracker.summarize(query)
        if not result.success:
            st.error(f"Error: {result.error_message}")
            return

        render_expenses(result.expenses, result.query_description)
        st.metric("Total", format_amount(result.total_amount))
        if result.breakdown:
            st.markdown("**Breakdown**")
            st.table(
                [{"Group": key, "Total": format_amount(total)}
                 for key, total in result.breakdown.items()]
            )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    status = validate_all_settings()

    sections = [
        ("Ledger storage", "storage"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "Set `EXPENSE_STORAGE_DATA_DIR` and `EXPENSE_STORAGE_LEDGER_FILENAME` "
        "(or put them in a `.env` file) to change where the ledger is kept."
    )


if __name__ == "__main__":
    main()
