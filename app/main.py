"""
Streamlit Frontend for Shop Ledger

Two views over the same ledger:
1. Dashboard - today's numbers, year balance, add entry, recent records
   with delete, and a daily income/expense chart
2. Yearly Report - totals, monthly chart and category breakdowns

DESIGN PRINCIPLES:
1. The page only renders; all numbers come from the orchestrator flows
2. Deletes always need an explicit confirmation
3. Rejected entries show their issues next to the form
"""

import math
from datetime import date

import streamlit as st

from shop_ledger.config import get_settings, validate_all_settings
from shop_ledger.models.transaction import Transaction, TransactionType
from shop_ledger.orchestrator import (
    DashboardFlow,
    ReportFlow,
    create_app_components,
    record_markup,
)
from shop_ledger.services.storage import StorageError
from shop_ledger.validation import TransactionValidationError


INCOME_COLOR = "#10b981"
EXPENSE_COLOR = "#ef4444"

# Page configuration
st.set_page_config(
    page_title="Shop Ledger",
    page_icon="💴",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .income-text { color: #10b981; font-weight: bold; }
    .expense-text { color: #ef4444; font-weight: bold; }
    .t-meta { color: #94a3b8; font-size: 0.85em; }
</style>
""", unsafe_allow_html=True)


def format_currency(value: float) -> str:
    """Render an amount with the configured currency symbol."""
    symbol = get_settings().app.currency_symbol
    if math.isnan(value):
        return f"{symbol}NaN"
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def main():
    """Main application entry point."""
    try:
        dashboard_flow, report_flow, _ = get_components()
    except ValueError as e:
        st.error(f"Configuration problem: {e}")
        return

    st.sidebar.title("💴 Shop Ledger")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Dashboard", "📅 Yearly Report", "⚙️ Settings"],
        index=0,
    )

    if page == "📊 Dashboard":
        render_dashboard_page(dashboard_flow)
    elif page == "📅 Yearly Report":
        render_report_page(report_flow)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_dashboard_page(flow: DashboardFlow):
    """Render the dashboard."""
    st.title("📊 Dashboard")

    error = st.session_state.pop("delete_error", None)
    if error:
        st.error(f"Could not delete the record: {error}")

    data = flow.build(date.today())

    col1, col2, col3 = st.columns(3)
    col1.metric("Today's Income", format_currency(data.daily.income))
    col2.metric("Today's Expense", format_currency(data.daily.expense))
    col3.metric(f"{data.today.year} Balance", format_currency(data.year_balance))

    render_entry_form(flow)

    st.markdown("---")
    left, right = st.columns([3, 2])

    with left:
        st.subheader(f"Last {len(data.trend)} Days")
        st.bar_chart(
            {
                "Day": [point.label for point in data.trend],
                "Income": [point.income for point in data.trend],
                "Expense": [point.expense for point in data.trend],
            },
            x="Day",
            y=["Income", "Expense"],
            color=[INCOME_COLOR, EXPENSE_COLOR],
            stack=False,
        )

    with right:
        st.subheader("Recent Records")
        if data.is_empty:
            st.info("📋 No records yet. Use 'Add Record' to create the first one.")
        for tx in data.recent:
            render_transaction_row(flow, tx)


def render_entry_form(flow: DashboardFlow):
    """Render the add-record form."""
    with st.expander("➕ Add Record"):
        with st.form("transaction-form", clear_on_submit=True):
            type_choice = st.radio(
                "Type",
                options=list(TransactionType),
                format_func=lambda t: "Income" if t == TransactionType.INCOME else "Expense",
                horizontal=True,
            )
            amount = st.text_input("Amount", placeholder="0.00")
            category = st.text_input("Category", placeholder="e.g. Dine-in, Ingredients, Rent")
            entry_date = st.date_input("Date", value=date.today())
            order_id = st.text_input("Order Reference (optional)")
            note = st.text_input("Note (optional)")

            if not st.form_submit_button("💾 Save", type="primary"):
                return

        try:
            flow.submit(
                type=type_choice,
                amount=amount,
                category=category,
                date=entry_date.isoformat(),
                order_id=order_id,
                note=note,
            )
        except TransactionValidationError as e:
            for issue in e.issues:
                st.error(f"{issue.field}: {issue.message}")
            return
        except StorageError as e:
            st.error(f"Could not save the record: {e}")
            return

        st.rerun()


def render_transaction_row(flow: DashboardFlow, tx: Transaction):
    """One record in the recent list, with its delete controls."""
    deletion = flow.deletion
    sign, css = ("+", "income-text") if tx.is_income else ("-", "expense-text")

    info, amount_col, action = st.columns([3, 2, 1])
    info.markdown(
        record_markup(tx),
        unsafe_allow_html=True,
    )
    amount_col.markdown(
        f"<span class='{css}'>{sign}{format_currency(tx.amount_value)}</span>",
        unsafe_allow_html=True,
    )
    # Handlers are registered per record id through the widget key
    action.button(
        "🗑️",
        key=f"delete-{tx.id}",
        on_click=deletion.request,
        args=(tx.id,),
    )

    if deletion.pending_id == tx.id:
        st.warning("Delete this record?")
        yes, no = st.columns(2)
        yes.button("✅ Delete", key=f"confirm-{tx.id}", on_click=_confirm_delete, args=(flow,))
        no.button("❌ Cancel", key=f"cancel-{tx.id}", on_click=deletion.cancel)


def _confirm_delete(flow: DashboardFlow):
    try:
        flow.deletion.confirm()
    except StorageError as e:
        st.session_state.delete_error = str(e)


def render_report_page(flow: ReportFlow):
    """Render the yearly report."""
    st.title("📅 Yearly Report")

    today = date.today()
    options = flow.year_options(today)
    year = st.selectbox(
        "Year",
        options=options,
        index=options.index(today.year),
        format_func=lambda y: f"{y}",
    )

    report = flow.build(year)
    if report.message:
        st.info(report.message)

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", format_currency(report.totals.income))
    col2.metric("Total Expense", format_currency(report.totals.expense))
    col3.metric("Net Profit", format_currency(report.totals.net))

    st.subheader("Monthly")
    st.bar_chart(
        {
            "Month": [f"{m:02d}" for m in range(1, 13)],
            "Income": report.monthly.income,
            "Expense": report.monthly.expense,
        },
        x="Month",
        y=["Income", "Expense"],
        color=[INCOME_COLOR, EXPENSE_COLOR],
        stack=False,
    )

    exp_col, inc_col = st.columns(2)
    with exp_col:
        st.subheader("Expense by Category")
        render_category_chart(report.expense_categories, EXPENSE_COLOR)
    with inc_col:
        st.subheader("Income by Category")
        render_category_chart(report.income_categories, INCOME_COLOR)


def render_category_chart(breakdown: dict[str, float], color: str):
    if not breakdown:
        st.caption("Nothing recorded.")
        return
    st.bar_chart(
        {"Category": list(breakdown.keys()), "Amount": list(breakdown.values())},
        x="Category",
        y="Amount",
        color=color,
        horizontal=True,
    )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Storage", "storage"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown(
        "Settings are read from environment variables or a `.env` file, "
        "e.g. `LEDGER_STORAGE_DATA_DIR`, `RECENT_LIMIT`, `VALIDATE_ON_ADD`."
    )


if __name__ == "__main__":
    main()
