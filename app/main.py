"""
Streamlit Frontend for RupeeWise

The screens a user works with every day: dashboard, transactions,
budget planner, debts, AI advisor and data backup.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every number comes from the aggregation engine
3. Clear error messages in simple language
4. Visual feedback for all operations

The UI holds no financial logic. It calls the record store to change
data and the aggregation functions to read it back.
"""

import asyncio
from datetime import date
from decimal import Decimal

import streamlit as st

from rupeewise.aggregation import (
    budget_overview,
    category_breakdown,
    current_month,
    debt_totals,
    filter_by_date_range,
    global_summary,
    month_label,
    month_scoped_view,
    person_netting,
    recent_first,
    shift_month,
)
from rupeewise.config import get_settings, validate_all_settings
from rupeewise.models import (
    EXPENSE_CATEGORIES,
    TRANSACTION_CATEGORIES,
    DebtType,
    DebtUpdate,
    NewDebt,
    NewTransaction,
    TransactionType,
)
from rupeewise.orchestrator import AdviceFlow, create_app_components
from rupeewise.services.persistence import PersistenceAdapter, backup_filename
from rupeewise.store import RecordStore
from rupeewise.validation import RecordValidationError, RecordValidator


# Page configuration
st.set_page_config(
    page_title="RupeeWise",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


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
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        return create_app_components(use_storage=False)


def money(amount: Decimal) -> str:
    symbol = get_settings().app.currency_symbol
    return f"{symbol}{amount:,.2f}"


def show_validation_error(error: RecordValidationError):
    st.error(RecordValidator.get_user_friendly_summary(error.result))


def main():
    """Main application entry point."""
    store, persistence, advice_flow = get_components()

    # Sidebar navigation
    st.sidebar.title("💰 RupeeWise")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "📊 Dashboard",
            "🧾 Transactions",
            "🎯 Budget Planner",
            "🤝 Debts & Loans",
            "🤖 AI Advisor",
            "💾 Data Management",
        ],
        index=0,
    )

    if persistence.last_error:
        st.sidebar.warning(f"Last save failed: {persistence.last_error}")

    # Route to appropriate page
    if page == "📊 Dashboard":
        render_dashboard_page(store)
    elif page == "🧾 Transactions":
        render_transactions_page(store)
    elif page == "🎯 Budget Planner":
        render_budget_page(store)
    elif page == "🤝 Debts & Loans":
        render_debts_page(store)
    elif page == "🤖 AI Advisor":
        render_advisor_page(store, advice_flow)
    elif page == "💾 Data Management":
        render_data_page(store, persistence)


def render_dashboard_page(store: RecordStore):
    st.title("📊 Dashboard")

    snapshot = store.snapshot()
    summary = global_summary(snapshot.transactions)
    totals = debt_totals(snapshot.debts)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Income", money(summary.total_income))
    col2.metric("Total Expense", money(summary.total_expense))
    col3.metric("Balance", money(summary.balance))
    col4.metric("Savings Rate", f"{summary.savings_rate:.1f}%")

    col1, col2 = st.columns(2)
    col1.metric("I Owe", money(totals.total_i_owe))
    col2.metric("Owed To Me", money(totals.total_owed_to_me))

    st.markdown("### Expenses by Category")
    breakdown = category_breakdown(snapshot.transactions)
    if breakdown:
        st.bar_chart({c.category: float(c.total_amount) for c in breakdown})
    else:
        st.info("No expenses recorded yet.")

    st.markdown("### Recent Transactions")
    recent = recent_first(snapshot.transactions)[:5]
    if recent:
        st.table([
            {
                "Date": t.date.isoformat(),
                "Description": t.description,
                "Category": t.category,
                "Amount": ("+" if t.type == TransactionType.INCOME else "-") + money(t.amount),
            }
            for t in recent
        ])
    else:
        st.info("Add your first transaction on the Transactions page.")


def render_transactions_page(store: RecordStore):
    st.title("🧾 Transactions")

    with st.form("add_transaction", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            txn_type = st.radio(
                "Type",
                [TransactionType.EXPENSE, TransactionType.INCOME],
                format_func=lambda t: t.value.title(),
                horizontal=True,
            )
            description = st.text_input("Description")
            amount = st.number_input("Amount", min_value=0.0, step=100.0)
        with col2:
            txn_date = st.date_input("Date", value=date.today())
            category = st.selectbox("Category", TRANSACTION_CATEGORIES)

        if st.form_submit_button("Add Transaction"):
            try:
                store.add_transaction(NewTransaction(
                    date=txn_date,
                    description=description,
                    amount=Decimal(str(amount)),
                    type=txn_type,
                    category=category,
                ))
                st.success("Transaction added.")
            except RecordValidationError as e:
                show_validation_error(e)

    st.markdown("---")
    st.markdown("### History")

    col1, col2 = st.columns(2)
    start = col1.date_input("From", value=None)
    end = col2.date_input("To", value=None)

    transactions = recent_first(
        filter_by_date_range(store.transactions, start=start, end=end)
    )
    if not transactions:
        st.info("No transactions in this range.")
        return

    for t in transactions:
        col1, col2, col3, col4 = st.columns([2, 4, 2, 1])
        col1.write(t.date.isoformat())
        col2.write(f"**{t.description}** · {t.category}")
        sign = "+" if t.type == TransactionType.INCOME else "-"
        col3.write(f"{sign}{money(t.amount)}")
        if col4.button("🗑️", key=f"del_txn_{t.id}"):
            store.delete_transaction(t.id)
            st.rerun()


def render_budget_page(store: RecordStore):
    st.title("🎯 Budget Planner")

    if "budget_month" not in st.session_state:
        st.session_state.budget_month = current_month()

    col1, col2, col3 = st.columns([1, 3, 1])
    if col1.button("◀ Previous"):
        st.session_state.budget_month = shift_month(st.session_state.budget_month, -1)
    if col3.button("Next ▶"):
        st.session_state.budget_month = shift_month(st.session_state.budget_month, 1)
    month = st.session_state.budget_month
    col2.markdown(f"### {month_label(month)}")

    snapshot = store.snapshot()
    view = month_scoped_view(snapshot.transactions, snapshot.debts, month)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Income", money(view.income))
    col2.metric("Expense", money(view.expense))
    col3.metric("Savings", money(view.savings))
    col4.metric("Savings Rate", f"{view.savings_rate:.1f}%")

    st.markdown("### Category Budgets")
    ratio = Decimal(str(get_settings().app.budget_warning_ratio))
    for progress in budget_overview(snapshot.budgets, view.expenses_by_category, warning_ratio=ratio):
        col1, col2 = st.columns([3, 1])
        with col1:
            status = (
                "🔴 Over budget" if progress.is_over_budget
                else "🟡 Near limit" if progress.is_near_limit
                else "🟢"
            )
            st.write(
                f"**{progress.category}** {status} · "
                f"{money(progress.spent)} of {money(progress.limit)}"
            )
            st.progress(float(progress.percentage) / 100)
        with col2, st.form(f"budget_{progress.category}", border=False):
            # Keyed on the stored limit so an import resets the field
            new_limit = st.number_input(
                f"{progress.category} limit",
                min_value=0.0,
                value=float(progress.limit),
                step=500.0,
                key=f"limit_{progress.category}_{progress.limit}",
                label_visibility="collapsed",
            )
            if st.form_submit_button("Save"):
                try:
                    store.upsert_budget(progress.category, Decimal(str(new_limit)))
                    st.rerun()
                except RecordValidationError as e:
                    show_validation_error(e)

    st.caption(f"Budget categories: {', '.join(EXPENSE_CATEGORIES)}")


def render_debts_page(store: RecordStore):
    st.title("🤝 Debts & Loans")

    totals = debt_totals(store.debts)
    col1, col2 = st.columns(2)
    col1.metric("I Owe", money(totals.total_i_owe))
    col2.metric("Owed To Me", money(totals.total_owed_to_me))

    with st.form("add_debt", clear_on_submit=True):
        debt_type = st.radio(
            "Type",
            [DebtType.I_OWE, DebtType.OWE_ME],
            format_func=lambda t: "I Owe" if t == DebtType.I_OWE else "Owes Me",
            horizontal=True,
        )
        person_name = st.text_input("Person")
        amount = st.number_input("Amount", min_value=0.0, step=100.0)
        description = st.text_input("Description (optional)")
        due_date = st.date_input("Due date (optional)", value=None)

        if st.form_submit_button("Add Debt"):
            try:
                store.add_debt(NewDebt(
                    person_name=person_name,
                    description=description or None,
                    amount=Decimal(str(amount)),
                    type=debt_type,
                    due_date=due_date,
                ))
                st.success("Debt added.")
            except RecordValidationError as e:
                show_validation_error(e)

    st.markdown("---")
    balances = person_netting(store.debts)
    if not balances:
        st.info("No debts recorded.")
        return

    for balance in balances:
        if balance.is_settled:
            status = "✅ Settled"
        elif balance.net < 0:
            status = f"You owe {money(-balance.net)}"
        else:
            status = f"Owes you {money(balance.net)}"

        with st.expander(f"{balance.person_name} · {status}"):
            for debt in balance.debts:
                render_debt_row(store, debt)


def render_debt_row(store: RecordStore, debt):
    col1, col2, col3, col4 = st.columns([4, 2, 1, 1])
    label = "Pay" if debt.type == DebtType.I_OWE else "Get"
    text = f"{label} {money(debt.amount)}"
    if debt.description:
        text += f" · {debt.description}"
    if debt.due_date:
        text += f" · due {debt.due_date.isoformat()}"
    col1.write(f"~~{text}~~" if debt.is_paid else text)

    if col2.button("Mark unpaid" if debt.is_paid else "Mark paid", key=f"toggle_{debt.id}"):
        store.toggle_debt_paid(debt.id)
        st.rerun()
    if col4.button("🗑️", key=f"del_debt_{debt.id}"):
        store.delete_debt(debt.id)
        st.rerun()

    with col3.popover("✏️"):
        with st.form(f"edit_{debt.id}"):
            amount = st.number_input("Amount", min_value=0.0, value=float(debt.amount))
            description = st.text_input("Description", value=debt.description or "")
            due_date = st.date_input("Due date", value=debt.due_date)
            if st.form_submit_button("Save"):
                try:
                    store.edit_debt(debt.id, DebtUpdate(
                        amount=Decimal(str(amount)),
                        description=description or None,
                        due_date=due_date,
                    ))
                    st.rerun()
                except RecordValidationError as e:
                    show_validation_error(e)


def render_advisor_page(store: RecordStore, advice_flow: AdviceFlow):
    st.title("🤖 AI Advisor")
    st.markdown(
        "Get a short, personal analysis of your spending and debts. "
        "Your data is sent to Google Gemini only when you click the button."
    )

    if st.button("Analyze my finances", type="primary"):
        with st.spinner("Thinking..."):
            st.session_state.advice = run_async(advice_flow.request_advice(store))

    if st.session_state.get("advice"):
        st.markdown(st.session_state.advice)


def render_data_page(store: RecordStore, persistence: PersistenceAdapter):
    st.title("💾 Data Management")

    st.markdown("### Backup")
    st.download_button(
        "Download backup",
        data=persistence.export_document(store),
        file_name=backup_filename(),
        mime="application/json",
    )

    st.markdown("### Restore")
    uploaded = st.file_uploader("Backup file", type=["json"])
    if uploaded and st.button("Import"):
        result = persistence.import_document(store, uploaded.getvalue())
        if result.success:
            st.success(result.message)
        else:
            st.error(result.message)

    st.markdown("---")
    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Gemini (AI Advisor)", "gemini"),
        ("Local Storage", "storage"),
        ("App Settings", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
