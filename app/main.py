"""
Streamlit Frontend for WealthWay

The single page the user works with every day.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before anything is deleted
3. An invalid date range is shown as an error, never as zeros
4. Advice is on demand only

All state lives in a DashboardSession kept in st.session_state; this file
only renders it and forwards clicks.
"""

import asyncio

import streamlit as st

from wealthway.charts import category_donut, income_expense_bar
from wealthway.config import get_settings
from wealthway.cycles import MAX_START_DAY, MIN_START_DAY
from wealthway.formatting import (
    advice_box_html,
    format_currency,
    format_signed_amount,
    format_transaction_line,
)
from wealthway.models.transaction import TransactionType
from wealthway.orchestrator import DashboardSession, create_app_components
from wealthway.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="WealthWay",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .balance-box {
        padding: 20px;
        background-color: #4f46e5;
        color: white;
        border-radius: 16px;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .advice-box {
        padding: 20px;
        background-color: #eef2ff;
        border-radius: 10px;
        border-left: 5px solid #6366f1;
        margin: 10px 0;
        font-style: italic;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


ADVICE_PLACEHOLDER = (
    "Press \"Get advice\" and the AI will suggest tips based on "
    "spending in the selected period."
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def get_session() -> DashboardSession:
    """Get or create this browser session's dashboard state."""
    if "dashboard" not in st.session_state:
        try:
            st.session_state.dashboard = create_app_components()
        except Exception as e:
            st.error(f"Failed to load saved data: {e}")
            st.session_state.dashboard = create_app_components(use_settings_path=False)
    if "pending_delete" not in st.session_state:
        st.session_state.pending_delete = None
    return st.session_state.dashboard


def main():
    """Main application entry point."""
    session = get_session()
    symbol = get_settings().app.currency_symbol

    render_sidebar(session)

    st.title("💰 WealthWay")
    view = session.view()

    if view.invalid_range:
        st.markdown(f"""
        <div class="error-box">
            <h4>⚠️ Invalid period</h4>
            <p>{view.error_message}</p>
        </div>
        """, unsafe_allow_html=True)

    left, right = st.columns([1, 2])

    with left:
        render_balance(view, symbol)
        render_form(session, symbol)

    with right:
        render_advice(session)
        render_charts(view, symbol)
        render_history(session, view, symbol)


def render_sidebar(session: DashboardSession):
    """Cycle setting, presets and the date range pickers."""
    st.sidebar.title("📅 Period")

    days = list(range(MIN_START_DAY, MAX_START_DAY + 1))
    new_day = st.sidebar.selectbox(
        "Cycle start day",
        options=days,
        index=days.index(session.cycle_start_day),
        help="Day of the month on which each billing cycle begins",
    )
    if new_day != session.cycle_start_day:
        try:
            session.change_cycle_start_day(new_day)
        except StorageError as e:
            st.sidebar.error(f"Could not save the cycle start day: {e}")
        else:
            st.rerun()
    st.sidebar.caption(f"\"This cycle\" runs from the {session.cycle_description}.")

    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button("This cycle"):
            session.select_this_cycle()
            st.rerun()
    with col2:
        if st.button("Previous cycle"):
            session.select_previous_cycle()
            st.rerun()

    start = st.sidebar.date_input("From", value=session.start_date)
    end = st.sidebar.date_input("To", value=session.end_date)
    if start != session.start_date or end != session.end_date:
        session.set_start_date(start)
        session.set_end_date(end)
        st.rerun()


def render_balance(view, symbol: str):
    if view.invalid_range:
        st.markdown('<div class="balance-box">Period error</div>', unsafe_allow_html=True)
        return
    totals = view.totals
    st.markdown(f"""
    <div class="balance-box">
        <p>Balance for the period</p>
        <div class="big-number">{format_currency(totals.balance, symbol)}</div>
        <p>Income +{format_currency(totals.income, symbol)} &nbsp;|&nbsp;
           Expense -{format_currency(totals.expense, symbol)}</p>
    </div>
    """, unsafe_allow_html=True)


def render_form(session: DashboardSession, symbol: str):
    """Entry / edit form."""
    form = session.form
    st.subheader("✏️ Edit transaction" if form.is_editing else "➕ New transaction")

    type_options = [TransactionType.EXPENSE, TransactionType.INCOME]
    chosen_type = st.radio(
        "Type",
        options=type_options,
        index=type_options.index(form.type),
        format_func=lambda t: t.value.title(),
        horizontal=True,
    )
    if chosen_type != form.type:
        session.switch_form_type(chosen_type)
        st.rerun()

    form.amount = st.text_input(f"Amount ({symbol})", value=form.amount, placeholder="0")

    options = [""] + list(form.category_options)
    form.category = st.selectbox(
        "Category",
        options=options,
        index=options.index(form.category) if form.category in options else 0,
        format_func=lambda c: c or "Please select",
    )
    form.date = st.date_input("Date", value=form.date)
    form.memo = st.text_input("Memo", value=form.memo, placeholder="What was it for?")

    if st.button("Update" if form.is_editing else "Save", type="primary"):
        try:
            saved = session.submit_form()
        except StorageError as e:
            st.error(f"Could not save the transaction: {e}")
        else:
            if saved is None:
                st.warning("Please enter an amount and choose a category.")
            else:
                st.rerun()

    if form.is_editing:
        col1, col2 = st.columns(2)
        with col1:
            if st.button("🗑️ Delete"):
                st.session_state.pending_delete = form.editing_id
                st.rerun()
        with col2:
            if st.button("Cancel"):
                session.reset_form()
                st.rerun()

    render_delete_confirmation(session)


def render_delete_confirmation(session: DashboardSession):
    """Two-step delete: the store only deletes once the user confirms here."""
    pending = st.session_state.pending_delete
    if pending is None:
        return

    st.warning("Delete this transaction?")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Yes, delete", type="primary"):
            st.session_state.pending_delete = None
            try:
                session.delete_transaction(pending, confirm=lambda: True)
            except StorageError as e:
                st.error(f"Could not delete the transaction: {e}")
            else:
                st.rerun()
    with col2:
        if st.button("Keep it"):
            st.session_state.pending_delete = None
            st.rerun()


def render_advice(session: DashboardSession):
    st.subheader("✨ AI advice for this period")
    if not session.has_advisor:
        st.info("Set GEMINI_API_KEY to enable advice.")
        return

    if st.button("Get advice", disabled=session.date_error is not None):
        with st.spinner("Analysing..."):
            run_async(session.request_insights())

    st.markdown(
        advice_box_html(session.insights or ADVICE_PLACEHOLDER),
        unsafe_allow_html=True,
    )


def render_charts(view, symbol: str):
    col1, col2 = st.columns(2)

    with col1:
        st.markdown("**Expense breakdown**")
        if view.invalid_range:
            st.info("Period error")
        elif not view.breakdown:
            st.info("No expenses in this period")
        else:
            st.plotly_chart(
                category_donut(view.breakdown, symbol),
                use_container_width=True,
                config={"displayModeBar": False},
            )

    with col2:
        st.markdown("**Income vs expense**")
        if view.invalid_range:
            st.info("Period error")
        else:
            st.plotly_chart(
                income_expense_bar(view.totals, symbol),
                use_container_width=True,
                config={"displayModeBar": False},
            )


def render_history(session: DashboardSession, view, symbol: str):
    """Transactions in the period, newest entry first."""
    st.subheader("📋 History")
    st.caption(f"{view.count} transactions")

    if view.invalid_range:
        st.error(view.error_message)
        return
    if not view.transactions:
        st.info("No transactions in this period.")
        return

    for tx in view.transactions:
        col1, col2, col3 = st.columns([4, 2, 1])
        with col1:
            marker = "🟢" if tx.type == TransactionType.INCOME else "🔴"
            st.markdown(f"{marker} **{tx.category}**  \n{format_transaction_line(tx)}")
        with col2:
            st.markdown(f"**{format_signed_amount(tx, symbol)}**")
        with col3:
            if st.button("✏️", key=f"edit-{tx.id}"):
                session.start_editing(tx.id)
                st.rerun()


if __name__ == "__main__":
    main()
