"""
Streamlit Frontend for Finance Tracker

This is the user interface for managing accounts.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every change goes through an explicit command of the account flow
3. Deleting asks for confirmation first
4. Saving happens behind the scenes; a failed save does not interrupt the user
"""

import asyncio
from decimal import Decimal

import streamlit as st

from src.audit import AuditLogger, configure_logging, create_correlation_id
from src.config import get_settings, validate_all_settings
from src.models.account import COLOR_PALETTE, DEFAULT_ICON, AccountIcon
from src.orchestrator import AccountManagementFlow, create_account_flow, create_gateway
from src.services.persistence import AccountsGateway


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Icon keys are symbol names; show something readable in the browser
ICON_EMOJI = {
    AccountIcon.DOLLAR_SIGN.value: "💲",
    AccountIcon.CREDIT_CARD.value: "💳",
    AccountIcon.CREDIT_CARD_NUMBERS.value: "🔢",
    AccountIcon.BANK.value: "🏛️",
    AccountIcon.BUILDING.value: "🏢",
    AccountIcon.HOUSE.value: "🏠",
    AccountIcon.HEART.value: "❤️",
    AccountIcon.HEALTH.value: "🩺",
    AccountIcon.CAR.value: "🚗",
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
def get_gateway() -> AccountsGateway:
    """Get or create the persistence gateway (cached, shared by all sessions)."""
    app_settings = get_settings().app
    configure_logging(app_settings.log_level, json_output=app_settings.json_logs)
    try:
        return create_gateway(use_storage=True)
    except Exception as e:
        AuditLogger().log_error("storage_init_failed", str(e))
        st.error(f"Failed to initialize storage: {e}")
        return create_gateway(use_storage=False)


def get_account_flow() -> AccountManagementFlow:
    """Get this browser session's account flow, loading accounts on first use."""
    if "account_flow" not in st.session_state:
        account_flow = create_account_flow(get_gateway())
        run_async(account_flow.load_accounts(correlation_id=create_correlation_id()))
        st.session_state.account_flow = account_flow
    return st.session_state.account_flow


def format_amount(amount: Decimal) -> str:
    symbol = get_settings().app.currency_symbol
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def main():
    """Main application entry point."""
    account_flow = get_account_flow()

    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏦 Accounts", "➕ Add Account", "⚙️ Settings"],
        index=0,
    )

    if page == "🏦 Accounts":
        render_accounts_page(account_flow)
    elif page == "➕ Add Account":
        render_add_account_page(account_flow)
    elif page == "⚙️ Settings":
        render_settings_page()


def select_icon_and_color(key: str, icon: str = DEFAULT_ICON, color_name: str = "green"):
    """Icon and color pickers shared by the add and edit forms."""
    icons = [item.value for item in AccountIcon]
    colors = list(COLOR_PALETTE)

    col1, col2 = st.columns(2)
    with col1:
        selected_icon = st.selectbox(
            "Icon",
            options=icons,
            index=icons.index(icon) if icon in icons else 0,
            format_func=lambda x: f"{ICON_EMOJI.get(x, '•')} {x}",
            key=f"{key}_icon",
        )
    with col2:
        selected_color = st.selectbox(
            "Color",
            options=colors,
            index=colors.index(color_name) if color_name in colors else 0,
            format_func=lambda x: x.title(),
            key=f"{key}_color",
        )
    return selected_icon, COLOR_PALETTE[selected_color]


def color_name_of(color) -> str:
    for name, value in COLOR_PALETTE.items():
        if value == color:
            return name
    return "green"


def render_accounts_page(account_flow: AccountManagementFlow):
    """Render the accounts list."""
    st.title("🏦 Accounts")

    accounts = account_flow.accounts
    if not accounts:
        st.info("No accounts yet. Use 'Add Account' to create your first one.")
        return

    for account in accounts:
        swatch = account.color.to_hex()
        header = (
            f"{ICON_EMOJI.get(account.icon, '•')} {account.name} "
            f"· {format_amount(account.balance)}"
        )
        with st.expander(header):
            st.markdown(
                f"<div style='height:6px;background:{swatch};border-radius:3px'></div>",
                unsafe_allow_html=True,
            )

            st.markdown("#### Transactions")
            if account.transactions:
                for transaction in account.transactions:
                    col1, col2, col3 = st.columns([3, 2, 2])
                    col1.write(transaction.title)
                    col2.write(format_amount(transaction.amount))
                    col3.write(transaction.date)
            else:
                st.caption("No transactions")

            render_balance_entry(account_flow, account)
            render_edit_form(account_flow, account)
            render_delete_controls(account_flow, account)


def render_balance_entry(account_flow: AccountManagementFlow, account):
    with st.form(key=f"balance_{account.id}", clear_on_submit=True):
        amount_text = st.text_input("Set balance", placeholder="e.g. 1250.50")
        if st.form_submit_button("Update Balance"):
            result = run_async(account_flow.edit_balance(account.id, amount_text))
            if result.success:
                st.rerun()
            st.error(result.message)


def render_edit_form(account_flow: AccountManagementFlow, account):
    with st.form(key=f"edit_{account.id}"):
        st.markdown("#### Edit Account")
        name = st.text_input("Account Name", value=account.name)
        icon, color = select_icon_and_color(
            f"edit_{account.id}",
            icon=account.icon,
            color_name=color_name_of(account.color),
        )
        if st.form_submit_button("Save Account", disabled=not name):
            run_async(account_flow.edit_account(account.id, name=name, icon=icon, color=color))
            st.rerun()


def render_delete_controls(account_flow: AccountManagementFlow, account):
    deletion = account_flow.deletion

    if deletion.is_pending and deletion.account_id == account.id:
        st.warning("Are you sure you want to delete this account?")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("🗑️ Delete", key=f"confirm_delete_{account.id}", type="primary"):
                run_async(account_flow.confirm_delete())
                st.rerun()
        with col2:
            if st.button("Cancel", key=f"cancel_delete_{account.id}"):
                account_flow.cancel_delete()
                st.rerun()
    elif st.button("Delete Account", key=f"delete_{account.id}", disabled=deletion.is_pending):
        account_flow.request_delete(account.id)
        st.rerun()


def render_add_account_page(account_flow: AccountManagementFlow):
    """Render the add account page."""
    st.title("➕ Add Account")

    name = st.text_input("Account Name")
    icon, color = select_icon_and_color("add")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Add Account", type="primary", disabled=not name):
            result = run_async(account_flow.create_account(name, icon=icon, color=color))
            st.success(result.message)
    with col2:
        if st.button("Add Bank Account instead", disabled=not name):
            result = run_async(account_flow.create_account_from_bank(name, icon=icon, color=color))
            if result.success:
                st.success(result.message)
            else:
                st.warning(result.message)


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Google Sheets (Remote Store)", "google_sheets"),
        ("Accounts Store", "accounts_store"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown(
        "To configure the application, create a `.env` file with your settings. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
