"""
Main Orchestrator for Finance Tracker

This module ties together the account collection, the delete confirmation
and the persistence gateway, and defines the account-management commands:
1. Load accounts (replace the collection only if the load worked)
2. Create account (blank, or seeded from a bank source)
3. Edit account (name, icon, color)
4. Delete account (request -> confirm, or cancel)
5. Edit balance (from typed amount text)

DESIGN DECISION: The UI calls these commands; nothing reacts to state
changes behind its back. Every mutating command explicitly saves the whole
collection and returns a CommandResult carrying the save outcome.
Persistence failures are never raised to the UI.
"""

from typing import Optional
from uuid import UUID

import structlog

from src.audit import AuditLogger, create_correlation_id
from src.config import get_settings
from src.models.account import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    Account,
    ColorWrapper,
)
from src.models.collection import AccountCollection
from src.models.deletion import DeleteConfirmation
from src.models.results import CommandResult, PersistenceResult
from src.services.bank import BankAccountSourceInterface, DisabledBankAccountSource
from src.services.persistence import AccountsGateway
from src.services.storage import (
    DocumentStoreInterface,
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
    InMemoryDocumentStore,
)
from src.validation import parse_amount


logger = structlog.get_logger(__name__)


class AccountManagementFlow:
    """
    Holds the in-memory accounts and runs the commands against them.

    The collection here is the single source of truth. The gateway only
    ever sees a snapshot of it, for the duration of one save.
    """

    def __init__(
        self,
        gateway: AccountsGateway,
        bank_source: Optional[BankAccountSourceInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        decimal_separator: str = ".",
    ):
        self._gateway = gateway
        self._bank_source = bank_source or DisabledBankAccountSource()
        self._audit_logger = audit_logger or AuditLogger()
        self._decimal_separator = decimal_separator
        self._accounts = AccountCollection()
        self._deletion = DeleteConfirmation()

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts)

    @property
    def deletion(self) -> DeleteConfirmation:
        return self._deletion

    def get_account(self, account_id: UUID) -> Optional[Account]:
        return self._accounts.get(account_id)

    async def load_accounts(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> PersistenceResult:
        """
        Load the persisted collection.

        On any failure the current collection is kept as it is.
        """
        correlation_id = correlation_id or create_correlation_id()

        result = await self._gateway.load()
        if result.success:
            self._accounts.replace_all(result.accounts or [])

        self._audit_logger.log_persistence(result, correlation_id=correlation_id)
        return result

    async def create_account(
        self,
        name: str,
        icon: str = DEFAULT_ICON,
        color: ColorWrapper = DEFAULT_COLOR,
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """Append a new account with zero balance and no transactions."""
        correlation_id = correlation_id or create_correlation_id()

        if not name:
            return self._rejected_create("create_account", correlation_id)

        account = self._accounts.add(Account(name=name, icon=icon, color=color))
        self._audit_logger.log_account_created(
            account_id=account.id,
            name=name,
            correlation_id=correlation_id,
        )

        persistence = await self._save(correlation_id)
        return CommandResult(
            command="create_account",
            success=True,
            message=f"Account '{name}' created",
            account_id=account.id,
            persistence=persistence,
        )

    async def create_account_from_bank(
        self,
        name: str,
        icon: str = DEFAULT_ICON,
        color: ColorWrapper = DEFAULT_COLOR,
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        Append a new account seeded from the bank source.

        Nothing is added or saved when the source returns no data.
        """
        correlation_id = correlation_id or create_correlation_id()

        if not name:
            return self._rejected_create("create_account_from_bank", correlation_id)

        snapshot = await self._bank_source.fetch_bank_account()
        if snapshot is None:
            self._audit_logger.log_bank_fetch_failed(
                source=self._bank_source.name,
                correlation_id=correlation_id,
            )
            return CommandResult(
                command="create_account_from_bank",
                success=False,
                message="Failed to fetch bank account data",
            )

        account = self._accounts.add(Account(
            name=name,
            balance=snapshot.balance,
            icon=icon,
            color=color,
            transactions=snapshot.transactions,
        ))
        self._audit_logger.log_account_created(
            account_id=account.id,
            name=name,
            correlation_id=correlation_id,
            source=self._bank_source.name,
        )

        persistence = await self._save(correlation_id)
        return CommandResult(
            command="create_account_from_bank",
            success=True,
            message=f"Account '{name}' created from bank data",
            account_id=account.id,
            persistence=persistence,
        )

    async def edit_account(
        self,
        account_id: UUID,
        name: str,
        icon: str,
        color: ColorWrapper,
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        Overwrite name, icon and color of an account.

        An unknown identifier is a no-op on the collection; the collection
        is saved either way.
        """
        correlation_id = correlation_id or create_correlation_id()

        account = self._accounts.edit(account_id, name=name, icon=icon, color=color)
        if account is None:
            self._audit_logger.log_account_not_found(
                account_id=account_id,
                command="edit_account",
                correlation_id=correlation_id,
            )
        else:
            self._audit_logger.log_account_edited(
                account_id=account_id,
                name=name,
                icon=icon,
                correlation_id=correlation_id,
            )

        persistence = await self._save(correlation_id)
        return CommandResult(
            command="edit_account",
            success=account is not None,
            message="Account updated" if account else "Account not found",
            account_id=account_id,
            found=account is not None,
            persistence=persistence,
        )

    def request_delete(
        self,
        account_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        First phase of a delete: nothing is removed yet.

        Raises:
            DeleteConfirmationError: If another delete is in progress
        """
        correlation_id = correlation_id or create_correlation_id()

        self._deletion.request(account_id)
        self._audit_logger.log_delete_requested(
            account_id=account_id,
            correlation_id=correlation_id,
        )
        return CommandResult(
            command="request_delete",
            success=True,
            message="Are you sure you want to delete this account?",
            account_id=account_id,
            found=account_id in self._accounts,
        )

    def cancel_delete(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        Drop the pending delete.

        Raises:
            DeleteConfirmationError: If no delete is pending
        """
        correlation_id = correlation_id or create_correlation_id()

        account_id = self._deletion.account_id
        self._deletion.cancel()
        self._audit_logger.log_delete_cancelled(
            account_id=account_id,
            correlation_id=correlation_id,
        )
        return CommandResult(
            command="cancel_delete",
            success=True,
            message="Delete cancelled",
            account_id=account_id,
        )

    async def confirm_delete(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        Second phase of a delete: remove the account and save.

        If the account is gone already, nothing is removed; the collection
        is saved either way.

        Raises:
            DeleteConfirmationError: If no delete is pending
        """
        correlation_id = correlation_id or create_correlation_id()

        account_id = self._deletion.confirm()
        try:
            removed = self._accounts.remove(account_id)
        finally:
            self._deletion.complete()

        if removed is None:
            self._audit_logger.log_account_not_found(
                account_id=account_id,
                command="confirm_delete",
                correlation_id=correlation_id,
            )
        else:
            self._audit_logger.log_account_deleted(
                account_id=account_id,
                name=removed.name,
                correlation_id=correlation_id,
            )

        persistence = await self._save(correlation_id)
        return CommandResult(
            command="confirm_delete",
            success=removed is not None,
            message="Account deleted" if removed else "Account not found",
            account_id=account_id,
            found=removed is not None,
            persistence=persistence,
        )

    async def edit_balance(
        self,
        account_id: UUID,
        amount_text: str,
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        Replace an account's balance with the typed amount.

        This sets the balance outright; it does not add a transaction.
        Invalid input leaves the balance unchanged and saves nothing.
        """
        correlation_id = correlation_id or create_correlation_id()

        parsed = parse_amount(amount_text, self._decimal_separator)
        if not parsed.is_valid:
            self._audit_logger.log_balance_input_rejected(
                account_id=account_id,
                raw_input=amount_text,
                reason=parsed.reason or "invalid",
                correlation_id=correlation_id,
            )
            return CommandResult(
                command="edit_balance",
                success=False,
                message=parsed.reason or "Invalid amount",
                account_id=account_id,
                found=account_id in self._accounts,
            )

        account = self._accounts.get(account_id)
        if account is None:
            self._audit_logger.log_account_not_found(
                account_id=account_id,
                command="edit_balance",
                correlation_id=correlation_id,
            )
            return CommandResult(
                command="edit_balance",
                success=False,
                message="Account not found",
                account_id=account_id,
                found=False,
            )

        old_balance = account.balance
        account.balance = parsed.amount
        self._audit_logger.log_balance_edited(
            account_id=account_id,
            old_balance=str(old_balance),
            new_balance=str(parsed.amount),
            correlation_id=correlation_id,
        )

        persistence = await self._save(correlation_id)
        return CommandResult(
            command="edit_balance",
            success=True,
            message=f"Balance set to {parsed.amount}",
            account_id=account_id,
            persistence=persistence,
        )

    async def _save(self, correlation_id: Optional[UUID]) -> PersistenceResult:
        result = await self._gateway.save(self._accounts.snapshot())
        self._audit_logger.log_persistence(result, correlation_id=correlation_id)
        return result

    def _rejected_create(self, command: str, correlation_id: UUID) -> CommandResult:
        self._audit_logger.log_account_create_rejected(
            reason="Account name is empty",
            correlation_id=correlation_id,
        )
        return CommandResult(
            command=command,
            success=False,
            message="Please enter an account name",
        )


def create_document_store() -> DocumentStoreInterface:
    """
    Build the configured document store.

    Falls back to the in-memory store when Google Sheets is not configured.
    """
    settings = get_settings()

    if settings.accounts_store.backend == "memory":
        return InMemoryDocumentStore()

    try:
        return GoogleSheetsDocumentStore(GoogleSheetsClient())
    except Exception as e:
        # Storage not configured - continue without it
        logger.warning("remote_store_not_configured", error=str(e))
        return InMemoryDocumentStore()


def create_gateway(use_storage: bool = True) -> AccountsGateway:
    """
    Build the persistence gateway over the configured document store.

    The gateway holds no account state and may be shared between flows.
    """
    store = create_document_store() if use_storage else InMemoryDocumentStore()
    return AccountsGateway(store, get_settings().accounts_store)


def create_account_flow(gateway: AccountsGateway) -> AccountManagementFlow:
    """Build a flow with its own empty collection and delete confirmation."""
    return AccountManagementFlow(
        gateway=gateway,
        audit_logger=AuditLogger(),
        decimal_separator=get_settings().app.decimal_separator,
    )


def create_app_components(
    use_storage: bool = True,
) -> tuple[AccountManagementFlow, DocumentStoreInterface]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the configured document store.
                    Set to False to keep everything in memory.

    Returns:
        (account_flow, document_store)
    """
    gateway = create_gateway(use_storage)
    return create_account_flow(gateway), gateway.store
