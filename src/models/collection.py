"""
In-memory account collection.

The collection is the single source of truth for the running application.
It is also the unit of persistence: the gateway always writes all of it.
"""

from typing import Iterable, Iterator, Optional
from uuid import UUID

from src.models.account import Account, ColorWrapper


class DuplicateAccountError(ValueError):
    """An account with the same identifier is already in the collection."""
    pass


class AccountCollection:
    """
    Ordered accounts, unique by identifier.

    Lookups are linear; a personal collection holds a handful of accounts.
    """

    def __init__(self, accounts: Optional[Iterable[Account]] = None):
        self._accounts: list[Account] = []
        for account in accounts or []:
            self.add(account)

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(list(self._accounts))

    def __contains__(self, account_id: object) -> bool:
        return self.index_of(account_id) is not None

    def snapshot(self) -> list[Account]:
        """Deep copies of the accounts, in order, safe to hand to a save."""
        return [account.model_copy(deep=True) for account in self._accounts]

    def index_of(self, account_id: object) -> Optional[int]:
        for idx, account in enumerate(self._accounts):
            if account.id == account_id:
                return idx
        return None

    def get(self, account_id: UUID) -> Optional[Account]:
        idx = self.index_of(account_id)
        return self._accounts[idx] if idx is not None else None

    def add(self, account: Account) -> Account:
        if account.id in self:
            raise DuplicateAccountError(f"Account already present: {account.id}")
        self._accounts.append(account)
        return account

    def edit(
        self,
        account_id: UUID,
        name: str,
        icon: str,
        color: ColorWrapper,
    ) -> Optional[Account]:
        """
        Overwrite name, icon and color in place.

        Balance and transactions are untouched. Returns None when
        no account has this identifier.
        """
        account = self.get(account_id)
        if account is None:
            return None
        account.name = name
        account.icon = icon
        account.color = color
        return account

    def remove(self, account_id: UUID) -> Optional[Account]:
        """Remove exactly the account with this identifier."""
        idx = self.index_of(account_id)
        if idx is None:
            return None
        return self._accounts.pop(idx)

    def replace_all(self, accounts: Iterable[Account]) -> None:
        """Swap the whole content, e.g. after a successful load."""
        replacement = AccountCollection(accounts)
        self._accounts = replacement._accounts
