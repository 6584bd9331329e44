"""Shared fixtures. No test touches the network."""

from decimal import Decimal

import pytest

from src.config import AccountsStoreSettings
from src.models.account import COLOR_PALETTE, Account, Transaction
from src.services.persistence import AccountsGateway
from src.services.storage import InMemoryDocumentStore


@pytest.fixture
def store_settings(tmp_path) -> AccountsStoreSettings:
    return AccountsStoreSettings(
        backend="memory",
        staging_dir=str(tmp_path / "staging"),
    )


@pytest.fixture
def memory_store(tmp_path) -> InMemoryDocumentStore:
    return InMemoryDocumentStore(asset_dir=tmp_path / "assets")


@pytest.fixture
def gateway(memory_store, store_settings) -> AccountsGateway:
    return AccountsGateway(memory_store, store_settings)


@pytest.fixture
def checking() -> Account:
    return Account(
        name="Checking",
        balance=Decimal("1000"),
        icon="creditcard.fill",
        color=COLOR_PALETTE["blue"],
        transactions=[
            Transaction(title="Utilities", amount=Decimal("-100"), date="May 28, 2023"),
            Transaction(title="Rent", amount=Decimal("-800"), date="May 26, 2023"),
            Transaction(title="Deposit", amount=Decimal("500"), date="May 23, 2023"),
        ],
    )


@pytest.fixture
def savings() -> Account:
    return Account(
        name="Savings",
        balance=Decimal("5000.25"),
        icon="building.columns.fill",
        color=COLOR_PALETTE["green"],
        transactions=[
            Transaction(title="Groceries", amount=Decimal("-50.10"), date="May 29, 2023"),
            Transaction(title="Salary", amount=Decimal("2000"), date="May 25, 2023"),
        ],
    )
