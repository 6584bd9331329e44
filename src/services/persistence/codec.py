"""
Accounts document codec.

The persisted document is a JSON array of accounts:

    [
      {
        "id": "…",
        "name": "Checking",
        "balance": 1000.0,
        "icon": "creditcard.fill",
        "color": {"red": 0.0, "green": 0.478, "blue": 1.0, "opacity": 1.0},
        "transactions": [
          {"id": "…", "title": "Rent", "amount": -800.0, "date": "May 26, 2023"}
        ]
      }
    ]

Amounts are JSON numbers. They are read back as Decimal, so any amount
with up to 15 significant digits survives the round trip exactly.

The account `id` is written and read back. Documents written without it
get a freshly minted identifier per account on every load.
"""

import json
from decimal import Decimal
from typing import Iterable

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from src.models.account import Account


class AccountsEncodeError(ValueError):
    """Accounts could not be serialized."""
    pass


class AccountsDecodeError(ValueError):
    """Bytes are not a valid accounts document."""
    pass


def encode_accounts(accounts: Iterable[Account], pretty: bool = True) -> bytes:
    try:
        payload = [account.model_dump(mode="json") for account in accounts]
        text = json.dumps(payload, indent=2 if pretty else None, allow_nan=False)
    except (TypeError, ValueError, PydanticSerializationError) as e:
        raise AccountsEncodeError(f"Failed to encode accounts: {e}")
    return text.encode("utf-8")


def decode_accounts(data: bytes) -> list[Account]:
    try:
        payload = json.loads(data, parse_float=Decimal)
    except (UnicodeDecodeError, ValueError) as e:
        raise AccountsDecodeError(f"Accounts document is not valid JSON: {e}")

    if not isinstance(payload, list):
        raise AccountsDecodeError(
            f"Accounts document must be an array, got {type(payload).__name__}"
        )

    try:
        accounts = [Account.model_validate(item) for item in payload]
    except ValidationError as e:
        raise AccountsDecodeError(f"Invalid account in document: {e}")

    if len({account.id for account in accounts}) != len(accounts):
        raise AccountsDecodeError("Accounts document repeats an account id")
    return accounts
