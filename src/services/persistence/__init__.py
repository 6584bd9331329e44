"""Persistence of the account collection."""

from src.services.persistence.codec import (
    AccountsDecodeError,
    AccountsEncodeError,
    decode_accounts,
    encode_accounts,
)
from src.services.persistence.gateway import AccountsGateway

__all__ = [
    "AccountsDecodeError",
    "AccountsEncodeError",
    "AccountsGateway",
    "decode_accounts",
    "encode_accounts",
]
