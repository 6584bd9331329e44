"""
Core Data Models for Finance Tracker

These models define the schemas for accounts and their transactions.
They are designed to:
1. Serialize to a field-named document (never positional)
2. Round-trip through the persisted document without losing fields
3. Stay permissive where the user is free to type anything

DESIGN DECISION: No validation is performed on transaction amount sign,
date format, or icon key membership. Amounts are limited to 15 significant
digits, the most a JSON number read as a double keeps exactly. The icon set below is what the UI
offers, not what the model enforces.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of values offered by the UI
# =============================================================================

class AccountIcon(str, Enum):
    """Icon keys the account forms offer."""
    DOLLAR_SIGN = "dollarsign.circle.fill"
    CREDIT_CARD = "creditcard.fill"
    CREDIT_CARD_NUMBERS = "creditcard.and.123"
    BANK = "building.columns.fill"
    BUILDING = "building.2.fill"
    HOUSE = "house.fill"
    HEART = "heart.fill"
    HEALTH = "waveform.path.ecg"
    CAR = "car.fill"


DEFAULT_ICON = AccountIcon.DOLLAR_SIGN.value


# =============================================================================
# COLOR
# =============================================================================

class ColorWrapper(BaseModel):
    """
    Four-channel normalized color (red, green, blue, opacity).

    Frozen, so equality and hashing come from the four channel values.
    The RGBA tuple form is lossless; the hex form is 8 bits per channel.
    """
    model_config = ConfigDict(frozen=True)

    red: float = Field(..., ge=0.0, le=1.0)
    green: float = Field(..., ge=0.0, le=1.0)
    blue: float = Field(..., ge=0.0, le=1.0)
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)

    @field_validator("red", "green", "blue", "opacity", mode="before")
    @classmethod
    def coerce_decimal_channel(cls, v):
        # Documents are parsed with Decimal floats
        if isinstance(v, Decimal):
            return float(v)
        return v

    @classmethod
    def from_rgba(cls, rgba: tuple[float, ...]) -> "ColorWrapper":
        """Build from an (r, g, b) or (r, g, b, a) tuple of floats."""
        if len(rgba) == 3:
            red, green, blue = rgba
            return cls(red=red, green=green, blue=blue)
        if len(rgba) == 4:
            red, green, blue, opacity = rgba
            return cls(red=red, green=green, blue=blue, opacity=opacity)
        raise ValueError(f"Expected 3 or 4 channels, got {len(rgba)}")

    def to_rgba(self) -> tuple[float, float, float, float]:
        return (self.red, self.green, self.blue, self.opacity)

    @classmethod
    def from_hex(cls, value: str) -> "ColorWrapper":
        """Parse '#RRGGBB' or '#RRGGBBAA'."""
        digits = value.strip().lstrip("#")
        if len(digits) not in (6, 8):
            raise ValueError(f"Invalid hex color: {value}")
        try:
            channels = [int(digits[i:i + 2], 16) / 255 for i in range(0, len(digits), 2)]
        except ValueError:
            raise ValueError(f"Invalid hex color: {value}")
        return cls.from_rgba(tuple(channels))

    def to_hex(self, include_opacity: bool = False) -> str:
        channels = self.to_rgba() if include_opacity else self.to_rgba()[:3]
        return "#" + "".join(f"{round(c * 255):02X}" for c in channels)


# Colors the account forms offer, in display order
COLOR_PALETTE: dict[str, ColorWrapper] = {
    "green": ColorWrapper(red=0.204, green=0.780, blue=0.349),
    "yellow": ColorWrapper(red=1.0, green=0.800, blue=0.0),
    "orange": ColorWrapper(red=1.0, green=0.584, blue=0.0),
    "red": ColorWrapper(red=1.0, green=0.231, blue=0.188),
    "pink": ColorWrapper(red=1.0, green=0.176, blue=0.333),
    "purple": ColorWrapper(red=0.686, green=0.322, blue=0.871),
    "blue": ColorWrapper(red=0.0, green=0.478, blue=1.0),
    "cyan": ColorWrapper(red=0.196, green=0.678, blue=0.902),
    "magenta": ColorWrapper(red=1.0, green=0.0, blue=1.0),
}

DEFAULT_COLOR = COLOR_PALETTE["green"]


# =============================================================================
# TRANSACTIONS AND ACCOUNTS
# =============================================================================

MAX_AMOUNT_DIGITS = 15

# Balances and transaction amounts; wider values would not survive the document
Amount = Annotated[Decimal, Field(max_digits=MAX_AMOUNT_DIGITS)]


class Transaction(BaseModel):
    """
    A signed monetary entry owned by one account.

    Positive amounts are credits, negative amounts are debits.
    The date is free-form text and is not parsed.
    """

    id: UUID = Field(default_factory=uuid4)
    title: str
    amount: Amount
    date: str

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)


class Account(BaseModel):
    """
    A named, balance-holding account.

    Identity is the `id` alone: two accounts with the same id are equal
    whatever their other fields, and the id cannot be reassigned.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(
        default_factory=uuid4,
        frozen=True,
        description="Opaque identifier, minted once at creation"
    )
    name: str
    balance: Amount = Decimal("0")
    icon: str = Field(default=DEFAULT_ICON)
    color: ColorWrapper = Field(default=DEFAULT_COLOR)
    transactions: list[Transaction] = Field(default_factory=list)

    @field_serializer("balance", when_used="json")
    def serialize_balance(self, balance: Decimal) -> float:
        return float(balance)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def same_fields(self, other: "Account") -> bool:
        """Compare every field, identifier included."""
        return self.model_dump() == other.model_dump()


class BankAccountSnapshot(BaseModel):
    """Balance and transactions reported by an external bank source."""

    balance: Amount
    transactions: list[Transaction] = Field(default_factory=list)
    source: Optional[str] = Field(
        default=None,
        description="Name of the source that produced the snapshot"
    )
