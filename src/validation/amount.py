"""
Amount Entry Parsing

Parses what the user types into the amount field.

Accepted:  "12", "-3", "12.5", "12.50"
Rejected:  "12.5.3" (two separators), "12.345" (three fractional digits),
           "abc", "", "12.", ".5", anything over 15 digits

IMPORTANT: Parsing NEVER silently fixes input. Anything outside the
accepted shape is reported invalid and the caller keeps the old value.
"""

import re
from decimal import Decimal

from pydantic import TypeAdapter, ValidationError

from src.models.account import MAX_AMOUNT_DIGITS, Amount
from src.models.results import AmountParseResult


_WHOLE_PART = re.compile(r"[+-]?[0-9]+")
_FRACTION_PART = re.compile(r"[0-9]{1,2}")
_AMOUNT = TypeAdapter(Amount)


def parse_amount(text: str, decimal_separator: str = ".") -> AmountParseResult:
    """
    Parse a decimal amount with at most two fractional digits.

    Args:
        text: Raw user input
        decimal_separator: Separator between whole and fractional part

    Returns:
        AmountParseResult with the parsed amount when valid
    """
    components = text.split(decimal_separator)

    if len(components) > 2:
        return AmountParseResult(
            raw_input=text,
            is_valid=False,
            reason="More than one decimal separator",
        )

    whole = components[0]
    if not _WHOLE_PART.fullmatch(whole):
        return AmountParseResult(
            raw_input=text,
            is_valid=False,
            reason="Whole part is not a number",
        )

    if len(components) == 1:
        return _checked(text, Decimal(whole))

    fraction = components[1]
    if not _FRACTION_PART.fullmatch(fraction):
        return AmountParseResult(
            raw_input=text,
            is_valid=False,
            reason="Fractional part must be one or two digits",
        )

    return _checked(text, Decimal(f"{whole}.{fraction}"))


def _checked(text: str, amount: Decimal) -> AmountParseResult:
    try:
        amount = _AMOUNT.validate_python(amount)
    except ValidationError:
        return AmountParseResult(
            raw_input=text,
            is_valid=False,
            reason=f"Amount has more than {MAX_AMOUNT_DIGITS} digits",
        )
    return AmountParseResult(raw_input=text, is_valid=True, amount=amount)
