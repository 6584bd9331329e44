"""Input validation package."""

from src.validation.amount import parse_amount

__all__ = ["parse_amount"]
